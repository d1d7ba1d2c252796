"""Telegram dispatch: classify, decode, format, record and forward"""
from typing import Dict, Any, Optional, Union
import logging

from api.models.telegram import FragmentKind
from services.formatter import describe
from services.forwarding_service import ForwardingService
from services.metrics_store import MetricsStore
from services.telegram_parser import classify, decode_demand, decode_price

logger = logging.getLogger(__name__)


class TelegramResult:
    """Outcome of handling one telegram"""

    def __init__(self, name: str, kind: Optional[FragmentKind] = None,
                 reading=None, display: Optional[str] = None):
        self.name = name
        self.kind = kind
        self.reading = reading
        self.display = display

    @property
    def stored(self) -> bool:
        return self.reading is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.name,
            'stored': self.stored,
            'display': self.display
        }


class TelegramService:
    """
    Routes each telegram to the decoder for its fragment kind.

    Demand and price telegrams append exactly one reading to the store and
    are forwarded to the configured sinks; every other kind is logged and
    acknowledged without touching the store.
    """

    def __init__(self, store: MetricsStore, forwarder: Optional[ForwardingService] = None):
        self.store = store
        self.forwarder = forwarder

    def receive(self, body: Union[bytes, str]) -> TelegramResult:
        """
        Handle one telegram body

        Raises:
            MalformedInputError: if the body is not well-formed XML
            DecodeError: if a demand or price field cannot be decoded
        """
        classification = classify(body)

        if classification.kind is FragmentKind.INSTANTANEOUS_DEMAND:
            telegram = decode_demand(classification)
            display = describe(telegram)
            reading = self.store.record_demand(telegram.value())
        elif classification.kind is FragmentKind.PRICE_CLUSTER:
            telegram = decode_price(classification)
            display = describe(telegram)
            reading = self.store.record_price(telegram.value())
        else:
            logger.info(f"Ignoring {classification.name or '<empty>'} telegram")
            return TelegramResult(classification.name, classification.kind)

        logger.info(f"{telegram.kind.value}: {display} -> {reading}")
        logger.debug(
            f"{telegram.kind.value} envelope: {telegram.envelope.to_dict()}, "
            f"fragment: {telegram.fragment.to_dict()}"
        )
        self._forward(telegram.metric_name, telegram.value())
        return TelegramResult(classification.name, telegram.kind, reading, display)

    def _forward(self, metric: str, value: int) -> None:
        if self.forwarder is None:
            return
        try:
            self.forwarder.forward(metric, value)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Could not queue {metric}={value} for forwarding: {e}")
