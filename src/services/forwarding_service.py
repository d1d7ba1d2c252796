"""
Forwarding of decoded metrics to external time-series databases.

Forwarding is best effort: values are handed to a thread pool and the
request that produced them never waits for or sees the outcome. Failures
are logged and dropped; there are no retries.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple
import logging
import socket

import requests

from config.server_config import ServerConfig

logger = logging.getLogger(__name__)


class GraphiteSink:
    """Pushes "<api-key>.<name> <value>" lines to a carbon endpoint over UDP"""

    name = 'graphite'

    def __init__(self, api_key: str, host: str, port: int):
        self.api_key = api_key
        self.address = (host, port)

    def format_line(self, metric: str, value: int) -> str:
        return f"{self.api_key}.{metric} {value}\n"

    def send(self, metric: str, value: int) -> Tuple[bool, str]:
        line = self.format_line(metric, value)
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.sendto(line.encode('utf-8'), self.address)
        except OSError as e:
            return False, f"UDP send to {self.address[0]}:{self.address[1]} failed: {e}"
        return True, "Sent"


class InfluxDBSink:
    """Posts a single-point series to an InfluxDB 0.x HTTP endpoint"""

    name = 'influxdb'

    def __init__(self, url: str, timeout: float = ServerConfig.INFLUXDB_TIMEOUT):
        self.url = url
        self.timeout = timeout

    @staticmethod
    def build_payload(metric: str, value: int) -> list:
        return [{'name': metric, 'columns': ['value'], 'points': [[value]]}]

    def send(self, metric: str, value: int) -> Tuple[bool, str]:
        try:
            response = requests.post(
                self.url,
                json=self.build_payload(metric, value),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return False, f"POST failed: {e}"
        if response.status_code >= 400:
            return False, f"POST returned {response.status_code}: {response.text[:200]}"
        return True, "Sent"


class ForwardingService:
    """Fans each metric out to all configured sinks on a background pool"""

    def __init__(self, sinks: List, max_workers: int = ServerConfig.FORWARDING_WORKERS):
        self.sinks = sinks
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix='metric-forwarder'
        )
        logger.info(f"ForwardingService initialized with sinks: {[s.name for s in sinks]}")

    @classmethod
    def from_config(cls) -> Optional['ForwardingService']:
        """Build a service from the environment, None when nothing is configured"""
        if not ServerConfig.forwarding_enabled():
            logger.info("Metric forwarding disabled")
            return None

        sinks = []
        api_key = ServerConfig.get_graphite_api_key()
        if api_key:
            host, port = ServerConfig.get_graphite_address()
            sinks.append(GraphiteSink(api_key, host, port))
        influx_url = ServerConfig.get_influxdb_url()
        if influx_url:
            sinks.append(InfluxDBSink(influx_url))

        if not sinks:
            logger.info("No forwarding sinks configured")
            return None
        return cls(sinks)

    def forward(self, metric: str, value: int) -> Future:
        """Queue a metric for all sinks and return immediately"""
        return self._executor.submit(self._send_all, metric, value)

    def _send_all(self, metric: str, value: int) -> int:
        delivered = 0
        for sink in self.sinks:
            try:
                success, message = sink.send(metric, value)
            except Exception as e:
                logger.exception(f"Sink {sink.name}: unexpected error forwarding {metric}={value}: {e}")
                continue
            if success:
                delivered += 1
                logger.debug(f"Sink {sink.name}: forwarded {metric}={value}")
            else:
                logger.warning(f"Sink {sink.name}: failed to forward {metric}={value} - {message}")
        return delivered

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
