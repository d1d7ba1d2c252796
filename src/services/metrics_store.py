"""
In-process metrics log.

An append-only sequence of readings shared by all request handlers.
The log is owned by the app created in main.create_app() and starts
with one zero reading, so there is always a previous reading to carry
demand or price forward from.
"""
from typing import List, Optional
from datetime import datetime, timezone
import threading
import logging

from api.models.reading import Reading

logger = logging.getLogger(__name__)


class MetricsStore:
    """
    Thread-safe append-only log of readings.

    Every read and write goes through a single lock, so concurrent appends
    are serialized and snapshots never observe a partially updated list.
    Entries are never evicted.
    """

    def __init__(self):
        """Initialize the log with a single zero reading"""
        self._readings: List[Reading] = [Reading.zero()]
        self.lock = threading.Lock()

    def append(self, reading: Reading) -> None:
        """Add a reading to the end of the log"""
        with self.lock:
            self._readings.append(reading)

    def snapshot(self) -> List[Reading]:
        """Return a copy of the log in append order"""
        with self.lock:
            return list(self._readings)

    def latest(self) -> Reading:
        """Most recently appended reading"""
        with self.lock:
            return self._readings[-1]

    def record_demand(self, demand: int, time: Optional[datetime] = None) -> Reading:
        """
        Append a demand reading, carrying the previous price forward.

        Args:
            demand: Raw demand value
            time: Reading time, defaults to now (UTC)

        Returns:
            The appended reading
        """
        time = time or datetime.now(timezone.utc)
        with self.lock:
            reading = Reading(time=time, demand=demand, price=self._readings[-1].price)
            self._readings.append(reading)
        logger.debug(f"Recorded demand reading: {reading}")
        return reading

    def record_price(self, price: int, time: Optional[datetime] = None) -> Reading:
        """
        Append a price reading, carrying the previous demand forward.

        Args:
            price: Raw price value
            time: Reading time, defaults to now (UTC)

        Returns:
            The appended reading
        """
        time = time or datetime.now(timezone.utc)
        with self.lock:
            reading = Reading(time=time, demand=self._readings[-1].demand, price=price)
            self._readings.append(reading)
        logger.debug(f"Recorded price reading: {reading}")
        return reading

    def __len__(self) -> int:
        with self.lock:
            return len(self._readings)
