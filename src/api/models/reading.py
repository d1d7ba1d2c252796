"""Metrics log reading model"""
from datetime import datetime, timezone
from typing import Dict, Any

# Timestamp of the zero reading the log starts with
EPOCH_ZERO = datetime.min.replace(tzinfo=timezone.utc)


class Reading:
    """A point-in-time snapshot of demand and price"""

    def __init__(self, time: datetime, demand: int, price: int):
        """
        Initialize a reading

        Args:
            time: When the reading was recorded (UTC)
            demand: Raw instantaneous demand
            price: Raw price
        """
        self.time = time
        self.demand = demand
        self.price = price

    @classmethod
    def zero(cls) -> 'Reading':
        return cls(time=EPOCH_ZERO, demand=0, price=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary"""
        return {
            'time': self.time.isoformat(),
            'demand': self.demand,
            'price': self.price
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Reading':
        """Create instance from dictionary"""
        time = data.get('time')
        return cls(
            time=datetime.fromisoformat(time) if time else EPOCH_ZERO,
            demand=data.get('demand', 0),
            price=data.get('price', 0)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Reading):
            return NotImplemented
        return (self.time, self.demand, self.price) == (other.time, other.demand, other.price)

    def __repr__(self) -> str:
        return f"Reading(time={self.time.isoformat()}, demand={self.demand}, price={self.price})"
