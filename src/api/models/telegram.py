"""Telegram models for the EAGLE gateway's XML documents

A telegram is a <rainforest> envelope wrapping exactly one fragment:

    <rainforest macId="0xf0ad4e00ce69" timestamp="1355292588s">
      <InstantaneousDemand>
        <DeviceMacId>0x00158d0000000004</DeviceMacId>
        <Demand>0x001738</Demand>
        ...
      </InstantaneousDemand>
    </rainforest>
"""
from enum import Enum
from typing import Dict, Any, Optional
from xml.etree.ElementTree import Element

from utils.decoders import (
    MacAddress,
    check_display_digits,
    decode_child,
    hex_integer,
    hex_mac_address,
    yes_no_flag,
)
from utils.errors import DecodeError


class FragmentKind(Enum):
    """Fragment kinds the gateway is known to send"""

    INSTANTANEOUS_DEMAND = 'InstantaneousDemand'
    PRICE_CLUSTER = 'PriceCluster'
    DEVICE_INFO = 'DeviceInfo'
    NETWORK_INFO = 'NetworkInfo'
    MESSAGE = 'Message'
    CURRENT_SUMMATION = 'CurrentSummation'
    METER_INFO = 'MeterInfo'
    FAST_POLL_STATUS = 'FastPollStatus'
    HISTORY_DATA = 'HistoryData'
    PROFILE_DATA = 'ProfileData'

    @classmethod
    def from_name(cls, name: str) -> Optional['FragmentKind']:
        """Look up a kind by element name, None if the name is not known"""
        try:
            return cls(name)
        except ValueError:
            return None


def _mac_or_none(mac: Optional[MacAddress]) -> Optional[str]:
    return str(mac) if mac is not None else None


class Envelope:
    """Attributes of the outer <rainforest> element"""

    def __init__(self,
                 mac_id: Optional[MacAddress] = None,
                 version: str = '',
                 timestamp: str = ''):
        self.mac_id = mac_id
        self.version = version
        self.timestamp = timestamp

    @classmethod
    def from_element(cls, element: Element) -> 'Envelope':
        """Decode envelope attributes; macId is optional but must be valid if present"""
        mac_text = element.get('macId')
        mac_id = None
        if mac_text is not None:
            try:
                mac_id = hex_mac_address(mac_text)
            except DecodeError as e:
                raise DecodeError(f"macId: {e.message}")
        return cls(
            mac_id=mac_id,
            version=element.get('version', ''),
            timestamp=element.get('timestamp', ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mac_id': _mac_or_none(self.mac_id),
            'version': self.version,
            'timestamp': self.timestamp,
        }


class InstantaneousDemandFragment:
    """Fields of an <InstantaneousDemand> fragment"""

    def __init__(self,
                 device_mac_id: Optional[MacAddress] = None,
                 meter_mac_id: str = '',
                 timestamp: int = 0,
                 demand: int = 0,
                 multiplier: int = 0,
                 divisor: int = 0,
                 digits_right: int = 0,
                 digits_left: int = 0,
                 suppress_leading_zero: bool = False):
        """
        Initialize a demand fragment

        Args:
            device_mac_id: MAC address of the gateway's ZigBee radio
            meter_mac_id: Meter id as sent, normally 16 hex digits
            timestamp: Seconds since 2000-01-01 UTC when the meter reported
            demand: Raw instantaneous demand (24-bit signed on the wire)
            multiplier: Scaling multiplier; zero means 1
            divisor: Scaling divisor; zero means 1
            digits_right: Digits to display right of the decimal point
            digits_left: Display width left of the decimal point
            suppress_leading_zero: True to pad with spaces instead of zeros
        """
        self.device_mac_id = device_mac_id
        self.meter_mac_id = meter_mac_id
        self.timestamp = timestamp
        self.demand = demand
        self.multiplier = multiplier
        self.divisor = divisor
        self.digits_right = digits_right
        self.digits_left = digits_left
        self.suppress_leading_zero = suppress_leading_zero

    @property
    def effective_multiplier(self) -> int:
        return self.multiplier or 1

    @property
    def effective_divisor(self) -> int:
        return self.divisor or 1

    @property
    def kilowatts(self) -> float:
        """Scaled demand in kW"""
        return float(self.demand) * self.effective_multiplier / self.effective_divisor

    @classmethod
    def from_element(cls, element: Element) -> 'InstantaneousDemandFragment':
        fragment = cls(
            device_mac_id=decode_child(element, 'DeviceMacId', hex_mac_address, None),
            meter_mac_id=decode_child(element, 'MeterMacId', str, ''),
            timestamp=decode_child(element, 'TimeStamp', hex_integer, 0),
            demand=decode_child(element, 'Demand', hex_integer, 0),
            multiplier=decode_child(element, 'Multiplier', hex_integer, 0),
            divisor=decode_child(element, 'Divisor', hex_integer, 0),
            digits_right=decode_child(element, 'DigitsRight', hex_integer, 0),
            digits_left=decode_child(element, 'DigitsLeft', hex_integer, 0),
            suppress_leading_zero=decode_child(element, 'SuppressLeadingZero', yes_no_flag, False),
        )
        check_display_digits(fragment.digits_right, 'DigitsRight')
        check_display_digits(fragment.digits_left, 'DigitsLeft')
        return fragment

    def to_dict(self) -> Dict[str, Any]:
        return {
            'device_mac_id': _mac_or_none(self.device_mac_id),
            'meter_mac_id': self.meter_mac_id,
            'timestamp': self.timestamp,
            'demand': self.demand,
            'multiplier': self.multiplier,
            'divisor': self.divisor,
            'digits_right': self.digits_right,
            'digits_left': self.digits_left,
            'suppress_leading_zero': self.suppress_leading_zero,
        }


class PriceClusterFragment:
    """Fields of a <PriceCluster> fragment"""

    def __init__(self,
                 device_mac_id: Optional[MacAddress] = None,
                 meter_mac_id: Optional[MacAddress] = None,
                 timestamp: int = 0,
                 price: int = 0,
                 currency: int = 0,
                 trailing_digits: int = 0,
                 tier: str = '',
                 start_time: int = 0,
                 duration: int = 0,
                 rate_label: str = ''):
        """
        Initialize a price fragment

        Args:
            device_mac_id: MAC address of the gateway's ZigBee radio
            meter_mac_id: MAC address of the meter
            timestamp: Seconds since 2000-01-01 UTC when the price was received
            price: Raw price; zero if no price is set
            currency: ISO 4217 numeric currency code
            trailing_digits: Implicit decimal places in price
            tier: Price tier in effect (1 - 5)
            start_time: Start of the price period (0xffffffff when unset)
            duration: Length of the price period in minutes (0xffff when unset)
            rate_label: Label for the current tier, "Set by User" for user prices
        """
        self.device_mac_id = device_mac_id
        self.meter_mac_id = meter_mac_id
        self.timestamp = timestamp
        self.price = price
        self.currency = currency
        self.trailing_digits = trailing_digits
        self.tier = tier
        self.start_time = start_time
        self.duration = duration
        self.rate_label = rate_label

    @classmethod
    def from_element(cls, element: Element) -> 'PriceClusterFragment':
        fragment = cls(
            device_mac_id=decode_child(element, 'DeviceMacId', hex_mac_address, None),
            meter_mac_id=decode_child(element, 'MeterMacId', hex_mac_address, None),
            timestamp=decode_child(element, 'TimeStamp', hex_integer, 0),
            price=decode_child(element, 'Price', hex_integer, 0),
            currency=decode_child(element, 'Currency', hex_integer, 0),
            trailing_digits=decode_child(element, 'TrailingDigits', hex_integer, 0),
            tier=decode_child(element, 'Tier', str, ''),
            start_time=decode_child(element, 'StartTime', hex_integer, 0),
            duration=decode_child(element, 'Duration', hex_integer, 0),
            rate_label=decode_child(element, 'RateLabel', str, ''),
        )
        check_display_digits(fragment.trailing_digits, 'TrailingDigits')
        return fragment

    def to_dict(self) -> Dict[str, Any]:
        return {
            'device_mac_id': _mac_or_none(self.device_mac_id),
            'meter_mac_id': _mac_or_none(self.meter_mac_id),
            'timestamp': self.timestamp,
            'price': self.price,
            'currency': self.currency,
            'trailing_digits': self.trailing_digits,
            'tier': self.tier,
            'start_time': self.start_time,
            'duration': self.duration,
            'rate_label': self.rate_label,
        }


class InstantaneousDemand:
    """A decoded demand telegram: envelope plus fragment"""

    kind = FragmentKind.INSTANTANEOUS_DEMAND
    metric_name = 'demand'

    def __init__(self, envelope: Envelope, fragment: InstantaneousDemandFragment):
        self.envelope = envelope
        self.fragment = fragment

    def value(self) -> int:
        """Raw demand as stored in the metrics log"""
        return self.fragment.demand


class PriceCluster:
    """A decoded price telegram: envelope plus fragment"""

    kind = FragmentKind.PRICE_CLUSTER
    metric_name = 'price'

    def __init__(self, envelope: Envelope, fragment: PriceClusterFragment):
        self.envelope = envelope
        self.fragment = fragment

    def value(self) -> int:
        """Raw price as stored in the metrics log"""
        return self.fragment.price
