"""Field decoders for the gateway's text encodings

The EAGLE gateway sends every numeric field as hex text ("0x001738"),
MAC addresses as "0x"-prefixed hex strings and flags as "Y"/"N".
"""
import binascii
from typing import Callable, Optional, TypeVar
from xml.etree.ElementTree import Element

from utils.errors import DecodeError

T = TypeVar('T')

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


def hex_integer(text: str) -> int:
    """
    Parse an integer literal, auto-detecting the base from its prefix

    Args:
        text: "0x" / "0o" / "0b" prefixed literal, or plain decimal

    Returns:
        Signed integer in the 64-bit range

    Raises:
        DecodeError: if the text is not a valid literal or overflows int64
    """
    if text is None:
        raise DecodeError("Invalid integer literal: None")
    try:
        value = int(text, 0)
    except ValueError:
        raise DecodeError(f"Invalid integer literal: {text!r}")

    if not INT64_MIN <= value <= INT64_MAX:
        raise DecodeError(f"Integer literal out of range: {text!r}")
    return value


def yes_no_flag(text: Optional[str]) -> bool:
    """
    Interpret a Y/N flag by its first character

    Anything that does not start with Y or y is False, including empty text.
    """
    if not text:
        return False
    return text[0] in ('Y', 'y')


class MacAddress(bytes):
    """Hardware address decoded from the gateway's hex form"""

    def __str__(self) -> str:
        return ':'.join(f'{b:02x}' for b in self)

    def __repr__(self) -> str:
        return f"MacAddress('{self}')"


def hex_mac_address(text: str) -> MacAddress:
    """
    Decode a "0x"-prefixed hex string into a hardware address

    Raises:
        DecodeError: on a missing prefix, odd digit count or non-hex digits
    """
    if not text or text[:2] not in ('0x', '0X'):
        raise DecodeError(f"MAC address must start with 0x: {text!r}")
    try:
        return MacAddress(binascii.unhexlify(text[2:]))
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid MAC address {text!r}: {e}")


def child_text(parent: Element, tag: str) -> Optional[str]:
    """Text of the first direct child named tag, or None when absent"""
    for child in parent:
        if local_name(child.tag) == tag:
            return child.text or ''
    return None


def decode_child(parent: Element, tag: str, decoder: Callable[[str], T], default: T) -> T:
    """Apply decoder to a child's text; absent children yield the default"""
    text = child_text(parent, tag)
    if text is None:
        return default
    try:
        return decoder(text)
    except DecodeError as e:
        raise DecodeError(f"{tag}: {e.message}")


def local_name(tag: str) -> str:
    """Strip an ElementTree "{namespace}" prefix from a tag"""
    if tag.startswith('{'):
        return tag.split('}', 1)[1]
    return tag


# Display precision fields are at most two hex digits on the wire
MAX_DISPLAY_DIGITS = 0xff


def check_display_digits(value: int, field: str) -> int:
    """
    Validate a digit-count field used as a display width or precision

    Raises:
        DecodeError: if value is negative or above MAX_DISPLAY_DIGITS
    """
    if not 0 <= value <= MAX_DISPLAY_DIGITS:
        raise DecodeError(f"{field} must be between 0 and {MAX_DISPLAY_DIGITS:#x}: {value}")
    return value
