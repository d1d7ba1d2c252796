"""Display strings for decoded telegrams"""
import logging

import pycountry

from api.models.telegram import (
    InstantaneousDemand,
    InstantaneousDemandFragment,
    PriceCluster,
    PriceClusterFragment,
)
from utils.decoders import check_display_digits

logger = logging.getLogger(__name__)


def currency_name(code: int) -> str:
    """
    ISO 4217 alphabetic code for a numeric currency code

    Returns an empty string for codes pycountry does not know.
    """
    currency = pycountry.currencies.get(numeric=f'{code:03d}') if code >= 0 else None
    if currency is None:
        logger.debug(f"Unknown ISO 4217 currency code: {code}")
        return ''
    return currency.alpha_3


def format_demand(fragment: InstantaneousDemandFragment) -> str:
    """
    Demand in kW, e.g. "5.944kW"

    DigitsLeft is the minimum field width and DigitsRight the precision.
    Without SuppressLeadingZero the field is padded with zeros.
    """
    check_display_digits(fragment.digits_left, 'DigitsLeft')
    check_display_digits(fragment.digits_right, 'DigitsRight')
    pad = '' if fragment.suppress_leading_zero else '0'
    width = fragment.digits_left or ''
    spec = f'{pad}{width}.{fragment.digits_right}f'
    return f'{format(fragment.kilowatts, spec)}kW'


def _truncating_divmod(value: int, divisor: int):
    quotient, remainder = divmod(abs(value), divisor)
    if value < 0:
        return -quotient, -remainder
    return quotient, remainder


def format_price(fragment: PriceClusterFragment) -> str:
    """
    Price with its currency, e.g. "0.797 CAD"

    The fractional part is the integer remainder printed as-is, so
    797 with four trailing digits renders as "0.797", not "0.0797".
    """
    check_display_digits(fragment.trailing_digits, 'TrailingDigits')
    name = currency_name(fragment.currency)
    if fragment.trailing_digits == 0:
        return f'{fragment.price} {name}'
    if fragment.trailing_digits >= len(str(abs(fragment.price))):
        # Divisor exceeds the price: nothing left of the point
        whole, fraction = 0, fragment.price
    else:
        divisor = 10 ** fragment.trailing_digits
        whole, fraction = _truncating_divmod(fragment.price, divisor)
    return f'{whole}.{fraction} {name}'


def describe(telegram) -> str:
    """Display string for any decoded telegram"""
    if isinstance(telegram, InstantaneousDemand):
        return format_demand(telegram.fragment)
    if isinstance(telegram, PriceCluster):
        return format_price(telegram.fragment)
    raise TypeError(f"No display format for {type(telegram).__name__}")
