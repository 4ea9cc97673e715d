"""
Display formatting for currency, percentages and tonnages.

Rounding is half away from zero on the exact binary value of the float,
so 0.125 formats as 0.13 and 2.5k rounds up to 3k.
"""

from decimal import ROUND_HALF_UP, Context, Decimal

from ._validation import require_finite
from .errors import InvalidInput

TONNES_UNIT = "tCO₂e"

# Wide enough for the integer part of any finite float
_CONTEXT = Context(prec=400)


def _fixed(value: float, decimals: int) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_CONTEXT))


def _grouped_integer(value: float) -> str:
    rounded = int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP, context=_CONTEXT))
    return f"{rounded:,}"


def format_currency(amount: float) -> str:
    """
    Compact currency label.

    >>> format_currency(1500000)
    '£1.5M'
    >>> format_currency(250000)
    '£250k'
    >>> format_currency(999)
    '£999'
    """
    amount = require_finite(amount, "Amount")
    if amount == 0:
        return "£0"

    prefix = "-£" if amount < 0 else "£"
    magnitude = abs(amount)
    if magnitude >= 1_000_000:
        return f"{prefix}{_fixed(magnitude / 1_000_000, 1)}M"
    if magnitude >= 1_000:
        return f"{prefix}{_fixed(magnitude / 1_000, 0)}k"
    return f"{prefix}{_grouped_integer(magnitude)}"


def format_currency_exact(amount: float) -> str:
    """Whole-pound currency label with thousands separators, e.g. £1,500,000."""
    amount = require_finite(amount, "Amount")
    prefix = "-£" if amount < 0 else "£"
    return f"{prefix}{_grouped_integer(abs(amount))}"


def format_percentage(value: float, decimals: int = 1) -> str:
    value = require_finite(value, "Value")
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= 10:
        raise InvalidInput("Decimals must be an integer between 0 and 10")
    return f"{_fixed(value, decimals)}%"


def format_tonnes(value: float) -> str:
    """
    Tonnage label with precision that shrinks as the value grows.

    Two decimals below 1 t, one below 10 t, whole tonnes with grouping
    otherwise.
    """
    value = require_finite(value, "Value")
    if value < 0:
        raise InvalidInput("Carbon emissions value cannot be negative")
    if value == 0:
        return f"0 {TONNES_UNIT}"
    if value < 1:
        return f"{_fixed(value, 2)} {TONNES_UNIT}"
    if value < 10:
        return f"{_fixed(value, 1)} {TONNES_UNIT}"
    return f"{_grouped_integer(value)} {TONNES_UNIT}"
