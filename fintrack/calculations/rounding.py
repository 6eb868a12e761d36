"""
Shared numeric helpers for currency and percentage values.
"""

CURRENCY_PLACES = 2
PERCENT_PLACES = 2


def round_currency(value: float) -> float:
    """Round a currency amount to cents."""
    # Adding 0.0 turns -0.0 into 0.0
    return round(value, CURRENCY_PLACES) + 0.0


def round_percent(value: float) -> float:
    """Round a percentage to two decimal places."""
    return round(value, PERCENT_PLACES) + 0.0


def percent_of(part: float, whole: float) -> float:
    """Return part as a percentage of whole, or 0.0 when whole is zero."""
    if whole == 0:
        return 0.0
    return part / whole * 100


def is_number(value) -> bool:
    """True for int/float values, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
