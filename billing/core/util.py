"""Helper functions for billing engine."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def _to_decimal(value: Any) -> Decimal:
    """
    Convert a number to Decimal safely.

    Notes:
        Uses str(x) to avoid embedding binary-float artefacts into Decimal.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(amount: Decimal) -> Decimal:
    """Round an amount half-up to whole cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is 0."""
    if whole == 0:
        return Decimal("0")
    return _to_decimal(part) / _to_decimal(whole) * HUNDRED


def percent_change(current: Decimal, previous: Decimal) -> Optional[Decimal]:
    """
    Relative change from previous to current, in percent.

    Returns None when previous is 0, since the change is undefined.
    """
    if previous == 0:
        return None
    return (current - previous) / previous * HUNDRED
