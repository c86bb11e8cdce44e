from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce user/DB input into Decimal; anything non-numeric becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def round2(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Any]) -> Decimal:
    total = ZERO
    for v in values:
        total += to_decimal(v)
    return round2(total)