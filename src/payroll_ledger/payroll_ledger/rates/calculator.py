from __future__ import annotations

from decimal import Decimal
from typing import Any, Union

from ..common.money import ZERO, round2, to_decimal
from ..core.constants import (
    DEFAULT_WORKING_DAYS_PER_MONTH,
    DEFAULT_WORKING_HOURS_PER_DAY,
    OVERTIME_MULTIPLIER,
)
from ..core.enums import PaymentType
from .model import SalaryBreakdown


def _divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator <= 0:
        return ZERO
    return numerator / denominator


def _payment_type(value: Union[PaymentType, str, None]) -> PaymentType:
    if isinstance(value, PaymentType):
        return value
    v = str(value or "").strip().lower()
    return PaymentType.MONTHLY if v == "monthly" else PaymentType.DAILY


def calculate_salary_breakdown(
    payment_type: Union[PaymentType, str, None],
    primary_value: Any,
    working_days_per_month: Any = DEFAULT_WORKING_DAYS_PER_MONTH,
    working_hours_per_day: Any = DEFAULT_WORKING_HOURS_PER_DAY,
) -> SalaryBreakdown:
    """Derive daily/monthly/hourly/overtime rates from one authoritative value.

    Daily workers are configured by their daily rate, monthly workers by their
    monthly salary. The other rates are derived from unrounded intermediates
    and only the results are rounded. Bad input never raises: non-numeric or
    negative values count as 0 and a zero divisor yields 0 rates.
    """

    value = max(to_decimal(primary_value), ZERO)
    days = max(to_decimal(working_days_per_month), ZERO)
    hours = max(to_decimal(working_hours_per_day), ZERO)

    if _payment_type(payment_type) == PaymentType.MONTHLY:
        monthly = value
        daily = _divide(monthly, days)
    else:
        daily = value
        monthly = daily * days

    hourly = _divide(daily, hours)
    overtime = hourly * OVERTIME_MULTIPLIER

    return SalaryBreakdown(
        daily_rate=round2(daily),
        monthly_rate=round2(monthly),
        hourly_rate=round2(hourly),
        overtime_rate=round2(overtime),
    )
