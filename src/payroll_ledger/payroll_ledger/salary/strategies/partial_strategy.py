from __future__ import annotations

from ...common.money import round2
from ...core.constants import MAX_DAYS_PAID
from ...core.exceptions import InvalidAmountError, ValidationError
from ...workers.model import WorkerPayConfig
from ..model import PaymentRequest
from .base import GrossDecision, PaymentStrategy


class PartialPaymentStrategy(PaymentStrategy):
    """Daily rate times the number of days being paid."""

    def decide(self, request: PaymentRequest, pay: WorkerPayConfig) -> GrossDecision:
        days = request.days_paid
        if days is None or days <= 0:
            raise InvalidAmountError("Days paid must be greater than 0", field="days_paid")
        if days > MAX_DAYS_PAID:
            raise ValidationError(f"Days paid cannot exceed {MAX_DAYS_PAID}", field="days_paid")
        return GrossDecision(
            amount_gross=round2(pay.daily_rate * days),
            deducts_advance=True,
            days_paid=days,
        )
