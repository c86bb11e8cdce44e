from __future__ import annotations

from ...common.money import ZERO, money_sum
from ...workers.model import WorkerPayConfig
from ..model import PaymentRequest
from .base import GrossDecision, PaymentStrategy


class FullPaymentStrategy(PaymentStrategy):
    """Monthly rate, or the sum of explicit per-day payments when given."""

    def decide(self, request: PaymentRequest, pay: WorkerPayConfig) -> GrossDecision:
        daily = [d.amount for d in request.daily_payments if d.amount > 0]
        gross = money_sum(daily) if daily else pay.monthly_rate
        return GrossDecision(amount_gross=gross, deducts_advance=True, daily_deduction=ZERO)
