from __future__ import annotations

from ...workers.model import WorkerPayConfig
from ..model import PaymentRequest
from .base import GrossDecision, PaymentStrategy


class AdvancePaymentStrategy(PaymentStrategy):
    """Cash advance: money owed back, so it grows the advance balance."""

    def decide(self, request: PaymentRequest, pay: WorkerPayConfig) -> GrossDecision:
        return GrossDecision(
            amount_gross=self.require_positive_amount(request),
            deducts_advance=False,
            adds_to_advance=True,
        )
