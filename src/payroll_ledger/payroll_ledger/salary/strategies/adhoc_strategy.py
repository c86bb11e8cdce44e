from __future__ import annotations

from ...workers.model import WorkerPayConfig
from ..model import PaymentRequest
from .base import GrossDecision, PaymentStrategy


class AdhocPaymentStrategy(PaymentStrategy):
    """One-off payment; recovers outstanding advance unless the request opts out."""

    def decide(self, request: PaymentRequest, pay: WorkerPayConfig) -> GrossDecision:
        return GrossDecision(
            amount_gross=self.require_positive_amount(request),
            deducts_advance=bool(request.deduct_advance),
        )
