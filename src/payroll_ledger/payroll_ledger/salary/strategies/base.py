from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...common.money import ZERO
from ...core.exceptions import InvalidAmountError
from ...workers.model import WorkerPayConfig
from ..model import PaymentRequest


@dataclass(frozen=True)
class GrossDecision:
    amount_gross: Decimal
    deducts_advance: bool
    adds_to_advance: bool = False
    daily_deduction: Decimal = ZERO
    days_paid: Optional[int] = None


class PaymentStrategy(ABC):
    """Strategy Pattern: how a payment type turns a request into a gross amount."""

    @abstractmethod
    def decide(self, request: PaymentRequest, pay: WorkerPayConfig) -> GrossDecision:
        raise NotImplementedError

    @staticmethod
    def require_positive_amount(request: PaymentRequest) -> Decimal:
        if request.amount is None or request.amount <= 0:
            raise InvalidAmountError("Amount must be greater than 0", field="amount")
        return request.amount
