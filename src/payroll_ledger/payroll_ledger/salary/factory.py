from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PaymentEntryType
from ..core.exceptions import ValidationError
from .strategies.adhoc_strategy import AdhocPaymentStrategy
from .strategies.advance_strategy import AdvancePaymentStrategy
from .strategies.base import PaymentStrategy
from .strategies.full_strategy import FullPaymentStrategy
from .strategies.partial_strategy import PartialPaymentStrategy


@dataclass
class PaymentStrategyFactory:
    """Factory Pattern: choose the strategy for a payment type."""

    def for_type(self, payment_type: PaymentEntryType) -> PaymentStrategy:
        if payment_type == PaymentEntryType.FULL:
            return FullPaymentStrategy()
        if payment_type == PaymentEntryType.PARTIAL:
            return PartialPaymentStrategy()
        if payment_type == PaymentEntryType.ADVANCE:
            return AdvancePaymentStrategy()
        if payment_type == PaymentEntryType.ADHOC:
            return AdhocPaymentStrategy()
        raise ValidationError(f"Unknown payment type: {payment_type}", field="type")
