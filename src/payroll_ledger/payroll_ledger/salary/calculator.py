from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..common.money import ZERO, money_sum, round2
from ..core.exceptions import InvalidAmountError
from ..workers.model import WorkerPayConfig
from .factory import PaymentStrategyFactory
from .model import PaymentCalculation, PaymentRequest


class PaymentCalculator:
    """Pure computation of a payment against a given advance balance."""

    def __init__(self, factory: Optional[PaymentStrategyFactory] = None):
        self._factory = factory or PaymentStrategyFactory()

    def calculate(
        self,
        request: PaymentRequest,
        *,
        pay: WorkerPayConfig,
        advance_balance: Decimal,
    ) -> PaymentCalculation:
        balance = max(round2(advance_balance), ZERO)
        decision = self._factory.for_type(request.type).decide(request, pay)
        gross = round2(decision.amount_gross)

        deducted = min(balance, gross) if decision.deducts_advance else ZERO
        deducted = round2(deducted)

        overtime = tuple(o for o in request.overtime_payments if o.amount > 0)
        overtime_total = money_sum(o.amount for o in overtime)

        net = round2(gross - deducted - overtime_total)
        if net < 0:
            raise InvalidAmountError(
                "Overtime payments exceed the amount left after advance deduction",
                field="overtime_payments",
            )

        if decision.adds_to_advance:
            after = balance + gross
        else:
            after = balance - deducted

        return PaymentCalculation(
            type=request.type,
            amount_gross=gross,
            advance_deducted=deducted,
            daily_deduction=round2(decision.daily_deduction),
            overtime_payments_total=overtime_total,
            net_amount=net,
            advance_balance_before=balance,
            advance_balance_after=round2(after),
            days_paid=decision.days_paid,
            daily_payment_details=tuple(d for d in request.daily_payments if d.amount > 0),
            overtime_payment_details=overtime,
        )
