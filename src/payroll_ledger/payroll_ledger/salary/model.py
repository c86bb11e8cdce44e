from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import format_iso_date, today_local
from ..common.money import ZERO, round2
from ..common.validators import optional_date, require_date, require_int
from ..core.enums import PaymentEntryType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DailyPayment:
    work_date: date
    amount: Decimal

    def to_dict(self) -> dict:
        return {"date": format_iso_date(self.work_date), "amount": float(self.amount)}


@dataclass(frozen=True)
class OvertimePayment:
    work_date: date
    amount: Decimal
    hours: Decimal = ZERO

    def to_dict(self) -> dict:
        return {"date": format_iso_date(self.work_date), "amount": float(self.amount), "hours": float(self.hours)}


def _parse_payment_type(value: Any) -> PaymentEntryType:
    v = str(getattr(value, "value", value) or "").strip().lower()
    if not v:
        raise ValidationError("Payment type is required", field="type")
    try:
        return PaymentEntryType(v)
    except ValueError:
        raise ValidationError(f"Unknown payment type: {v}", field="type")


def _optional_days(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, "days_paid")


def _optional_amount(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return round2(value)


def _items(value: Any, field_name: str) -> list[dict]:
    """A JSON array of objects, or nothing."""
    if value is None or value == "":
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ValidationError(f"{field_name} must be a list of objects", field=field_name)
    return value


def _flag(value: Any, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    v = str(value).strip().lower()
    if v in ("true", "1", "yes"):
        return True
    if v in ("false", "0", "no"):
        return False
    raise ValidationError(f"{field_name} must be true or false", field=field_name)


@dataclass(frozen=True)
class PaymentRequest:
    """A payment as submitted; amounts are validated by the payment strategies."""

    worker_id: int
    type: PaymentEntryType
    pay_date: date
    days_paid: Optional[int] = None
    amount: Optional[Decimal] = None
    daily_payments: tuple[DailyPayment, ...] = ()
    overtime_payments: tuple[OvertimePayment, ...] = ()
    note: Optional[str] = None
    deduct_advance: bool = True

    @classmethod
    def from_payload(cls, payload: dict) -> "PaymentRequest":
        """Build from the JSON body the UI sends (camelCase keys)."""

        daily = tuple(
            DailyPayment(
                work_date=require_date(d.get("date"), "daily_payments"),
                amount=round2(d.get("amount")),
            )
            for d in _items(payload.get("dailyPayments"), "daily_payments")
        )
        overtime = tuple(
            OvertimePayment(
                work_date=require_date(o.get("date"), "overtime_payments"),
                amount=round2(o.get("amount")),
                hours=round2(o.get("hours")),
            )
            for o in _items(payload.get("overtimePayments"), "overtime_payments")
        )
        return cls(
            worker_id=require_int(payload.get("workerId"), "worker_id"),
            type=_parse_payment_type(payload.get("type")),
            pay_date=optional_date(payload.get("payDate"), "pay_date") or today_local(),
            days_paid=_optional_days(payload.get("daysPaid")),
            amount=_optional_amount(payload.get("amount")),
            daily_payments=daily,
            overtime_payments=overtime,
            note=(payload.get("note") or "").strip() or None,
            deduct_advance=_flag(payload.get("deductAdvance"), "deduct_advance", True),
        )


@dataclass(frozen=True)
class PaymentCalculation:
    type: PaymentEntryType
    amount_gross: Decimal
    advance_deducted: Decimal
    daily_deduction: Decimal
    overtime_payments_total: Decimal
    net_amount: Decimal
    advance_balance_before: Decimal
    advance_balance_after: Decimal
    days_paid: Optional[int] = None
    daily_payment_details: tuple[DailyPayment, ...] = ()
    overtime_payment_details: tuple[OvertimePayment, ...] = ()

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "daysPaid": self.days_paid,
            "amountGross": float(self.amount_gross),
            "advanceDeducted": float(self.advance_deducted),
            "dailyDeduction": float(self.daily_deduction),
            "overtimePaymentsTotal": float(self.overtime_payments_total),
            "netAmount": float(self.net_amount),
            "advanceBalanceBefore": float(self.advance_balance_before),
            "advanceBalanceAfter": float(self.advance_balance_after),
            "dailyPaymentDetails": [d.to_dict() for d in self.daily_payment_details],
            "overtimePaymentDetails": [o.to_dict() for o in self.overtime_payment_details],
        }


@dataclass(frozen=True)
class PaymentPreview:
    calculation: PaymentCalculation
    worker_id: int
    worker_name: str
    advance_balance: Decimal
    projected_advance_balance: Decimal

    def to_dict(self) -> dict:
        return {
            "calculation": self.calculation.to_dict(),
            "worker": {
                "id": self.worker_id,
                "name": self.worker_name,
                "advanceBalance": float(self.advance_balance),
            },
            "projected": {"advanceBalance": float(self.projected_advance_balance)},
        }


@dataclass(frozen=True)
class PaymentEntry:
    """Ledger row.

    Financial fields never change after insert. `advance_balance_before/after`
    are a cache of the ledger replay and are rewritten whenever the worker's
    ledger is appended to, re-dated or voided. `sequence` is insertion order.
    """

    entry_id: int
    worker_id: int
    type: PaymentEntryType
    pay_date: date
    amount_gross: Decimal
    advance_deducted: Decimal
    daily_deduction: Decimal
    overtime_payments_total: Decimal
    net_amount: Decimal
    advance_balance_before: Decimal
    advance_balance_after: Decimal
    sequence: int
    days_paid: Optional[int] = None
    daily_payment_details: tuple[DailyPayment, ...] = ()
    overtime_payment_details: tuple[OvertimePayment, ...] = ()
    note: Optional[str] = None
    voided: bool = False
    void_reason: Optional[str] = None
    voided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def draft(
        cls,
        *,
        worker_id: int,
        pay_date: date,
        calculation: PaymentCalculation,
        sequence: int,
        note: Optional[str],
        created_at: datetime,
    ) -> "PaymentEntry":
        """Not-yet-persisted entry (entry_id 0) placed at the end of its pay date."""

        return cls(
            entry_id=0,
            worker_id=worker_id,
            type=calculation.type,
            pay_date=pay_date,
            amount_gross=calculation.amount_gross,
            advance_deducted=calculation.advance_deducted,
            daily_deduction=calculation.daily_deduction,
            overtime_payments_total=calculation.overtime_payments_total,
            net_amount=calculation.net_amount,
            advance_balance_before=calculation.advance_balance_before,
            advance_balance_after=calculation.advance_balance_after,
            sequence=sequence,
            days_paid=calculation.days_paid,
            daily_payment_details=calculation.daily_payment_details,
            overtime_payment_details=calculation.overtime_payment_details,
            note=note,
            created_at=created_at,
        )

    def with_metadata(self, *, pay_date: Optional[date] = None, note: Optional[str] = None) -> "PaymentEntry":
        return replace(
            self,
            pay_date=pay_date or self.pay_date,
            note=self.note if note is None else (note.strip() or None),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "workerId": self.worker_id,
            "type": self.type.value,
            "payDate": format_iso_date(self.pay_date),
            "daysPaid": self.days_paid,
            "amountGross": float(self.amount_gross),
            "advanceDeducted": float(self.advance_deducted),
            "dailyDeduction": float(self.daily_deduction),
            "overtimePaymentsTotal": float(self.overtime_payments_total),
            "netAmount": float(self.net_amount),
            "advanceBalanceBefore": float(self.advance_balance_before),
            "advanceBalanceAfter": float(self.advance_balance_after),
            "dailyPaymentDetails": [d.to_dict() for d in self.daily_payment_details],
            "overtimePaymentDetails": [o.to_dict() for o in self.overtime_payment_details],
            "note": self.note,
            "isVoided": self.voided,
            "voidReason": self.void_reason,
            "voidedAt": self.voided_at.isoformat() if self.voided_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class BalanceSnapshot:
    entry_id: int
    before: Decimal
    after: Decimal


@dataclass(frozen=True)
class LedgerReplay:
    snapshots: list[BalanceSnapshot]
    final_balance: Decimal

    def snapshot_for(self, entry_id: int) -> Optional[BalanceSnapshot]:
        for s in self.snapshots:
            if s.entry_id == entry_id:
                return s
        return None


@dataclass(frozen=True)
class NewEntryWrite:
    entry: PaymentEntry


@dataclass(frozen=True)
class MetadataWrite:
    entry_id: int
    pay_date: date
    note: Optional[str]


@dataclass(frozen=True)
class VoidWrite:
    entry_id: int
    reason: Optional[str]
    voided_at: datetime


@dataclass(frozen=True)
class LedgerMutation:
    """Everything one ledger operation writes, committed atomically.

    `expected_version` is the worker's ledger_version read before computing;
    the commit is rejected if it moved. Snapshot id 0 targets `new_entry`.
    """

    worker_id: int
    expected_version: int
    final_balance: Decimal
    snapshots: Sequence[BalanceSnapshot] = ()
    new_entry: Optional[NewEntryWrite] = None
    metadata: Optional[MetadataWrite] = None
    void: Optional[VoidWrite] = None


@dataclass(frozen=True)
class LedgerDrift:
    entry_id: int
    stored_before: Decimal
    stored_after: Decimal
    expected_before: Decimal
    expected_after: Decimal

    def to_dict(self) -> dict:
        return {
            "entryId": self.entry_id,
            "stored": {"before": float(self.stored_before), "after": float(self.stored_after)},
            "expected": {"before": float(self.expected_before), "after": float(self.expected_after)},
        }


@dataclass(frozen=True)
class LedgerVerification:
    worker_id: int
    stored_balance: Decimal
    expected_balance: Decimal
    drifts: list[LedgerDrift] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not self.drifts and self.stored_balance == self.expected_balance

    def to_dict(self) -> dict:
        return {
            "workerId": self.worker_id,
            "consistent": self.consistent,
            "storedBalance": float(self.stored_balance),
            "expectedBalance": float(self.expected_balance),
            "drifts": [d.to_dict() for d in self.drifts],
        }
