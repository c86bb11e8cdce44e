from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from ..common.datetime_utils import now_local
from ..common.locks import WorkerLocks
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    AlreadyVoidedError,
    ConcurrencyConflictError,
    InactiveWorkerError,
    PaymentNotFoundError,
    ValidationError,
)
from ..workers.eligibility import ensure_eligible
from ..workers.model import Worker
from ..workers.repository import WorkerRepository
from ..workers.service import WorkerService
from .calculator import PaymentCalculator
from .ledger import changed_snapshots, deductible_balance, find_drifts, replay
from .model import (
    LedgerMutation,
    LedgerReplay,
    LedgerVerification,
    MetadataWrite,
    NewEntryWrite,
    PaymentCalculation,
    PaymentEntry,
    PaymentPreview,
    PaymentRequest,
    VoidWrite,
)
from .repository import LedgerRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SalaryPaymentService:
    """Payments against a worker's advance ledger.

    Reads (preview, history, verify) take no lock. Every mutation runs under
    the worker's lock, recomputes from freshly read state, replays the whole
    ledger and commits it in one transaction guarded by `ledger_version`. A
    conflict is retried once before it reaches the caller.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        workers: WorkerRepository,
        *,
        calculator: Optional[PaymentCalculator] = None,
        locks: Optional[WorkerLocks] = None,
        clock: Callable = now_local,
    ):
        self._ledger = ledger
        self._workers = WorkerService(workers)
        self._calculator = calculator or PaymentCalculator()
        self._locks = locks or WorkerLocks()
        self._clock = clock

    def _ensure_payable(self, worker: Worker, pay_date: date) -> None:
        ensure_eligible(worker, pay_date, action="record a payment", error_cls=InactiveWorkerError)

    def _get_entry(self, entry_id: int) -> PaymentEntry:
        entry = self._ledger.get_entry(int(entry_id))
        if not entry:
            raise PaymentNotFoundError(f"Payment {entry_id} not found")
        return entry

    def _mutate(self, worker_id: int, operation: Callable[[], T]) -> T:
        try:
            with self._locks.hold(worker_id):
                return operation()
        except ConcurrencyConflictError:
            logger.warning("Ledger conflict for worker %s, retrying once", worker_id)
        with self._locks.hold(worker_id):
            return operation()

    def _draft(
        self,
        worker: Worker,
        entries: Sequence[PaymentEntry],
        request: PaymentRequest,
    ) -> Tuple[PaymentCalculation, PaymentEntry, LedgerReplay]:
        """Price the request at its place in the ledger and replay with it appended."""

        available = deductible_balance(entries, worker.opening_advance_balance, request.pay_date)
        calc = self._calculator.calculate(request, pay=worker.pay, advance_balance=available)
        draft = PaymentEntry.draft(
            worker_id=worker.worker_id,
            pay_date=request.pay_date,
            calculation=calc,
            sequence=max((e.sequence for e in entries), default=0) + 1,
            note=request.note,
            created_at=self._clock(),
        )
        result = replay([*entries, draft], worker.opening_advance_balance)
        snapshot = result.snapshot_for(0)
        calc = replace(calc, advance_balance_before=snapshot.before, advance_balance_after=snapshot.after)
        draft = replace(draft, advance_balance_before=snapshot.before, advance_balance_after=snapshot.after)
        return calc, draft, result

    def preview(self, request: PaymentRequest) -> PaymentPreview:
        worker = self._workers.get_worker(request.worker_id)
        self._ensure_payable(worker, request.pay_date)
        calc, _, result = self._draft(worker, list(self._ledger.list_entries(worker.worker_id)), request)
        return PaymentPreview(
            calculation=calc,
            worker_id=worker.worker_id,
            worker_name=worker.full_name,
            advance_balance=worker.advance_balance,
            projected_advance_balance=result.final_balance,
        )

    def pay(self, request: PaymentRequest) -> PaymentEntry:
        return self._mutate(request.worker_id, lambda: self._pay_once(request))

    def _pay_once(self, request: PaymentRequest) -> PaymentEntry:
        worker = self._workers.get_worker(request.worker_id)
        self._ensure_payable(worker, request.pay_date)
        entries = list(self._ledger.list_entries(worker.worker_id))
        calc, draft, result = self._draft(worker, entries, request)

        new_id = self._ledger.commit(
            LedgerMutation(
                worker_id=worker.worker_id,
                expected_version=worker.ledger_version,
                final_balance=result.final_balance,
                snapshots=[s for s in changed_snapshots(entries, result) if s.entry_id != 0],
                new_entry=NewEntryWrite(entry=draft),
            )
        )
        logger.info(
            "Payment %s recorded for worker %s: %s gross=%s net=%s balance=%s",
            new_id,
            worker.worker_id,
            calc.type.value,
            calc.amount_gross,
            calc.net_amount,
            result.final_balance,
        )
        return self._get_entry(int(new_id))

    def history(self, worker_id: int, *, limit: Optional[int] = None) -> Sequence[PaymentEntry]:
        worker = self._workers.get_worker(worker_id)
        n = DEFAULT_HISTORY_LIMIT if limit is None else int(limit)
        if n <= 0:
            raise ValidationError("Limit must be greater than 0", field="limit")
        return self._ledger.history(worker.worker_id, limit=n)

    def edit_metadata(
        self,
        entry_id: int,
        *,
        pay_date: Optional[date] = None,
        note: Optional[str] = None,
    ) -> PaymentEntry:
        """Change pay date and/or note. Amounts are immutable: void and re-pay to correct them.

        A new pay date can reorder the ledger, so the balances are replayed.
        """

        entry = self._get_entry(entry_id)
        return self._mutate(entry.worker_id, lambda: self._edit_once(entry.entry_id, pay_date, note))

    def _edit_once(self, entry_id: int, pay_date: Optional[date], note: Optional[str]) -> PaymentEntry:
        entry = self._get_entry(entry_id)
        if entry.voided:
            raise AlreadyVoidedError("Cannot edit a voided payment")
        worker = self._workers.get_worker(entry.worker_id)
        if pay_date is not None and pay_date != entry.pay_date:
            self._ensure_payable(worker, pay_date)

        edited = entry.with_metadata(pay_date=pay_date, note=note)
        entries = [edited if e.entry_id == entry.entry_id else e for e in self._ledger.list_entries(worker.worker_id)]
        result = replay(entries, worker.opening_advance_balance)

        self._ledger.commit(
            LedgerMutation(
                worker_id=worker.worker_id,
                expected_version=worker.ledger_version,
                final_balance=result.final_balance,
                snapshots=changed_snapshots(entries, result),
                metadata=MetadataWrite(entry_id=entry.entry_id, pay_date=edited.pay_date, note=edited.note),
            )
        )
        logger.info(
            "Payment %s of worker %s edited (pay_date=%s); balance=%s",
            entry.entry_id,
            worker.worker_id,
            edited.pay_date,
            result.final_balance,
        )
        return self._get_entry(entry.entry_id)

    def void(self, entry_id: int, *, reason: Optional[str] = None) -> PaymentEntry:
        """Flag the entry as voided, keep the row and replay every later balance."""

        entry = self._get_entry(entry_id)
        return self._mutate(entry.worker_id, lambda: self._void_once(entry.entry_id, reason))

    def _void_once(self, entry_id: int, reason: Optional[str]) -> PaymentEntry:
        entry = self._get_entry(entry_id)
        if entry.voided:
            raise AlreadyVoidedError("Payment already voided")
        worker = self._workers.get_worker(entry.worker_id)

        all_entries = list(self._ledger.list_entries(worker.worker_id))
        remaining = [e for e in all_entries if e.entry_id != entry.entry_id]
        result = replay(remaining, worker.opening_advance_balance)

        self._ledger.commit(
            LedgerMutation(
                worker_id=worker.worker_id,
                expected_version=worker.ledger_version,
                final_balance=result.final_balance,
                snapshots=changed_snapshots(remaining, result),
                void=VoidWrite(
                    entry_id=entry.entry_id,
                    reason=(reason or "").strip() or None,
                    voided_at=self._clock(),
                ),
            )
        )
        logger.info(
            "Payment %s of worker %s voided; balance %s -> %s",
            entry.entry_id,
            worker.worker_id,
            worker.advance_balance,
            result.final_balance,
        )
        return self._get_entry(entry.entry_id)

    def verify(self, worker_id: int) -> LedgerVerification:
        """Replay the ledger and report any stored balance that disagrees."""

        worker = self._workers.get_worker(worker_id)
        entries = list(self._ledger.list_entries(worker.worker_id))
        result = replay(entries, worker.opening_advance_balance)
        verification = LedgerVerification(
            worker_id=worker.worker_id,
            stored_balance=worker.advance_balance,
            expected_balance=result.final_balance,
            drifts=find_drifts(entries, result),
        )
        if not verification.consistent:
            logger.warning("Ledger drift for worker %s: %d entries", worker.worker_id, len(verification.drifts))
        return verification
