from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import LedgerMutation, PaymentEntry


class LedgerRepository(Protocol):
    def get_entry(self, entry_id: int) -> Optional[PaymentEntry]:
        raise NotImplementedError

    def list_entries(self, worker_id: int) -> Sequence[PaymentEntry]:
        """Every entry of the worker, voided ones included, in ledger order."""

        raise NotImplementedError

    def history(self, worker_id: int, *, limit: int) -> Sequence[PaymentEntry]:
        """Non-voided entries, most recent first."""

        raise NotImplementedError

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[PaymentEntry]:
        """Non-voided entries paid within [start_date, end_date]."""

        raise NotImplementedError

    def commit(self, mutation: LedgerMutation) -> Optional[int]:
        """Apply all writes of one ledger operation in a single transaction.

        Raises ConcurrencyConflictError if the worker's ledger_version is no
        longer `mutation.expected_version`; nothing is written in that case.
        Returns the new entry id when `mutation.new_entry` is set.
        """

        raise NotImplementedError
