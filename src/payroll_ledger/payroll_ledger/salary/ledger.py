from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ..common.money import ZERO, round2
from ..core.enums import PaymentEntryType
from .model import BalanceSnapshot, LedgerDrift, LedgerReplay, PaymentEntry


def ledger_order_key(entry: PaymentEntry) -> tuple:
    return (entry.pay_date, entry.sequence)


def apply_entry(balance: Decimal, entry: PaymentEntry) -> Decimal:
    """One replay step over an entry's stored, immutable amounts."""

    if entry.type == PaymentEntryType.ADVANCE:
        return round2(balance + entry.amount_gross)
    return round2(max(ZERO, balance - entry.advance_deducted))


def replay(entries: Iterable[PaymentEntry], opening_balance: Decimal = ZERO) -> LedgerReplay:
    """Fold the non-voided entries in ledger order, starting from the opening balance."""

    balance = round2(opening_balance)
    snapshots: list[BalanceSnapshot] = []
    for entry in sorted((e for e in entries if not e.voided), key=ledger_order_key):
        after = apply_entry(balance, entry)
        snapshots.append(BalanceSnapshot(entry_id=entry.entry_id, before=balance, after=after))
        balance = after
    return LedgerReplay(snapshots=snapshots, final_balance=balance)


def changed_snapshots(entries: Sequence[PaymentEntry], result: LedgerReplay) -> list[BalanceSnapshot]:
    """Snapshots that differ from what is stored; the draft entry (id 0) always counts."""

    stored = {e.entry_id: e for e in entries}
    out: list[BalanceSnapshot] = []
    for s in result.snapshots:
        e = stored.get(s.entry_id)
        if e is None or s.entry_id == 0:
            out.append(s)
        elif e.advance_balance_before != s.before or e.advance_balance_after != s.after:
            out.append(s)
    return out


def find_drifts(entries: Sequence[PaymentEntry], result: LedgerReplay) -> list[LedgerDrift]:
    stored = {e.entry_id: e for e in entries}
    drifts: list[LedgerDrift] = []
    for s in result.snapshots:
        e = stored[s.entry_id]
        if e.advance_balance_before != s.before or e.advance_balance_after != s.after:
            drifts.append(
                LedgerDrift(
                    entry_id=e.entry_id,
                    stored_before=e.advance_balance_before,
                    stored_after=e.advance_balance_after,
                    expected_before=s.before,
                    expected_after=s.after,
                )
            )
    return drifts


def deductible_balance(entries: Sequence[PaymentEntry], opening_balance: Decimal, pay_date: date) -> Decimal:
    """Advance a new entry dated `pay_date` can still recover.

    The entry lands after every entry on or before its date. Later steps only
    shift down by what it deducts, so the lowest balance from there to the end
    of the ledger caps the deduction; anything above it would be clamped away.
    """

    stored = {e.entry_id: e for e in entries}
    result = replay(entries, opening_balance)
    balance = round2(opening_balance)
    floor = None
    for s in result.snapshots:
        if stored[s.entry_id].pay_date <= pay_date:
            balance = s.after
        else:
            floor = s.after if floor is None else min(floor, s.after)
    return balance if floor is None else min(balance, floor)
