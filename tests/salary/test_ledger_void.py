from datetime import date
from decimal import Decimal

import pytest

from src.payroll_ledger.payroll_ledger.core.enums import PaymentEntryType
from src.payroll_ledger.payroll_ledger.core.exceptions import AlreadyVoidedError, PaymentNotFoundError
from src.payroll_ledger.payroll_ledger.salary.ledger import replay
from src.payroll_ledger.payroll_ledger.salary.model import PaymentRequest


def _req(type_, pay_date, **kwargs):
    return PaymentRequest(worker_id=1, type=type_, pay_date=pay_date, **kwargs)


def _assert_replay_matches_storage(ledger_repo, workers_repo, worker_id=1):
    worker = workers_repo.get_by_id(worker_id)
    entries = list(ledger_repo.list_entries(worker_id))
    result = replay(entries, worker.opening_advance_balance)
    for snap in result.snapshots:
        stored = ledger_repo.get_entry(snap.entry_id)
        assert (stored.advance_balance_before, stored.advance_balance_after) == (snap.before, snap.after)
    assert worker.advance_balance == result.final_balance


def test_void_middle_entry_updates_later_entries_only(salary_service, workers_repo, ledger_repo, worker_factory):
    workers_repo.add(worker_factory(1))  # daily rate 1000
    first = salary_service.pay(_req(PaymentEntryType.ADVANCE, date(2024, 5, 1), amount=Decimal("3000")))
    middle = salary_service.pay(_req(PaymentEntryType.ADVANCE, date(2024, 5, 5), amount=Decimal("2000")))
    last = salary_service.pay(_req(PaymentEntryType.PARTIAL, date(2024, 5, 10), days_paid=2))
    assert last.advance_balance_after == Decimal("3000.00")

    voided = salary_service.void(middle.entry_id, reason="entered twice")

    assert voided.voided is True
    assert voided.void_reason == "entered twice"
    assert voided.voided_at is not None

    first_after = ledger_repo.get_entry(first.entry_id)
    last_after = ledger_repo.get_entry(last.entry_id)
    assert (first_after.advance_balance_before, first_after.advance_balance_after) == (Decimal("0.00"), Decimal("3000.00"))
    assert (last_after.advance_balance_before, last_after.advance_balance_after) == (Decimal("3000.00"), Decimal("1000.00"))
    assert last_after.advance_deducted == Decimal("2000.00")
    assert ledger_repo.snapshot_writes[-1] == [last.entry_id]
    assert workers_repo.get_by_id(1).advance_balance == Decimal("1000.00")
    _assert_replay_matches_storage(ledger_repo, workers_repo)


def test_replay_matches_storage_over_appends_and_voids(salary_service, workers_repo, ledger_repo, worker_factory):
    workers_repo.add(worker_factory(1, opening_advance_balance="250", advance_balance="250"))
    steps = [
        _req(PaymentEntryType.ADVANCE, date(2024, 5, 1), amount=Decimal("4000")),
        _req(PaymentEntryType.PARTIAL, date(2024, 5, 8), days_paid=3),
        _req(PaymentEntryType.ADHOC, date(2024, 5, 9), amount=Decimal("600")),
        _req(PaymentEntryType.ADVANCE, date(2024, 5, 12), amount=Decimal("1500")),
        _req(PaymentEntryType.FULL, date(2024, 5, 31)),
    ]
    ids = []
    for req in steps:
        ids.append(salary_service.pay(req).entry_id)
        _assert_replay_matches_storage(ledger_repo, workers_repo)

    for entry_id in (ids[0], ids[3], ids[1]):
        salary_service.void(entry_id)
        _assert_replay_matches_storage(ledger_repo, workers_repo)

    assert salary_service.verify(1).consistent
    assert workers_repo.get_by_id(1).advance_balance == Decimal("0.00")


def test_void_twice_is_rejected(salary_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1))
    entry = salary_service.pay(_req(PaymentEntryType.ADVANCE, date(2024, 5, 1), amount=Decimal("100")))
    salary_service.void(entry.entry_id)

    with pytest.raises(AlreadyVoidedError):
        salary_service.void(entry.entry_id)
    with pytest.raises(AlreadyVoidedError):
        salary_service.edit_metadata(entry.entry_id, note="late fix")


def test_void_unknown_payment(salary_service):
    with pytest.raises(PaymentNotFoundError):
        salary_service.void(404)


def test_moving_advance_after_full_payment_replays(salary_service, workers_repo, ledger_repo, worker_factory):
    workers_repo.add(worker_factory(1, base_salary="10000"))
    advance = salary_service.pay(_req(PaymentEntryType.ADVANCE, date(2024, 5, 15), amount=Decimal("2000")))
    full = salary_service.pay(_req(PaymentEntryType.FULL, date(2024, 5, 31)))
    assert full.net_amount == Decimal("8000.00")

    moved = salary_service.edit_metadata(advance.entry_id, pay_date=date(2024, 6, 5), note="paid in June")

    assert moved.pay_date == date(2024, 6, 5)
    assert moved.note == "paid in June"
    assert moved.amount_gross == Decimal("2000.00")
    assert ledger_repo.get_entry(full.entry_id).net_amount == Decimal("8000.00")
    assert workers_repo.get_by_id(1).advance_balance == Decimal("2000.00")
    _assert_replay_matches_storage(ledger_repo, workers_repo)


def test_note_only_edit_keeps_balances(salary_service, workers_repo, ledger_repo, worker_factory):
    workers_repo.add(worker_factory(1))
    entry = salary_service.pay(_req(PaymentEntryType.ADVANCE, date(2024, 5, 1), amount=Decimal("100")))

    edited = salary_service.edit_metadata(entry.entry_id, note="cash")

    assert edited.note == "cash"
    assert edited.pay_date == date(2024, 5, 1)
    assert ledger_repo.snapshot_writes[-1] == []
    assert workers_repo.get_by_id(1).advance_balance == Decimal("100.00")
