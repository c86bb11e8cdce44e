from __future__ import annotations

import threading
import time
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

import pytest

from src.payroll_ledger.payroll_ledger.attendance.model import AttendanceRecord
from src.payroll_ledger.payroll_ledger.attendance.service import AttendanceService
from src.payroll_ledger.payroll_ledger.budget.model import MaterialCost, OtherCost, Project
from src.payroll_ledger.payroll_ledger.budget.service import BudgetService
from src.payroll_ledger.payroll_ledger.common.locks import WorkerLocks
from src.payroll_ledger.payroll_ledger.core.enums import PaymentType, WorkerStatus
from src.payroll_ledger.payroll_ledger.core.exceptions import AlreadyVoidedError, ConcurrencyConflictError
from src.payroll_ledger.payroll_ledger.payroll.service import PayrollReportService
from src.payroll_ledger.payroll_ledger.salary.model import LedgerMutation, PaymentEntry
from src.payroll_ledger.payroll_ledger.salary.service import SalaryPaymentService
from src.payroll_ledger.payroll_ledger.workers.model import Worker, WorkerPayConfig


class InMemoryWorkers:
    def __init__(self):
        self.by_id: dict[int, Worker] = {}

    def add(self, worker: Worker) -> Worker:
        self.by_id[worker.worker_id] = worker
        return worker

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        return self.by_id.get(worker_id)

    def list_workers(self, *, worker_ids: Optional[Sequence[int]] = None) -> Sequence[Worker]:
        items = sorted(self.by_id.values(), key=lambda w: w.worker_id)
        if worker_ids is None:
            return items
        return [w for w in items if w.worker_id in set(worker_ids)]


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self.by_id[record.attendance_id] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.by_id.get(attendance_id)

    def get_for_worker_and_date(self, worker_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self.by_id.values():
            if r.worker_id == worker_id and r.work_date == work_date:
                return r
        return None

    def upsert(self, *, worker_id, work_date, status, check_in, check_out, hours_worked, overtime_hours, project_id=None, notes=None):
        existing = self.get_for_worker_and_date(worker_id, work_date)
        if existing:
            record = replace(
                existing,
                status=status,
                check_in=check_in,
                check_out=check_out,
                hours_worked=hours_worked,
                overtime_hours=overtime_hours,
                is_approved=existing.is_approved and existing.overtime_hours == overtime_hours,
                project_id=project_id,
                notes=notes,
            )
            self.by_id[existing.attendance_id] = record
            return record, False

        self._id += 1
        record = AttendanceRecord(
            attendance_id=self._id,
            worker_id=worker_id,
            work_date=work_date,
            status=status,
            check_in=check_in,
            check_out=check_out,
            hours_worked=hours_worked,
            overtime_hours=overtime_hours,
            project_id=project_id,
            notes=notes,
        )
        self.by_id[self._id] = record
        return record, True

    def delete(self, attendance_id: int) -> bool:
        return self.by_id.pop(attendance_id, None) is not None

    def set_overtime_approval(self, *, attendance_id: int, approved: bool) -> bool:
        record = self.by_id.get(attendance_id)
        if not record:
            return False
        self.by_id[attendance_id] = replace(record, is_approved=approved)
        return True

    def list_for_range(self, *, start_date: date, end_date: date, worker_ids=None):
        items = [
            r
            for r in self.by_id.values()
            if start_date <= r.work_date <= end_date and (worker_ids is None or r.worker_id in set(worker_ids))
        ]
        return sorted(items, key=lambda r: (r.work_date, r.worker_id))


class InMemoryLedger:
    """Mirrors MySQLLedgerRepository.commit: version check, then all writes or none."""

    def __init__(self, workers: InMemoryWorkers):
        self._workers = workers
        self.by_id: dict[int, PaymentEntry] = {}
        self._id = 0
        self.conflicts_to_raise = 0
        self.version_conflicts = 0
        self.snapshot_writes: list[list[int]] = []
        self.read_delays: dict[int, float] = {}
        self.reading = threading.Event()

    def get_entry(self, entry_id: int) -> Optional[PaymentEntry]:
        return self.by_id.get(entry_id)

    def list_entries(self, worker_id: int) -> Sequence[PaymentEntry]:
        self.reading.set()
        if self.read_delays.get(worker_id):
            time.sleep(self.read_delays[worker_id])
        items = [e for e in self.by_id.values() if e.worker_id == worker_id]
        return sorted(items, key=lambda e: (e.pay_date, e.sequence))

    def history(self, worker_id: int, *, limit: int) -> Sequence[PaymentEntry]:
        items = [e for e in self.list_entries(worker_id) if not e.voided]
        return list(reversed(items))[:limit]

    def list_for_range(self, *, start_date: date, end_date: date, worker_ids=None):
        return [
            e
            for e in sorted(self.by_id.values(), key=lambda e: (e.pay_date, e.sequence))
            if not e.voided
            and start_date <= e.pay_date <= end_date
            and (worker_ids is None or e.worker_id in set(worker_ids))
        ]

    def commit(self, mutation: LedgerMutation) -> Optional[int]:
        if self.conflicts_to_raise > 0:
            self.conflicts_to_raise -= 1
            raise ConcurrencyConflictError("simulated concurrent write")

        worker = self._workers.get_by_id(mutation.worker_id)
        if worker.ledger_version != mutation.expected_version:
            self.version_conflicts += 1
            raise ConcurrencyConflictError("ledger changed")

        staged = dict(self.by_id)
        new_id = None
        if mutation.new_entry is not None:
            new_id = self._id + 1
            staged[new_id] = replace(mutation.new_entry.entry, entry_id=new_id, sequence=new_id)
        if mutation.metadata is not None:
            m = mutation.metadata
            staged[m.entry_id] = replace(staged[m.entry_id], pay_date=m.pay_date, note=m.note)
        if mutation.void is not None:
            v = mutation.void
            if staged[v.entry_id].voided:
                raise AlreadyVoidedError("Payment already voided")
            staged[v.entry_id] = replace(staged[v.entry_id], voided=True, void_reason=v.reason, voided_at=v.voided_at)
        for s in mutation.snapshots:
            target = new_id if s.entry_id == 0 else s.entry_id
            staged[target] = replace(staged[target], advance_balance_before=s.before, advance_balance_after=s.after)

        self.by_id = staged
        if new_id is not None:
            self._id = new_id
        self.snapshot_writes.append([s.entry_id for s in mutation.snapshots])
        self._workers.add(
            replace(worker, advance_balance=mutation.final_balance, ledger_version=worker.ledger_version + 1)
        )
        return new_id


class InMemoryProjects:
    def __init__(self):
        self.projects: dict[int, Project] = {}
        self.materials: list[MaterialCost] = []
        self.other_costs: list[OtherCost] = []

    def get_project(self, project_id: int) -> Optional[Project]:
        return self.projects.get(project_id)

    def list_materials(self, project_id: int):
        return [m for m in self.materials if m.project_id == project_id]

    def list_other_costs(self, project_id: int):
        return [c for c in self.other_costs if c.project_id == project_id]


def make_worker(
    worker_id: int = 1,
    *,
    name: str = "Worker",
    payment_type: PaymentType = PaymentType.MONTHLY,
    base_salary: str = "26000",
    status: WorkerStatus = WorkerStatus.ACTIVE,
    inactive_from: Optional[date] = None,
    join_date: Optional[date] = None,
    advance_balance: str = "0",
    opening_advance_balance: str = "0",
) -> Worker:
    return Worker(
        worker_id=worker_id,
        full_name=name,
        pay=WorkerPayConfig(payment_type=payment_type, base_salary=Decimal(base_salary)),
        status=status,
        inactive_from=inactive_from,
        join_date=join_date,
        advance_balance=Decimal(advance_balance),
        opening_advance_balance=Decimal(opening_advance_balance),
    )


@pytest.fixture
def worker_factory():
    return make_worker


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 15, 10, 0, 0)


@pytest.fixture
def workers_repo():
    return InMemoryWorkers()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def ledger_repo(workers_repo):
    return InMemoryLedger(workers_repo)


@pytest.fixture
def projects_repo():
    return InMemoryProjects()


@pytest.fixture
def attendance_service(attendance_repo, workers_repo):
    return AttendanceService(attendance_repo, workers_repo)


@pytest.fixture
def salary_service(ledger_repo, workers_repo, fixed_now):
    return SalaryPaymentService(
        ledger_repo,
        workers_repo,
        locks=WorkerLocks(timeout_seconds=1.0),
        clock=lambda: fixed_now,
    )


@pytest.fixture
def budget_service(projects_repo, workers_repo, attendance_repo):
    return BudgetService(projects_repo, workers_repo, attendance_repo, today=lambda: date(2024, 6, 30))


@pytest.fixture
def payroll_report_service(attendance_repo, workers_repo, ledger_repo):
    return PayrollReportService(attendance_repo, workers_repo, ledger_repo)
