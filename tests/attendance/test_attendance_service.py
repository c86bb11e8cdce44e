from datetime import date
from decimal import Decimal

import pytest

from src.payroll_ledger.payroll_ledger.core.enums import AttendanceStatus, DisplayStatus, WorkerStatus
from src.payroll_ledger.payroll_ledger.core.exceptions import (
    BlockedByInactiveCutoffError,
    ValidationError,
    WorkerNotFoundError,
)


def test_cutoff_allows_day_before_and_blocks_cutoff_day(attendance_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1, status=WorkerStatus.INACTIVE, inactive_from=date(2024, 6, 1)))

    record, created = attendance_service.mark(worker_id=1, work_date=date(2024, 5, 31), status="present")
    assert created is True
    assert record.status == AttendanceStatus.PRESENT

    with pytest.raises(BlockedByInactiveCutoffError) as exc:
        attendance_service.mark(worker_id=1, work_date=date(2024, 6, 1), status="present")
    assert "2024-06-01" in str(exc.value)


def test_inactive_without_cutoff_date_is_blocked(attendance_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1, status=WorkerStatus.INACTIVE))

    with pytest.raises(BlockedByInactiveCutoffError):
        attendance_service.mark(worker_id=1, work_date=date(2020, 1, 1), status="present")


def test_upsert_is_keyed_by_worker_and_date(attendance_service, attendance_repo, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1))

    first, created = attendance_service.mark(worker_id=1, work_date=date(2024, 5, 2), status="present")
    second, created_again = attendance_service.mark(
        worker_id=1,
        work_date=date(2024, 5, 2),
        status="overtime",
        check_in="09:00",
        check_out="19:30",
    )

    assert created and not created_again
    assert second.attendance_id == first.attendance_id
    assert len(attendance_repo.by_id) == 1
    assert second.status == AttendanceStatus.PRESENT
    assert second.overtime_hours == Decimal("2.50")
    assert second.hours_worked == Decimal("10.50")
    assert second.display_status == DisplayStatus.OVERTIME


def test_unknown_worker(attendance_service):
    with pytest.raises(WorkerNotFoundError):
        attendance_service.mark(worker_id=99, work_date=date(2024, 5, 2), status="present")


def test_records_past_cutoff_are_immutable(attendance_service, attendance_repo, workers_repo, worker_factory):
    from dataclasses import replace

    worker = workers_repo.add(worker_factory(1))
    record, _ = attendance_service.mark(worker_id=1, work_date=date(2024, 6, 3), status="present")

    workers_repo.add(replace(worker, status=WorkerStatus.INACTIVE, inactive_from=date(2024, 6, 1)))

    with pytest.raises(BlockedByInactiveCutoffError):
        attendance_service.delete(record.attendance_id)
    assert attendance_repo.get_by_id(record.attendance_id) is not None


def test_delete_reverts_to_not_marked(attendance_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1, name="An"))
    record, _ = attendance_service.mark(worker_id=1, work_date=date(2024, 5, 2), status="half-day")

    attendance_service.delete(record.attendance_id)

    sheet = attendance_service.day_sheet(date(2024, 5, 2))
    assert sheet.rows[0].display_status == DisplayStatus.NOT_MARKED


def test_approve_overtime_requires_overtime(attendance_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1))
    plain, _ = attendance_service.mark(worker_id=1, work_date=date(2024, 5, 2), status="present")
    with pytest.raises(ValidationError):
        attendance_service.approve_overtime(plain.attendance_id)

    ot, _ = attendance_service.mark(
        worker_id=1, work_date=date(2024, 5, 3), status="overtime", check_in="08:00", check_out="18:00"
    )
    approved = attendance_service.approve_overtime(ot.attendance_id)
    assert approved.is_approved is True
    assert approved.approved_overtime_hours == Decimal("2.00")


def test_day_sheet_lists_hidden_workers_with_reason(attendance_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1, name="An"))
    workers_repo.add(worker_factory(2, name="Binh", status=WorkerStatus.INACTIVE, inactive_from=date(2024, 6, 1)))

    sheet = attendance_service.day_sheet(date(2024, 6, 5))

    assert [r.worker_id for r in sheet.rows] == [1]
    assert [r.worker_id for r in sheet.hidden] == [2]
    assert sheet.hidden[0].editable is False
    assert "inactive from 2024-06-01" in sheet.hidden[0].reason


def test_list_for_worker_hides_records_past_cutoff(attendance_service, attendance_repo, workers_repo, worker_factory):
    from src.payroll_ledger.payroll_ledger.attendance.model import AttendanceRecord

    workers_repo.add(worker_factory(1, status=WorkerStatus.INACTIVE, inactive_from=date(2024, 6, 1)))
    workers_repo.add(worker_factory(2))
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 31), status="present")
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 30), status="half-day")
    attendance_service.mark(worker_id=2, work_date=date(2024, 5, 30), status="present")
    attendance_repo.add(AttendanceRecord(99, 1, date(2024, 6, 2), AttendanceStatus.PRESENT))

    records = attendance_service.list_for_worker(1, start=date(2024, 5, 1), end=date(2024, 6, 30))
    assert [r.work_date for r in records] == [date(2024, 5, 30), date(2024, 5, 31)]

    everything = attendance_service.list_for_worker(
        1, start=date(2024, 5, 1), end=date(2024, 6, 30), include_inactive=True
    )
    assert [r.attendance_id for r in everything][-1] == 99

    with pytest.raises(ValidationError):
        attendance_service.list_for_worker(1, start=date(2024, 6, 30), end=date(2024, 5, 1))


def test_stats_counts_statuses_and_hours(attendance_service, workers_repo, worker_factory):
    workers_repo.add(worker_factory(1))
    workers_repo.add(worker_factory(2))
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 2), status="present", check_in="08:00", check_out="16:00")
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 3), status="overtime", check_in="09:00", check_out="19:30")
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 4), status="absent")
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 5), status="half-day")
    attendance_service.mark(worker_id=1, work_date=date(2024, 5, 6), status="on-leave")
    attendance_service.mark(worker_id=2, work_date=date(2024, 5, 2), status="present")
    attendance_service.mark(worker_id=2, work_date=date(2024, 6, 1), status="present")

    stats = attendance_service.stats(start=date(2024, 5, 1), end=date(2024, 5, 31))

    assert stats.total_records == 6
    assert (stats.present_count, stats.absent_count, stats.half_day_count, stats.on_leave_count) == (3, 1, 1, 1)
    assert stats.overtime_days == 1
    assert stats.total_hours_worked == Decimal("18.50")
    assert stats.total_overtime_hours == Decimal("2.50")

    mine = attendance_service.stats(start=date(2024, 5, 1), end=date(2024, 5, 31), worker_id=1)
    assert mine.total_records == 5
    assert mine.to_dict()["presentCount"] == 2
