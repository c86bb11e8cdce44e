from datetime import date
from decimal import Decimal

import pytest

from src.payroll_ledger.payroll_ledger.attendance.model import AttendanceRecord
from src.payroll_ledger.payroll_ledger.budget.model import MaterialCost, OtherCost, Project
from src.payroll_ledger.payroll_ledger.core.enums import AttendanceStatus, PaymentType, WorkerStatus
from src.payroll_ledger.payroll_ledger.core.exceptions import ProjectNotFoundError


@pytest.fixture
def site(projects_repo, workers_repo, attendance_repo, worker_factory):
    workers_repo.add(worker_factory(1, name="An"))
    workers_repo.add(worker_factory(2, name="Binh", payment_type=PaymentType.DAILY, base_salary="900"))
    workers_repo.add(
        worker_factory(
            3,
            name="Cuong",
            payment_type=PaymentType.DAILY,
            base_salary="850",
            status=WorkerStatus.INACTIVE,
            inactive_from=date(2024, 6, 1),
        )
    )
    workers_repo.add(worker_factory(4, name="Not assigned"))

    projects_repo.projects[1] = Project(
        project_id=1,
        name="Warehouse",
        total_budget=Decimal("500000"),
        start_date=date(2024, 5, 1),
        end_date=date(2024, 12, 31),
        worker_ids=(1, 2, 3),
    )
    projects_repo.materials += [
        MaterialCost(1, 1, "Cement", Decimal("120"), Decimal("350")),
        MaterialCost(2, 1, "Rebar", Decimal("2.5"), Decimal("52000")),
    ]
    projects_repo.other_costs.append(OtherCost(1, 1, "Crane rental", Decimal("18000")))

    def rec(i, worker_id, day, status, overtime="0", approved=False):
        attendance_repo.add(
            AttendanceRecord(
                attendance_id=i,
                worker_id=worker_id,
                work_date=day,
                status=status,
                overtime_hours=Decimal(overtime),
                is_approved=approved,
            )
        )

    rec(1, 1, date(2024, 4, 30), AttendanceStatus.PRESENT)
    rec(2, 1, date(2024, 5, 2), AttendanceStatus.PRESENT)
    rec(3, 1, date(2024, 5, 3), AttendanceStatus.PRESENT, overtime="2.5", approved=True)
    rec(4, 1, date(2024, 5, 4), AttendanceStatus.PRESENT, overtime="1")
    rec(5, 1, date(2024, 5, 5), AttendanceStatus.HALF_DAY)
    rec(6, 2, date(2024, 5, 2), AttendanceStatus.HALF_DAY)
    rec(7, 2, date(2024, 5, 6), AttendanceStatus.ABSENT)
    rec(8, 3, date(2024, 5, 31), AttendanceStatus.PRESENT)
    rec(9, 3, date(2024, 6, 3), AttendanceStatus.PRESENT)
    rec(10, 4, date(2024, 5, 2), AttendanceStatus.PRESENT)


def test_worker_salary_summary_rows(budget_service, site):
    summary = budget_service.worker_salary_summary(1)

    assert summary.end == date(2024, 6, 30)
    assert [r.worker_id for r in summary.rows] == [1, 3, 2]
    an = summary.rows[0]
    assert an.days_worked == Decimal("3.50")
    assert an.approved_overtime_hours == Decimal("2.50")
    assert an.payable == Decimal("3968.75")
    assert summary.rows[1].payable == Decimal("850.00")
    assert summary.rows[2].payable == Decimal("450.00")
    assert summary.total_payable == Decimal("5268.75")


def test_budget_summary_totals(budget_service, site):
    s = budget_service.summary(1)

    assert s.materials_total == Decimal("172000.00")
    assert s.other_costs_total == Decimal("18000.00")
    assert s.salaries_total == Decimal("5268.75")
    assert s.spent == Decimal("195268.75")
    assert s.remaining == Decimal("304731.25")
    assert s.to_dict()["breakdown"]["salaries"] == 5268.75


def test_as_of_limits_the_window(budget_service, site):
    summary = budget_service.worker_salary_summary(1, as_of=date(2024, 5, 2))
    payable = {r.worker_id: r.payable for r in summary.rows}
    assert payable == {1: Decimal("1000.00"), 2: Decimal("450.00"), 3: Decimal("0.00")}


def test_join_date_clips_window(budget_service, workers_repo, site, worker_factory):
    workers_repo.add(
        worker_factory(2, name="Binh", payment_type=PaymentType.DAILY, base_salary="900", join_date=date(2024, 5, 3))
    )
    rows = {r.worker_id: r for r in budget_service.worker_salary_summary(1).rows}
    assert rows[2].payable == Decimal("0.00")


def test_unknown_project(budget_service):
    with pytest.raises(ProjectNotFoundError):
        budget_service.summary(42)
