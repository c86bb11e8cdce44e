from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .budget.mysql_project_repository import MySQLProjectRepository
from .budget.service import BudgetService
from .common.locks import WorkerLocks
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.service import PayrollReportService
from .salary.mysql_ledger_repository import MySQLLedgerRepository
from .salary.service import SalaryPaymentService
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.service import WorkerService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    workers_repo: MySQLWorkerRepository
    attendance_repo: MySQLAttendanceRepository
    ledger_repo: MySQLLedgerRepository
    projects_repo: MySQLProjectRepository

    worker_service: WorkerService
    attendance_service: AttendanceService
    salary_service: SalaryPaymentService
    budget_service: BudgetService
    payroll_report_service: PayrollReportService


def build_container(*, db_config: dict, lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    workers_repo = MySQLWorkerRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    ledger_repo = MySQLLedgerRepository(conn)
    projects_repo = MySQLProjectRepository(conn)

    worker_service = WorkerService(workers_repo)
    attendance_service = AttendanceService(attendance_repo, workers_repo)
    salary_service = SalaryPaymentService(
        ledger_repo,
        workers_repo,
        locks=WorkerLocks(timeout_seconds=lock_timeout_seconds),
    )
    budget_service = BudgetService(projects_repo, workers_repo, attendance_repo)
    payroll_report_service = PayrollReportService(attendance_repo, workers_repo, ledger_repo)

    return Container(
        conn=conn,
        workers_repo=workers_repo,
        attendance_repo=attendance_repo,
        ledger_repo=ledger_repo,
        projects_repo=projects_repo,
        worker_service=worker_service,
        attendance_service=attendance_service,
        salary_service=salary_service,
        budget_service=budget_service,
        payroll_report_service=payroll_report_service,
    )
