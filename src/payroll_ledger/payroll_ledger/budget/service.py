from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_local
from ..common.money import money_sum
from ..core.exceptions import ProjectNotFoundError
from ..payroll.earnings import compute_earnings
from ..workers.repository import WorkerRepository
from .model import Project, ProjectBudgetSummary, WorkerSalaryRow, WorkerSalarySummary
from .repository import ProjectRepository


class BudgetService:
    """Project spend = materials + other costs + payable derived from attendance."""

    def __init__(
        self,
        projects: ProjectRepository,
        workers: WorkerRepository,
        attendance: AttendanceRepository,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._projects = projects
        self._workers = workers
        self._attendance = attendance
        self._today = today

    def _get_project(self, project_id: int) -> Project:
        project = self._projects.get_project(int(project_id))
        if not project:
            raise ProjectNotFoundError(f"Project {project_id} not found")
        return project

    def _summarize_workers(self, project: Project, as_of: Optional[date]) -> WorkerSalarySummary:
        start = project.start_date
        end = as_of or self._today()
        if project.end_date and project.end_date < end:
            end = project.end_date

        if not project.worker_ids or end < start:
            return WorkerSalarySummary(start=start, end=end)

        workers = self._workers.list_workers(worker_ids=list(project.worker_ids))
        records = self._attendance.list_for_range(
            start_date=start,
            end_date=end,
            worker_ids=[w.worker_id for w in workers],
        )

        rows = []
        for w in workers:
            e = compute_earnings(w, records, start=start, end=end)
            rows.append(
                WorkerSalaryRow(
                    worker_id=w.worker_id,
                    full_name=w.full_name,
                    payment_type=w.pay.payment_type.value,
                    present_days=e.present_days,
                    half_days=e.half_days,
                    days_worked=e.days_worked,
                    approved_overtime_hours=e.approved_overtime_hours,
                    daily_rate=e.daily_rate,
                    overtime_rate=e.overtime_rate,
                    payable=e.total,
                )
            )
        rows.sort(key=lambda r: r.payable, reverse=True)
        return WorkerSalarySummary(start=start, end=end, rows=rows)

    def worker_salary_summary(self, project_id: int, *, as_of: Optional[date] = None) -> WorkerSalarySummary:
        return self._summarize_workers(self._get_project(project_id), as_of)

    def summary(self, project_id: int, *, as_of: Optional[date] = None) -> ProjectBudgetSummary:
        project = self._get_project(project_id)
        return ProjectBudgetSummary(
            project_id=project.project_id,
            name=project.name,
            total_budget=project.total_budget,
            materials_total=money_sum(m.total_amount for m in self._projects.list_materials(project.project_id)),
            other_costs_total=money_sum(c.amount for c in self._projects.list_other_costs(project.project_id)),
            worker_salary_summary=self._summarize_workers(project, as_of),
        )
