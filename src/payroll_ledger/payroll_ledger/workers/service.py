from __future__ import annotations

from ..core.exceptions import WorkerNotFoundError
from ..rates.model import SalaryBreakdown
from .model import Worker
from .repository import WorkerRepository


class WorkerService:
    def __init__(self, workers: WorkerRepository):
        self._workers = workers

    def get_worker(self, worker_id: int) -> Worker:
        worker = self._workers.get_by_id(int(worker_id))
        if not worker:
            raise WorkerNotFoundError(f"Worker {worker_id} not found")
        return worker

    def get_rates(self, worker_id: int) -> SalaryBreakdown:
        return self.get_worker(worker_id).pay.breakdown
