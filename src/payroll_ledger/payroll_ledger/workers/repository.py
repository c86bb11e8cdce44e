from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerRepository(Protocol):
    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def list_workers(self, *, worker_ids: Optional[Sequence[int]] = None) -> Sequence[Worker]:
        """All workers, or only the given ids when provided."""

        raise NotImplementedError
