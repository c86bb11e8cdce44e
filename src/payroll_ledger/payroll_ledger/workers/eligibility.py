from __future__ import annotations

from datetime import date
from typing import Optional, Type

from ..core.enums import WorkerStatus
from ..core.exceptions import BlockedByInactiveCutoffError
from .model import Worker


def is_eligible_on(worker: Worker, day: date) -> bool:
    """Active workers are always eligible; inactive ones only before `inactive_from`.

    An inactive worker without a cut-off date is treated as cut off immediately.
    """

    if worker.status == WorkerStatus.ACTIVE:
        return True
    if worker.inactive_from is None:
        return False
    return day < worker.inactive_from


def cutoff_reason(worker: Worker, day: date) -> Optional[str]:
    """User-facing explanation of why `worker` is blocked on `day`, or None."""

    if is_eligible_on(worker, day):
        return None
    if worker.inactive_from is None:
        return f"{worker.full_name} is inactive; set an inactive date first"
    return f"{worker.full_name} is inactive from {worker.inactive_from.isoformat()}"


def ensure_eligible(
    worker: Worker,
    day: date,
    *,
    action: str,
    error_cls: Type[BlockedByInactiveCutoffError] = BlockedByInactiveCutoffError,
) -> None:
    reason = cutoff_reason(worker, day)
    if reason is None:
        return
    raise error_cls(
        f"Cannot {action} on {day.isoformat()}: {reason}",
        worker_id=worker.worker_id,
        cutoff=worker.inactive_from,
    )
