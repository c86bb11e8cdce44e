from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)


class WorkerLocks:
    """Per-worker exclusive locks for ledger mutations.

    Different workers never contend; the registry itself is guarded by a
    short-lived lock.
    """

    def __init__(self, *, timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout_seconds)
        self._registry_lock = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def _lock_for(self, worker_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(worker_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[worker_id] = lock
            return lock

    @contextmanager
    def hold(self, worker_id: int) -> Iterator[None]:
        lock = self._lock_for(int(worker_id))
        if not lock.acquire(timeout=self._timeout):
            logger.warning("Ledger lock timeout for worker %s after %.1fs", worker_id, self._timeout)
            raise ConcurrencyConflictError(f"Worker {worker_id} ledger is busy, try again")
        try:
            yield
        finally:
            lock.release()
