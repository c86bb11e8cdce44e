from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidAmountError(ValidationError):
    """Raised when an amount or day count must be positive and is not."""


class BlockedByInactiveCutoffError(DomainError):
    """Raised when a worker is past their inactive cut-off for a date."""

    def __init__(self, message: str, *, worker_id: int, cutoff=None):
        super().__init__(message)
        self.worker_id = worker_id
        self.cutoff = cutoff


class InactiveWorkerError(BlockedByInactiveCutoffError):
    """Raised when a payment's pay date falls on/after the worker's cut-off."""


class NotFoundError(DomainError):
    """Base for lookups that found nothing."""


class WorkerNotFoundError(NotFoundError):
    pass


class PaymentNotFoundError(NotFoundError):
    pass


class AttendanceNotFoundError(NotFoundError):
    pass


class ProjectNotFoundError(NotFoundError):
    pass


class AlreadyVoidedError(DomainError):
    """Raised when editing or voiding a payment that is already voided."""


class ConcurrencyConflictError(DomainError):
    """Raised on lock contention or when the ledger changed underneath a write."""
