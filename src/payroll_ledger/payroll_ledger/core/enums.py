from __future__ import annotations

from enum import Enum


class PaymentType(str, Enum):
    """Which rate is the source of truth for a worker's pay."""

    DAILY = "Daily"
    MONTHLY = "Monthly"


class WorkerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Stored attendance statuses."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    ON_LEAVE = "on-leave"


class DisplayStatus(str, Enum):
    """Statuses shown to the UI.

    OVERTIME is never persisted: it is derived from PRESENT + overtime hours.
    """

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    ON_LEAVE = "on-leave"
    OVERTIME = "overtime"
    NOT_MARKED = "not-marked"


class PaymentEntryType(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    ADVANCE = "advance"
    ADHOC = "adhoc"


class PayrollStatus(str, Enum):
    """Settlement state of a worker for a payroll period."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
