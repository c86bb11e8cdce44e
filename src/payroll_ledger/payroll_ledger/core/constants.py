"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_WORK_HOURS = 8
OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_WORKING_DAYS_PER_MONTH = 26
DEFAULT_WORKING_HOURS_PER_DAY = 8
MAX_DAYS_PAID = 31
MINUTES_PER_DAY = 1440

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
