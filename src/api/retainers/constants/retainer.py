from enum import Enum

# Quarterly cycles, not configurable
CYCLE_LENGTH = 3

# Trailing months whose unused allotment feeds a new period's rollover
ROLLOVER_MONTHS = 3

UNCATEGORIZED = "Uncategorized"
UNKNOWN_CATEGORY = "Unknown"

# Usage percentage at which the dashboard warns before overage
USAGE_WARNING_PERCENT = 80


class StatusVariant(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DESTRUCTIVE = "destructive"


class SettlementKind(str, Enum):
    EXTRA = "extra"
    UNUSED = "unused"


class CycleBudgetState(str, Enum):
    REMAINING = "remaining"
    FULLY_USED = "fully_used"
    OVER = "over"
