import os
from enum import Enum


# Stored by member name (RETAINER, ACTIVE, ...)
class BillingType(str, Enum):
    RETAINER = "retainer"
    T_AND_M = "t_and_m"
    FIXED = "fixed"


class RetainerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


DEFAULT_CLIENT_CURRENCY = os.getenv("DEFAULT_CLIENT_CURRENCY", "USD")
