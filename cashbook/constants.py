# CASHBOOK/backend/cashbook/constants.py

from enum import Enum


class UserRole(str, Enum):
    OWNER = "OWNER"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"
    VIEWER = "VIEWER"
    UNASSIGNED = "UNASSIGNED"

class CashbookStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"

class EntryType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    NOTE = "NOTE"

class PaymentMethod(str, Enum):
    CASH = "CASH"
    BANK = "BANK"
    MOBILE_BANKING = "MOBILE_BANKING"

class ReportPeriod(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


# Valeurs par défaut
DEFAULT_CASHBOOK_NAME = "Untitled Ledger"
DEFAULT_USER_NAME = "Unknown User"
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

# Seuils et limites
WEEKLY_REPORT_DAYS = 7
MAX_ENTRIES_PER_PAGE = 500
