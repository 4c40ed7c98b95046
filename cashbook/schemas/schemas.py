# CASHBOOK/backend/cashbook/schemas/schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from typing import Optional, List
from datetime import datetime
from cashbook.constants import UserRole, CashbookStatus, EntryType, PaymentMethod, DEFAULT_CASHBOOK_NAME

# ---------- USER SCHEMAS ----------
class UserRegister(BaseModel):
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    email: Optional[str] = None

class UserLogin(BaseModel):
    phone: str
    password: str

class StaffCreate(UserRegister):
    role: UserRole = UserRole.EMPLOYEE
    can_create_cashbooks: bool = False
    can_archive_cashbooks: bool = False

class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[UserRole] = None
    can_create_cashbooks: Optional[bool] = None
    can_archive_cashbooks: Optional[bool] = None
    password: Optional[str] = None

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    password: Optional[str] = None
    profile_photo: Optional[str] = None

class UserOut(BaseModel):
    id: int
    full_name: str
    phone: str
    email: Optional[str] = None
    role: UserRole
    can_create_cashbooks: bool
    can_archive_cashbooks: bool
    profile_photo: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class SetupStatus(BaseModel):
    initialized: bool
    users_count: int

# ---------- TOKEN SCHEMA ----------
class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserOut

# ---------- SESSION (identité en cache côté client) ----------
class CachedIdentity(UserOut):
    password_hash: str

# ---------- CATEGORY SCHEMAS ----------
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)

class CategoryOut(BaseModel):
    id: int
    name: str
    owner_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# ---------- CASHBOOK SCHEMAS ----------
class CashbookCreate(BaseModel):
    category_id: int
    name: str = DEFAULT_CASHBOOK_NAME
    staff_ids: List[int] = []

class CashbookUpdate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[int] = None

class CashbookStatusUpdate(BaseModel):
    status: Optional[CashbookStatus] = None

class CashbookOut(BaseModel):
    id: int
    category_id: int
    name: str
    owner_id: Optional[int] = None
    status: CashbookStatus
    created_at: Optional[datetime] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[int] = None

    # Contexte de permissions pour l'utilisateur courant
    user_role: Optional[UserRole] = None
    can_edit: bool = False
    can_archive: bool = False
    can_post: bool = False

    model_config = ConfigDict(from_attributes=True)

class CashbookWithDetails(CashbookOut):
    total_in: float = 0
    total_out: float = 0
    balance: float = 0
    entries_count: int = 0

# ---------- STAFF SCHEMAS ----------
class StaffAssign(BaseModel):
    user_id: int
    role: UserRole = UserRole.EMPLOYEE
    can_edit: bool = True
    can_archive: bool = False

class StaffPermissionUpdate(BaseModel):
    role: Optional[UserRole] = None
    can_edit: Optional[bool] = None
    can_archive: Optional[bool] = None

class CashbookStaffOut(BaseModel):
    id: int
    cashbook_id: int
    user_id: int
    role: UserRole
    can_edit: bool
    can_archive: bool

    model_config = ConfigDict(from_attributes=True)

# ---------- ENTRY SCHEMAS ----------
class EntryCreate(BaseModel):
    type: EntryType
    amount: float = Field(0, ge=0)
    description: Optional[str] = ""
    payment_method: PaymentMethod = PaymentMethod.CASH
    attachment_url: Optional[str] = None

class EntryUpdate(BaseModel):
    type: Optional[EntryType] = None
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

class EntryOut(BaseModel):
    id: int
    cashbook_id: int
    type: EntryType
    amount: float
    description: Optional[str] = ""
    payment_method: PaymentMethod
    attachment_url: Optional[str] = None
    is_verified: bool
    verified_by: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_datetime(self, value: datetime) -> str:
        """Sérialise un datetime en chaîne ISO 8601 pour JSON."""
        return value.isoformat()

# ---------- REPORT SCHEMAS ----------
class CashbookReport(BaseModel):
    cashbook_id: int
    name: str
    category_id: int
    status: CashbookStatus
    total_in: float
    total_out: float
    balance: float
    entries_count: int

class ReportTotals(BaseModel):
    total_in: float
    total_out: float
    balance: float

class AggregatedReport(BaseModel):
    period: str
    start: datetime
    end: datetime
    cashbooks: List[CashbookReport]
    totals: ReportTotals

# ---------- NOTIFICATION SCHEMAS ----------
class NotificationOut(BaseModel):
    id: int
    title: str
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
