# CASHBOOK/backend/cashbook/models/models.py

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from cashbook.database import Base
from cashbook.constants import UserRole, CashbookStatus, PaymentMethod

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    phone = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, default=UserRole.UNASSIGNED.value, nullable=False)
    can_create_cashbooks = Column(Boolean, default=False, nullable=False)
    can_archive_cashbooks = Column(Boolean, default=False, nullable=False)
    profile_photo = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    staff_assignments = relationship("CashbookStaff", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_owner(self):
        return self.role == UserRole.OWNER.value

class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    cashbooks = relationship("Cashbook", back_populates="category")

class Cashbook(Base):
    __tablename__ = "cashbooks"
    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    name = Column(String, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String, default=CashbookStatus.ACTIVE.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Corbeille (suppression logique)
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    deleted_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    category = relationship("Category", back_populates="cashbooks")
    staff = relationship("CashbookStaff", back_populates="cashbook", cascade="all, delete-orphan")
    entries = relationship("Entry", back_populates="cashbook", cascade="all, delete-orphan")

class CashbookStaff(Base):
    __tablename__ = "cashbook_staff"
    __table_args__ = (UniqueConstraint("cashbook_id", "user_id", name="uq_cashbook_staff_user"),)
    id = Column(Integer, primary_key=True)
    cashbook_id = Column(Integer, ForeignKey("cashbooks.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String, default=UserRole.EMPLOYEE.value, nullable=False)
    can_edit = Column(Boolean, default=True, nullable=False)
    can_archive = Column(Boolean, default=False, nullable=False)

    cashbook = relationship("Cashbook", back_populates="staff")
    user = relationship("User", back_populates="staff_assignments")

class Entry(Base):
    __tablename__ = "entries"
    id = Column(Integer, primary_key=True)
    cashbook_id = Column(Integer, ForeignKey("cashbooks.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Float, nullable=False, default=0)
    description = Column(String, default="")
    payment_method = Column(String, default=PaymentMethod.CASH.value, nullable=False)
    attachment_url = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    cashbook = relationship("Cashbook", back_populates="entries")

class Notification(Base):
    __tablename__ = "notifications"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(String, default="")
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="notifications")
