"""SQLAlchemy User model."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from site_bot.utils.clock import utcnow


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class UserRole(str, enum.Enum):
    EMPLOYEE = "employee"
    CUSTOMER = "customer"
    ADMIN = "admin"


class User(Base):
    """Anyone who has messaged the bot, keyed by normalized phone.

    Customers are created verified on first contact.  Employees are promoted
    by an administrator and must pass OTP verification before using the
    employee portal.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    phone: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE

    def __repr__(self) -> str:
        return f"<User id={self.id} role={self.role.value} phone={self.phone!r}>"
