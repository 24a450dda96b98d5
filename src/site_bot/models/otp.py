"""SQLAlchemy model for employee one-time codes."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from site_bot.models.user import Base
from site_bot.utils.clock import utcnow


class EmployeeOTP(Base):
    """Hash-at-rest verification code; at most one per phone."""

    __tablename__ = "employee_otps"

    phone: Mapped[str] = mapped_column(String(20), primary_key=True)
    otp_hash: Mapped[str] = mapped_column(Text, nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
