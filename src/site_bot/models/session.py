"""SQLAlchemy model for per-phone conversation state."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from site_bot.models.user import Base
from site_bot.utils.clock import utcnow


class SessionRecord(Base):
    """One row per phone; no history is kept."""

    __tablename__ = "sessions"

    phone: Mapped[str] = mapped_column(String(20), primary_key=True)
    intent: Mapped[str | None] = mapped_column(String(100))
    step: Mapped[str | None] = mapped_column(String(100))
    data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<SessionRecord phone={self.phone!r} intent={self.intent} step={self.step}>"
