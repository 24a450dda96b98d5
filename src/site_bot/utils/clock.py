"""Timezone helpers.

SQLite hands back naive datetimes even for ``DateTime(timezone=True)``
columns, so every comparison goes through :func:`as_utc`.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
