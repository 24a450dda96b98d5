"""Session store — persists per-phone conversation state."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from site_bot.database.repository import SessionRepository
from site_bot.flows.state import ConversationSession
from site_bot.models.session import SessionRecord
from site_bot.utils.clock import utcnow
from site_bot.utils.phone import mask_phone

logger = logging.getLogger(__name__)


def _to_session(record: SessionRecord) -> ConversationSession:
    return ConversationSession.from_row(
        phone=record.phone,
        intent=record.intent,
        step=record.step,
        data=record.data,
        updated_at=record.updated_at,
    )


class SessionStore:
    """SQL-backed session store keyed by the sender's normalized phone.

    Each call runs in its own short transaction so callers can bound it with
    a deadline independently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, phone: str) -> ConversationSession | None:
        async with self._session_factory() as db:
            record = await SessionRepository(db).find(phone)
        return _to_session(record) if record else None

    async def create(self, phone: str) -> ConversationSession:
        async with self._session_factory() as db:
            record = await SessionRepository(db).add(SessionRecord(phone=phone, data={}))
            await db.commit()
        logger.info("Creating new session for %s", mask_phone(phone))
        return _to_session(record)

    async def get_or_create(self, phone: str) -> ConversationSession:
        """Retrieve or lazily create the session for *phone*."""
        existing = await self.get(phone)
        if existing is not None:
            return existing
        try:
            return await self.create(phone)
        except IntegrityError:
            # Another worker created it first.
            existing = await self.get(phone)
            if existing is None:
                raise
            return existing

    async def save(self, session: ConversationSession) -> None:
        """Write intent, step and payload back; creates the row if missing."""
        async with self._session_factory() as db:
            repo = SessionRepository(db)
            record = await repo.find(session.phone)
            if record is None:
                record = await repo.add(SessionRecord(phone=session.phone))
            record.intent = session.intent.value if session.intent else None
            record.step = session.step.value if session.step else None
            record.data = session.payload()
            await db.commit()
        session.updated_at = utcnow()

    async def clear(self, phone: str) -> None:
        """Reset intent, step and payload (e.g. on flow completion or 'menu')."""
        async with self._session_factory() as db:
            await SessionRepository(db).clear(phone)
            await db.commit()
        logger.info("Session cleared for %s", mask_phone(phone))
