"""Repositories — data access layer, one class per aggregate.

Repositories never commit; the calling service owns the transaction.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from site_bot.models.otp import EmployeeOTP
from site_bot.models.records import (
    Activity,
    Booking,
    CustomerInquiry,
    InventoryTransaction,
    MaterialRequest,
    MessageLog,
)
from site_bot.models.session import SessionRecord
from site_bot.models.user import User


class UserRepository:
    """Encapsulates all database queries related to users."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_phone(self, phone: str) -> User | None:
        """Look up a user by their normalized phone (e.g. ``+919876543210``)."""
        stmt = select(User).where(User.phone == phone)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        self._session.add(user)
        await self._session.flush()
        return user


class SessionRepository:
    """Queries for the one-row-per-phone conversation state table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, phone: str) -> SessionRecord | None:
        return await self._session.get(SessionRecord, phone)

    async def add(self, record: SessionRecord) -> SessionRecord:
        self._session.add(record)
        await self._session.flush()
        return record

    async def clear(self, phone: str) -> None:
        await self._session.execute(
            update(SessionRecord)
            .where(SessionRecord.phone == phone)
            .values(intent=None, step=None, data={})
        )


class OTPRepository:
    """Queries for stored one-time codes."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, phone: str) -> EmployeeOTP | None:
        return await self._session.get(EmployeeOTP, phone)

    async def add(self, phone: str, otp_hash: str, expires_at: datetime) -> EmployeeOTP:
        record = EmployeeOTP(phone=phone, otp_hash=otp_hash, attempts=0, expires_at=expires_at)
        self._session.add(record)
        await self._session.flush()
        return record

    async def delete(self, phone: str) -> None:
        await self._session.execute(delete(EmployeeOTP).where(EmployeeOTP.phone == phone))

    async def increment_attempts(self, phone: str) -> None:
        """Bump the counter in SQL so concurrent failures cannot overwrite each other."""
        await self._session.execute(
            update(EmployeeOTP)
            .where(EmployeeOTP.phone == phone)
            .values(attempts=EmployeeOTP.attempts + 1)
        )


class RecordRepository:
    """Inserts and reads for the records produced by conversation flows."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        record: Activity
        | MaterialRequest
        | Booking
        | CustomerInquiry
        | InventoryTransaction
        | MessageLog,
    ):
        self._session.add(record)
        await self._session.flush()
        return record

    async def recent_activities(self, user_id: uuid.UUID, limit: int = 5) -> Sequence[Activity]:
        stmt = (
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def recent_material_requests(
        self, user_id: uuid.UUID, limit: int = 3
    ) -> Sequence[MaterialRequest]:
        stmt = (
            select(MaterialRequest)
            .where(MaterialRequest.user_id == user_id)
            .order_by(MaterialRequest.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    # ── Inventory ────────────────────────────────────────

    def _signed_quantity(self):
        return case(
            (InventoryTransaction.transaction_type == "in", InventoryTransaction.quantity),
            else_=-InventoryTransaction.quantity,
        )

    async def stock_level(self, item_ref: str, site_ref: str) -> int:
        stmt = select(func.coalesce(func.sum(self._signed_quantity()), 0)).where(
            InventoryTransaction.item_ref == item_ref,
            InventoryTransaction.site_ref == site_ref,
        )
        result = await self._session.execute(stmt)
        return max(int(result.scalar_one()), 0)

    async def stock_levels(self, site_ref: str) -> dict[str, int]:
        """Stock on hand per item at *site_ref*, for items with any movement."""
        stmt = (
            select(InventoryTransaction.item_ref, func.sum(self._signed_quantity()))
            .where(InventoryTransaction.site_ref == site_ref)
            .group_by(InventoryTransaction.item_ref)
        )
        result = await self._session.execute(stmt)
        return {item_ref: max(int(total), 0) for item_ref, total in result.all()}
