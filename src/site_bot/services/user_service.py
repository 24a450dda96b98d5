"""User service — get-or-create identities and manage role changes."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from site_bot.database.repository import UserRepository
from site_bot.models.user import User, UserRole
from site_bot.utils.clock import utcnow
from site_bot.utils.phone import mask_phone, normalize_phone

logger = logging.getLogger(__name__)


class UserService:
    """Identity records keyed by normalized phone.

    Role rules
    ----------
    * First contact creates a customer, verified immediately.
    * ``customer → employee`` clears verification; the employee has to pass
      OTP verification again.
    * ``employee → customer`` marks the user verified.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_phone(self, phone: str) -> User | None:
        async with self._session_factory() as db:
            return await UserRepository(db).find_by_phone(normalize_phone(phone))

    async def get_or_create(self, phone: str) -> User:
        """Return the user for *phone*, creating a verified customer if absent."""
        phone = normalize_phone(phone)
        user = await self.get_by_phone(phone)
        if user is not None:
            return user

        now = utcnow()
        try:
            async with self._session_factory() as db:
                user = await UserRepository(db).add(
                    User(phone=phone, role=UserRole.CUSTOMER, is_verified=True, verified_at=now)
                )
                await db.commit()
        except IntegrityError:
            # Concurrent first contact: the other insert won.
            user = await self.get_by_phone(phone)
            if user is None:
                raise
            return user

        logger.info("Created new customer %s", mask_phone(phone))
        return user

    async def mark_verified(self, phone: str) -> None:
        async with self._session_factory() as db:
            user = await UserRepository(db).find_by_phone(normalize_phone(phone))
            if user is None:
                logger.warning("Cannot verify unknown user %s", mask_phone(phone))
                return
            user.is_verified = True
            user.verified_at = utcnow()
            await db.commit()

    async def promote_to_employee(
        self, phone: str, name: str | None = None, email: str | None = None
    ) -> User:
        """Make *phone* an employee (creating the user if needed) and reset verification."""
        phone = normalize_phone(phone)
        async with self._session_factory() as db:
            repo = UserRepository(db)
            user = await repo.find_by_phone(phone)
            if user is None:
                user = await repo.add(User(phone=phone, role=UserRole.EMPLOYEE))
            user.role = UserRole.EMPLOYEE
            user.name = name or user.name
            user.email = email or user.email
            user.is_verified = False
            user.verified_at = None
            await db.commit()
        logger.info("Promoted %s to employee", mask_phone(phone))
        return user

    async def demote_to_customer(self, phone: str) -> User | None:
        phone = normalize_phone(phone)
        async with self._session_factory() as db:
            user = await UserRepository(db).find_by_phone(phone)
            if user is None:
                return None
            user.role = UserRole.CUSTOMER
            user.is_verified = True
            user.verified_at = utcnow()
            await db.commit()
        logger.info("Demoted %s to customer", mask_phone(phone))
        return user
