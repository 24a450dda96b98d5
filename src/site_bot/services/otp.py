"""One-time verification codes for employees.

Codes are six random digits delivered over WhatsApp.  Only a bcrypt hash is
stored; a code is good for ``otp_ttl_minutes`` and ``otp_max_attempts``
wrong guesses, after which the record is deleted and a new code is needed.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import secrets
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

import bcrypt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from site_bot.config import settings
from site_bot.database.repository import OTPRepository, UserRepository
from site_bot.messages import strings
from site_bot.services.whatsapp import MessagingTransport
from site_bot.utils.clock import as_utc, utcnow
from site_bot.utils.phone import mask_phone, normalize_phone

logger = logging.getLogger(__name__)

CODE_LENGTH = 6


def generate_code() -> str:
    """Uniformly random 6-digit code; leading zeros allowed."""
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


# ── Hashing ──────────────────────────────────────────────


class OTPHasher(ABC):
    """One-way hash for codes at rest."""

    @abstractmethod
    async def hash(self, code: str) -> str: ...

    @abstractmethod
    async def verify(self, code: str, hashed: str) -> bool: ...


class BcryptHasher(OTPHasher):
    """bcrypt with a configurable cost, run in a worker thread."""

    def __init__(self, rounds: int | None = None) -> None:
        self._rounds = rounds or settings.otp_bcrypt_rounds

    async def hash(self, code: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = await asyncio.to_thread(bcrypt.hashpw, code.encode(), salt)
        return hashed.decode()

    async def verify(self, code: str, hashed: str) -> bool:
        try:
            return await asyncio.to_thread(bcrypt.checkpw, code.encode(), hashed.encode())
        except ValueError:
            logger.error("Stored OTP hash is malformed")
            return False


# ── Results ──────────────────────────────────────────────


class VerificationReason(str, enum.Enum):
    ACCEPTED = "accepted"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    MISMATCH = "mismatch"


@dataclass
class VerificationResult:
    accepted: bool
    reason: VerificationReason
    message: str
    remaining_attempts: int | None = None


# ── Service ──────────────────────────────────────────────


class OTPService:
    """Issue, verify and inspect per-phone one-time codes.

    Parameters
    ----------
    session_factory:
        Async session factory for the ``employee_otps`` and ``users`` tables.
    transport:
        Delivers the code to the phone.
    hasher:
        Defaults to :class:`BcryptHasher`.
    clock:
        Returns the current aware UTC time.
    code_factory:
        Produces new plaintext codes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: MessagingTransport,
        hasher: OTPHasher | None = None,
        clock: Callable[[], datetime] = utcnow,
        code_factory: Callable[[], str] = generate_code,
        ttl_minutes: int | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._transport = transport
        self._hasher = hasher or BcryptHasher()
        self._clock = clock
        self._code_factory = code_factory
        self._ttl = timedelta(minutes=ttl_minutes or settings.otp_ttl_minutes)
        self._max_attempts = max_attempts or settings.otp_max_attempts

    async def issue(self, phone: str) -> bool:
        """Replace any existing code for *phone* with a new one and deliver it.

        Returns ``False`` (and removes the stored record) if delivery fails.
        """
        phone = normalize_phone(phone)
        code = self._code_factory()
        hashed = await self._hasher.hash(code)
        expires_at = self._clock() + self._ttl

        async with self._session_factory() as db:
            repo = OTPRepository(db)
            await repo.delete(phone)
            await repo.add(phone, hashed, expires_at)
            await db.commit()

        body = strings.OTP_DELIVERY.format(code=code, ttl=int(self._ttl.total_seconds() // 60))
        if not await self._transport.send_text(phone, body):
            logger.error("OTP delivery failed for %s, discarding code", mask_phone(phone))
            await self._delete(phone)
            return False

        logger.info("OTP issued for %s", mask_phone(phone))
        return True

    async def verify(self, phone: str, candidate: str) -> VerificationResult:
        """Check *candidate* against the stored code for *phone*."""
        phone = normalize_phone(phone)
        async with self._session_factory() as db:
            repo = OTPRepository(db)
            record = await repo.find(phone)

            if record is None:
                return VerificationResult(False, VerificationReason.NOT_FOUND, strings.OTP_NOT_FOUND)

            if self._clock() >= as_utc(record.expires_at):
                await repo.delete(phone)
                await db.commit()
                logger.info("OTP expired for %s", mask_phone(phone))
                return VerificationResult(False, VerificationReason.EXPIRED, strings.OTP_EXPIRED)

            if record.attempts >= self._max_attempts:
                await repo.delete(phone)
                await db.commit()
                logger.warning("OTP attempts exhausted for %s", mask_phone(phone))
                return VerificationResult(
                    False, VerificationReason.TOO_MANY_ATTEMPTS, strings.OTP_TOO_MANY_ATTEMPTS
                )

            attempts = record.attempts
            matched = await self._hasher.verify(candidate.strip(), record.otp_hash)

            if not matched:
                await repo.increment_attempts(phone)
                await db.commit()
                remaining = max(self._max_attempts - (attempts + 1), 0)
                logger.info("Invalid OTP for %s, %d attempts left", mask_phone(phone), remaining)
                return VerificationResult(
                    False,
                    VerificationReason.MISMATCH,
                    strings.OTP_INVALID.format(remaining=remaining),
                    remaining_attempts=remaining,
                )

            user = await UserRepository(db).find_by_phone(phone)
            if user is not None:
                user.is_verified = True
                user.verified_at = self._clock()
            else:
                logger.warning("Verified OTP for %s but no user record exists", mask_phone(phone))
            await repo.delete(phone)
            await db.commit()

        logger.info("OTP verified for %s", mask_phone(phone))
        return VerificationResult(True, VerificationReason.ACCEPTED, strings.OTP_ACCEPTED)

    async def has_active(self, phone: str) -> bool:
        """``True`` if an unexpired code exists; expired ones are deleted."""
        phone = normalize_phone(phone)
        async with self._session_factory() as db:
            repo = OTPRepository(db)
            record = await repo.find(phone)
            if record is None:
                return False
            if self._clock() >= as_utc(record.expires_at):
                await repo.delete(phone)
                await db.commit()
                return False
            return True

    async def _delete(self, phone: str) -> None:
        async with self._session_factory() as db:
            await OTPRepository(db).delete(phone)
            await db.commit()
