"""Verification gate — OTP challenge for employees who are not yet verified."""

from __future__ import annotations

import logging
import re

from site_bot.config import settings
from site_bot.flows.base import FlowInput
from site_bot.messages import strings
from site_bot.messages.builder import Messenger
from site_bot.models.user import User
from site_bot.services.otp import OTPService
from site_bot.services.resilience import with_deadline
from site_bot.utils.phone import mask_phone

logger = logging.getLogger(__name__)

_CODE = re.compile(r"^\d{6}$")
RESEND_KEYWORDS = ("otp", "resend", "code")


class VerificationGate:
    """Drives an unverified employee through the one-time code challenge.

    Flow
    ----
    1. A six-digit message is checked against the stored code.
    2. A message mentioning ``otp``/``resend``/``code`` issues a fresh code.
    3. Anything else issues a code on first contact, or reminds the user
       to enter the code they already have.
    """

    def __init__(
        self, otp: OTPService, messenger: Messenger, timeout_ms: int | None = None
    ) -> None:
        self._otp = otp
        self._messenger = messenger
        self._timeout_ms = timeout_ms or settings.otp_timeout_ms

    async def handle(self, user: User, message: FlowInput) -> bool:
        """Return ``True`` when this message completed verification."""
        phone = user.phone
        text = message.text.strip()

        if _CODE.match(text):
            outcome = await with_deadline(
                self._otp.verify(phone, text), self._timeout_ms, "OTP verify"
            )
            if not outcome.ok:
                await self._messenger.text(phone, strings.OTP_UNAVAILABLE)
                return False
            result = outcome.value
            await self._messenger.text(phone, result.message)
            if result.accepted:
                user.is_verified = True
                logger.info("Employee %s verified", mask_phone(phone))
            return result.accepted

        if any(keyword in text.lower() for keyword in RESEND_KEYWORDS):
            sent = await self._issue(phone)
            await self._messenger.text(
                phone, strings.VERIFY_RESENT if sent else strings.VERIFY_SEND_FAILED
            )
            return False

        active = await with_deadline(
            self._otp.has_active(phone), self._timeout_ms, "OTP lookup"
        )
        if not active.ok:
            await self._messenger.text(phone, strings.OTP_UNAVAILABLE)
            return False

        if active.value:
            await self._messenger.text(phone, strings.VERIFY_REMINDER)
            return False

        if await self._issue(phone):
            await self._messenger.text(phone, strings.VERIFY_FIRST_CONTACT)
        else:
            await self._messenger.text(phone, strings.VERIFY_SEND_FAILED)
        return False

    async def _issue(self, phone: str) -> bool:
        outcome = await with_deadline(self._otp.issue(phone), self._timeout_ms, "OTP issue")
        return bool(outcome.unwrap_or(False))
