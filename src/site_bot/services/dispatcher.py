"""Dispatcher — turns one inbound message into flow work.

Routing logic
-------------
* ``role == employee`` → :class:`~site_bot.flows.employee.EmployeeFlow`
* anyone else (customers, admins) → :class:`~site_bot.flows.customer.CustomerFlow`

Every persistence call goes through the resilience wrapper.  When the store
is unreachable the message is still answered, using a transient customer
identity and an empty session that are never written back.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable

from site_bot.config import settings
from site_bot.flows.base import BaseFlow, FlowInput, InboundImage
from site_bot.flows.state import ConversationSession
from site_bot.messages.builder import Messenger
from site_bot.models.user import User, UserRole
from site_bot.services.records import RecordService
from site_bot.services.resilience import with_deadline, with_retry
from site_bot.services.session_store import SessionStore
from site_bot.services.user_service import UserService
from site_bot.utils.phone import mask_phone, normalize_phone
from site_bot.webhook.schemas import InboundMessage

logger = logging.getLogger(__name__)


def transient_user(phone: str) -> User:
    """Stand-in identity for degraded mode; never persisted."""
    return User(
        id=uuid.uuid4(),
        phone=phone,
        role=UserRole.CUSTOMER,
        is_verified=False,
    )


class Dispatcher:
    """Central entry point that resolves who is talking and which flow answers.

    Parameters
    ----------
    users, sessions, records:
        Persistence-backed services.
    messenger:
        Outbound messages (read receipts and the apology go through its transport).
    employee_flow, customer_flow:
        Role-specific flow engines.
    health_check:
        Cheap availability check for the store, e.g. ``SELECT 1``.
    """

    def __init__(
        self,
        users: UserService,
        sessions: SessionStore,
        records: RecordService,
        messenger: Messenger,
        employee_flow: BaseFlow,
        customer_flow: BaseFlow,
        health_check: Callable[[], Awaitable[object]],
        timeout_ms: int | None = None,
        retries: int | None = None,
        backoff_ms: int | None = None,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._records = records
        self._messenger = messenger
        self._employee_flow = employee_flow
        self._customer_flow = customer_flow
        self._health_check = health_check
        self._timeout_ms = timeout_ms or settings.persistence_timeout_ms
        self._retries = retries or settings.persistence_retries
        self._backoff_ms = backoff_ms if backoff_ms is not None else settings.retry_backoff_ms

    async def dispatch(self, message: InboundMessage) -> None:
        """Handle one inbound message.  Never raises."""
        phone = normalize_phone(message.from_)
        role = UserRole.CUSTOMER
        try:
            available = await self._persistence_available()

            if available:
                await with_deadline(
                    self._records.log_inbound(phone, message.type, message.content(), message.timestamp),
                    self._timeout_ms,
                    "message log",
                )
            await with_deadline(
                self._messenger.transport.mark_read(message.id),
                settings.transport_timeout_ms,
                "read receipt",
            )

            user = await self._resolve_user(phone, available)
            role = user.role
            session = await self._resolve_session(phone, available)

            flow = self._employee_flow if user.role is UserRole.EMPLOYEE else self._customer_flow
            flow_input = self._to_flow_input(message)
            logger.info(
                "Routing %s (%s) → %s [intent=%s step=%s]",
                mask_phone(phone),
                user.role.value,
                flow.name,
                session.intent.value if session.intent else None,
                session.step.value if session.step else None,
            )
            await flow.handle(user, session, flow_input)
        except Exception:
            logger.exception("Unhandled error while processing message %s from %s", message.id, mask_phone(phone))
            await self._apologize(phone, role)

    # ── Resolution ───────────────────────────────────────

    async def _persistence_available(self) -> bool:
        outcome = await with_deadline(
            self._health_check(), self._timeout_ms, "persistence health check"
        )
        if not outcome.ok:
            logger.warning("Persistence unavailable, handling message in degraded mode")
        return outcome.ok

    async def _resolve_user(self, phone: str, available: bool) -> User:
        if available:
            outcome = await with_retry(
                lambda: self._users.get_or_create(phone),
                attempts=self._retries,
                timeout_ms=self._timeout_ms,
                name="user lookup",
                backoff_ms=self._backoff_ms,
            )
            if outcome.ok:
                return outcome.value
        logger.warning("Using transient identity for %s", mask_phone(phone))
        return transient_user(phone)

    async def _resolve_session(self, phone: str, available: bool) -> ConversationSession:
        if available:
            outcome = await with_deadline(
                self._sessions.get_or_create(phone), self._timeout_ms, "session lookup"
            )
            if outcome.ok:
                return outcome.value
        logger.warning("Using transient session for %s", mask_phone(phone))
        return ConversationSession(phone=phone, transient=True)

    @staticmethod
    def _to_flow_input(message: InboundMessage) -> FlowInput:
        image = None
        if message.image is not None:
            image = InboundImage(
                media_id=message.image.id,
                mime_type=message.image.mime_type,
                caption=message.image.caption,
            )
        return FlowInput(text=message.extract_text(), image=image)

    async def _apologize(self, phone: str, role: UserRole) -> None:
        try:
            await self._messenger.error(phone, role)
        except Exception:
            logger.exception("Could not deliver error message to %s", mask_phone(phone))
