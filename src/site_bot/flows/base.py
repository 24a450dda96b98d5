"""Base flow — shared interface and step engine for every conversation flow."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from site_bot.config import settings
from site_bot.flows.machine import StepSequence
from site_bot.flows.state import ConversationSession
from site_bot.messages.builder import Messenger
from site_bot.models.user import User
from site_bot.services.resilience import with_deadline
from site_bot.services.session_store import SessionStore
from site_bot.utils.phone import mask_phone

logger = logging.getLogger(__name__)

# Abandon any in-progress flow and go back to the main menu.
RESTART_KEYWORDS = frozenset({"menu", "main", "start", "restart", "મેનુ"})
SKIP_KEYWORD = "skip"


@dataclass
class InboundImage:
    """An image attachment on the inbound message."""

    media_id: str
    mime_type: str | None = None
    caption: str | None = None


@dataclass
class FlowInput:
    """What a flow gets to see of one inbound message."""

    text: str
    image: InboundImage | None = None

    @property
    def command(self) -> str:
        """Lower-cased, stripped text for keyword and id matching."""
        return self.text.strip().lower()


# A step handler validates input, records it on the session and returns
# ``True`` to advance; on ``False`` it has already re-prompted.
StepHandler = Callable[[User, ConversationSession, FlowInput], Awaitable[bool]]
StepPrompt = Callable[[str, ConversationSession], Awaitable[None]]


class BaseFlow(ABC):
    """Abstract base class for the role-specific flow engines.

    Subclasses receive the resolved user, their session and the message.
    They mutate the session in memory and persist it through :meth:`_save`
    and :meth:`_clear`, which are deadline-bounded and no-ops for transient
    sessions.
    """

    def __init__(
        self,
        sessions: SessionStore,
        messenger: Messenger,
        timeout_ms: int | None = None,
    ) -> None:
        self._sessions = sessions
        self._messenger = messenger
        self._timeout_ms = timeout_ms or settings.persistence_timeout_ms

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable flow name (used in logs)."""

    @abstractmethod
    async def handle(self, user: User, session: ConversationSession, message: FlowInput) -> None:
        """Process one inbound message.

        Parameters
        ----------
        user:
            The resolved (possibly transient) identity.
        session:
            Conversation state for ``user.phone``; mutated in place.
        message:
            Extracted text and optional image.
        """

    # ── Session persistence ──────────────────────────────

    async def _save(self, session: ConversationSession) -> bool:
        if session.transient:
            return False
        outcome = await with_deadline(
            self._sessions.save(session), self._timeout_ms, "session save"
        )
        return outcome.ok

    async def _clear(self, session: ConversationSession) -> bool:
        session.clear()
        if session.transient:
            return False
        outcome = await with_deadline(
            self._sessions.clear(session.phone), self._timeout_ms, "session clear"
        )
        return outcome.ok

    # ── Step engine ──────────────────────────────────────

    def _prompt_text(self, body: str) -> StepPrompt:
        async def prompt(phone: str, session: ConversationSession) -> None:
            await self._messenger.text(phone, body)

        return prompt


    async def _run_step(
        self,
        user: User,
        session: ConversationSession,
        message: FlowInput,
        sequence: StepSequence,
        handlers: Mapping[enum.Enum, StepHandler],
        prompts: Mapping[enum.Enum, StepPrompt],
        complete: Callable[[User, ConversationSession], Awaitable[None]],
    ) -> None:
        """Apply *message* to the current step.

        Rejected input leaves ``session.step`` untouched.  Accepted input
        moves to the next step in *sequence* (persisted, then prompted) or,
        after the last step, calls *complete*.
        """
        step = session.step
        if step not in sequence:
            logger.warning(
                "%s: step %r not in flow for %s, resetting", self.name, step, mask_phone(user.phone)
            )
            await self._clear(session)
            return

        if not await handlers[step](user, session, message):
            return

        following = sequence.next(step)
        if following is None:
            await complete(user, session)
            return

        session.step = following
        await self._save(session)
        await prompts[following](user.phone, session)
