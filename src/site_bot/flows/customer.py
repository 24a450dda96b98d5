"""Customer flow — main menu, information pages, inquiries and site-visit booking."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, time, timedelta

from site_bot.config import settings
from site_bot.flows.base import RESTART_KEYWORDS, BaseFlow, FlowInput, StepHandler, StepPrompt
from site_bot.flows.machine import StepSequence
from site_bot.flows.state import (
    BookingState,
    BookingStep,
    ConversationSession,
    InquiryState,
    InquiryStep,
    Intent,
    PostInquiryState,
    PostInquiryStep,
)
from site_bot.messages import strings
from site_bot.messages.builder import Messenger, rows_from
from site_bot.models.user import User
from site_bot.services.notifications import EmailNotifier
from site_bot.services.records import RecordService
from site_bot.services.resilience import with_deadline
from site_bot.services.session_store import SessionStore
from site_bot.services.whatsapp import Button, ListRow, ListSection
from site_bot.utils.phone import mask_phone

logger = logging.getLogger(__name__)

BOOKING_STEPS = StepSequence(list(BookingStep))
INQUIRY_STEPS = StepSequence(list(InquiryStep))

MIN_NAME_LENGTH = 2
MIN_ANSWER_LENGTH = 2
DATE_OPTION_DAYS = 7

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY_DATE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_TIME = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MENU_KEYWORDS = frozenset({"menu", "main", "start", "hi", "hello"})
MENU_CHOICES = {
    "book_visit": "book",
    "book": "book",
    "1": "book",
    "check_availability": "availability",
    "2": "availability",
    "pricing": "pricing",
    "3": "pricing",
    "talk_to_sales": "sales",
    "4": "sales",
    "help": "help",
    "callback": "callback",
    "continue_chat": "continue_chat",
    "share_requirements": "inquiry",
    "interested": "inquiry",
    "yes": "inquiry",
    "5": "inquiry",
}
POST_INQUIRY_BOOK = frozenset({"book_visit", "book", "book visit", "yes", "1"})
POST_INQUIRY_LATER = frozenset({"talk_later", "later", "call later", "call me", "2"})


def parse_visit_date(text: str, today: date) -> date | None:
    """Parse ``YYYY-MM-DD`` or ``DD/MM/YYYY``; only dates after *today* count."""
    text = text.strip()
    try:
        if _ISO_DATE.match(text):
            parsed = datetime.strptime(text, "%Y-%m-%d").date()
        elif _DMY_DATE.match(text):
            parsed = datetime.strptime(text, "%d/%m/%Y").date()
        else:
            return None
    except ValueError:
        return None
    return parsed if parsed > today else None


def is_valid_email(text: str) -> bool:
    return bool(_EMAIL.match(text.strip()))


def parse_visit_time(text: str) -> time | None:
    """Parse a 24-hour ``H:MM`` or ``HH:MM`` time."""
    match = _TIME.match(text.strip())
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def format_long_date(value: date) -> str:
    """``Tuesday, 20 October 2026``"""
    return f"{value:%A}, {value.day} {value:%B %Y}"


def format_12h(value: time) -> str:
    """``14:00`` → ``2:00 PM``"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


class CustomerFlow(BaseFlow):
    """State machine for customers (and admins) — no verification gate."""

    def __init__(
        self,
        sessions: SessionStore,
        messenger: Messenger,
        records: RecordService,
        notifier: EmailNotifier | None = None,
        today: Callable[[], date] = date.today,
        timeout_ms: int | None = None,
    ) -> None:
        super().__init__(sessions, messenger, timeout_ms)
        self._records = records
        self._notifier = notifier
        self._today = today

        self._handlers: dict[BookingStep, StepHandler] = {
            BookingStep.COLLECT_NAME: self._accept_name,
            BookingStep.COLLECT_DATE: self._accept_date,
            BookingStep.COLLECT_TIME: self._accept_time,
        }
        self._prompts: dict[BookingStep, StepPrompt] = {
            BookingStep.COLLECT_NAME: self._prompt_name,
            BookingStep.COLLECT_DATE: self._prompt_date,
            BookingStep.COLLECT_TIME: self._prompt_time,
        }
        self._inquiry_handlers: dict[InquiryStep, StepHandler] = {
            InquiryStep.COLLECT_NAME: self._accept_answer(
                "full_name", strings.INQUIRY_NAME_INVALID
            ),
            InquiryStep.COLLECT_EMAIL: self._accept_answer(
                "email", strings.INQUIRY_EMAIL_INVALID, is_valid_email
            ),
            InquiryStep.COLLECT_OCCUPATION: self._accept_answer(
                "occupation", strings.INQUIRY_OCCUPATION_INVALID
            ),
            InquiryStep.COLLECT_SPACE_REQUIREMENT: self._accept_answer(
                "space_requirement", strings.INQUIRY_SPACE_INVALID
            ),
            InquiryStep.COLLECT_SPACE_USE: self._accept_answer(
                "space_use", strings.INQUIRY_USE_INVALID
            ),
            InquiryStep.COLLECT_PRICE_RANGE: self._accept_answer(
                "price_range", strings.INQUIRY_PRICE_INVALID
            ),
        }
        self._inquiry_prompts: dict[InquiryStep, StepPrompt] = {
            InquiryStep.COLLECT_NAME: self._prompt_text(strings.INQUIRY_START),
            InquiryStep.COLLECT_EMAIL: self._prompt_email,
            InquiryStep.COLLECT_OCCUPATION: self._prompt_text(strings.INQUIRY_OCCUPATION_PROMPT),
            InquiryStep.COLLECT_SPACE_REQUIREMENT: self._prompt_text(strings.INQUIRY_SPACE_PROMPT),
            InquiryStep.COLLECT_SPACE_USE: self._prompt_text(strings.INQUIRY_USE_PROMPT),
            InquiryStep.COLLECT_PRICE_RANGE: self._prompt_text(strings.INQUIRY_PRICE_PROMPT),
        }

    @property
    def name(self) -> str:
        return "CustomerFlow"

    async def handle(self, user: User, session: ConversationSession, message: FlowInput) -> None:
        if message.command in RESTART_KEYWORDS:
            if session.active:
                logger.info("%s abandoned %s for %s", self.name, session.intent.value, mask_phone(user.phone))
                await self._clear(session)
            await self.show_menu(user.phone)
            return

        if session.intent is Intent.BOOKING:
            await self._run_step(
                user, session, message, BOOKING_STEPS,
                self._handlers, self._prompts, self._complete_booking,
            )
            return

        if session.intent is Intent.INQUIRY:
            await self._run_step(
                user, session, message, INQUIRY_STEPS,
                self._inquiry_handlers, self._inquiry_prompts, self._complete_inquiry,
            )
            return

        if session.intent is Intent.POST_INQUIRY:
            await self._handle_post_inquiry(user, session, message)
            return

        if session.active:
            # An employee-only intent left over from a role change.
            await self._clear(session)
        await self._handle_menu(user, session, message)

    # ── Main menu ────────────────────────────────────────

    async def _handle_menu(self, user: User, session: ConversationSession, message: FlowInput) -> None:
        phone = user.phone
        command = message.command
        if command in MENU_KEYWORDS:
            await self.show_menu(phone)
            return

        choice = MENU_CHOICES.get(command)
        if choice == "book":
            session.start(Intent.BOOKING, BOOKING_STEPS.first)
            await self._save(session)
            logger.info("%s started booking for %s", self.name, mask_phone(phone))
            await self._prompt_name(phone, session)
        elif choice == "inquiry":
            session.start(Intent.INQUIRY, INQUIRY_STEPS.first)
            await self._save(session)
            logger.info("%s started inquiry for %s", self.name, mask_phone(phone))
            await self._inquiry_prompts[INQUIRY_STEPS.first](phone, session)
        elif choice == "availability":
            await self._messenger.text(phone, strings.AVAILABILITY)
        elif choice == "pricing":
            await self._messenger.text(phone, strings.PRICING)
        elif choice == "sales":
            await self._messenger.buttons(
                phone,
                strings.SALES.format(admin_contact=settings.admin_contact),
                [
                    Button("callback", "📞 Request Callback"),
                    Button("continue_chat", "💬 Continue Here"),
                ],
            )
        elif choice == "help":
            await self._messenger.text(
                phone, strings.CUSTOMER_HELP.format(admin_contact=settings.admin_contact)
            )
        elif choice == "callback":
            await self._messenger.text(phone, strings.CALLBACK_ACK)
            if self._notifier is not None:
                await with_deadline(
                    self._notifier.callback_requested(phone, user.name),
                    settings.transport_timeout_ms,
                    "callback email",
                )
        elif choice == "continue_chat":
            await self._messenger.text(phone, strings.CONTINUE_CHAT_ACK)
        else:
            await self.show_menu(phone)

    async def show_menu(self, phone: str) -> None:
        await self._messenger.buttons(
            phone,
            strings.CUSTOMER_MENU,
            [
                Button("book_visit", "📅 Book Site Visit"),
                Button("check_availability", "🕐 Check Availability"),
                Button("pricing", "💰 Pricing & Plans"),
            ],
        )
        await self._messenger.list_message(
            phone,
            strings.CUSTOMER_MENU_MORE,
            strings.CUSTOMER_MENU_MORE_BUTTON,
            [
                ListSection(
                    strings.CUSTOMER_MENU_MORE_SECTION,
                    [
                        ListRow(
                            "share_requirements", "📝 Share Requirements", "Tell us what space you need"
                        ),
                        ListRow("talk_to_sales", "📞 Talk to Sales", "Connect with our sales team"),
                        ListRow("help", "❓ Help", "Get help and support"),
                    ],
                )
            ],
        )

    # ── Booking prompts ──────────────────────────────────

    async def _prompt_name(self, phone: str, session: ConversationSession) -> None:
        await self._messenger.text(phone, strings.BOOKING_START)

    async def _prompt_date(self, phone: str, session: ConversationSession) -> None:
        today = self._today()
        rows = []
        for offset in range(1, DATE_OPTION_DAYS + 1):
            day = today + timedelta(days=offset)
            rows.append(
                ListRow(
                    id=day.isoformat(),
                    title=f"{day:%a}, {day.day} {day:%b}",
                    description=strings.BOOKING_DATE_TOMORROW if offset == 1 else None,
                )
            )
        state: BookingState = session.state
        await self._messenger.list_message(
            phone,
            strings.BOOKING_DATE_PROMPT.format(name=state.name or ""),
            strings.BOOKING_DATE_BUTTON,
            [ListSection(strings.BOOKING_DATE_SECTION, rows)],
        )

    async def _prompt_time(self, phone: str, session: ConversationSession) -> None:
        await self._messenger.list_message(
            phone,
            strings.BOOKING_TIME_PROMPT,
            strings.BOOKING_TIME_BUTTON,
            [ListSection(strings.BOOKING_TIME_SECTION, rows_from(strings.TIME_SLOTS))],
        )

    # ── Booking steps ────────────────────────────────────

    async def _accept_name(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        name = message.text.strip()
        if len(name) < MIN_NAME_LENGTH:
            await self._messenger.text(user.phone, strings.BOOKING_NAME_INVALID)
            return False
        session.state.name = name
        return True

    async def _accept_date(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        parsed = parse_visit_date(message.text, self._today())
        if parsed is None:
            await self._messenger.text(user.phone, strings.BOOKING_DATE_INVALID)
            return False
        session.state.date = parsed.isoformat()
        return True

    async def _accept_time(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        parsed = parse_visit_time(message.text)
        if parsed is None:
            await self._messenger.text(user.phone, strings.BOOKING_TIME_INVALID)
            await self._prompt_time(user.phone, session)
            return False
        session.state.time = f"{parsed:%H:%M}"
        return True

    # ── Completion ───────────────────────────────────────

    async def _complete_booking(self, user: User, session: ConversationSession) -> None:
        state: BookingState = session.state
        visit_date = date.fromisoformat(state.date)
        visit_time = parse_visit_time(state.time)
        slot = datetime.combine(visit_date, visit_time)

        outcome = await with_deadline(
            self._records.add_booking(user.phone, state, slot), self._timeout_ms, "booking insert"
        )
        await self._clear(session)

        if not outcome.ok:
            await self._messenger.text(user.phone, strings.BOOKING_FAILED)
            return

        booking = outcome.value
        await self._messenger.text(
            user.phone,
            strings.BOOKING_CONFIRMED.format(
                name=state.name,
                date=format_long_date(visit_date),
                time=format_12h(visit_time),
                short_id=str(booking.id)[:8],
            ),
        )

        if self._notifier is not None:
            await with_deadline(
                self._notifier.booking_created(booking),
                settings.transport_timeout_ms,
                "booking email",
            )

    # ── Inquiry ──────────────────────────────────────────

    def _accept_answer(
        self,
        field_name: str,
        invalid: str,
        validate: Callable[[str], bool] | None = None,
    ) -> StepHandler:
        async def accept(user: User, session: ConversationSession, message: FlowInput) -> bool:
            answer = message.text.strip()
            ok = validate(answer) if validate else len(answer) >= MIN_ANSWER_LENGTH
            if not ok:
                await self._messenger.text(user.phone, invalid)
                return False
            setattr(session.state, field_name, answer)
            return True

        return accept

    async def _prompt_email(self, phone: str, session: ConversationSession) -> None:
        state: InquiryState = session.state
        await self._messenger.text(phone, strings.INQUIRY_EMAIL_PROMPT.format(name=state.full_name))

    async def _complete_inquiry(self, user: User, session: ConversationSession) -> None:
        state: InquiryState = session.state
        outcome = await with_deadline(
            self._records.add_inquiry(user.phone, state), self._timeout_ms, "inquiry insert"
        )
        if not outcome.ok:
            await self._clear(session)
            await self._messenger.text(
                user.phone, strings.INQUIRY_FAILED.format(admin_contact=settings.admin_contact)
            )
            return

        inquiry = outcome.value
        session.start(Intent.POST_INQUIRY, PostInquiryStep.AWAITING_RESPONSE)
        session.state = PostInquiryState(inquiry_id=str(inquiry.id), full_name=state.full_name)
        await self._save(session)

        await self._send_post_inquiry_choice(
            user.phone,
            strings.INQUIRY_SUMMARY.format(
                full_name=state.full_name,
                email=state.email,
                occupation=state.occupation,
                space_requirement=state.space_requirement,
                space_use=state.space_use,
                price_range=state.price_range,
            ),
        )

        if self._notifier is not None:
            await with_deadline(
                self._notifier.inquiry_created(inquiry),
                settings.transport_timeout_ms,
                "inquiry email",
            )

    async def _send_post_inquiry_choice(self, phone: str, body: str) -> None:
        await self._messenger.buttons(
            phone,
            body,
            [
                Button("book_visit", "📅 Book Visit"),
                Button("talk_later", "💬 Call Later"),
            ],
        )

    async def _handle_post_inquiry(
        self, user: User, session: ConversationSession, message: FlowInput
    ) -> None:
        phone = user.phone
        command = message.command
        if command in POST_INQUIRY_BOOK:
            session.start(Intent.BOOKING, BOOKING_STEPS.first)
            await self._save(session)
            logger.info("%s started booking after inquiry for %s", self.name, mask_phone(phone))
            await self._prompt_name(phone, session)
        elif command in POST_INQUIRY_LATER:
            await self._clear(session)
            await self._messenger.text(
                phone, strings.POST_INQUIRY_LATER.format(admin_contact=settings.admin_contact)
            )
        else:
            await self._send_post_inquiry_choice(phone, strings.POST_INQUIRY_UNCLEAR)
