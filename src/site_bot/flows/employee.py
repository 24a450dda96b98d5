"""Employee flow — verification gate, menu, activity logging, material requests, inventory."""

from __future__ import annotations

import logging
import re

from site_bot.config import settings
from site_bot.flows.base import (
    RESTART_KEYWORDS,
    SKIP_KEYWORD,
    BaseFlow,
    FlowInput,
    StepHandler,
    StepPrompt,
)
from site_bot.flows.machine import StepSequence
from site_bot.flows.state import (
    ActivityLoggingState,
    ActivityStep,
    ConversationSession,
    ImageRef,
    Intent,
    InventoryState,
    InventoryStep,
    MaterialRequestState,
    MaterialStep,
)
from site_bot.flows.verification import VerificationGate
from site_bot.messages import strings
from site_bot.messages.builder import Messenger, rows_from
from site_bot.models.user import User
from site_bot.services.notifications import EmailNotifier
from site_bot.services.records import InsufficientStockError, RecordService
from site_bot.services.resilience import with_deadline
from site_bot.services.session_store import SessionStore
from site_bot.services.storage import MediaUploader
from site_bot.services.whatsapp import Button, ListRow, ListSection
from site_bot.utils.phone import mask_phone

logger = logging.getLogger(__name__)

ACTIVITY_STEPS = StepSequence(list(ActivityStep))
MATERIAL_STEPS = StepSequence(list(MaterialStep))
INVENTORY_STEPS = StepSequence(list(InventoryStep))

MIN_HOURS, MAX_HOURS = 1, 24
MIN_MATERIAL_NAME = 2
ACTIVITY_NAMESPACE = "activities"
MATERIAL_NAMESPACE = "material-requests"
INVENTORY_NAMESPACE = "inventory"
STOCK_OPERATIONS = frozenset({"item_in", "item_out"})
DASHBOARD_ACTIVITIES = 5
DASHBOARD_REQUESTS = 3

_HOURS = re.compile(r"^\d{1,2}$")
_QUANTITY = re.compile(r"^(\d+)\s*(\D.*)$")
_COUNT = re.compile(r"^\d+$")

HELP_KEYWORDS = frozenset({"help", "મદદ"})
MENU_CHOICES = {
    "log_activity": "log_activity",
    "1": "log_activity",
    "request_materials": "request_materials",
    "2": "request_materials",
    "view_dashboard": "view_dashboard",
    "3": "view_dashboard",
    "help": "help",
    "4": "help",
    "contact_admin": "contact_admin",
    "inventory": "inventory",
    "5": "inventory",
}


def site_name(site_id: str | None) -> str:
    if site_id in strings.SITES:
        return strings.SITES[site_id][0]
    return site_id or "-"


def activity_label(activity_type: str | None) -> str:
    if activity_type in strings.ACTIVITY_TYPES:
        return strings.ACTIVITY_TYPES[activity_type][0]
    return activity_type or "-"


def urgency_label(urgency: str | None) -> str:
    if urgency in strings.URGENCY_LEVELS:
        return strings.URGENCY_LEVELS[urgency][0]
    return urgency or "-"


def item_name(item_id: str | None) -> str:
    if item_id in strings.INVENTORY_ITEMS:
        return strings.INVENTORY_ITEMS[item_id][0]
    return item_id or "-"


def item_unit(item_id: str | None) -> str:
    if item_id in strings.INVENTORY_ITEMS:
        return strings.INVENTORY_ITEMS[item_id][2]
    return ""


def items_in(category: str | None) -> list[str]:
    return [
        item_id
        for item_id, (_, item_category, _) in strings.INVENTORY_ITEMS.items()
        if item_category == category
    ]


def parse_quantity(text: str) -> tuple[int, str] | None:
    """``"10 bags"`` → ``(10, "bags")``; ``None`` without a leading positive integer."""
    match = _QUANTITY.match(text.strip())
    if not match:
        return None
    quantity, unit = int(match.group(1)), match.group(2).strip()
    if quantity < 1 or not unit:
        return None
    return quantity, unit


class EmployeeFlow(BaseFlow):
    """State machine for verified employees.

    Routing
    -------
    * Unverified → :class:`VerificationGate`
    * Restart keyword → clear session, main menu
    * No intent → main menu selection
    * ``log_activity`` / ``request_materials`` / ``inventory`` → step engine
    """

    def __init__(
        self,
        sessions: SessionStore,
        messenger: Messenger,
        gate: VerificationGate,
        records: RecordService,
        uploader: MediaUploader,
        notifier: EmailNotifier | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        super().__init__(sessions, messenger, timeout_ms)
        self._gate = gate
        self._records = records
        self._uploader = uploader
        self._notifier = notifier

        self._activity_handlers: dict[ActivityStep, StepHandler] = {
            ActivityStep.SELECT_SITE: self._accept_site,
            ActivityStep.SELECT_ACTIVITY_TYPE: self._accept_activity_type,
            ActivityStep.ENTER_HOURS: self._accept_hours,
            ActivityStep.ENTER_DESCRIPTION: self._accept_description,
            ActivityStep.UPLOAD_IMAGE: self._accept_activity_photo,
        }
        self._activity_prompts: dict[ActivityStep, StepPrompt] = {
            ActivityStep.SELECT_SITE: self._prompt_site,
            ActivityStep.SELECT_ACTIVITY_TYPE: self._prompt_activity_type,
            ActivityStep.ENTER_HOURS: self._prompt_text(strings.ENTER_HOURS),
            ActivityStep.ENTER_DESCRIPTION: self._prompt_text(strings.ENTER_DESCRIPTION),
            ActivityStep.UPLOAD_IMAGE: self._prompt_text(strings.UPLOAD_ACTIVITY_PHOTO),
        }
        self._material_handlers: dict[MaterialStep, StepHandler] = {
            MaterialStep.SELECT_SITE: self._accept_material_site,
            MaterialStep.ENTER_MATERIAL: self._accept_material_name,
            MaterialStep.ENTER_QUANTITY: self._accept_quantity,
            MaterialStep.SELECT_URGENCY: self._accept_urgency,
            MaterialStep.UPLOAD_IMAGE: self._accept_material_photo,
        }
        self._material_prompts: dict[MaterialStep, StepPrompt] = {
            MaterialStep.SELECT_SITE: self._prompt_material_site,
            MaterialStep.ENTER_MATERIAL: self._prompt_text(strings.ENTER_MATERIAL),
            MaterialStep.ENTER_QUANTITY: self._prompt_text(strings.ENTER_QUANTITY),
            MaterialStep.SELECT_URGENCY: self._prompt_urgency,
            MaterialStep.UPLOAD_IMAGE: self._prompt_text(strings.UPLOAD_MATERIAL_PHOTO),
        }
        self._inventory_handlers: dict[InventoryStep, StepHandler] = {
            InventoryStep.SELECT_SITE: self._accept_inventory_site,
            InventoryStep.SELECT_OPERATION: self._accept_operation,
            InventoryStep.SELECT_CATEGORY: self._accept_category,
            InventoryStep.SELECT_ITEM: self._accept_item,
            InventoryStep.ENTER_QUANTITY: self._accept_stock_quantity,
            InventoryStep.ENTER_NOTES: self._accept_notes,
            InventoryStep.UPLOAD_IMAGE: self._accept_inventory_photo,
        }
        self._inventory_prompts: dict[InventoryStep, StepPrompt] = {
            InventoryStep.SELECT_SITE: self._prompt_inventory_site,
            InventoryStep.SELECT_OPERATION: self._prompt_operation,
            InventoryStep.SELECT_CATEGORY: self._prompt_category,
            InventoryStep.SELECT_ITEM: self._prompt_item,
            InventoryStep.ENTER_QUANTITY: self._prompt_stock_quantity,
            InventoryStep.ENTER_NOTES: self._prompt_text(strings.INVENTORY_ENTER_NOTES),
            InventoryStep.UPLOAD_IMAGE: self._prompt_text(strings.INVENTORY_UPLOAD_PHOTO),
        }

    @property
    def name(self) -> str:
        return "EmployeeFlow"

    async def handle(self, user: User, session: ConversationSession, message: FlowInput) -> None:
        phone = user.phone

        if not user.is_verified:
            if await self._gate.handle(user, message):
                await self._messenger.text(phone, strings.EMPLOYEE_WELCOME)
                await self.show_menu(phone)
            return

        if message.command in RESTART_KEYWORDS:
            if session.active:
                logger.info("%s abandoned %s for %s", self.name, session.intent.value, mask_phone(phone))
                await self._clear(session)
            await self.show_menu(phone)
            return

        if session.intent is Intent.LOG_ACTIVITY:
            await self._run_step(
                user, session, message, ACTIVITY_STEPS,
                self._activity_handlers, self._activity_prompts, self._complete_activity,
            )
        elif session.intent is Intent.REQUEST_MATERIALS:
            await self._run_step(
                user, session, message, MATERIAL_STEPS,
                self._material_handlers, self._material_prompts, self._complete_material_request,
            )
        elif session.intent is Intent.INVENTORY:
            await self._run_step(
                user, session, message, INVENTORY_STEPS,
                self._inventory_handlers, self._inventory_prompts, self._complete_inventory,
            )
        else:
            if session.active:
                # A customer-only intent left over from a role change.
                await self._clear(session)
            await self._handle_menu(user, session, message)

    # ── Main menu ────────────────────────────────────────

    async def _handle_menu(self, user: User, session: ConversationSession, message: FlowInput) -> None:
        phone = user.phone
        command = message.command
        if command in HELP_KEYWORDS:
            await self._show_help(phone)
            return

        choice = MENU_CHOICES.get(command)
        if choice == "log_activity":
            await self._start(session, Intent.LOG_ACTIVITY, ACTIVITY_STEPS, self._activity_prompts)
        elif choice == "request_materials":
            await self._start(session, Intent.REQUEST_MATERIALS, MATERIAL_STEPS, self._material_prompts)
        elif choice == "inventory":
            await self._start(session, Intent.INVENTORY, INVENTORY_STEPS, self._inventory_prompts)
        elif choice == "view_dashboard":
            await self._show_dashboard(user)
        elif choice == "help":
            await self._show_help(phone)
        elif choice == "contact_admin":
            await self._messenger.text(
                phone, strings.EMPLOYEE_CONTACT_ADMIN.format(admin_contact=settings.admin_contact)
            )
        else:
            await self.show_menu(phone)

    async def show_menu(self, phone: str) -> None:
        await self._messenger.buttons(
            phone,
            strings.EMPLOYEE_MENU,
            [
                Button("log_activity", "📝 કામની નોંધ કરો"),
                Button("request_materials", "📦 સામગ્રીની માંગ"),
                Button("view_dashboard", "📊 ડેશબોર્ડ જુઓ"),
            ],
        )
        await self._messenger.list_message(
            phone,
            strings.EMPLOYEE_MENU_MORE,
            strings.EMPLOYEE_MENU_MORE_BUTTON,
            [
                ListSection(
                    strings.EMPLOYEE_MENU_MORE_SECTION,
                    [
                        ListRow("inventory", "📊 ઇન્વેન્ટરી", "સ્ટોક ઉમેરો, કાઢો અથવા રિપોર્ટ જુઓ"),
                        ListRow("help", "❓ મદદ", "મદદ અને સહાય મેળવો"),
                        ListRow("contact_admin", "📞 એડમિનનો સંપર્ક", "વહીવટીતંત્રનો સંપર્ક કરો"),
                    ],
                )
            ],
        )

    async def _show_help(self, phone: str) -> None:
        await self._messenger.text(
            phone, strings.EMPLOYEE_HELP.format(admin_contact=settings.admin_contact)
        )

    async def _start(self, session, intent, sequence, prompts) -> None:
        session.start(intent, sequence.first)
        await self._save(session)
        logger.info("%s started %s for %s", self.name, intent.value, mask_phone(session.phone))
        await prompts[sequence.first](session.phone, session)

    # ── Prompts ──────────────────────────────────────────

    async def _send_sites(self, phone: str, body: str) -> None:
        await self._messenger.list_message(
            phone,
            body,
            strings.SELECT_SITE_BUTTON,
            [ListSection(strings.SELECT_SITE_SECTION, rows_from(strings.SITES))],
        )

    async def _prompt_site(self, phone: str, session: ConversationSession) -> None:
        await self._send_sites(phone, strings.SELECT_SITE)

    async def _prompt_material_site(self, phone: str, session: ConversationSession) -> None:
        await self._send_sites(phone, strings.MATERIAL_SELECT_SITE)

    async def _prompt_activity_type(self, phone: str, session: ConversationSession) -> None:
        await self._messenger.list_message(
            phone,
            strings.SELECT_ACTIVITY,
            strings.SELECT_ACTIVITY_BUTTON,
            [ListSection(strings.SELECT_ACTIVITY_SECTION, rows_from(strings.ACTIVITY_TYPES))],
        )

    async def _prompt_urgency(self, phone: str, session: ConversationSession) -> None:
        await self._messenger.list_message(
            phone,
            strings.SELECT_URGENCY,
            strings.SELECT_URGENCY_BUTTON,
            [ListSection(strings.SELECT_URGENCY_SECTION, rows_from(strings.URGENCY_LEVELS))],
        )

    # ── Activity logging steps ───────────────────────────

    async def _accept_site(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in strings.SITES:
            await self._send_sites(user.phone, strings.SELECT_SITE_INVALID)
            return False
        session.state.site_id = message.command
        return True

    async def _accept_activity_type(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in strings.ACTIVITY_TYPES:
            await self._messenger.text(user.phone, strings.SELECT_ACTIVITY_INVALID)
            await self._prompt_activity_type(user.phone, session)
            return False
        session.state.activity_type = message.command
        return True

    async def _accept_hours(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        text = message.command
        hours = int(text) if _HOURS.match(text) else None
        if hours is None or not MIN_HOURS <= hours <= MAX_HOURS:
            await self._messenger.text(user.phone, strings.ENTER_HOURS_INVALID)
            return False
        session.state.hours = hours
        return True

    async def _accept_description(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        text = message.text.strip()
        if not text:
            await self._messenger.text(user.phone, strings.ENTER_DESCRIPTION)
            return False
        session.state.description = "" if text.lower() == SKIP_KEYWORD else text
        return True

    async def _accept_activity_photo(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        return await self._accept_photo(user, session, message, ACTIVITY_NAMESPACE, strings.ACTIVITY_PHOTO_CAPTION)

    # ── Material request steps ───────────────────────────

    async def _accept_material_site(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in strings.SITES:
            await self._send_sites(user.phone, strings.MATERIAL_SELECT_SITE_INVALID)
            return False
        session.state.site_id = message.command
        return True

    async def _accept_material_name(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        name = message.text.strip()
        if len(name) < MIN_MATERIAL_NAME:
            await self._messenger.text(user.phone, strings.ENTER_MATERIAL_INVALID)
            return False
        session.state.material_name = name
        return True

    async def _accept_quantity(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        parsed = parse_quantity(message.text)
        if parsed is None:
            await self._messenger.text(user.phone, strings.ENTER_QUANTITY_INVALID)
            return False
        session.state.quantity, session.state.unit = parsed
        return True

    async def _accept_urgency(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in strings.URGENCY_LEVELS:
            await self._messenger.text(user.phone, strings.SELECT_URGENCY_INVALID)
            await self._prompt_urgency(user.phone, session)
            return False
        session.state.urgency = message.command
        return True

    async def _accept_material_photo(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        return await self._accept_photo(user, session, message, MATERIAL_NAMESPACE, strings.MATERIAL_PHOTO_CAPTION)

    # ── Inventory steps ──────────────────────────────────

    async def _prompt_inventory_site(self, phone: str, session: ConversationSession) -> None:
        await self._send_sites(phone, strings.INVENTORY_SELECT_SITE)

    async def _prompt_operation(self, phone: str, session: ConversationSession) -> None:
        await self._messenger.buttons(
            phone,
            strings.INVENTORY_MENU,
            [Button(op_id, title) for op_id, title in strings.INVENTORY_OPERATIONS.items()],
        )

    async def _prompt_category(self, phone: str, session: ConversationSession) -> None:
        state: InventoryState = session.state
        await self._messenger.list_message(
            phone,
            strings.INVENTORY_SELECT_CATEGORY.format(
                operation=strings.INVENTORY_OPERATIONS.get(state.operation, "")
            ),
            strings.INVENTORY_CATEGORY_BUTTON,
            [ListSection(strings.INVENTORY_CATEGORY_SECTION, rows_from(strings.INVENTORY_CATEGORIES))],
        )

    async def _prompt_item(self, phone: str, session: ConversationSession) -> None:
        state: InventoryState = session.state
        levels = (
            await with_deadline(
                self._records.stock_levels(state.site_id), self._timeout_ms, "stock levels"
            )
        ).unwrap_or({})
        rows = [
            ListRow(
                item_id,
                item_name(item_id),
                strings.INVENTORY_ITEM_STOCK.format(
                    stock=levels.get(item_id, 0), unit=item_unit(item_id)
                ),
            )
            for item_id in items_in(state.category)
        ]
        await self._messenger.list_message(
            phone,
            strings.INVENTORY_SELECT_ITEM,
            strings.INVENTORY_ITEM_BUTTON,
            [ListSection(strings.INVENTORY_ITEM_SECTION, rows)],
        )

    async def _prompt_stock_quantity(self, phone: str, session: ConversationSession) -> None:
        state: InventoryState = session.state
        await self._messenger.text(
            phone,
            strings.INVENTORY_ENTER_QUANTITY.format(
                item=item_name(state.item_id), unit=item_unit(state.item_id)
            ),
        )

    async def _accept_inventory_site(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in strings.SITES:
            await self._send_sites(user.phone, strings.INVENTORY_SELECT_SITE_INVALID)
            return False
        session.state.site_id = message.command
        return True

    async def _accept_operation(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        command = message.command
        if command == "stock_report":
            # The report ends the flow without another step.
            await self._show_stock_report(user.phone, session.state.site_id)
            await self._clear(session)
            return False
        if command not in STOCK_OPERATIONS:
            await self._messenger.text(user.phone, strings.INVENTORY_OPERATION_INVALID)
            await self._prompt_operation(user.phone, session)
            return False
        session.state.operation = command
        return True

    async def _accept_category(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in strings.INVENTORY_CATEGORIES:
            await self._messenger.text(user.phone, strings.INVENTORY_CATEGORY_INVALID)
            await self._prompt_category(user.phone, session)
            return False
        session.state.category = message.command
        return True

    async def _accept_item(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        if message.command not in items_in(session.state.category):
            await self._messenger.text(user.phone, strings.INVENTORY_ITEM_INVALID)
            await self._prompt_item(user.phone, session)
            return False
        session.state.item_id = message.command
        return True

    async def _accept_stock_quantity(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        state: InventoryState = session.state
        text = message.command
        quantity = int(text) if _COUNT.match(text) else 0
        if quantity < 1:
            await self._messenger.text(user.phone, strings.INVENTORY_QUANTITY_INVALID)
            return False

        if state.operation == "item_out":
            outcome = await with_deadline(
                self._records.stock_level(state.item_id, state.site_id),
                self._timeout_ms,
                "stock level",
            )
            if not outcome.ok:
                await self._messenger.text(user.phone, strings.INVENTORY_STOCK_UNAVAILABLE)
                return False
            if quantity > outcome.value:
                await self._messenger.text(
                    user.phone,
                    strings.INVENTORY_INSUFFICIENT_STOCK.format(
                        available=outcome.value, requested=quantity
                    ),
                )
                return False

        state.quantity = quantity
        return True

    async def _accept_notes(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        text = message.text.strip()
        if not text:
            await self._messenger.text(user.phone, strings.INVENTORY_ENTER_NOTES)
            return False
        session.state.notes = "" if text.lower() == SKIP_KEYWORD else text
        return True

    async def _accept_inventory_photo(self, user: User, session: ConversationSession, message: FlowInput) -> bool:
        return await self._accept_photo(
            user, session, message, INVENTORY_NAMESPACE, strings.INVENTORY_PHOTO_CAPTION, required=True
        )

    # ── Shared photo step ────────────────────────────────

    async def _accept_photo(
        self,
        user: User,
        session: ConversationSession,
        message: FlowInput,
        namespace: str,
        default_caption: str,
        required: bool = False,
    ) -> bool:
        phone = user.phone
        if message.image is not None:
            await self._messenger.text(phone, strings.UPLOAD_IN_PROGRESS)
            stored = await self._uploader.store(message.image.media_id, namespace)
            if stored is None:
                await self._messenger.text(
                    phone, strings.INVENTORY_UPLOAD_FAILED if required else strings.UPLOAD_FAILED
                )
                return False
            session.state.image = ImageRef(
                url=stored.url,
                key=stored.key,
                caption=message.image.caption or default_caption,
                media_id=message.image.media_id,
            )
            await self._messenger.text(phone, strings.UPLOAD_DONE)
            return True

        if message.command == SKIP_KEYWORD and not required:
            return True

        await self._messenger.text(
            phone, strings.INVENTORY_PHOTO_REQUIRED if required else strings.UPLOAD_PROMPT
        )
        return False

    # ── Completion ───────────────────────────────────────

    async def _complete_activity(self, user: User, session: ConversationSession) -> None:
        state: ActivityLoggingState = session.state
        outcome = await with_deadline(
            self._records.add_activity(user.id, state), self._timeout_ms, "activity insert"
        )
        await self._clear(session)

        if not outcome.ok:
            await self._messenger.text(user.phone, strings.ACTIVITY_FAILED)
            return

        activity = outcome.value
        await self._messenger.text(
            user.phone,
            strings.ACTIVITY_LOGGED.format(
                site=site_name(state.site_id),
                activity=activity_label(state.activity_type),
                hours=state.hours,
                description=state.description or strings.NO_DESCRIPTION,
                photo=strings.WITH_PHOTO if state.image else strings.WITHOUT_PHOTO,
                short_id=str(activity.id)[:8],
            ),
        )

    async def _complete_material_request(self, user: User, session: ConversationSession) -> None:
        state: MaterialRequestState = session.state
        outcome = await with_deadline(
            self._records.add_material_request(user.id, state),
            self._timeout_ms,
            "material request insert",
        )
        await self._clear(session)

        if not outcome.ok:
            await self._messenger.text(user.phone, strings.MATERIAL_FAILED)
            return

        request = outcome.value
        await self._messenger.text(
            user.phone,
            strings.MATERIAL_REQUESTED.format(
                material=state.material_name,
                quantity=state.quantity,
                unit=state.unit,
                site=site_name(state.site_id),
                urgency=urgency_label(state.urgency),
                photo=strings.WITH_PHOTO if state.image else strings.WITHOUT_PHOTO,
                short_id=str(request.id)[:8],
            ),
        )

        if self._notifier is not None:
            await with_deadline(
                self._notifier.material_request_created(
                    request, site_name(state.site_id), user.name or user.phone
                ),
                settings.transport_timeout_ms,
                "material request email",
            )

    # ── Dashboard ────────────────────────────────────────

    async def _show_dashboard(self, user: User) -> None:
        activities = (
            await with_deadline(
                self._records.recent_activities(user.id, DASHBOARD_ACTIVITIES),
                self._timeout_ms,
                "dashboard activities",
            )
        ).unwrap_or([])
        requests = (
            await with_deadline(
                self._records.recent_material_requests(user.id, DASHBOARD_REQUESTS),
                self._timeout_ms,
                "dashboard material requests",
            )
        ).unwrap_or([])

        activity_lines = "\n".join(
            strings.DASHBOARD_ACTIVITY_LINE.format(
                activity=activity_label(a.activity_type), hours=a.hours
            )
            for a in activities
        )
        request_lines = "\n".join(
            strings.DASHBOARD_REQUEST_LINE.format(material=r.material_name, status=r.status)
            for r in requests
        )
        await self._messenger.text(
            user.phone,
            strings.DASHBOARD.format(
                total_hours=sum(a.hours or 0 for a in activities),
                activity_count=len(activities),
                request_count=len(requests),
                activities=activity_lines or strings.DASHBOARD_NO_ACTIVITIES,
                requests=request_lines or strings.DASHBOARD_NO_REQUESTS,
            ),
        )

    # ── Inventory ────────────────────────────────────────

    async def _complete_inventory(self, user: User, session: ConversationSession) -> None:
        state: InventoryState = session.state
        outcome = await with_deadline(
            self._records.add_inventory_transaction(user.id, state),
            self._timeout_ms,
            "inventory insert",
        )
        await self._clear(session)

        if not outcome.ok:
            if isinstance(outcome.error, InsufficientStockError):
                await self._messenger.text(
                    user.phone,
                    strings.INVENTORY_INSUFFICIENT_STOCK.format(
                        available=outcome.error.available, requested=outcome.error.requested
                    ),
                )
            await self._messenger.text(user.phone, strings.INVENTORY_FAILED)
            return

        transaction = outcome.value
        unit = item_unit(state.item_id)
        await self._messenger.text(
            user.phone,
            strings.INVENTORY_UPDATED.format(
                item=item_name(state.item_id),
                operation=strings.INVENTORY_ADDED
                if transaction.transaction_type == "in"
                else strings.INVENTORY_REMOVED,
                quantity=transaction.quantity,
                unit=unit,
                previous=transaction.previous_stock,
                new=transaction.new_stock,
                site=site_name(state.site_id),
            ),
        )

    async def _show_stock_report(self, phone: str, site_id: str | None) -> None:
        outcome = await with_deadline(
            self._records.stock_levels(site_id), self._timeout_ms, "stock report"
        )
        if not outcome.ok:
            await self._messenger.text(phone, strings.STOCK_REPORT_FAILED)
            return

        levels = outcome.value
        lines = []
        for category, (label, _) in strings.INVENTORY_CATEGORIES.items():
            lines.append(strings.STOCK_REPORT_CATEGORY.format(category=label))
            for item_id in items_in(category):
                stock = levels.get(item_id, 0)
                lines.append(
                    strings.STOCK_REPORT_LINE.format(
                        mark="✅" if stock > 0 else "❌",
                        item=item_name(item_id),
                        stock=stock,
                        unit=item_unit(item_id),
                    )
                )
        await self._messenger.text(
            phone, strings.STOCK_REPORT.format(site=site_name(site_id), lines="\n".join(lines))
        )
