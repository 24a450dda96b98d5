"""Typed conversation state.

The ``sessions`` table stores ``intent``, ``step`` and an open JSON payload.
In memory the payload is one dataclass per intent, so each flow only sees the
fields it collects.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Union

logger = logging.getLogger(__name__)


class Intent(str, enum.Enum):
    LOG_ACTIVITY = "log_activity"
    REQUEST_MATERIALS = "request_materials"
    BOOKING = "booking"
    INVENTORY = "inventory"
    INQUIRY = "inquiry"
    POST_INQUIRY = "post_inquiry"


class ActivityStep(str, enum.Enum):
    SELECT_SITE = "select_site"
    SELECT_ACTIVITY_TYPE = "select_activity_type"
    ENTER_HOURS = "enter_hours"
    ENTER_DESCRIPTION = "enter_description"
    UPLOAD_IMAGE = "upload_image"


class MaterialStep(str, enum.Enum):
    SELECT_SITE = "select_site"
    ENTER_MATERIAL = "enter_material"
    ENTER_QUANTITY = "enter_quantity"
    SELECT_URGENCY = "select_urgency"
    UPLOAD_IMAGE = "upload_image"


class BookingStep(str, enum.Enum):
    COLLECT_NAME = "collect_name"
    COLLECT_DATE = "collect_date"
    COLLECT_TIME = "collect_time"


class InventoryStep(str, enum.Enum):
    SELECT_SITE = "select_site"
    SELECT_OPERATION = "select_operation"
    SELECT_CATEGORY = "select_category"
    SELECT_ITEM = "select_item"
    ENTER_QUANTITY = "enter_quantity"
    ENTER_NOTES = "enter_notes"
    UPLOAD_IMAGE = "upload_image"


class InquiryStep(str, enum.Enum):
    COLLECT_NAME = "collect_name"
    COLLECT_EMAIL = "collect_email"
    COLLECT_OCCUPATION = "collect_occupation"
    COLLECT_SPACE_REQUIREMENT = "collect_space_requirement"
    COLLECT_SPACE_USE = "collect_space_use"
    COLLECT_PRICE_RANGE = "collect_price_range"


class PostInquiryStep(str, enum.Enum):
    AWAITING_RESPONSE = "awaiting_response"


@dataclass
class ImageRef:
    """An uploaded photo: public URL plus object-storage key."""

    url: str
    key: str
    caption: str | None = None
    media_id: str | None = None


@dataclass
class NoFlow:
    pass


@dataclass
class ActivityLoggingState:
    site_id: str | None = None
    activity_type: str | None = None
    hours: int | None = None
    description: str | None = None
    image: ImageRef | None = None


@dataclass
class MaterialRequestState:
    site_id: str | None = None
    material_name: str | None = None
    quantity: int | None = None
    unit: str | None = None
    urgency: str | None = None
    image: ImageRef | None = None


@dataclass
class BookingState:
    name: str | None = None
    date: str | None = None  # ISO ``YYYY-MM-DD``
    time: str | None = None  # ``HH:MM``


@dataclass
class InventoryState:
    site_id: str | None = None
    operation: str | None = None  # ``item_in`` or ``item_out``
    category: str | None = None
    item_id: str | None = None
    quantity: int | None = None
    notes: str | None = None
    image: ImageRef | None = None


@dataclass
class InquiryState:
    full_name: str | None = None
    email: str | None = None
    occupation: str | None = None
    space_requirement: str | None = None
    space_use: str | None = None
    price_range: str | None = None


@dataclass
class PostInquiryState:
    inquiry_id: str | None = None
    full_name: str | None = None


FlowState = Union[
    NoFlow,
    ActivityLoggingState,
    MaterialRequestState,
    BookingState,
    InventoryState,
    InquiryState,
    PostInquiryState,
]

STATE_TYPES: dict[Intent, type] = {
    Intent.LOG_ACTIVITY: ActivityLoggingState,
    Intent.REQUEST_MATERIALS: MaterialRequestState,
    Intent.BOOKING: BookingState,
    Intent.INVENTORY: InventoryState,
    Intent.INQUIRY: InquiryState,
    Intent.POST_INQUIRY: PostInquiryState,
}

STEP_TYPES: dict[Intent, type[enum.Enum]] = {
    Intent.LOG_ACTIVITY: ActivityStep,
    Intent.REQUEST_MATERIALS: MaterialStep,
    Intent.BOOKING: BookingStep,
    Intent.INVENTORY: InventoryStep,
    Intent.INQUIRY: InquiryStep,
    Intent.POST_INQUIRY: PostInquiryStep,
}


def _state_from_payload(state_type: type, data: dict[str, Any]) -> FlowState:
    known = {f.name for f in fields(state_type)}
    values = {k: v for k, v in (data or {}).items() if k in known}
    if isinstance(values.get("image"), dict):
        values["image"] = ImageRef(**values["image"])
    return state_type(**values)


@dataclass
class ConversationSession:
    """Conversation state for one phone.

    ``step`` is only meaningful while ``intent`` is set; :meth:`clear` resets
    both together with the payload.  ``transient`` sessions were synthesized
    because the store was unreachable and are never written back.
    """

    phone: str
    intent: Intent | None = None
    step: enum.Enum | None = None
    state: FlowState = field(default_factory=NoFlow)
    updated_at: datetime | None = None
    transient: bool = False

    @classmethod
    def from_row(
        cls,
        phone: str,
        intent: str | None,
        step: str | None,
        data: dict[str, Any] | None,
        updated_at: datetime | None = None,
    ) -> ConversationSession:
        """Rebuild typed state from stored columns.

        Unknown intents or steps (e.g. left over from an older deployment)
        produce an idle session rather than an error.
        """
        session = cls(phone=phone, updated_at=updated_at)
        if not intent:
            return session
        try:
            parsed_intent = Intent(intent)
            parsed_step = STEP_TYPES[parsed_intent](step)
        except ValueError:
            logger.warning("Discarding unknown session state %s/%s for %s", intent, step, phone)
            return session

        session.intent = parsed_intent
        session.step = parsed_step
        session.state = _state_from_payload(STATE_TYPES[parsed_intent], data or {})
        return session

    @property
    def active(self) -> bool:
        return self.intent is not None

    def start(self, intent: Intent, first_step: enum.Enum) -> None:
        self.intent = intent
        self.step = first_step
        self.state = STATE_TYPES[intent]()

    def clear(self) -> None:
        self.intent = None
        self.step = None
        self.state = NoFlow()

    def payload(self) -> dict[str, Any]:
        """JSON-ready payload for the ``data`` column."""
        if isinstance(self.state, NoFlow):
            return {}
        return {k: v for k, v in asdict(self.state).items() if v is not None}
