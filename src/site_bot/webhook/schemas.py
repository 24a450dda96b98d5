"""Pydantic models for the WhatsApp Cloud API webhook payload.

Only the fields the bot reads are modelled; everything else is ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextBody(_Lenient):
    body: str = ""


class Reply(_Lenient):
    id: str
    title: str | None = None
    description: str | None = None


class Interactive(_Lenient):
    type: str | None = None
    button_reply: Reply | None = None
    list_reply: Reply | None = None


class QuickReply(_Lenient):
    payload: str | None = None
    text: str | None = None


class Image(_Lenient):
    id: str
    mime_type: str | None = None
    sha256: str | None = None
    caption: str | None = None


class InboundMessage(_Lenient):
    """One inbound message event."""

    id: str
    from_: str = Field(alias="from")
    timestamp: str | None = None
    type: str = "text"
    text: TextBody | None = None
    interactive: Interactive | None = None
    button: QuickReply | None = None
    image: Image | None = None

    def extract_text(self) -> str:
        """Typed text, else button id, else list id, else quick-reply payload."""
        if self.text is not None and self.text.body.strip():
            return self.text.body.strip()
        if self.interactive is not None:
            if self.interactive.button_reply is not None:
                return self.interactive.button_reply.id
            if self.interactive.list_reply is not None:
                return self.interactive.list_reply.id
        if self.button is not None and self.button.payload:
            return self.button.payload
        return ""

    def content(self) -> dict[str, Any]:
        """The message body as stored in the audit log."""
        return self.model_dump(
            include={"text", "interactive", "button", "image"}, exclude_none=True
        )


class Metadata(_Lenient):
    display_phone_number: str | None = None
    phone_number_id: str | None = None


class ChangeValue(_Lenient):
    messaging_product: str | None = None
    metadata: Metadata | None = None
    # Validated one by one in WebhookPayload.messages().
    messages: list[Any] = Field(default_factory=list)


class Change(_Lenient):
    field: str | None = None
    value: ChangeValue = Field(default_factory=ChangeValue)


class Entry(_Lenient):
    id: str | None = None
    changes: list[Change] = Field(default_factory=list)


class WebhookPayload(_Lenient):
    """Top-level webhook body: ``{"object": ..., "entry": [...]}``."""

    object: str | None = None
    entry: list[Entry] = Field(default_factory=list)

    def messages(self) -> list[InboundMessage]:
        """Every well-formed message in the delivery.

        A message that fails validation is logged and skipped; the rest of the
        delivery is still returned.
        """
        parsed = []
        for entry in self.entry:
            for change in entry.changes:
                for raw in change.value.messages:
                    try:
                        parsed.append(InboundMessage.model_validate(raw))
                    except ValidationError as exc:
                        message_id = raw.get("id") if isinstance(raw, dict) else None
                        logger.warning(
                            "Skipping malformed message %s: %d validation error(s)",
                            message_id, exc.error_count(),
                        )
        return parsed
