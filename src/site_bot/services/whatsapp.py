"""WhatsApp Cloud API client — outbound messages, read receipts and media.

Every call catches ``httpx.HTTPError`` and reports failure through its
return value; nothing here raises into the conversation flows.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx

from site_bot.config import settings
from site_bot.utils.phone import mask_phone

logger = logging.getLogger(__name__)


@dataclass
class Button:
    id: str
    title: str


@dataclass
class ListRow:
    id: str
    title: str
    description: str | None = None


@dataclass
class ListSection:
    title: str
    rows: list[ListRow] = field(default_factory=list)


@dataclass
class MediaContent:
    """Bytes downloaded from the messaging platform's media store."""

    data: bytes
    mime_type: str


class MessagingTransport(ABC):
    """Outbound side of the messaging channel."""

    @abstractmethod
    async def send_text(self, to: str, body: str) -> bool:
        """Send a plain text message; ``True`` when the platform accepted it."""

    @abstractmethod
    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        """Send up to three reply buttons under *body*."""

    @abstractmethod
    async def send_list(
        self, to: str, body: str, button_label: str, sections: list[ListSection]
    ) -> bool:
        """Send a list picker opened by *button_label*."""

    @abstractmethod
    async def mark_read(self, message_id: str) -> bool:
        """Request a read receipt for an inbound message."""

    @abstractmethod
    async def fetch_media(self, media_id: str) -> MediaContent | None:
        """Download an inbound attachment by its platform media id."""


class WhatsAppClient(MessagingTransport):
    """Async wrapper around the Graph API ``/messages`` and media endpoints."""

    def __init__(
        self,
        api_token: str | None = None,
        phone_number_id: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        self._token = api_token if api_token is not None else settings.whatsapp_api_token
        self._phone_number_id = phone_number_id or settings.whatsapp_phone_number_id
        self._base_url = (base_url or settings.whatsapp_api_base_url).rstrip("/")
        self._timeout = (timeout_ms or settings.transport_timeout_ms) / 1000

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    # ── Outbound messages ────────────────────────────────

    async def send_text(self, to: str, body: str) -> bool:
        return await self._post_message(
            to,
            {"type": "text", "text": {"preview_url": False, "body": body}},
            preview=body,
        )

    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        interactive = {
            "type": "button",
            "body": {"text": body},
            "action": {
                "buttons": [
                    {"type": "reply", "reply": {"id": b.id, "title": b.title}}
                    for b in buttons
                ]
            },
        }
        return await self._post_message(
            to, {"type": "interactive", "interactive": interactive}, preview=body
        )

    async def send_list(
        self, to: str, body: str, button_label: str, sections: list[ListSection]
    ) -> bool:
        interactive = {
            "type": "list",
            "body": {"text": body},
            "action": {
                "button": button_label,
                "sections": [
                    {
                        "title": section.title,
                        "rows": [_row_payload(row) for row in section.rows],
                    }
                    for section in sections
                ],
            },
        }
        return await self._post_message(
            to, {"type": "interactive", "interactive": interactive}, preview=body
        )

    async def mark_read(self, message_id: str) -> bool:
        payload = {
            "messaging_product": "whatsapp",
            "status": "read",
            "message_id": message_id,
        }
        return await self._post(payload, description=f"read receipt {message_id}")

    # ── Media ────────────────────────────────────────────

    async def fetch_media(self, media_id: str) -> MediaContent | None:
        """Resolve *media_id* to its download URL, then download it.

        Both requests carry the bearer token; the download URL is short-lived.
        """
        if not self._token:
            logger.warning("WHATSAPP_API_TOKEN not set — cannot fetch media %s", media_id)
            return None
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                meta = await client.get(f"{self._base_url}/{media_id}", headers=self._headers)
                if meta.status_code != 200:
                    logger.error(
                        "Media lookup failed for %s: %s %s",
                        media_id, meta.status_code, meta.text,
                    )
                    return None
                info = meta.json()
                resp = await client.get(info["url"], headers=self._headers)
            if resp.status_code != 200:
                logger.error("Media download failed for %s: %s", media_id, resp.status_code)
                return None
            mime_type = info.get("mime_type") or resp.headers.get("content-type", "image/jpeg")
            return MediaContent(data=resp.content, mime_type=mime_type)
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.exception("Media fetch error for %s: %s", media_id, exc)
            return None

    # ── Private helpers ──────────────────────────────────

    async def _post_message(self, to: str, body: dict, preview: str) -> bool:
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to.lstrip("+"),
            **body,
        }
        if not self._token:
            logger.warning(
                "WHATSAPP_API_TOKEN not set — reply logged only (%s): %s",
                mask_phone(to), preview,
            )
            return True
        return await self._post(payload, description=f"message to {mask_phone(to)}")

    async def _post(self, payload: dict, description: str) -> bool:
        if not self._token:
            return True
        url = f"{self._base_url}/{self._phone_number_id}/messages"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            logger.exception("WhatsApp request error (%s): %s", description, exc)
            return False

        if resp.status_code == 200:
            logger.debug("Sent %s", description)
            return True
        logger.error("Failed to send %s: %s %s", description, resp.status_code, resp.text)
        return False


def _row_payload(row: ListRow) -> dict[str, str]:
    payload = {"id": row.id, "title": row.title}
    if row.description:
        payload["description"] = row.description
    return payload
