"""Outbound message builder.

Flows describe *what* to say; :class:`Messenger` clamps it to the
platform's interactive-message limits and hands it to the transport.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from site_bot.messages import strings
from site_bot.models.user import UserRole
from site_bot.services.whatsapp import Button, ListRow, ListSection, MessagingTransport

logger = logging.getLogger(__name__)

# WhatsApp interactive limits
MAX_BUTTONS = 3
MAX_BUTTON_TITLE = 20
MAX_LIST_ROWS = 10
MAX_ROW_TITLE = 24
MAX_ROW_DESCRIPTION = 72
MAX_LIST_BUTTON_LABEL = 20
MAX_SECTION_TITLE = 24


def _clip(value: str, limit: int) -> str:
    return value if len(value) <= limit else value[: limit - 1] + "…"


def rows_from(catalogue: Mapping[str, tuple[str, str]]) -> list[ListRow]:
    """Turn an ``{id: (title, description)}`` catalogue into list rows."""
    return [ListRow(id=key, title=title, description=desc) for key, (title, desc) in catalogue.items()]


class Messenger:
    """Formats text, button and list messages for one transport."""

    def __init__(self, transport: MessagingTransport) -> None:
        self._transport = transport

    @property
    def transport(self) -> MessagingTransport:
        return self._transport

    async def text(self, to: str, body: str) -> bool:
        return await self._transport.send_text(to, body)

    async def buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        if len(buttons) > MAX_BUTTONS:
            logger.warning("Dropping %d buttons over the limit of %d", len(buttons) - MAX_BUTTONS, MAX_BUTTONS)
        clamped = [Button(id=b.id, title=_clip(b.title, MAX_BUTTON_TITLE)) for b in buttons[:MAX_BUTTONS]]
        return await self._transport.send_buttons(to, body, clamped)

    async def list_message(
        self, to: str, body: str, button_label: str, sections: list[ListSection]
    ) -> bool:
        """Send a list message, keeping at most ten rows across all sections."""
        remaining = MAX_LIST_ROWS
        clamped: list[ListSection] = []
        for section in sections:
            if remaining <= 0:
                break
            rows = [
                ListRow(
                    id=row.id,
                    title=_clip(row.title, MAX_ROW_TITLE),
                    description=_clip(row.description, MAX_ROW_DESCRIPTION) if row.description else None,
                )
                for row in section.rows[:remaining]
            ]
            remaining -= len(rows)
            clamped.append(ListSection(title=_clip(section.title, MAX_SECTION_TITLE), rows=rows))
        return await self._transport.send_list(
            to, body, _clip(button_label, MAX_LIST_BUTTON_LABEL), clamped
        )

    async def error(self, to: str, role: UserRole) -> bool:
        """Send the generic apology in the language of *role*."""
        body = strings.ERROR_EMPLOYEE if role is UserRole.EMPLOYEE else strings.ERROR_CUSTOMER
        return await self._transport.send_text(to, body)
