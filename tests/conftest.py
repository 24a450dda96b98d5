"""Shared fixtures — in-memory database and recording fakes for collaborators."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from site_bot.container import build_container
from site_bot.database.engine import init_db
from site_bot.services.notifications import EmailNotifier
from site_bot.services.otp import OTPHasher
from site_bot.services.storage import ObjectStorage, StoredObject
from site_bot.services.whatsapp import Button, ListSection, MediaContent, MessagingTransport
from site_bot.utils.clock import utcnow
from site_bot.webhook.schemas import InboundMessage


# ── Collaborator fakes ──────────────────────────────────

class RecordingTransport(MessagingTransport):
    """Keeps every outbound message instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, object]] = []  # (kind, to, payload)
        self.read: list[str] = []
        self.media: dict[str, MediaContent] = {}
        self.fail_text = False

    async def send_text(self, to: str, body: str) -> bool:
        if self.fail_text:
            return False
        self.sent.append(("text", to, body))
        return True

    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        self.sent.append(("buttons", to, (body, buttons)))
        return True

    async def send_list(
        self, to: str, body: str, button_label: str, sections: list[ListSection]
    ) -> bool:
        self.sent.append(("list", to, (body, button_label, sections)))
        return True

    async def mark_read(self, message_id: str) -> bool:
        self.read.append(message_id)
        return True

    async def fetch_media(self, media_id: str) -> MediaContent | None:
        return self.media.get(media_id)

    # helpers

    @property
    def texts(self) -> list[str]:
        return [payload for kind, _, payload in self.sent if kind == "text"]

    @property
    def button_bodies(self) -> list[str]:
        return [payload[0] for kind, _, payload in self.sent if kind == "buttons"]

    @property
    def list_bodies(self) -> list[str]:
        return [payload[0] for kind, _, payload in self.sent if kind == "list"]

    def reset(self) -> None:
        self.sent.clear()
        self.read.clear()


class FakeStorage(ObjectStorage):
    def __init__(self) -> None:
        self.uploads: list[tuple[str, str, str]] = []  # (filename, mime, namespace)
        self.fail = False

    async def upload(self, data: bytes, filename: str, mime_type: str, namespace: str):
        if self.fail:
            return None
        self.uploads.append((filename, mime_type, namespace))
        key = f"{namespace}/{filename}.jpg"
        return StoredObject(url=f"https://cdn.test/{key}", key=key)


class RecordingHasher(OTPHasher):
    """Reversible stand-in for bcrypt that remembers issued codes."""

    def __init__(self) -> None:
        self.codes: list[str] = []

    async def hash(self, code: str) -> str:
        self.codes.append(code)
        return f"hashed:{code}"

    async def verify(self, code: str, hashed: str) -> bool:
        return hashed == f"hashed:{code}"


class FrozenClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or utcnow()

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ── In-memory test database ─────────────────────────────

@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory DB with all tables for each test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool, echo=False)
    await init_db(bind=engine)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def hasher():
    return RecordingHasher()


@pytest.fixture
def notifier():
    """Mocked notifier — never actually sends emails."""
    return AsyncMock(spec=EmailNotifier)


@pytest.fixture
def container(session_factory, transport, storage, hasher, notifier):
    return build_container(
        session_factory=session_factory,
        transport=transport,
        storage=storage,
        hasher=hasher,
        notifier=notifier,
    )


@pytest.fixture
def inbound():
    """Factory for inbound message events."""
    ids = itertools.count(1)

    def make(
        phone: str,
        text: str | None = None,
        *,
        button_id: str | None = None,
        list_id: str | None = None,
        payload: str | None = None,
        image_id: str | None = None,
    ) -> InboundMessage:
        data: dict = {"id": f"wamid.{next(ids)}", "from": phone, "timestamp": "1700000000"}
        if text is not None:
            data.update(type="text", text={"body": text})
        elif button_id is not None:
            data.update(type="interactive", interactive={"type": "button_reply", "button_reply": {"id": button_id, "title": button_id}})
        elif list_id is not None:
            data.update(type="interactive", interactive={"type": "list_reply", "list_reply": {"id": list_id, "title": list_id}})
        elif payload is not None:
            data.update(type="button", button={"payload": payload, "text": payload})
        elif image_id is not None:
            data.update(type="image", image={"id": image_id, "mime_type": "image/jpeg"})
        return InboundMessage.model_validate(data)

    return make
