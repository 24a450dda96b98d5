"""Tests for the SQL-backed session store and typed session state."""

import pytest

from site_bot.flows.state import (
    ActivityLoggingState,
    ActivityStep,
    BookingStep,
    ConversationSession,
    ImageRef,
    Intent,
    InventoryState,
    InventoryStep,
    NoFlow,
)
from site_bot.services.session_store import SessionStore

PHONE = "+919876543210"


@pytest.fixture
def store(session_factory):
    return SessionStore(session_factory)


@pytest.mark.asyncio
async def test_get_or_create_starts_idle(store):
    session = await store.get_or_create(PHONE)
    assert session.phone == PHONE
    assert not session.active
    assert isinstance(session.state, NoFlow)

    again = await store.get_or_create(PHONE)
    assert again.phone == PHONE


@pytest.mark.asyncio
async def test_save_and_reload_typed_state(store):
    session = await store.get_or_create(PHONE)
    session.start(Intent.LOG_ACTIVITY, ActivityStep.SELECT_SITE)
    session.state.site_id = "site_2"
    session.state.image = ImageRef(url="https://cdn.test/a.jpg", key="activities/a.jpg")
    session.step = ActivityStep.ENTER_HOURS
    await store.save(session)

    loaded = await store.get(PHONE)
    assert loaded.intent is Intent.LOG_ACTIVITY
    assert loaded.step is ActivityStep.ENTER_HOURS
    assert isinstance(loaded.state, ActivityLoggingState)
    assert loaded.state.site_id == "site_2"
    assert loaded.state.image.key == "activities/a.jpg"


@pytest.mark.asyncio
async def test_inventory_state_survives_reload(store):
    session = await store.get_or_create(PHONE)
    session.start(Intent.INVENTORY, InventoryStep.SELECT_SITE)
    session.state.site_id = "site_1"
    session.state.operation = "item_out"
    session.state.item_id = "cement"
    session.state.quantity = 4
    session.step = InventoryStep.ENTER_NOTES
    await store.save(session)

    loaded = await store.get(PHONE)
    assert loaded.step is InventoryStep.ENTER_NOTES
    assert isinstance(loaded.state, InventoryState)
    assert (loaded.state.operation, loaded.state.item_id, loaded.state.quantity) == ("item_out", "cement", 4)


@pytest.mark.asyncio
async def test_save_creates_missing_row(store):
    session = ConversationSession(phone=PHONE)
    session.start(Intent.BOOKING, BookingStep.COLLECT_NAME)
    await store.save(session)

    loaded = await store.get(PHONE)
    assert loaded.step is BookingStep.COLLECT_NAME


@pytest.mark.asyncio
async def test_clear_resets_intent_step_and_payload(store):
    session = await store.get_or_create(PHONE)
    session.start(Intent.BOOKING, BookingStep.COLLECT_DATE)
    session.state.name = "Asha"
    await store.save(session)

    await store.clear(PHONE)

    loaded = await store.get(PHONE)
    assert loaded.intent is None
    assert loaded.step is None
    assert loaded.payload() == {}


def test_unknown_stored_state_becomes_idle():
    session = ConversationSession.from_row(PHONE, "old_intent", "old_step", {"x": 1})
    assert not session.active

    session = ConversationSession.from_row(PHONE, "booking", "not_a_step", {})
    assert not session.active


def test_payload_ignores_unknown_keys_and_drops_none():
    session = ConversationSession.from_row(
        PHONE, "log_activity", "enter_hours", {"site_id": "site_1", "legacy": True}
    )
    assert session.state.site_id == "site_1"
    assert session.payload() == {"site_id": "site_1"}
