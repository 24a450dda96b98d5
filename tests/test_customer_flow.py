"""Tests for the customer flow: menu pages, inquiries and site-visit booking."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy import select

from site_bot.config import settings
from site_bot.flows.base import FlowInput
from site_bot.flows.customer import (
    CustomerFlow,
    format_12h,
    format_long_date,
    is_valid_email,
    parse_visit_date,
    parse_visit_time,
)
from site_bot.flows.state import BookingStep, InquiryStep, Intent, PostInquiryStep
from site_bot.messages import strings
from site_bot.models.records import Booking, CustomerInquiry

PHONE = "+919812345678"
TODAY = date(2026, 10, 18)


@pytest.fixture
def send(container, inbound):
    async def _send(text=None, **kwargs):
        await container.dispatcher.dispatch(inbound(PHONE, text, **kwargs))

    return _send


async def _bookings(session_factory):
    async with session_factory() as db:
        result = await db.execute(select(Booking))
        return result.scalars().all()


# ──────────────────────────────────────────────────────────
# Date and time helpers
# ──────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "text, expected",
    [
        ("2026-10-19", date(2026, 10, 19)),
        ("25/12/2026", date(2026, 12, 25)),
        (" 2027-01-05 ", date(2027, 1, 5)),
    ],
)
def test_parse_visit_date(text, expected):
    assert parse_visit_date(text, TODAY) == expected


@pytest.mark.parametrize(
    "text",
    ["2026-10-18", "2026-10-01", "18/10/2026", "2026-02-30", "31/04/2027", "tomorrow", "12-25-2026", ""],
)
def test_parse_visit_date_rejects_today_past_and_garbage(text):
    assert parse_visit_date(text, TODAY) is None


@pytest.mark.parametrize(
    "text, expected",
    [("14:00", time(14, 0)), ("9:30", time(9, 30)), ("00:00", time(0, 0)), ("23:59", time(23, 59))],
)
def test_parse_visit_time(text, expected):
    assert parse_visit_time(text) == expected


@pytest.mark.parametrize("text", ["24:00", "12:60", "2pm", "14", ""])
def test_parse_visit_time_rejects(text):
    assert parse_visit_time(text) is None


def test_formatting():
    assert format_long_date(date(2026, 10, 20)) == "Tuesday, 20 October 2026"
    assert format_12h(time(14, 0)) == "2:00 PM"
    assert format_12h(time(9, 0)) == "9:00 AM"
    assert format_12h(time(0, 15)) == "12:15 AM"
    assert format_12h(time(12, 0)) == "12:00 PM"


# ──────────────────────────────────────────────────────────
# Menu
# ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_greeting_shows_menu(send, transport):
    await send("hi")
    assert strings.CUSTOMER_MENU in transport.button_bodies
    assert strings.CUSTOMER_MENU_MORE in transport.list_bodies


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "choice, expected",
    [
        ("check_availability", strings.AVAILABILITY),
        ("2", strings.AVAILABILITY),
        ("pricing", strings.PRICING),
        ("continue_chat", strings.CONTINUE_CHAT_ACK),
        ("help", strings.CUSTOMER_HELP.format(admin_contact=settings.admin_contact)),
    ],
)
async def test_information_pages(send, transport, choice, expected):
    await send(choice)
    assert transport.texts[-1] == expected


@pytest.mark.asyncio
async def test_talk_to_sales_offers_callback(send, transport):
    await send(list_id="talk_to_sales")
    kind, _, (body, buttons) = transport.sent[-1]
    assert kind == "buttons"
    assert settings.admin_contact in body
    assert [b.id for b in buttons] == ["callback", "continue_chat"]


@pytest.mark.asyncio
async def test_callback_notifies_sales(send, transport, notifier):
    await send(button_id="callback")
    assert transport.texts[-1] == strings.CALLBACK_ACK
    notifier.callback_requested.assert_awaited_once()
    assert notifier.callback_requested.await_args.args[0] == PHONE


# ──────────────────────────────────────────────────────────
# Booking
# ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_booking_round_trip(container, session_factory, send, transport, notifier):
    visit = date.today() + timedelta(days=3)

    await send(button_id="book_visit")
    session = await container.sessions.get(PHONE)
    assert session.intent is Intent.BOOKING
    assert session.step is BookingStep.COLLECT_NAME

    await send("Asha Patel")
    assert transport.list_bodies[-1] == strings.BOOKING_DATE_PROMPT.format(name="Asha Patel")

    await send(list_id=visit.isoformat())
    assert (await container.sessions.get(PHONE)).step is BookingStep.COLLECT_TIME

    await send(list_id="14:00")

    [booking] = await _bookings(session_factory)
    assert booking.customer_phone == PHONE
    assert booking.customer_name == "Asha Patel"
    assert booking.slot_time == datetime.combine(visit, time(14, 0))
    assert booking.duration_minutes == 60
    assert booking.status == "pending"

    session = await container.sessions.get(PHONE)
    assert session.intent is None
    assert session.step is None

    confirmation = transport.texts[-1]
    assert "Asha Patel" in confirmation
    assert format_long_date(visit) in confirmation
    assert "2:00 PM" in confirmation
    assert str(booking.id)[:8] in confirmation
    notifier.booking_created.assert_awaited_once()


@pytest.mark.asyncio
async def test_booking_rejects_short_name_and_past_date(container, session_factory, send, transport):
    await send("book")

    await send("A")
    assert transport.texts[-1] == strings.BOOKING_NAME_INVALID
    assert (await container.sessions.get(PHONE)).step is BookingStep.COLLECT_NAME

    await send("Asha")
    for bad in ("yesterday", date.today().isoformat(), "2020-01-01"):
        await send(bad)
        assert transport.texts[-1] == strings.BOOKING_DATE_INVALID
        assert (await container.sessions.get(PHONE)).step is BookingStep.COLLECT_DATE

    await send((date.today() + timedelta(days=1)).strftime("%d/%m/%Y"))
    await send("25:00")
    assert strings.BOOKING_TIME_INVALID in transport.texts
    assert (await container.sessions.get(PHONE)).step is BookingStep.COLLECT_TIME
    assert await _bookings(session_factory) == []


@pytest.mark.asyncio
async def test_restart_keyword_abandons_booking(container, send, transport):
    await send("book")
    await send("Asha")
    await send("menu")

    session = await container.sessions.get(PHONE)
    assert session.intent is None
    assert strings.CUSTOMER_MENU in transport.button_bodies


# ──────────────────────────────────────────────────────────
# Inquiry
# ──────────────────────────────────────────────────────────

async def _inquiries(session_factory):
    async with session_factory() as db:
        result = await db.execute(select(CustomerInquiry))
        return result.scalars().all()


async def _share_requirements(send):
    await send(list_id="share_requirements")
    for answer in (
        "Asha Patel",
        "asha@example.com",
        "Architect",
        "1000 sq ft",
        "Design studio",
        "₹1-2 Crores",
    ):
        await send(answer)


@pytest.mark.parametrize("text", ["asha@example.com", " a.b@studio.co.in "])
def test_is_valid_email(text):
    assert is_valid_email(text)


@pytest.mark.parametrize("text", ["", "asha", "asha@", "@example.com", "asha@example", "a b@example.com"])
def test_is_valid_email_rejects(text):
    assert not is_valid_email(text)


@pytest.mark.asyncio
async def test_inquiry_round_trip(container, session_factory, send, transport, notifier):
    await send("interested")
    session = await container.sessions.get(PHONE)
    assert session.intent is Intent.INQUIRY
    assert session.step is InquiryStep.COLLECT_NAME
    assert transport.texts[-1] == strings.INQUIRY_START
    await send("menu")

    await _share_requirements(send)

    [inquiry] = await _inquiries(session_factory)
    assert inquiry.phone == PHONE
    assert inquiry.full_name == "Asha Patel"
    assert inquiry.email == "asha@example.com"
    assert inquiry.occupation == "Architect"
    assert inquiry.space_requirement == "1000 sq ft"
    assert inquiry.space_use == "Design studio"
    assert inquiry.price_range == "₹1-2 Crores"
    assert inquiry.status == "inquiry"

    summary = transport.button_bodies[-1]
    assert "asha@example.com" in summary
    assert "Design studio" in summary
    notifier.inquiry_created.assert_awaited_once()

    session = await container.sessions.get(PHONE)
    assert session.intent is Intent.POST_INQUIRY
    assert session.step is PostInquiryStep.AWAITING_RESPONSE
    assert session.state.inquiry_id == str(inquiry.id)


@pytest.mark.asyncio
async def test_inquiry_rejects_bad_answers(container, session_factory, send, transport):
    await send("share_requirements")
    await send("A")
    assert transport.texts[-1] == strings.INQUIRY_NAME_INVALID
    assert (await container.sessions.get(PHONE)).step is InquiryStep.COLLECT_NAME

    await send("Asha")
    assert transport.texts[-1] == strings.INQUIRY_EMAIL_PROMPT.format(name="Asha")
    await send("not-an-email")
    session = await container.sessions.get(PHONE)
    assert transport.texts[-1] == strings.INQUIRY_EMAIL_INVALID
    assert session.step is InquiryStep.COLLECT_EMAIL
    assert session.state.email is None
    assert await _inquiries(session_factory) == []


@pytest.mark.asyncio
async def test_after_inquiry_customer_can_book(container, send, transport):
    await _share_requirements(send)

    await send(button_id="book_visit")

    session = await container.sessions.get(PHONE)
    assert session.intent is Intent.BOOKING
    assert session.step is BookingStep.COLLECT_NAME
    assert transport.texts[-1] == strings.BOOKING_START


@pytest.mark.asyncio
async def test_after_inquiry_customer_can_ask_for_a_call(container, send, transport):
    await _share_requirements(send)

    await send(button_id="talk_later")

    assert (await container.sessions.get(PHONE)).intent is None
    assert transport.texts[-1] == strings.POST_INQUIRY_LATER.format(
        admin_contact=settings.admin_contact
    )


@pytest.mark.asyncio
async def test_unclear_reply_after_inquiry_repeats_the_choice(container, send, transport):
    await _share_requirements(send)

    await send("maybe next month")

    assert transport.button_bodies[-1] == strings.POST_INQUIRY_UNCLEAR
    assert (await container.sessions.get(PHONE)).intent is Intent.POST_INQUIRY


# ──────────────────────────────────────────────────────────
# Date options
# ──────────────────────────────────────────────────────────

@pytest.fixture
def fixed_flow(container, notifier):
    return CustomerFlow(
        container.sessions,
        container.messenger,
        records=container.records,
        notifier=notifier,
        today=lambda: TODAY,
    )


@pytest.mark.asyncio
async def test_date_prompt_offers_next_seven_days(container, fixed_flow, transport):
    user = await container.users.get_or_create(PHONE)
    session = await container.sessions.get_or_create(PHONE)

    await fixed_flow.handle(user, session, FlowInput("book"))
    await fixed_flow.handle(user, session, FlowInput("Asha"))

    _, _, (body, _, sections) = transport.sent[-1]
    rows = sections[0].rows
    assert [r.id for r in rows] == [(TODAY + timedelta(days=i)).isoformat() for i in range(1, 8)]
    assert rows[0].description == strings.BOOKING_DATE_TOMORROW
    assert rows[1].title == "Tue, 20 Oct"
