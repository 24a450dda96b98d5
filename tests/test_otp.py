"""Tests for one-time code issue / verify / expiry."""

import pytest

from site_bot.database.repository import OTPRepository
from site_bot.messages import strings
from site_bot.services.otp import BcryptHasher, OTPService, VerificationReason, generate_code
from site_bot.services.user_service import UserService

from conftest import FrozenClock

PHONE = "+919876543210"


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def otp(session_factory, transport, hasher, clock):
    return OTPService(session_factory, transport, hasher=hasher, clock=clock)


async def _stored(session_factory, phone=PHONE):
    async with session_factory() as db:
        return await OTPRepository(db).find(phone)


# ──────────────────────────────────────────────────────────
# Codes
# ──────────────────────────────────────────────────────────

def test_generated_codes_are_six_digits():
    for _ in range(200):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()


@pytest.mark.asyncio
async def test_bcrypt_hasher_round_trip():
    hasher = BcryptHasher(rounds=4)
    hashed = await hasher.hash("012345")
    assert hashed != "012345"
    assert await hasher.verify("012345", hashed)
    assert not await hasher.verify("543210", hashed)


@pytest.mark.asyncio
async def test_bcrypt_hasher_rejects_malformed_hash():
    assert not await BcryptHasher(rounds=4).verify("123456", "not-a-hash")


# ──────────────────────────────────────────────────────────
# Issue
# ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_issue_stores_hash_and_delivers_code(otp, session_factory, transport, hasher):
    assert await otp.issue(PHONE)

    code = hasher.codes[-1]
    record = await _stored(session_factory)
    assert record.otp_hash == f"hashed:{code}"
    assert record.attempts == 0
    assert code in transport.texts[-1]


@pytest.mark.asyncio
async def test_issue_replaces_previous_code(otp, hasher):
    await otp.issue(PHONE)
    first = hasher.codes[-1]
    await otp.issue(PHONE)
    second = hasher.codes[-1]

    if first != second:
        result = await otp.verify(PHONE, first)
        assert not result.accepted
    assert (await otp.verify(PHONE, second)).accepted


@pytest.mark.asyncio
async def test_issue_rolls_back_when_delivery_fails(otp, session_factory, transport):
    transport.fail_text = True
    assert not await otp.issue(PHONE)
    assert await _stored(session_factory) is None


# ──────────────────────────────────────────────────────────
# Verify
# ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_round_trip_accepts_exactly_once(otp, session_factory, hasher):
    users = UserService(session_factory)
    await users.promote_to_employee(PHONE)
    await otp.issue(PHONE)
    code = hasher.codes[-1]

    first = await otp.verify(PHONE, code)
    assert first.accepted
    assert first.reason is VerificationReason.ACCEPTED
    assert first.message == strings.OTP_ACCEPTED
    assert (await users.get_by_phone(PHONE)).is_verified

    second = await otp.verify(PHONE, code)
    assert not second.accepted
    assert second.reason is VerificationReason.NOT_FOUND


@pytest.mark.asyncio
async def test_wrong_code_reports_remaining_attempts(otp, hasher):
    await otp.issue(PHONE)
    wrong = "000000" if hasher.codes[-1] != "000000" else "111111"

    result = await otp.verify(PHONE, wrong)
    assert result.reason is VerificationReason.MISMATCH
    assert result.remaining_attempts == 2
    assert result.message == strings.OTP_INVALID.format(remaining=2)


@pytest.mark.asyncio
async def test_lockout_after_three_wrong_codes(otp, session_factory, hasher):
    await otp.issue(PHONE)
    code = hasher.codes[-1]
    wrong = "000000" if code != "000000" else "111111"

    for remaining in (2, 1, 0):
        result = await otp.verify(PHONE, wrong)
        assert result.reason is VerificationReason.MISMATCH
        assert result.remaining_attempts == remaining

    assert (await _stored(session_factory)).attempts == 3

    locked = await otp.verify(PHONE, code)
    assert not locked.accepted
    assert locked.reason is VerificationReason.TOO_MANY_ATTEMPTS
    assert await _stored(session_factory) is None


@pytest.mark.asyncio
async def test_expired_code_is_rejected_even_if_correct(otp, session_factory, hasher, clock):
    await otp.issue(PHONE)
    code = hasher.codes[-1]

    clock.advance(minutes=10)
    result = await otp.verify(PHONE, code)

    assert not result.accepted
    assert result.reason is VerificationReason.EXPIRED
    assert result.message == strings.OTP_EXPIRED
    assert await _stored(session_factory) is None


@pytest.mark.asyncio
async def test_verify_without_code_is_not_found(otp):
    result = await otp.verify(PHONE, "123456")
    assert result.reason is VerificationReason.NOT_FOUND
    assert result.message == strings.OTP_NOT_FOUND


# ──────────────────────────────────────────────────────────
# has_active
# ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_has_active(otp, session_factory, clock):
    assert not await otp.has_active(PHONE)

    await otp.issue(PHONE)
    assert await otp.has_active(PHONE)

    clock.advance(minutes=11)
    assert not await otp.has_active(PHONE)
    assert await _stored(session_factory) is None


# ──────────────────────────────────────────────────────────
# Copy
# ──────────────────────────────────────────────────────────

def _is_gujarati(text: str) -> bool:
    return any("\u0a80" <= ch <= "\u0aff" for ch in text)


@pytest.mark.parametrize(
    "message",
    [
        strings.OTP_DELIVERY,
        strings.OTP_NOT_FOUND,
        strings.OTP_EXPIRED,
        strings.OTP_TOO_MANY_ATTEMPTS,
        strings.OTP_INVALID,
        strings.OTP_ACCEPTED,
    ],
)
def test_code_messages_are_in_gujarati(message):
    assert _is_gujarati(message)


@pytest.mark.asyncio
async def test_delivered_code_message_is_gujarati(otp, transport, hasher):
    await otp.issue(PHONE)
    body = transport.texts[-1]
    assert hasher.codes[-1] in body
    assert _is_gujarati(body)
