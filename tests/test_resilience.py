"""Tests for the deadline and retry wrappers."""

import asyncio
import time

import pytest

from site_bot.services.resilience import OutcomeStatus, with_deadline, with_retry


async def _never():
    await asyncio.Event().wait()


async def _value(v):
    return v


async def _boom():
    raise ConnectionError("db down")


@pytest.mark.asyncio
async def test_returns_value_when_operation_finishes_first():
    outcome = await with_deadline(_value(42), 500, "fast op")
    assert outcome.ok
    assert outcome.value == 42


@pytest.mark.asyncio
async def test_hanging_operation_times_out_without_raising():
    started = time.monotonic()
    outcome = await with_deadline(_never(), 50, "hanging op")
    elapsed = time.monotonic() - started

    assert outcome.status is OutcomeStatus.TIMED_OUT
    assert outcome.value is None
    assert elapsed < 0.5


@pytest.mark.asyncio
async def test_failure_is_captured():
    outcome = await with_deadline(_boom(), 500, "failing op")
    assert outcome.status is OutcomeStatus.FAILED
    assert isinstance(outcome.error, ConnectionError)
    assert outcome.unwrap_or("fallback") == "fallback"


@pytest.mark.asyncio
async def test_late_result_is_discarded():
    finished = asyncio.Event()

    async def slow():
        await asyncio.sleep(0.1)
        finished.set()
        return "late"

    outcome = await with_deadline(slow(), 10, "slow op")
    assert not outcome.ok
    # The operation keeps running in the background.
    await asyncio.wait_for(finished.wait(), 1)


@pytest.mark.asyncio
async def test_retry_succeeds_on_second_attempt():
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise ConnectionError("first attempt fails")
        return "ok"

    outcome = await with_retry(flaky, attempts=3, timeout_ms=200, name="flaky", backoff_ms=1)
    assert outcome.ok
    assert outcome.value == "ok"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retry_returns_last_outcome_when_all_attempts_fail():
    calls = []

    async def always_down():
        calls.append(1)
        raise ConnectionError("down")

    outcome = await with_retry(always_down, attempts=2, timeout_ms=200, name="down", backoff_ms=1)
    assert outcome.status is OutcomeStatus.FAILED
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retry_backs_off_exponentially():
    calls = []

    async def always_down():
        calls.append(time.monotonic())
        raise ConnectionError("down")

    await with_retry(always_down, attempts=3, timeout_ms=200, name="down", backoff_ms=40)

    assert len(calls) == 3
    first_gap, second_gap = calls[1] - calls[0], calls[2] - calls[1]
    assert first_gap >= 0.035
    assert second_gap >= 0.075


@pytest.mark.asyncio
async def test_retry_bounds_each_attempt_with_the_deadline():
    calls = []

    async def hang():
        calls.append(1)
        await _never()

    started = time.monotonic()
    outcome = await with_retry(hang, attempts=2, timeout_ms=30, name="hang", backoff_ms=0)

    assert outcome.status is OutcomeStatus.TIMED_OUT
    assert len(calls) == 2
    assert time.monotonic() - started < 1


@pytest.mark.asyncio
async def test_retry_stops_after_first_success():
    calls = []

    async def fine():
        calls.append(1)
        return "ok"

    outcome = await with_retry(fine, attempts=5, timeout_ms=200, name="fine", backoff_ms=1)
    assert outcome.value == "ok"
    assert calls == [1]
