"""Deadline-bounded execution for calls that may hang.

Every persistence call made while handling a message goes through
:func:`with_deadline`.  A slow or dead backend yields an :class:`Outcome`
that is not OK instead of an exception, and the caller degrades.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_BACKOFF_MS = 5000


class OutcomeStatus(str, enum.Enum):
    OK = "ok"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass
class Outcome(Generic[T]):
    """Result of a bounded call: ``OK(value)``, ``TIMED_OUT`` or ``FAILED(error)``."""

    status: OutcomeStatus
    value: T | None = None
    error: BaseException | None = None

    @staticmethod
    def success(value: T) -> Outcome[T]:
        return Outcome(OutcomeStatus.OK, value=value)

    @staticmethod
    def timed_out() -> Outcome[T]:
        return Outcome(OutcomeStatus.TIMED_OUT)

    @staticmethod
    def failure(error: BaseException) -> Outcome[T]:
        return Outcome(OutcomeStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default


def _discard(task: asyncio.Future) -> None:
    # Retrieve the late result so asyncio doesn't report it as never retrieved.
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Late failure discarded: %r", task.exception())


async def with_deadline(
    operation: Awaitable[T], timeout_ms: int, name: str
) -> Outcome[T]:
    """Race *operation* against a *timeout_ms* timer.

    If the timer wins, the operation is left running in the background and its
    eventual result is dropped.  Never raises for timeouts or errors raised by
    the operation itself.
    """
    task = asyncio.ensure_future(operation)
    done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)

    if not done:
        task.add_done_callback(_discard)
        logger.warning("%s timed out after %dms, using fallback", name, timeout_ms)
        return Outcome.timed_out()

    error = task.exception()
    if error is not None:
        logger.error("%s failed: %r", name, error, exc_info=error)
        return Outcome.failure(error)
    return Outcome.success(task.result())


async def with_retry(
    factory: Callable[[], Awaitable[T]],
    attempts: int,
    timeout_ms: int,
    name: str,
    backoff_ms: int = 1000,
) -> Outcome[T]:
    """Call ``with_deadline(factory(), ...)`` up to *attempts* times.

    Waits ``backoff_ms * 2**n`` (capped at five seconds) between attempts and
    returns the last outcome if none succeeded.
    """

    def give_up(state: RetryCallState) -> Outcome[T]:
        logger.error("%s failed after %d attempts", name, state.attempt_number)
        return state.outcome.result()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=backoff_ms / 1000, max=MAX_BACKOFF_MS / 1000),
        retry=retry_if_result(lambda outcome: not outcome.ok),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        retry_error_callback=give_up,
        reraise=False,
    )
    return await retrying(lambda: with_deadline(factory(), timeout_ms, name))
