"""Inbound work queue — decouples webhook acknowledgement from processing.

The webhook handler enqueues and returns at once; a fixed pool of worker
tasks feeds messages to the dispatcher.  Messages from the same phone are
processed one at a time, different phones run concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable

from site_bot.config import settings
from site_bot.utils.phone import mask_phone, normalize_phone
from site_bot.webhook.schemas import InboundMessage

logger = logging.getLogger(__name__)

RECENT_IDS = 1000

Handler = Callable[[InboundMessage], Awaitable[None]]


class QueueFullError(Exception):
    """The inbound queue is at capacity; the delivery should be retried."""


class InboundQueue:
    """Bounded ``asyncio.Queue`` with per-phone serialization.

    ``join()`` resolves once every enqueued message has been handled.
    """

    def __init__(
        self,
        handler: Handler,
        workers: int | None = None,
        max_size: int | None = None,
    ) -> None:
        self._handler = handler
        self._worker_count = workers or settings.queue_workers
        self._queue: asyncio.Queue[InboundMessage] = asyncio.Queue(
            maxsize=max_size or settings.queue_max_size
        )
        self._workers: list[asyncio.Task] = []
        self._locks: dict[str, asyncio.Lock] = {}
        self._pending: dict[str, int] = {}
        self._seen: OrderedDict[str, None] = OrderedDict()
        self.running = False

    # ── Lifecycle ────────────────────────────────────────

    async def start_workers(self) -> None:
        if self.running:
            return
        self.running = True
        for i in range(self._worker_count):
            self._workers.append(asyncio.create_task(self._worker(f"worker-{i}")))
        logger.info("Started %d inbound queue workers", self._worker_count)

    async def stop_workers(self) -> None:
        self.running = False
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers.clear()
        logger.info("Inbound queue workers stopped")

    async def join(self) -> None:
        await self._queue.join()

    @property
    def size(self) -> int:
        return self._queue.qsize()

    # ── Producer side ────────────────────────────────────

    def enqueue(self, message: InboundMessage) -> bool:
        """Queue *message*; ``False`` if it is a duplicate.

        Raises :class:`QueueFullError` when the queue is at capacity.  The id
        is only remembered once the message is queued, so a redelivery of a
        rejected message is accepted.
        """
        if self.is_duplicate(message.id):
            logger.info("Dropping duplicate delivery of message %s", message.id)
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull as exc:
            logger.error("Inbound queue full, rejecting message %s", message.id)
            raise QueueFullError(message.id) from exc
        self.remember(message.id)
        return True

    def is_duplicate(self, message_id: str) -> bool:
        return message_id in self._seen

    def remember(self, message_id: str) -> None:
        """Add *message_id* to the window of recently queued ids."""
        self._seen[message_id] = None
        self._seen.move_to_end(message_id)
        if len(self._seen) > RECENT_IDS:
            self._seen.popitem(last=False)

    # ── Consumer side ────────────────────────────────────

    async def _worker(self, name: str) -> None:
        while self.running:
            message = await self._queue.get()
            try:
                await self._process(message)
            except Exception:
                logger.exception("%s failed on message %s", name, message.id)
            finally:
                self._queue.task_done()

    async def _process(self, message: InboundMessage) -> None:
        phone = normalize_phone(message.from_)
        lock = self._locks.setdefault(phone, asyncio.Lock())
        self._pending[phone] = self._pending.get(phone, 0) + 1
        try:
            async with lock:
                logger.debug("Processing %s from %s", message.id, mask_phone(phone))
                await self._handler(message)
        finally:
            self._pending[phone] -= 1
            if self._pending[phone] == 0:
                del self._pending[phone]
                del self._locks[phone]
