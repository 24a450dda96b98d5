"""Record service — writes the records produced by completed flows."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from site_bot.database.repository import RecordRepository
from site_bot.flows.state import (
    ActivityLoggingState,
    BookingState,
    InquiryState,
    InventoryState,
    MaterialRequestState,
)
from site_bot.messages import strings
from site_bot.models.records import (
    Activity,
    Booking,
    CustomerInquiry,
    InventoryTransaction,
    MaterialRequest,
    MessageLog,
)
from site_bot.utils.clock import utcnow

logger = logging.getLogger(__name__)

BOOKING_DURATION_MINUTES = 60


class InsufficientStockError(Exception):
    """A stock-out asked for more than is on hand."""

    def __init__(self, item_id: str, available: int, requested: int) -> None:
        super().__init__(f"{item_id}: {requested} requested, {available} available")
        self.item_id = item_id
        self.available = available
        self.requested = requested


class RecordService:
    """Append-only writes plus the dashboard reads."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _add(self, record):
        async with self._session_factory() as db:
            await RecordRepository(db).add(record)
            await db.commit()
        return record

    async def add_activity(self, user_id: uuid.UUID | None, state: ActivityLoggingState) -> Activity:
        details: dict[str, Any] = {"logged_via": "whatsapp", "language": "gujarati"}
        if state.image is not None:
            details["work_photo"] = {"url": state.image.url, "key": state.image.key}
        activity = Activity(
            user_id=user_id,
            site_ref=state.site_id,
            activity_type=state.activity_type,
            hours=state.hours,
            description=state.description or "",
            image_url=state.image.url if state.image else None,
            image_key=state.image.key if state.image else None,
            details=details,
        )
        await self._add(activity)
        logger.info("Activity %s logged (%s, %sh)", activity.id, state.activity_type, state.hours)
        return activity

    async def add_material_request(
        self, user_id: uuid.UUID | None, state: MaterialRequestState
    ) -> MaterialRequest:
        request = MaterialRequest(
            user_id=user_id,
            site_ref=state.site_id,
            material_name=state.material_name,
            quantity=state.quantity,
            unit=state.unit,
            urgency=state.urgency or "medium",
            status="pending",
            requested_date=utcnow(),
            image_url=state.image.url if state.image else None,
            image_key=state.image.key if state.image else None,
            notes=strings.MATERIAL_NOTES,
        )
        await self._add(request)
        logger.info("Material request %s created (%s)", request.id, state.material_name)
        return request

    async def add_booking(self, phone: str, state: BookingState, slot_time: datetime) -> Booking:
        booking = Booking(
            customer_phone=phone,
            customer_name=state.name,
            slot_time=slot_time,
            duration_minutes=BOOKING_DURATION_MINUTES,
            status="pending",
            notes=strings.BOOKING_NOTES,
        )
        await self._add(booking)
        logger.info("Booking %s created for %s", booking.id, slot_time.isoformat())
        return booking

    async def add_inquiry(self, phone: str, state: InquiryState) -> CustomerInquiry:
        inquiry = CustomerInquiry(
            phone=phone,
            full_name=state.full_name,
            email=state.email,
            occupation=state.occupation,
            space_requirement=state.space_requirement,
            space_use=state.space_use,
            price_range=state.price_range,
            status="inquiry",
        )
        await self._add(inquiry)
        logger.info("Customer inquiry %s saved", inquiry.id)
        return inquiry

    async def add_inventory_transaction(
        self, user_id: uuid.UUID | None, state: InventoryState
    ) -> InventoryTransaction:
        """Record a stock movement against the current stock level.

        Raises :class:`InsufficientStockError` when taking out more than is
        on hand; nothing is written in that case.
        """
        async with self._session_factory() as db:
            repo = RecordRepository(db)
            previous = await repo.stock_level(state.item_id, state.site_id)
            if state.operation == "item_in":
                transaction_type, new_stock = "in", previous + state.quantity
            else:
                if state.quantity > previous:
                    raise InsufficientStockError(state.item_id, previous, state.quantity)
                transaction_type, new_stock = "out", previous - state.quantity

            transaction = InventoryTransaction(
                item_ref=state.item_id,
                site_ref=state.site_id,
                transaction_type=transaction_type,
                quantity=state.quantity,
                previous_stock=previous,
                new_stock=new_stock,
                notes=state.notes or None,
                image_url=state.image.url if state.image else None,
                image_key=state.image.key if state.image else None,
                created_by=user_id,
            )
            await repo.add(transaction)
            await db.commit()
        logger.info(
            "Inventory %s %s x%d at %s (%d -> %d)",
            transaction_type, state.item_id, state.quantity, state.site_id, previous, new_stock,
        )
        return transaction

    async def stock_level(self, item_id: str, site_id: str) -> int:
        async with self._session_factory() as db:
            return await RecordRepository(db).stock_level(item_id, site_id)

    async def stock_levels(self, site_id: str) -> dict[str, int]:
        async with self._session_factory() as db:
            return await RecordRepository(db).stock_levels(site_id)

    async def log_inbound(
        self, phone: str, message_type: str, content: dict[str, Any], timestamp: str | None
    ) -> None:
        await self._add(
            MessageLog(
                phone=phone,
                direction="inbound",
                message_type=message_type,
                content=content,
                metadata_={"timestamp": timestamp},
            )
        )

    async def recent_activities(self, user_id: uuid.UUID, limit: int = 5) -> Sequence[Activity]:
        async with self._session_factory() as db:
            return await RecordRepository(db).recent_activities(user_id, limit)

    async def recent_material_requests(
        self, user_id: uuid.UUID, limit: int = 3
    ) -> Sequence[MaterialRequest]:
        async with self._session_factory() as db:
            return await RecordRepository(db).recent_material_requests(user_id, limit)
