"""Email notifications — tells back-office staff about new requests."""

from __future__ import annotations

import logging
from email.message import EmailMessage

import aiosmtplib

from site_bot.config import settings
from site_bot.models.records import Booking, CustomerInquiry, MaterialRequest

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Sends plain-text notification emails using the configured SMTP server.

    Every method returns ``True`` when the message was handed to the server.
    An empty recipient address disables that notification.
    """

    def __init__(
        self,
        procurement_email: str | None = None,
        sales_email: str | None = None,
    ) -> None:
        self._procurement_email = (
            procurement_email if procurement_email is not None else settings.procurement_email
        )
        self._sales_email = sales_email if sales_email is not None else settings.sales_email

    async def material_request_created(
        self, request: MaterialRequest, site_name: str, requested_by: str
    ) -> bool:
        """Notify procurement about a new material request."""
        subject = f"[{settings.app_name}] New material request: {request.material_name}"
        body = (
            "A new material request was submitted via WhatsApp.\n\n"
            f"Request ID: {request.id}\n"
            f"Material:   {request.material_name}\n"
            f"Quantity:   {request.quantity} {request.unit}\n"
            f"Site:       {site_name}\n"
            f"Urgency:    {request.urgency}\n"
            f"Requested by: {requested_by}\n"
        )
        if request.image_url:
            body += f"Photo:      {request.image_url}\n"
        return await self._send(self._procurement_email, subject, body)

    async def booking_created(self, booking: Booking) -> bool:
        """Notify sales about a new site-visit booking."""
        subject = f"[{settings.app_name}] New site visit booking"
        body = (
            "A customer booked a site visit via WhatsApp.\n\n"
            f"Booking ID: {booking.id}\n"
            f"Name:       {booking.customer_name}\n"
            f"Phone:      {booking.customer_phone}\n"
            f"Slot:       {booking.slot_time:%Y-%m-%d %H:%M}\n"
            f"Duration:   {booking.duration_minutes} minutes\n"
        )
        return await self._send(self._sales_email, subject, body)

    async def inquiry_created(self, inquiry: CustomerInquiry) -> bool:
        """Pass a customer's space requirements on to sales."""
        subject = f"[{settings.app_name}] New customer inquiry: {inquiry.full_name}"
        body = (
            "A customer shared their requirements via WhatsApp.\n\n"
            f"Inquiry ID: {inquiry.id}\n"
            f"Name:       {inquiry.full_name}\n"
            f"Phone:      {inquiry.phone}\n"
            f"Email:      {inquiry.email}\n"
            f"Occupation: {inquiry.occupation}\n"
            f"Space:      {inquiry.space_requirement}\n"
            f"Use:        {inquiry.space_use}\n"
            f"Budget:     {inquiry.price_range}\n"
        )
        return await self._send(self._sales_email, subject, body)

    async def callback_requested(self, phone: str, name: str | None = None) -> bool:
        """Ask sales to call a customer back."""
        subject = f"[{settings.app_name}] Callback requested"
        body = (
            "A customer asked for a callback via WhatsApp.\n\n"
            f"Phone: {phone}\n"
            f"Name:  {name or 'unknown'}\n"
        )
        return await self._send(self._sales_email, subject, body)

    async def _send(self, to_email: str, subject: str, body: str) -> bool:
        if not to_email:
            logger.debug("No recipient configured for %r, skipping email", subject)
            return False

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = settings.email_from
        msg["To"] = to_email
        msg.set_content(body)

        logger.info("Sending notification email to %s", to_email)
        try:
            await aiosmtplib.send(
                msg,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username or None,
                password=settings.smtp_password or None,
                start_tls=True,
            )
        except aiosmtplib.SMTPException as exc:
            logger.exception("Notification email to %s failed: %s", to_email, exc)
            return False

        logger.info("Notification email sent to %s", to_email)
        return True
