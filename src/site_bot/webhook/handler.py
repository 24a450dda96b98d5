"""WhatsApp webhook handler — acknowledges deliveries and queues messages."""

from __future__ import annotations

import hashlib
import hmac
import logging

from fastapi import APIRouter, Query, Request, Response
from pydantic import ValidationError

from site_bot.config import settings
from site_bot.services.inbox import QueueFullError
from site_bot.utils.phone import mask_phone
from site_bot.webhook.schemas import WebhookPayload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])

SIGNATURE_HEADER = "X-Hub-Signature-256"


def verify_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """Check a ``sha256=<hex>`` HMAC of the raw request body."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature[7:])


# ──────────────────────────────────────────────────────────────
# GET /webhook — Meta verification challenge
# ──────────────────────────────────────────────────────────────
@router.get("/webhook")
async def verify_webhook(
    hub_mode: str = Query(None, alias="hub.mode"),
    hub_verify_token: str = Query(None, alias="hub.verify_token"),
    hub_challenge: str = Query(None, alias="hub.challenge"),
) -> Response:
    """Respond to the Meta webhook verification challenge."""
    if hub_mode == "subscribe" and hub_verify_token == settings.whatsapp_verify_token:
        logger.info("Webhook verified successfully")
        return Response(content=hub_challenge, media_type="text/plain")
    logger.warning("Webhook verification failed (bad token or mode)")
    return Response(content="Forbidden", status_code=403)


# ──────────────────────────────────────────────────────────────
# POST /webhook — Incoming messages
# ──────────────────────────────────────────────────────────────
@router.post("/webhook", response_model=None)
async def receive_message(request: Request) -> dict | Response:
    """Queue every message in a Cloud API delivery and acknowledge at once.

    Expected payload structure (simplified)::

        {
          "entry": [{
            "changes": [{
              "value": {
                "messages": [{
                  "id": "wamid.XXX",
                  "from": "919876543210",
                  "type": "text",
                  "text": { "body": "Hello!" }
                }]
              }
            }]
          }]
        }

    Processing happens on the inbound queue; this handler never waits for it.
    A full queue answers 503 so the platform retries the delivery.
    """
    raw = await request.body()

    if settings.whatsapp_app_secret and not verify_signature(
        raw, request.headers.get(SIGNATURE_HEADER), settings.whatsapp_app_secret
    ):
        logger.warning("Rejected webhook delivery with bad signature")
        return Response(content="Invalid signature", status_code=403)

    try:
        payload = WebhookPayload.model_validate_json(raw)
    except ValidationError:
        logger.debug("Received non-message or malformed webhook event, ignoring")
        return {"status": "ok"}

    queue = request.app.state.container.queue
    rejected = 0
    for message in payload.messages():
        logger.info(
            "Message %s from %s (%s)", message.id, mask_phone(message.from_), message.type
        )
        try:
            queue.enqueue(message)
        except QueueFullError:
            rejected += 1

    if rejected:
        # Meta redelivers on a non-2xx answer; already queued ids are deduplicated.
        logger.warning("Inbound queue full, asking for redelivery of %d message(s)", rejected)
        return Response(content="Queue full", status_code=503)

    return {"status": "ok"}
