"""Tests for the webhook endpoints."""

from __future__ import annotations

import hashlib
import hmac
import json
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio

from site_bot.config import settings
from site_bot.main import app
from site_bot.services.inbox import QueueFullError
from site_bot.webhook.handler import SIGNATURE_HEADER, verify_signature


class RecordingQueue:
    def __init__(self) -> None:
        self.messages = []
        self.capacity: int | None = None

    def enqueue(self, message) -> bool:
        if self.capacity is not None and len(self.messages) >= self.capacity:
            raise QueueFullError(message.id)
        self.messages.append(message)
        return True


def _delivery(*messages: dict) -> dict:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "waba-1",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "metadata": {"phone_number_id": "123"},
                            "messages": list(messages),
                        },
                    }
                ],
            }
        ],
    }


@pytest.fixture
def queue():
    return RecordingQueue()


@pytest_asyncio.fixture
async def client(queue):
    app.state.container = SimpleNamespace(queue=queue)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    del app.state.container


# ── GET /webhook ─────────────────────────────────────────

@pytest.mark.asyncio
async def test_verification_challenge(client):
    resp = await client.get(
        "/webhook",
        params={
            "hub.mode": "subscribe",
            "hub.verify_token": settings.whatsapp_verify_token,
            "hub.challenge": "1158201444",
        },
    )
    assert resp.status_code == 200
    assert resp.text == "1158201444"


@pytest.mark.asyncio
async def test_verification_rejects_bad_token(client):
    resp = await client.get(
        "/webhook",
        params={"hub.mode": "subscribe", "hub.verify_token": "wrong", "hub.challenge": "x"},
    )
    assert resp.status_code == 403


# ── POST /webhook ────────────────────────────────────────

@pytest.mark.asyncio
async def test_messages_are_queued(client, queue):
    body = _delivery(
        {"id": "wamid.1", "from": "919876543210", "timestamp": "1700000000", "type": "text", "text": {"body": "hi"}},
        {
            "id": "wamid.2",
            "from": "919876543210",
            "type": "interactive",
            "interactive": {"type": "list_reply", "list_reply": {"id": "site_1", "title": "Site A"}},
        },
    )
    resp = await client.post("/webhook", json=body)

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert [m.id for m in queue.messages] == ["wamid.1", "wamid.2"]
    assert queue.messages[1].extract_text() == "site_1"


@pytest.mark.asyncio
async def test_status_updates_are_acknowledged(client, queue):
    body = _delivery()
    body["entry"][0]["changes"][0]["value"]["statuses"] = [{"id": "wamid.9", "status": "delivered"}]

    resp = await client.post("/webhook", json=body)
    assert resp.status_code == 200
    assert queue.messages == []


@pytest.mark.asyncio
async def test_malformed_body_is_acknowledged(client, queue):
    resp = await client.post("/webhook", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 200
    assert queue.messages == []


@pytest.mark.asyncio
async def test_malformed_message_does_not_drop_the_rest(client, queue):
    body = _delivery(
        {"id": "good", "from": "919876543210", "type": "text", "text": {"body": "hi"}},
        {"id": "odd", "type": "unsupported"},
        {"id": "also-good", "from": "919812345678", "type": "text", "text": {"body": "hello"}},
    )
    resp = await client.post("/webhook", json=body)

    assert resp.status_code == 200
    assert [m.id for m in queue.messages] == ["good", "also-good"]


@pytest.mark.asyncio
async def test_full_queue_asks_for_redelivery(client, queue):
    queue.capacity = 1
    body = _delivery(
        {"id": "wamid.1", "from": "919876543210", "type": "text", "text": {"body": "one"}},
        {"id": "wamid.2", "from": "919876543210", "type": "text", "text": {"body": "two"}},
    )
    resp = await client.post("/webhook", json=body)

    assert resp.status_code == 503
    assert [m.id for m in queue.messages] == ["wamid.1"]


@pytest.mark.asyncio
async def test_signature_enforced_when_secret_set(client, queue, monkeypatch):
    monkeypatch.setattr(settings, "whatsapp_app_secret", "s3cret")
    raw = json.dumps(
        _delivery({"id": "wamid.1", "from": "919876543210", "type": "text", "text": {"body": "hi"}})
    ).encode()

    bad = await client.post(
        "/webhook", content=raw, headers={"Content-Type": "application/json", SIGNATURE_HEADER: "sha256=00"}
    )
    assert bad.status_code == 403
    assert queue.messages == []

    signature = "sha256=" + hmac.new(b"s3cret", raw, hashlib.sha256).hexdigest()
    good = await client.post(
        "/webhook", content=raw, headers={"Content-Type": "application/json", SIGNATURE_HEADER: signature}
    )
    assert good.status_code == 200
    assert len(queue.messages) == 1


def test_verify_signature():
    payload = b'{"entry": []}'
    digest = hmac.new(b"key", payload, hashlib.sha256).hexdigest()
    assert verify_signature(payload, f"sha256={digest}", "key")
    assert not verify_signature(payload, digest, "key")
    assert not verify_signature(payload, None, "key")
    assert not verify_signature(payload, f"sha256={digest}", "other")


# ── Health ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
