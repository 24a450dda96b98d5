"""Tests for the WhatsApp Cloud API client."""

import json

import httpx
import pytest

from site_bot.services.whatsapp import Button, ListRow, ListSection, WhatsAppClient


class CapturingClient:
    """Replaces ``httpx.AsyncClient``; answers every request with *response*."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, *args, **kwargs):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def _answer(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self._response, Exception):
            raise self._response
        return self._response

    async def post(self, url, json=None, headers=None):
        return await self._answer(httpx.Request("POST", url, json=json, headers=headers))

    async def get(self, url, headers=None):
        return await self._answer(httpx.Request("GET", url, headers=headers))


@pytest.fixture
def fake_http(monkeypatch):
    def install(response):
        fake = CapturingClient(response)
        monkeypatch.setattr(httpx, "AsyncClient", fake)
        return fake

    return install


@pytest.mark.asyncio
async def test_without_token_messages_are_only_logged(fake_http):
    fake = fake_http(httpx.Response(500))
    client = WhatsAppClient(api_token="")

    assert await client.send_text("+919876543210", "hello")
    assert await client.mark_read("wamid.1")
    assert await client.fetch_media("m1") is None
    assert fake.requests == []


@pytest.mark.asyncio
async def test_send_buttons_payload(fake_http):
    fake = fake_http(httpx.Response(200, json={"messages": [{"id": "wamid.out"}]}))
    client = WhatsAppClient(api_token="tok", phone_number_id="123", base_url="https://graph.test/v21.0")

    ok = await client.send_buttons("+919876543210", "Pick", [Button("a", "Alpha"), Button("b", "Beta")])

    assert ok
    [request] = fake.requests
    assert str(request.url) == "https://graph.test/v21.0/123/messages"
    assert request.headers["Authorization"] == "Bearer tok"
    payload = json.loads(request.content)
    assert payload["to"] == "919876543210"
    assert payload["interactive"]["type"] == "button"
    assert [b["reply"]["id"] for b in payload["interactive"]["action"]["buttons"]] == ["a", "b"]


@pytest.mark.asyncio
async def test_send_list_omits_empty_descriptions(fake_http):
    fake = fake_http(httpx.Response(200, json={}))
    client = WhatsAppClient(api_token="tok", phone_number_id="123")

    await client.send_list(
        "+919876543210",
        "Choose",
        "Open",
        [ListSection("S", [ListRow("r1", "One"), ListRow("r2", "Two", "second")])],
    )
    rows = json.loads(fake.requests[0].content)["interactive"]["action"]["sections"][0]["rows"]
    assert rows == [{"id": "r1", "title": "One"}, {"id": "r2", "title": "Two", "description": "second"}]


@pytest.mark.asyncio
async def test_api_error_status_returns_false(fake_http):
    fake_http(httpx.Response(400, json={"error": {"message": "bad"}}))
    client = WhatsAppClient(api_token="tok", phone_number_id="123")
    assert not await client.send_text("+919876543210", "hello")


@pytest.mark.asyncio
async def test_network_error_returns_false(fake_http):
    fake_http(httpx.ConnectError("unreachable"))
    client = WhatsAppClient(api_token="tok", phone_number_id="123")
    assert not await client.send_text("+919876543210", "hello")
    assert await client.fetch_media("m1") is None
