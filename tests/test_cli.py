"""CLI tests against an in-process app."""

import httpx
import pytest
from typer.testing import CliRunner

from api.main import create_app
from cli.main import _poll, _send, app
from webhook_speaker.config import AppConfig
from webhook_speaker.store import MemoryNotificationStore

URL = "http://speaker.test/webhook"

runner = CliRunner()


@pytest.fixture
def store():
    return MemoryNotificationStore()


@pytest.fixture
def transport(store):
    return httpx.ASGITransport(app=create_app(AppConfig(), store=store))


def test_events_command():
    r = runner.invoke(app, ["events"])
    assert r.exit_code == 0
    assert "cash-register.mp3" in r.output
    assert "doorbell" in r.output


@pytest.mark.asyncio
async def test_send_samples(transport, store):
    failed = await _send(URL, "test-key", transport=transport)
    assert failed == 0
    # the trailing poll drained everything
    assert len(store) == 0


@pytest.mark.asyncio
async def test_send_reports_failures():
    transport = httpx.MockTransport(lambda req: httpx.Response(500, json={"error": "Internal server error"}))
    assert await _send(URL, "test-key", transport=transport) == 5


@pytest.mark.asyncio
async def test_poll(transport, store):
    async with httpx.AsyncClient(transport=transport) as client:
        await client.post(URL, json={"event_type": "doorbell"})
    assert len(store) == 1
    assert await _poll(URL, "k", transport=transport)
    assert len(store) == 0
    assert await _poll(URL, "k", transport=transport)


@pytest.mark.asyncio
async def test_poll_rejected():
    transport = httpx.MockTransport(lambda req: httpx.Response(401, json={"error": "Speaker key required"}))
    assert not await _poll(URL, "", transport=transport)
