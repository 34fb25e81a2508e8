"""Tests for the WhatsApp sender and booking notifications."""

import json

import pytest
import requests

from models import AuditLog
from utils.messaging import send_text


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


@pytest.fixture
def live_whatsapp(app):
    app.config.update(
        WHATSAPP_TEST_MODE=False,
        WHATSAPP_API_KEY="token-123",
        WHATSAPP_PHONE_NUMBER_ID="5550001",
        WHATSAPP_API_BASE="https://graph.example.test/v20.0/",
    )
    return app


def _notify_metadata():
    row = AuditLog.query.filter_by(action="BOOKING_NOTIFY").one()
    return json.loads(row.metadata_json)


def test_send_text_posts_to_graph_api(live_whatsapp, monkeypatch):
    calls = []

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        return FakeResponse()

    monkeypatch.setattr(requests, "post", fake_post)

    assert send_text("+447700900000", "Hello") == (True, None)
    assert len(calls) == 1
    call = calls[0]
    assert call["url"] == "https://graph.example.test/v20.0/5550001/messages"
    assert call["headers"]["Authorization"] == "Bearer token-123"
    assert call["json"] == {
        "messaging_product": "whatsapp",
        "to": "+447700900000",
        "type": "text",
        "text": {"body": "Hello"},
    }


def test_send_text_reports_http_errors(live_whatsapp, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(401))

    ok, error = send_text("+447700900000", "Hello")
    assert ok is False
    assert "401" in error


def test_send_text_stub_does_not_call_api(app, monkeypatch):
    def fail_post(*args, **kwargs):
        raise AssertionError("requests.post should not be called")

    monkeypatch.setattr(requests, "post", fail_post)
    assert send_text("+447700900000", "Hello") == (True, None)
    assert send_text("", "Hello") == (False, "No recipient")


def test_booking_succeeds_when_send_fails(client, live_whatsapp, make_client, monkeypatch):
    def broken_post(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "post", broken_post)
    alice = make_client(phone="+447700900000")

    resp = client.post("/bookings", json={"client_id": alice.id, "date": "2024-06-10", "start": "09:00"})
    assert resp.status_code == 201

    metadata = _notify_metadata()
    assert metadata["sent"] is False
    assert "connection refused" in metadata["error"]


def test_booking_notification_sent(client, live_whatsapp, make_client, monkeypatch):
    sent = []
    monkeypatch.setattr(requests, "post", lambda url, **kw: sent.append(kw["json"]) or FakeResponse())
    alice = make_client(phone="+447700900000")

    resp = client.post("/bookings", json={"client_id": alice.id, "date": "2024-06-10", "start": "09:00"})
    assert resp.status_code == 201
    assert sent[0]["to"] == "+447700900000"
    assert "09:00" in sent[0]["text"]["body"]
    assert _notify_metadata() == {"sent": True, "error": None}
