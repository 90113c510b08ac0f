"""
WAHA Webhook Receiver Tests

Gateway events -> session handle -> lifecycle signals.
"""

import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from api.deps import get_bootstrap
from infra import RelayBootstrap
from main import app
from transport.whatsapp import StubSessionHandle

HMAC_KEY = "hook-secret"


def status_event(status, session="default", me=None):
    event = {
        "id": "evt_01",
        "timestamp": 1707500000000,
        "event": "session.status",
        "session": session,
        "payload": {"status": status},
        "engine": "WEBJS",
    }
    if me:
        event["me"] = me
    return event


def post_signed(client, event=None, content=None, key=HMAC_KEY):
    """POST to the webhook with the headers WAHA adds when an HMAC key is set."""
    body = content if content is not None else json.dumps(event).encode()
    signature = hmac.new(key.encode(), body, hashlib.sha512).hexdigest()
    return client.post(
        "/webhook/waha",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-Webhook-Hmac": signature,
            "X-Webhook-Hmac-Algorithm": "sha512",
        },
    )


@pytest.fixture
def webhook_relay(config_factory):
    session = StubSessionHandle(ready=False)
    relay = RelayBootstrap(
        config=config_factory(waha_webhook_hmac_key=HMAC_KEY),
        session=session,
    )
    app.dependency_overrides[get_bootstrap] = lambda: relay
    yield relay
    app.dependency_overrides.clear()


@pytest.fixture
def webhook_client(webhook_relay):
    return TestClient(app)


class TestSessionStatusEvents:

    def test_working_event_makes_session_ready(self, webhook_client, webhook_relay):
        response = post_signed(
            webhook_client,
            status_event("WORKING", me={"id": "6281100000000@c.us", "pushName": "Admin"}),
        )

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert webhook_relay.lifecycle.is_ready()
        assert webhook_relay.session.identity.push_name == "Admin"

    def test_failed_event_triggers_reconnect(self, webhook_client, webhook_relay):
        response = post_signed(webhook_client, status_event("FAILED"))

        assert response.status_code == 200
        assert webhook_relay.lifecycle.reconnect_attempts == 1
        assert webhook_relay.session.initialize_calls == 1

    def test_qr_event_sets_pairing_token(self, webhook_client, webhook_relay):
        webhook_relay.session.pairing_token = "2@from-gateway"

        post_signed(webhook_client, status_event("SCAN_QR_CODE"))

        assert webhook_relay.lifecycle.pairing_token == "2@from-gateway"

    def test_other_session_is_ignored(self, webhook_client, webhook_relay):
        response = post_signed(webhook_client, status_event("FAILED", session="other"))

        assert response.status_code == 200
        assert webhook_relay.lifecycle.reconnect_attempts == 0

    def test_non_status_event_is_acknowledged(self, webhook_client, webhook_relay):
        response = post_signed(
            webhook_client,
            {"event": "message", "session": "default", "payload": {"body": "hi"}},
        )

        assert response.status_code == 200
        assert webhook_relay.session.status == "STOPPED"

    def test_invalid_json_returns_422(self, webhook_client):
        response = post_signed(webhook_client, content=b"not json")
        assert response.status_code == 422

    def test_missing_event_fields_returns_422(self, webhook_client):
        response = post_signed(webhook_client, {"payload": {}})
        assert response.status_code == 422


class TestSignature:

    def test_unsigned_event_rejected(self, webhook_client, webhook_relay):
        response = webhook_client.post("/webhook/waha", json=status_event("FAILED"))

        assert response.status_code == 401
        assert webhook_relay.lifecycle.reconnect_attempts == 0

    def test_bad_signature_rejected(self, webhook_client, webhook_relay):
        response = webhook_client.post(
            "/webhook/waha",
            json=status_event("FAILED"),
            headers={"X-Webhook-Hmac": "deadbeef"},
        )

        assert response.status_code == 403
        assert webhook_relay.lifecycle.reconnect_attempts == 0

    def test_wrong_key_rejected(self, webhook_client, webhook_relay):
        response = post_signed(webhook_client, status_event("FAILED"), key="other-secret")

        assert response.status_code == 403


class TestWithoutKey:

    @pytest.fixture
    def open_relay(self, config_factory):
        session = StubSessionHandle(ready=False)
        relay = RelayBootstrap(config=config_factory(), session=session)
        app.dependency_overrides[get_bootstrap] = lambda: relay
        yield relay
        app.dependency_overrides.clear()

    def test_stopped_event_cannot_force_restart(self, open_relay):
        response = TestClient(app).post("/webhook/waha", json=status_event("STOPPED"))

        assert response.status_code == 403
        assert open_relay.lifecycle.reconnect_attempts == 0
        assert open_relay.session.initialize_calls == 0

    def test_working_event_cannot_mark_ready(self, open_relay):
        response = TestClient(app).post(
            "/webhook/waha",
            json=status_event("WORKING", me={"id": "6289999999999@c.us"}),
        )

        assert response.status_code == 403
        assert not open_relay.lifecycle.is_ready()
