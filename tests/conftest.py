"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Config is read at import time; keep tests off any real gateway
os.environ.setdefault("SENDER_WHATSAPP_NUMBER", "6281100000000")
os.environ.setdefault("WHATSAPP_BACKEND", "stub")
os.environ.setdefault("SESSION_POLL_INTERVAL", "0")

from infra import RelayBootstrap, RelayConfig  # noqa: E402
from transport.whatsapp import StubSessionHandle  # noqa: E402

ADMIN_A = "6281111111111@c.us"
ADMIN_B = "6282222222222@c.us"


def make_config(**overrides) -> RelayConfig:
    """RelayConfig with stub defaults; keyword arguments override fields."""
    values = dict(
        recipients=(ADMIN_A, ADMIN_B),
        sender_number="6281100000000",
        whatsapp_backend="stub",
        waha_base_url="http://waha.test",
        waha_session="default",
        waha_api_key=None,
        waha_timeout=5.0,
        waha_webhook_hmac_key=None,
        session_poll_interval=0.0,
    )
    values.update(overrides)
    return RelayConfig(**values)


@pytest.fixture
def config_factory():
    """Factory fixture around make_config."""
    return make_config


@pytest.fixture
def ticket_payload():
    """The reference ticket posted by the ticket backend."""
    return {
        "ticketId": "T-1001",
        "subject": "Login issue",
        "name": "Jane Doe",
        "email": "jane@example.com",
        "type": "Bug",
        "priority": "High",
        "description": "Cannot log in",
        "createdAt": "2024-01-01T10:00:00Z",
        "uploadedFiles": [
            {"name": "screenshot.png", "url": "https://files.example.com/a.png"},
        ],
        "adminDashboardLink": "https://admin.example.com/tickets/T-1001",
    }


@pytest.fixture
def stub_session():
    return StubSessionHandle()


@pytest.fixture
def relay(stub_session):
    """Bootstrap wired to the stub session and two admin recipients."""
    return RelayBootstrap(config=make_config(), session=stub_session)


@pytest.fixture
def client(relay):
    """TestClient whose requests resolve to the `relay` fixture."""
    from fastapi.testclient import TestClient

    from api.deps import get_bootstrap
    from main import app

    app.dependency_overrides[get_bootstrap] = lambda: relay
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
