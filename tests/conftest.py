"""
Shared test fixtures for conversation-cli tests.
Patches the config module so no test reads the real .env or hits the network.
"""

import os
import sys

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conversation_cli.models import ServiceConfig, TransportResponse  # noqa: E402

BASE_URL = "https://conv.example.test/api"
VERSION_DATE = "2017-02-03"


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Ensure every test starts with a clean config state."""
    from conversation_cli import config

    monkeypatch.setattr(config, "env", {})
    monkeypatch.setattr(config, "SERVICE_URL", BASE_URL)
    monkeypatch.setattr(config, "USERNAME", "fake-user")
    monkeypatch.setattr(config, "PASSWORD", "fake-pass")
    monkeypatch.setattr(config, "VERSION_DATE", VERSION_DATE)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_MAX_RETRIES", 2)
    monkeypatch.setattr(config, "RUNTIME_QUIET", False)


class FakeTransport:
    """Records every OutboundRequest and replies with queued responses."""

    def __init__(self, *responses):
        self.requests = []
        self.responses = list(responses) or [TransportResponse(200, "OK", {}, b"{}")]

    def __call__(self, request):
        self.requests.append(request)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    @property
    def last(self):
        return self.requests[-1]


def json_response(status=200, body=b"{}", reason="OK", headers=None):
    return TransportResponse(status, reason, headers or {"Content-Type": "application/json"}, body)


@pytest.fixture
def service():
    return ServiceConfig.create(
        version_date=VERSION_DATE, url=BASE_URL, username="user", password="pass"
    )


@pytest.fixture
def transport():
    return FakeTransport()
