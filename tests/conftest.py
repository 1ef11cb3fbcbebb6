from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

SYSTEM_NUMBER = "+15005550006"


class FakeProvider:
    """In-memory stand-in for the Twilio provider that records every request."""

    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.tokens: list[tuple[str, int]] = []
        self.created_calls: list[dict] = []
        self.updated_calls: list[tuple[str, str]] = []
        self.messages: list[tuple[str, str]] = []

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    async def create_token(self, identity: str, ttl: int) -> str:
        self._maybe_fail()
        self.tokens.append((identity, ttl))
        return f"jwt-for-{identity}"

    async def create_call(self, to_number, *, url, status_callback, status_events):
        from integrations.twilio_client import CallRecord

        self._maybe_fail()
        self.created_calls.append(
            {
                "to": to_number,
                "url": url,
                "status_callback": status_callback,
                "status_events": list(status_events),
            }
        )
        return CallRecord(sid="CA123", status="queued")

    async def update_call(self, call_sid, *, status):
        from integrations.twilio_client import CallRecord

        self._maybe_fail()
        self.updated_calls.append((call_sid, status))
        return CallRecord(sid=call_sid, status=status)

    async def send_message(self, to_number, body):
        from integrations.twilio_client import MessageRecord

        self._maybe_fail()
        self.messages.append((to_number, body))
        return MessageRecord(sid=f"SM{len(self.messages):03d}", status="queued")


@pytest.fixture(scope="session")
def app():
    os.environ["TWILIO_PHONE_NUMBER"] = SYSTEM_NUMBER
    os.environ["TWILIO_TWIML_APP_SID"] = "AP123"
    os.environ.pop("PUBLIC_BASE_URL", None)

    import importlib

    for module_name in [
        "config.settings",
        "integrations.twilio_client",
        "api.dependencies",
        "api.call_routes",
        "api.routes",
        "main",
    ]:
        sys.modules.pop(module_name, None)

    main = importlib.import_module("main")
    return main.app


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def client(app, provider):
    import api.dependencies as deps

    app.dependency_overrides[deps.get_provider] = lambda: provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
