"""Shared test fixtures: a fake Calendly API and a wired-up plugin."""

import httpx
import pytest

from blockchat.conversation import InMemoryConversationService
from blockchat.plugins import CalendlyAvailabilityBlock

API_TOKEN = "test-token"
USER_URI = "https://api.calendly.com/users/user-123"


class FakeCalendly:
    """Answers Calendly endpoints from canned data and records every request."""

    def __init__(self):
        self.event_types = [
            {"name": "Demo Call", "uri": "U1"},
            {"name": "Intro", "uri": "U2"},
        ]
        self.slots = [
            {"start_time": "2024-12-30T09:00:00Z"},
            {"start_time": "2024-12-30T15:00:00Z"},
            {"start_time": "2024-12-31T10:00:00Z"},
        ]
        # path suffix -> status code, body bytes or exception to raise
        self.failures = {}
        self.requests = []

    def _failure_for(self, path):
        for suffix, failure in self.failures.items():
            if path.endswith(suffix):
                return failure
        return None

    def handler(self, request):
        self.requests.append(request)
        path = request.url.path

        failure = self._failure_for(path)
        if isinstance(failure, Exception):
            raise failure
        if isinstance(failure, int):
            return httpx.Response(failure, json={"message": "error"})
        if isinstance(failure, bytes):
            return httpx.Response(200, content=failure)

        if path.endswith("/event_types"):
            return httpx.Response(200, json={"collection": self.event_types})
        if path.endswith("/event_type_available_times"):
            return httpx.Response(200, json={"collection": self.slots})
        if path.endswith("/users/me"):
            return httpx.Response(200, json={"resource": {"uri": USER_URI}})
        return httpx.Response(404, json={"message": "not found"})

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    @property
    def paths(self):
        return [r.url.path for r in self.requests]


@pytest.fixture
def fake_calendly():
    return FakeCalendly()


@pytest.fixture
def conversations():
    return InMemoryConversationService()


@pytest.fixture
def plugin(fake_calendly, conversations):
    return CalendlyAvailabilityBlock(
        api_token=API_TOKEN,
        conversation_service=conversations,
        transport=fake_calendly.transport,
    )


@pytest.fixture
def block():
    return {
        "name": "check-availability",
        "message": {
            "plugin": "calendly-plugin",
            "args": {
                "event_name": "Demo Call",
                "user_uri": USER_URI,
                "start_time": "2024-12-30T00:00:00Z",
                "end_time": "2025-01-01T00:00:00Z",
            },
        },
    }
