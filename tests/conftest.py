"""Shared fixtures: canned Google responses served through httpx.MockTransport."""

import httpx
import pytest

from maps_agent.config import settings


API_KEY = "test-key"


class RecordingHandler:
    """
    MockTransport handler replaying queued responses in order.

    Each queued item is an httpx.Response, or a callable taking the request
    (useful for raising transport errors). Every request is recorded.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if callable(response):
            return response(request)
        return response


def connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def recorder():
    """Factory returning (handler, transport) for a queue of responses."""
    def _make(*responses):
        handler = RecordingHandler(*responses)
        return handler, httpx.MockTransport(handler)
    return _make


@pytest.fixture(autouse=True)
def no_env_api_key(monkeypatch):
    """Keep a developer's GOOGLE_MAPS_API_KEY out of the tests."""
    monkeypatch.setattr(settings, "google_maps_api_key", None)
