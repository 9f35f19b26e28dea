"""
Shared fixtures for fetch_builder tests.
"""
import json
from typing import Callable, List

import httpx
import pytest

from fetch_builder import config as builder_config


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, **response_kwargs):
        self.status_code = status_code
        self.response_kwargs = response_kwargs
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.response_kwargs)


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """Factory for RecordingHandler instances."""
    return RecordingHandler


@pytest.fixture
def make_client():
    """Build an httpx.Client around a MockTransport handler."""
    clients = []

    def _make(handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def make_async_client():
    """Build an httpx.AsyncClient around a MockTransport handler."""

    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def streaming_response():
    """Unread response whose body is only consumed on demand."""

    def _make(status_code: int = 200, payload=None, headers=None) -> httpx.Response:
        body = json.dumps(payload).encode() if payload is not None else b""
        return httpx.Response(
            status_code,
            headers=headers or {},
            stream=httpx.ByteStream(body),
            request=httpx.Request("GET", "https://api.example.com/items"),
        )

    return _make


@pytest.fixture(autouse=True)
def reset_default_doers():
    """Keep process-wide defaults from leaking between tests."""
    builder_config.set_default_doer(None)
    builder_config.set_default_async_doer(None)
    yield
    builder_config.close_default_doers()


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    monkeypatch.delenv(builder_config.DEBUG_ENV_VAR, raising=False)
