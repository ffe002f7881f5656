"""
Pytest configuration and shared fixtures for the Audiobookshelf MCP test suite.

This module provides fixtures for mocking the Audiobookshelf client and the
HTTP layer. No test talks to a real Audiobookshelf server. The src directory
is put on the path by the pytest ``pythonpath`` setting in pyproject.toml.
"""
from typing import Callable, List
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from audiobookshelf.client import AudiobookshelfClient

BASE_URL = "https://abs.example.com"
TOKEN = "env-token"


@pytest.fixture
def abs_env(monkeypatch):
    """Set ABS_BASE_URL and ABS_API_KEY for the test."""
    monkeypatch.setenv("ABS_BASE_URL", BASE_URL)
    monkeypatch.setenv("ABS_API_KEY", TOKEN)


@pytest.fixture
def no_abs_env(monkeypatch):
    """Ensure ABS_BASE_URL and ABS_API_KEY are unset for the test."""
    monkeypatch.delenv("ABS_BASE_URL", raising=False)
    monkeypatch.delenv("ABS_API_KEY", raising=False)


@pytest.fixture
def mock_abs_client():
    """Create a mocked AudiobookshelfClient for testing.

    Returns:
        MagicMock: client whose get/post/request are AsyncMocks returning a JSON body
    """
    client = MagicMock(spec=AudiobookshelfClient)

    client.get = AsyncMock(return_value=b'{"ok":true}')
    client.post = AsyncMock(return_value=b'{"ok":true}')
    client.request = AsyncMock(return_value=b'{"ok":true}')
    client.close = AsyncMock()

    return client


class RecordingTransport:
    """httpx.MockTransport wrapper that records every request.

    Attributes:
        requests: Requests received, in order
        responder: Callable producing the response for a request
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, content=b'{"ok":true}')
        )
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def http_recorder() -> RecordingTransport:
    """Recording mock transport; set .responder to change the reply."""
    return RecordingTransport()


@pytest.fixture
def abs_client(http_recorder) -> AudiobookshelfClient:
    """AudiobookshelfClient wired to the recording mock transport."""
    return AudiobookshelfClient(httpx.AsyncClient(transport=http_recorder.transport))


@pytest.fixture
def sample_library():
    """Sample library payload as returned by GET /api/libraries/:id."""
    return {
        "id": "lib123",
        "name": "Audiobooks",
        "folders": [{"id": "fol1", "fullPath": "/audiobooks", "libraryId": "lib123"}],
        "displayOrder": 1,
        "icon": "database",
        "mediaType": "book",
        "provider": "google",
    }
