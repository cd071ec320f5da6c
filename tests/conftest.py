"""
Shared fixtures and fakes for Passless tests.
"""

import json

import pytest

from passless.core.config import Config


class FakeResponse:
    """Stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status=200, payload=None, text=None):
        self.status = status
        self._payload = payload
        self._text = text

    async def text(self):
        if self._text is not None:
            return self._text
        return json.dumps(self._payload)

    async def json(self, content_type=None):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records requests and replays queued responses per URL."""

    def __init__(self, responses=None):
        self.responses = {url: list(items) for url, items in (responses or {}).items()}
        self.requests = []
        self.closed = False

    def _next(self, url):
        return self.responses[url].pop(0)

    def post(self, url, data=None, headers=None):
        self.requests.append(('POST', url, data, headers))
        return self._next(url)

    def get(self, url, headers=None):
        self.requests.append(('GET', url, None, headers))
        return self._next(url)

    async def close(self):
        self.closed = True


@pytest.fixture
def config():
    """Create a test configuration"""
    return Config.from_dict({
        "google": {
            "client_id": "abc",
            "client_secret": "google-secret",
            "redirect_uri": "http://localhost/cb",
        },
        "yandex": {
            "client_id": "yandex-client",
            "client_secret": "yandex-secret",
            "redirect_uri": "http://localhost/yandex/cb",
        },
        "passkey": {
            "rp_name": "Test App",
            "rp_id": "localhost",
            "origin": "http://localhost:3000",
        },
    })


@pytest.fixture
def fake_response():
    """Factory for canned aiohttp responses"""
    return FakeResponse


@pytest.fixture
def fake_session():
    """Factory for a session replaying ``{url: [response, ...]}``"""
    return FakeSession
