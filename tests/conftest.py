"""Pytest configuration and fixtures."""

import json

import pytest

from cointrade.exchanges.transport import HttpResponse


class StubSender:
    """HttpSender that records requests and replays queued responses."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue_json(self, payload, status=200):
        self.responses.append(HttpResponse(status, {"Content-Type": "application/json"}, json.dumps(payload).encode()))
        return self

    def queue_raw(self, body, status=200):
        self.responses.append(HttpResponse(status, {}, body))
        return self

    def queue_error(self, exc):
        self.responses.append(exc)
        return self

    async def send(self, method, url, headers, body, content_type):
        self.calls.append({
            "method": method,
            "url": url,
            "headers": dict(headers),
            "body": body,
            "content_type": content_type,
        })
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def stub_sender():
    """Recording stub transport."""
    return StubSender()


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_secret"


@pytest.fixture
def token_secret():
    """Secret long enough for HS512 tokens."""
    return "0123456789abcdef" * 4


@pytest.fixture
def passphrase():
    """Test passphrase."""
    return "test_passphrase_345678"


@pytest.fixture
def fixed_clock():
    """Clock pinned to a known millisecond timestamp."""
    return lambda: 1622547800000
