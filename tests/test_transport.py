"""Tests for the aiohttp sender."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from cointrade.errors import TransportError, TransportTimeout
from cointrade.exchanges.transport import AiohttpSender, HttpResponse, ProxyConfig


def create_async_response(status=200, body=b"{}", headers=None):
    """Create a mock aiohttp response usable as an async context manager."""
    resp = AsyncMock()
    resp.status = status
    resp.headers = headers or {"Content-Type": "application/json"}
    resp.read = AsyncMock(return_value=body)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


@pytest.fixture
def sender():
    sender = AiohttpSender(timeout=5.0)
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    sender.session = session
    return sender


class TestAiohttpSender:
    """Tests for AiohttpSender."""

    @pytest.mark.asyncio
    async def test_send(self, sender):
        sender.session.request = MagicMock(return_value=create_async_response(body=b'{"price": "1"}'))

        response = await sender.send(
            "POST",
            "https://api.binance.com/api/v3/order",
            {"X-MBX-APIKEY": "key"},
            b"a=1",
            "application/x-www-form-urlencoded",
        )

        assert response == HttpResponse(200, {"Content-Type": "application/json"}, b'{"price": "1"}')
        args, kwargs = sender.session.request.call_args
        assert args == ("POST", "https://api.binance.com/api/v3/order")
        assert kwargs["data"] == b"a=1"
        assert kwargs["headers"]["X-MBX-APIKEY"] == "key"
        assert kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
        assert kwargs["proxy"] is None

    @pytest.mark.asyncio
    async def test_error_status_is_returned(self, sender):
        sender.session.request = MagicMock(return_value=create_async_response(status=429, body=b"slow down"))

        response = await sender.send("GET", "https://x", {}, None, None)

        assert response.status == 429
        assert response.body == b"slow down"

    @pytest.mark.asyncio
    async def test_timeout(self, sender):
        sender.session.request = MagicMock(side_effect=asyncio.TimeoutError())

        with pytest.raises(TransportTimeout):
            await sender.send("GET", "https://x", {}, None, None)

    @pytest.mark.asyncio
    async def test_client_error(self, sender):
        sender.session.request = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(TransportError) as exc_info:
            await sender.send("GET", "https://x", {}, None, None)

        assert not isinstance(exc_info.value, TransportTimeout)

    @pytest.mark.asyncio
    async def test_proxy_is_passed(self, sender):
        sender.proxy = ProxyConfig(url="http://proxy:8080", username="u", password="p")
        sender.session.request = MagicMock(return_value=create_async_response())

        await sender.send("GET", "https://x", {}, None, None)

        assert sender.session.request.call_args.kwargs["proxy"] == "http://u:p@proxy:8080"

    @pytest.mark.asyncio
    async def test_close(self, sender):
        session = sender.session

        await sender.close()

        session.close.assert_awaited_once()
        assert sender.session is None


class TestProxyConfig:
    """Tests for ProxyConfig."""

    def test_no_url(self):
        assert ProxyConfig().proxy_url is None

    def test_without_auth(self):
        assert ProxyConfig(url="http://proxy:8080").proxy_url == "http://proxy:8080"

    def test_scheme_defaults_to_http(self):
        assert ProxyConfig(url="proxy:8080", username="u", password="p").proxy_url == "http://u:p@proxy:8080"
