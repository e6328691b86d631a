"""HTTP sender capability and its default aiohttp implementation."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Mapping, Protocol

import aiohttp

from ..errors import TransportError, TransportTimeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "cointrade/1.0"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


class HttpSender(Protocol):
    """Executes a request and returns the raw response.

    Implementations raise TransportError on network failure and
    TransportTimeout when the request exceeds its deadline.
    """

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None,
        content_type: str | None,
    ) -> HttpResponse:
        ...


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


class AiohttpSender:
    """HttpSender backed by a lazily created aiohttp.ClientSession."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, proxy: ProxyConfig | None = None):
        self.timeout = timeout
        self.proxy = proxy or ProxyConfig()
        self.session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": USER_AGENT},
            )
        return self.session

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None,
        content_type: str | None,
    ) -> HttpResponse:
        session = await self._ensure_session()
        request_headers = dict(headers)
        if content_type and "Content-Type" not in request_headers:
            request_headers["Content-Type"] = content_type

        started = time.monotonic()
        try:
            async with session.request(
                method,
                url,
                headers=request_headers,
                data=body,
                proxy=self.proxy.proxy_url,
            ) as resp:
                payload = await resp.read()
                status = resp.status
                resp_headers = dict(resp.headers)
        except asyncio.TimeoutError as exc:
            logger.warning("%s %s timed out after %.1fs", method, url.split("?")[0], self.timeout)
            raise TransportTimeout(f"{method} {url} timed out after {self.timeout}s") from exc
        except aiohttp.ClientError as exc:
            logger.warning("%s %s failed: %s", method, url.split("?")[0], exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug(
            "%s %s -> %s (%.0f ms)",
            method,
            url.split("?")[0],
            status,
            (time.monotonic() - started) * 1000,
        )
        return HttpResponse(status=status, headers=resp_headers, body=payload)

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None
