"""Factory for creating exchange facade instances."""

from __future__ import annotations

from typing import Any, Type

from .base import BaseExchange
from .binance import BinanceExchange
from .bithumb import BithumbExchange
from .okx import OKXExchange
from .transport import HttpSender, ProxyConfig
from .upbit import UpbitExchange


EXCHANGES: dict[str, Type[BaseExchange]] = {
    "binance": BinanceExchange,
    "okx": OKXExchange,
    "upbit": UpbitExchange,
    "bithumb": BithumbExchange,
}


def create_exchange(
    exchange: str,
    api_key: str,
    secret: str,
    *,
    passphrase: str | None = None,
    sender: HttpSender | None = None,
    base_url: str | None = None,
    proxy: dict[str, Any] | None = None,
    **options: Any,
) -> BaseExchange:
    """Create an exchange facade.

    Args:
        exchange: Exchange name (binance, okx, upbit, bithumb), case-insensitive
        api_key: API key
        secret: API secret
        passphrase: API passphrase (required for OKX)
        sender: HTTP sender shared by the caller; a private one is created otherwise
        base_url: Override of the REST base URL
        proxy: Proxy configuration (url, username, password) for the default sender
        **options: Additional exchange-specific options (timeout, recv_window_ms, ...)

    Returns:
        Configured exchange facade

    Raises:
        ValueError: If exchange is not supported
        CredentialError: If required credentials are missing
    """
    exchange_lower = exchange.lower()

    if exchange_lower not in EXCHANGES:
        supported = ", ".join(EXCHANGES.keys())
        raise ValueError(
            f"Unsupported exchange: {exchange}. Supported exchanges: {supported}"
        )

    exchange_class = EXCHANGES[exchange_lower]

    proxy_config = None
    if proxy:
        proxy_config = ProxyConfig(
            url=proxy.get("url"),
            username=proxy.get("username"),
            password=proxy.get("password"),
        )

    kwargs: dict[str, Any] = {
        "sender": sender,
        "base_url": base_url,
        "proxy": proxy_config,
    }

    if passphrase is not None:
        kwargs["passphrase"] = passphrase

    kwargs.update(options)

    return exchange_class(api_key, secret, **kwargs)
