from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exchanges.base import BaseExchange
from .exchanges.init import create_exchanges_from_settings
from .exchanges.transport import AiohttpSender, HttpSender, ProxyConfig

if TYPE_CHECKING:
    from .settings import Settings


@dataclass(slots=True)
class AppContainer:
    settings: "Settings"
    sender: HttpSender
    exchanges: dict[str, BaseExchange] = field(default_factory=dict)

    def get_exchange(self, name: str) -> BaseExchange:
        try:
            return self.exchanges[name.lower()]
        except KeyError:
            configured = ", ".join(sorted(self.exchanges)) or "none"
            raise KeyError(f"Exchange '{name}' not configured (configured: {configured})") from None

    async def close(self) -> None:
        close = getattr(self.sender, "close", None)
        if close is not None:
            await close()


def build_sender(settings: "Settings") -> AiohttpSender:
    """One aiohttp sender shared by every facade in the container."""
    proxy = settings.transport.proxy
    proxy_config = ProxyConfig(**proxy.as_dict()) if proxy.enabled else None
    return AiohttpSender(timeout=settings.transport.timeout, proxy=proxy_config)


def build_container(settings: "Settings", sender: HttpSender | None = None) -> AppContainer:
    """Build the container with facades for all configured exchanges."""
    sender = sender or build_sender(settings)
    exchanges = {
        name.lower(): exchange
        for name, exchange in create_exchanges_from_settings(settings, sender=sender).items()
    }
    return AppContainer(settings=settings, sender=sender, exchanges=exchanges)
