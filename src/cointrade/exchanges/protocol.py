"""Domain types and the protocol every exchange facade implements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from ..errors import CredentialError


@dataclass(frozen=True, slots=True)
class Credentials:
    """API key material owned by a single facade."""

    api_key: str
    secret: str = field(repr=False)
    passphrase: str | None = field(default=None, repr=False)

    def validate(self, provider: str, requires_passphrase: bool = False) -> None:
        """Raise CredentialError when a required field is empty."""
        if not self.api_key:
            raise CredentialError(f"{provider}: API key cannot be empty")
        if not self.secret:
            raise CredentialError(f"{provider}: Secret cannot be empty")
        if requires_passphrase and not self.passphrase:
            raise CredentialError(f"{provider}: Passphrase cannot be empty")


@dataclass(frozen=True, slots=True)
class OrderBookLevel:
    """One depth level pairing the i-th best ask with the i-th best bid."""

    ask_price: str
    ask_size: str
    bid_price: str
    bid_size: str


@dataclass(frozen=True, slots=True)
class OrderBook:
    exchange: str
    market: str
    levels: tuple[OrderBookLevel, ...]


@dataclass(frozen=True, slots=True)
class Price:
    exchange: str
    symbol: str
    price: str


@dataclass(frozen=True, slots=True)
class CoinList:
    exchange: str
    symbols: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Order:
    """Order as acknowledged by the exchange.

    Fields the exchange does not echo back are taken from the request or
    left as None. ``raw`` holds the decoded provider payload.
    """

    exchange: str
    order_id: str
    market: str
    side: str | None = None
    order_type: str | None = None
    price: str | None = None
    amount: str | None = None
    state: str | None = None
    raw: Any = field(default=None, repr=False, compare=False)


class Exchange(Protocol):
    """Capability set shared by all exchange facades."""

    def get_name(self) -> str:
        """Display name of the exchange (e.g. 'Binance')."""
        ...

    async def place_order(self, request: Any) -> Order:
        """Place an order.

        Args:
            request: PlaceOrderRequest or a mapping with ``symbol`` (BASE/QUOTE),
                ``side``, ``order_type``, ``price`` and ``amount``

        Returns:
            Order acknowledged by the exchange
        """
        ...

    async def cancel_order(self, request: Any) -> Order:
        """Cancel an order by ``order_id`` (and ``symbol`` where required)."""
        ...

    async def get_order_book(self, request: Any) -> OrderBook:
        """Fetch depth for ``symbol``."""
        ...

    async def get_current_price(self, request: Any) -> Price:
        """Fetch last traded price for ``symbol``."""
        ...

    async def get_coin_list(self) -> CoinList:
        """Fetch every tradable market in BASE/QUOTE form."""
        ...

    async def close(self) -> None:
        """Release transport resources owned by the facade."""
        ...

