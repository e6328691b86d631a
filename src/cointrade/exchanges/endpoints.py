"""Per-provider endpoint tables."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..errors import EndpointNotFound

MAKE_ORDER = "make_order"
CANCEL_ORDER = "cancel_order"
ORDER_BOOK = "order_book"
CURRENT_PRICE = "current_price"
COIN_LIST = "coin_list"


@dataclass(frozen=True, slots=True)
class Endpoint:
    method: str
    path: str


class EndpointRegistry:
    """Read-only mapping from operation name to Endpoint."""

    def __init__(self, provider: str, table: Mapping[str, tuple[str, str] | Endpoint]):
        self.provider = provider
        self._table = MappingProxyType({
            name: entry if isinstance(entry, Endpoint) else Endpoint(*entry)
            for name, entry in table.items()
        })

    def lookup(self, operation: str) -> Endpoint:
        try:
            return self._table[operation]
        except KeyError:
            raise EndpointNotFound(self.provider, operation) from None

    def operations(self) -> list[str]:
        return sorted(self._table)

    def __contains__(self, operation: object) -> bool:
        return operation in self._table

    def __len__(self) -> int:
        return len(self._table)
