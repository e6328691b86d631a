"""Symbol codecs and helpers for normalizing provider responses."""

from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Iterable, Sequence

from ..errors import MalformedResponse
from .protocol import OrderBookLevel

# Quote assets recognised when a native symbol has no separator (BTCUSDT).
QUOTE_ASSETS = (
    "USDT", "USDC", "FDUSD", "BUSD", "TUSD", "DAI",
    "BTC", "ETH", "BNB", "XRP", "TRX", "DOGE",
    "EUR", "GBP", "TRY", "BRL", "JPY", "AUD", "KRW",
)

_ASSET_RE = re.compile(r"[A-Z0-9]+")


def split_symbol(symbol: str) -> tuple[str, str]:
    """Split a canonical ``BASE/QUOTE`` symbol.

    Raises:
        ValueError: If the symbol is not exactly two alphanumeric assets
    """
    parts = symbol.split("/")
    if len(parts) != 2 or not all(_ASSET_RE.fullmatch(p) for p in parts):
        raise ValueError(f"Invalid symbol '{symbol}', expected BASE/QUOTE")
    return parts[0], parts[1]


class SymbolCodec:
    """Translate between canonical ``BASE/QUOTE`` and a provider's native form.

    ``encode`` maps canonical to native and ``parse`` maps native to canonical.
    For every valid input the two are exact inverses.

    Args:
        separator: Native separator, "" when assets are concatenated
        quote_first: Native form puts the quote asset first (KRW-BTC)
        quote_assets: Suffixes used to split concatenated symbols
    """

    def __init__(
        self,
        separator: str = "",
        *,
        quote_first: bool = False,
        quote_assets: Iterable[str] = QUOTE_ASSETS,
    ):
        self.separator = separator
        self.quote_first = quote_first
        self.quote_assets = tuple(sorted(quote_assets, key=len, reverse=True))

    def encode(self, symbol: str) -> str:
        base, quote = split_symbol(symbol)
        first, second = (quote, base) if self.quote_first else (base, quote)
        return f"{first}{self.separator}{second}"

    def parse(self, native: str) -> str:
        if self.separator:
            parts = native.split(self.separator)
            if len(parts) != 2:
                raise ValueError(f"Invalid native symbol '{native}'")
            first, second = parts
        else:
            first, second = self._split_concatenated(native)
        base, quote = (second, first) if self.quote_first else (first, second)
        canonical = f"{base}/{quote}"
        split_symbol(canonical)
        return canonical

    def _split_concatenated(self, native: str) -> tuple[str, str]:
        for quote in self.quote_assets:
            if self.quote_first:
                if native.startswith(quote) and len(native) > len(quote):
                    return quote, native[len(quote):]
            elif native.endswith(quote) and len(native) > len(quote):
                return native[: -len(quote)], quote
        raise ValueError(f"Cannot determine quote asset of '{native}'")


def decode_json(body: bytes | str) -> Any:
    """Decode a JSON body keeping every JSON number's literal digits."""
    try:
        return json.loads(body, parse_float=Decimal)
    except ValueError as exc:
        raise MalformedResponse(f"Response is not valid JSON: {exc}") from exc


def format_path(path: Sequence[str | int]) -> str:
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else part
    return out or "<root>"


def get_field(payload: Any, *path: str | int) -> Any:
    """Walk ``payload`` along ``path`` (keys and list indexes).

    Raises:
        MalformedResponse: With the offending path if a step is missing
    """
    current = payload
    for depth, part in enumerate(path):
        try:
            if isinstance(part, int):
                if not isinstance(current, list):
                    raise TypeError
                current = current[part]
            else:
                if not isinstance(current, dict):
                    raise TypeError
                current = current[part]
        except (KeyError, IndexError, TypeError):
            raise MalformedResponse(
                "Missing or invalid field", format_path(path[: depth + 1])
            ) from None
    return current


def get_list(payload: Any, *path: str | int) -> list[Any]:
    value = get_field(payload, *path)
    if not isinstance(value, list):
        raise MalformedResponse("Expected a list", format_path(path))
    return value


def get_str(payload: Any, *path: str | int) -> str:
    value = get_field(payload, *path)
    if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
        raise MalformedResponse("Expected a string", format_path(path))
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def decimal_str(value: Any, field: str) -> str:
    """Return a numeric wire value as an exact decimal string.

    Strings pass through untouched; JSON numbers (decoded as Decimal or int)
    are written in positional notation without dropping trailing zeros,
    so 0.00000045 stays "0.00000045" rather than "4.5E-7".
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise MalformedResponse("Expected a numeric value", field)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def price_str(payload: Any, *path: str | int) -> str:
    """Like decimal_str, but an absent or null price normalizes to "0".

    Only the final key may be missing; a container of the wrong shape on the
    way to it raises MalformedResponse.
    """
    parent = get_field(payload, *path[:-1])
    key = path[-1]
    if isinstance(key, str) and isinstance(parent, dict) and key not in parent:
        return "0"
    value = get_field(payload, *path)
    if value is None:
        return "0"
    return decimal_str(value, format_path(path))


def pair_levels(
    asks: Sequence[Any],
    bids: Sequence[Any],
    asks_path: str = "asks",
    bids_path: str = "bids",
) -> tuple[OrderBookLevel, ...]:
    """Pair ``[price, size, ...]`` entries by index, truncating to the shorter side."""
    levels = []
    for i, (ask, bid) in enumerate(zip(asks, bids)):
        levels.append(
            OrderBookLevel(
                ask_price=decimal_str(_entry(ask, 0, f"{asks_path}[{i}]"), f"{asks_path}[{i}][0]"),
                ask_size=decimal_str(_entry(ask, 1, f"{asks_path}[{i}]"), f"{asks_path}[{i}][1]"),
                bid_price=decimal_str(_entry(bid, 0, f"{bids_path}[{i}]"), f"{bids_path}[{i}][0]"),
                bid_size=decimal_str(_entry(bid, 1, f"{bids_path}[{i}]"), f"{bids_path}[{i}][1]"),
            )
        )
    return tuple(levels)


def _entry(level: Any, index: int, field: str) -> Any:
    if not isinstance(level, (list, tuple)) or len(level) <= index:
        raise MalformedResponse("Expected a [price, size] entry", field)
    return level[index]


def optional_str(payload: Any, key: str) -> str | None:
    """String form of ``payload[key]``, or None when absent or null."""
    if not isinstance(payload, dict):
        return None
    value = payload.get(key)
    if value is None:
        return None
    return decimal_str(value, key)


def parse_native_symbol(codec: SymbolCodec, native: str, field: str = "market") -> str:
    """Canonical form of a symbol taken from a provider response."""
    try:
        return codec.parse(native)
    except ValueError as exc:
        raise MalformedResponse(str(exc), field) from exc
