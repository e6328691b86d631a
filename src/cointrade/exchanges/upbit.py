"""Upbit exchange facade."""

from __future__ import annotations

from typing import Any

from .base import BaseExchange
from .endpoints import CANCEL_ORDER, COIN_LIST, CURRENT_PRICE, MAKE_ORDER, ORDER_BOOK
from .normalization import (
    SymbolCodec,
    decimal_str,
    get_field,
    get_list,
    get_str,
    optional_str,
    parse_native_symbol,
    price_str,
)
from .protocol import CoinList, Order, OrderBook, OrderBookLevel, Price
from .requests import CancelOrderRequest, OrderBookRequest, PlaceOrderRequest, PriceRequest
from .signing import HashedTokenSigner, Signer

NAME = "Upbit"
UNIT_FIELDS = ("ask_price", "ask_size", "bid_price", "bid_size")


class UpbitExchange(BaseExchange):
    """Upbit REST API, authenticated with a JWT bearer token.

    Markets are quote-first (``KRW-BTC``). DELETE parameters travel in the
    query string, POST parameters as a JSON body.
    """

    name = NAME
    default_base_url = "https://api.upbit.com"
    endpoint_table = {
        MAKE_ORDER: ("POST", "/v1/orders"),
        CANCEL_ORDER: ("DELETE", "/v1/order"),
        ORDER_BOOK: ("GET", "/v1/orderbook"),
        CURRENT_PRICE: ("GET", "/v1/ticker"),
        COIN_LIST: ("GET", "/v1/market/all"),
    }
    query_methods = ("GET", "DELETE")
    codec = SymbolCodec("-", quote_first=True)
    sides = {"buy": "bid", "sell": "ask"}
    order_types = {"limit": "limit", "market": "market"}
    order_book_params = {"level": "0"}

    def create_signer(self) -> Signer:
        return HashedTokenSigner()

    def error_message(self, payload: Any) -> str:
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]
            return f"{error.get('name')}: {error.get('message')}"
        return super().error_message(payload)

    async def place_order(self, request: Any) -> Order:
        """Place an order.

        A generic market buy becomes ``ord_type=price``: Upbit spends ``price``
        in the quote currency instead of buying a volume.
        """
        req = PlaceOrderRequest.coerce(request)
        side = self.translate_side(req.side)
        ord_type = self.translate_order_type(req.order_type)
        if ord_type == "market" and side == "bid":
            ord_type = "price"

        params = {
            "market": self.encode_symbol(req.symbol),
            "side": side,
            "ord_type": ord_type,
        }
        if req.price is not None:
            params["price"] = req.price
        if req.amount is not None:
            params["volume"] = req.amount

        payload = await self.signed_call(MAKE_ORDER, params)
        return parse_order(payload, self.name, self.codec)

    async def cancel_order(self, request: Any) -> Order:
        """Cancel an order by uuid."""
        req = CancelOrderRequest.coerce(request)
        payload = await self.signed_call(CANCEL_ORDER, {"uuid": req.order_id})
        return parse_order(payload, self.name, self.codec)

    async def get_order_book(self, request: Any) -> OrderBook:
        req = OrderBookRequest.coerce(request)
        params = {"markets": self.encode_symbol(req.symbol), **self.order_book_params}
        payload = await self.public_call(ORDER_BOOK, params)
        return parse_order_book(payload, self.name, self.codec, depth=req.depth)

    async def get_current_price(self, request: Any) -> Price:
        req = PriceRequest.coerce(request)
        payload = await self.public_call(CURRENT_PRICE, {"markets": self.encode_symbol(req.symbol)})
        return parse_price(payload, self.name, req.symbol)

    async def get_coin_list(self) -> CoinList:
        payload = await self.public_call(COIN_LIST)
        return parse_coin_list(payload, self.name, self.codec)


def parse_order(payload: Any, exchange: str, codec: SymbolCodec) -> Order:
    """Normalize the order object returned by POST /v1/orders and DELETE /v1/order."""
    market = optional_str(payload, "market")
    return Order(
        exchange=exchange,
        order_id=get_str(payload, "uuid"),
        market=parse_native_symbol(codec, market, "market") if market else "",
        side=optional_str(payload, "side"),
        order_type=optional_str(payload, "ord_type"),
        price=optional_str(payload, "price"),
        amount=optional_str(payload, "volume"),
        state=optional_str(payload, "state"),
        raw=payload,
    )


def parse_order_book(
    payload: Any,
    exchange: str,
    codec: SymbolCodec,
    depth: int | None = None,
) -> OrderBook:
    """Normalize /v1/orderbook.

    Each ``orderbook_units`` entry already pairs one ask with one bid, so the
    units map one-to-one onto levels.
    """
    market = parse_native_symbol(codec, get_str(payload, 0, "market"), "[0].market")
    units = get_list(payload, 0, "orderbook_units")
    if depth:
        units = units[:depth]

    levels = []
    for i in range(len(units)):
        values = {
            name: decimal_str(
                get_field(payload, 0, "orderbook_units", i, name),
                f"[0].orderbook_units[{i}].{name}",
            )
            for name in UNIT_FIELDS
        }
        levels.append(OrderBookLevel(**values))
    return OrderBook(exchange=exchange, market=market, levels=tuple(levels))


def parse_price(payload: Any, exchange: str, symbol: str) -> Price:
    """Normalize /v1/ticker: a one-element list carrying ``trade_price``."""
    return Price(exchange=exchange, symbol=symbol, price=price_str(payload, 0, "trade_price"))


def parse_coin_list(payload: Any, exchange: str, codec: SymbolCodec) -> CoinList:
    symbols = tuple(
        parse_native_symbol(codec, get_str(payload, i, "market"), f"[{i}].market")
        for i in range(len(get_list(payload)))
    )
    return CoinList(exchange=exchange, symbols=symbols)
