"""Binance exchange facade."""

from __future__ import annotations

from typing import Any

from .base import BaseExchange
from .endpoints import CANCEL_ORDER, COIN_LIST, CURRENT_PRICE, MAKE_ORDER, ORDER_BOOK
from .normalization import (
    SymbolCodec,
    get_list,
    get_str,
    optional_str,
    pair_levels,
    price_str,
)
from .protocol import CoinList, Order, OrderBook, Price
from .request import FORM_CONTENT_TYPE
from .requests import CancelOrderRequest, OrderBookRequest, PlaceOrderRequest, PriceRequest
from .signing import HmacQuerySigner, Signer

NAME = "Binance"


class BinanceExchange(BaseExchange):
    """Binance spot REST API, signed with HMAC-SHA256 over the query string."""

    name = NAME
    default_base_url = "https://api.binance.com"
    endpoint_table = {
        MAKE_ORDER: ("POST", "/api/v3/order"),
        CANCEL_ORDER: ("DELETE", "/api/v3/order"),
        ORDER_BOOK: ("GET", "/api/v3/depth"),
        CURRENT_PRICE: ("GET", "/api/v3/ticker/price"),
        COIN_LIST: ("GET", "/api/v3/exchangeInfo"),
    }
    content_type = FORM_CONTENT_TYPE
    codec = SymbolCodec("")
    sides = {"buy": "BUY", "sell": "SELL"}
    order_types = {"limit": "LIMIT", "market": "MARKET"}

    def __init__(self, api_key: str, secret: str, *, recv_window_ms: int | None = None, **kwargs: Any):
        super().__init__(api_key, secret, recv_window_ms=recv_window_ms, **kwargs)
        self.recv_window_ms = recv_window_ms

    def create_signer(self) -> Signer:
        return HmacQuerySigner()

    def prepare_signed_params(self, params: dict[str, str]) -> dict[str, str]:
        params["timestamp"] = str(self.signer.clock())
        if self.recv_window_ms:
            params["recvWindow"] = str(self.recv_window_ms)
        return params

    def error_message(self, payload: Any) -> str:
        if isinstance(payload, dict) and "msg" in payload:
            return f"{payload.get('code')}: {payload['msg']}"
        return super().error_message(payload)

    async def place_order(self, request: Any) -> Order:
        """Place an order."""
        req = PlaceOrderRequest.coerce(request)
        order_type = self.translate_order_type(req.order_type)
        params = {
            "symbol": self.encode_symbol(req.symbol),
            "side": self.translate_side(req.side),
            "type": order_type,
            "newOrderRespType": "RESULT",
        }
        if req.price is not None:
            params["price"] = req.price
        if req.amount is not None:
            params["quantity"] = req.amount
        if order_type == "LIMIT":
            params["timeInForce"] = "GTC"

        payload = await self.signed_call(MAKE_ORDER, params)
        return parse_order(payload, req.symbol)

    async def cancel_order(self, request: Any) -> Order:
        """Cancel an active order."""
        req = CancelOrderRequest.coerce(request)
        symbol = self.require_symbol(req.symbol, "cancel order")
        params = {
            "symbol": self.encode_symbol(symbol),
            "orderId": req.order_id,
        }

        payload = await self.signed_call(CANCEL_ORDER, params)
        return parse_order(payload, symbol)

    async def get_order_book(self, request: Any) -> OrderBook:
        req = OrderBookRequest.coerce(request)
        params = {"symbol": self.encode_symbol(req.symbol)}
        if req.depth:
            params["limit"] = str(req.depth)

        payload = await self.public_call(ORDER_BOOK, params)
        return parse_order_book(payload, req.symbol)

    async def get_current_price(self, request: Any) -> Price:
        req = PriceRequest.coerce(request)
        payload = await self.public_call(CURRENT_PRICE, {"symbol": self.encode_symbol(req.symbol)})
        return parse_price(payload, req.symbol)

    async def get_coin_list(self) -> CoinList:
        payload = await self.public_call(COIN_LIST)
        return parse_coin_list(payload)


def parse_order(payload: Any, symbol: str) -> Order:
    """Normalize an order ack (newOrderRespType=RESULT) or cancel response."""
    return Order(
        exchange=NAME,
        order_id=get_str(payload, "orderId"),
        market=symbol,
        side=optional_str(payload, "side"),
        order_type=optional_str(payload, "type"),
        price=optional_str(payload, "price"),
        amount=optional_str(payload, "origQty"),
        state=optional_str(payload, "status"),
        raw=payload,
    )


def parse_order_book(payload: Any, symbol: str) -> OrderBook:
    """Normalize /api/v3/depth: ``{"bids": [[price, qty]], "asks": [...]}``."""
    return OrderBook(
        exchange=NAME,
        market=symbol,
        levels=pair_levels(get_list(payload, "asks"), get_list(payload, "bids")),
    )


def parse_price(payload: Any, symbol: str) -> Price:
    return Price(exchange=NAME, symbol=symbol, price=price_str(payload, "price"))


def parse_coin_list(payload: Any) -> CoinList:
    """Normalize /api/v3/exchangeInfo, keeping symbols open for trading."""
    symbols = []
    for i, entry in enumerate(get_list(payload, "symbols")):
        if isinstance(entry, dict) and entry.get("status", "TRADING") != "TRADING":
            continue
        base = get_str(payload, "symbols", i, "baseAsset")
        quote = get_str(payload, "symbols", i, "quoteAsset")
        symbols.append(f"{base}/{quote}")
    return CoinList(exchange=NAME, symbols=tuple(symbols))
