"""OKX exchange facade."""

from __future__ import annotations

from typing import Any

from ..errors import ExchangeAPIError
from .base import BaseExchange
from .endpoints import CANCEL_ORDER, COIN_LIST, CURRENT_PRICE, MAKE_ORDER, ORDER_BOOK
from .normalization import (
    SymbolCodec,
    get_list,
    get_str,
    pair_levels,
    parse_native_symbol,
    price_str,
)
from .protocol import CoinList, Order, OrderBook, Price
from .requests import CancelOrderRequest, OrderBookRequest, PlaceOrderRequest, PriceRequest
from .signing import HmacTimestampedSigner, Signer

NAME = "Okx"
DEFAULT_DEPTH = 30


class OKXExchange(BaseExchange):
    """OKX v5 REST API, signed with timestamped HMAC headers."""

    name = NAME
    default_base_url = "https://www.okx.com"
    endpoint_table = {
        MAKE_ORDER: ("POST", "/api/v5/trade/order"),
        CANCEL_ORDER: ("POST", "/api/v5/trade/cancel-order"),
        ORDER_BOOK: ("GET", "/api/v5/market/books-full"),
        CURRENT_PRICE: ("GET", "/api/v5/market/ticker"),
        COIN_LIST: ("GET", "/api/v5/public/instruments"),
    }
    requires_passphrase = True
    codec = SymbolCodec("-")
    sides = {"buy": "buy", "sell": "sell"}
    order_types = {"limit": "limit", "market": "market"}

    def __init__(self, api_key: str, secret: str, *, passphrase: str | None = None, td_mode: str = "cash", **kwargs: Any):
        super().__init__(api_key, secret, passphrase=passphrase, **kwargs)
        self.td_mode = td_mode

    def create_signer(self) -> Signer:
        return HmacTimestampedSigner()

    def error_message(self, payload: Any) -> str:
        if isinstance(payload, dict) and payload.get("msg"):
            return f"{payload.get('code')}: {payload['msg']}"
        return super().error_message(payload)

    def check_payload(self, payload: Any) -> None:
        """OKX reports failures as HTTP 200 with a non-zero ``code``."""
        if not isinstance(payload, dict):
            return
        code = str(payload.get("code", "0"))
        if code != "0":
            raise ExchangeAPIError(self.name, 200, self.error_message(payload), payload)
        for item in payload.get("data") or []:
            if isinstance(item, dict) and str(item.get("sCode", "0")) != "0":
                raise ExchangeAPIError(
                    self.name, 200, f"{item.get('sCode')}: {item.get('sMsg', '')}", payload
                )

    async def place_order(self, request: Any) -> Order:
        """Place an order."""
        req = PlaceOrderRequest.coerce(request)
        params = {
            "instId": self.encode_symbol(req.symbol),
            "side": self.translate_side(req.side),
            "ordType": self.translate_order_type(req.order_type),
            "tdMode": self.td_mode,
        }
        if req.price is not None:
            params["px"] = req.price
        if req.amount is not None:
            params["sz"] = req.amount

        payload = await self.signed_call(MAKE_ORDER, params)
        return parse_order(
            payload,
            req.symbol,
            side=params["side"],
            order_type=params["ordType"],
            price=req.price,
            amount=req.amount,
        )

    async def cancel_order(self, request: Any) -> Order:
        """Cancel an active order."""
        req = CancelOrderRequest.coerce(request)
        symbol = self.require_symbol(req.symbol, "cancel order")
        params = {
            "instId": self.encode_symbol(symbol),
            "ordId": req.order_id,
        }

        payload = await self.signed_call(CANCEL_ORDER, params)
        return parse_order(payload, symbol)

    async def get_order_book(self, request: Any) -> OrderBook:
        req = OrderBookRequest.coerce(request)
        params = {
            "instId": self.encode_symbol(req.symbol),
            "sz": str(req.depth or DEFAULT_DEPTH),
        }

        payload = await self.public_call(ORDER_BOOK, params)
        return parse_order_book(payload, req.symbol)

    async def get_current_price(self, request: Any) -> Price:
        req = PriceRequest.coerce(request)
        payload = await self.public_call(CURRENT_PRICE, {"instId": self.encode_symbol(req.symbol)})
        return parse_price(payload, req.symbol)

    async def get_coin_list(self) -> CoinList:
        payload = await self.public_call(COIN_LIST, {"instType": "SPOT"})
        return parse_coin_list(payload)


def parse_order_book(payload: Any, symbol: str) -> OrderBook:
    """Normalize books-full: ``data[0].asks`` / ``data[0].bids`` as ``[px, sz, ...]``."""
    return OrderBook(
        exchange=NAME,
        market=symbol,
        levels=pair_levels(
            get_list(payload, "data", 0, "asks"),
            get_list(payload, "data", 0, "bids"),
            asks_path="data[0].asks",
            bids_path="data[0].bids",
        ),
    )


def parse_price(payload: Any, symbol: str) -> Price:
    return Price(exchange=NAME, symbol=symbol, price=price_str(payload, "data", 0, "last"))


def parse_order(
    payload: Any,
    symbol: str,
    *,
    side: str | None = None,
    order_type: str | None = None,
    price: str | None = None,
    amount: str | None = None,
) -> Order:
    """Normalize an order/cancel ack; OKX only echoes ``ordId`` back."""
    return Order(
        exchange=NAME,
        order_id=get_str(payload, "data", 0, "ordId"),
        market=symbol,
        side=side,
        order_type=order_type,
        price=price,
        amount=amount,
        raw=payload,
    )


def parse_coin_list(payload: Any) -> CoinList:
    """Normalize /api/v5/public/instruments, keeping live instruments."""
    symbols = []
    for i, item in enumerate(get_list(payload, "data")):
        if isinstance(item, dict) and item.get("state", "live") != "live":
            continue
        native = get_str(payload, "data", i, "instId")
        symbols.append(parse_native_symbol(OKXExchange.codec, native, f"data[{i}].instId"))
    return CoinList(exchange=NAME, symbols=tuple(symbols))
