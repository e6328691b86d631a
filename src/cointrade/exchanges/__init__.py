"""Exchange facades and the signing/normalization layer behind them."""

from .protocol import CoinList, Credentials, Exchange, Order, OrderBook, OrderBookLevel, Price
from .canonical import canonicalize
from .normalization import SymbolCodec
from .requests import CancelOrderRequest, OrderBookRequest, PlaceOrderRequest, PriceRequest
from .transport import AiohttpSender, HttpResponse, HttpSender, ProxyConfig
from .base import BaseExchange
from .factory import create_exchange, EXCHANGES

__all__ = [
    "Exchange",
    "Credentials",
    "CoinList",
    "Order",
    "OrderBook",
    "OrderBookLevel",
    "Price",
    "canonicalize",
    "SymbolCodec",
    "PlaceOrderRequest",
    "CancelOrderRequest",
    "OrderBookRequest",
    "PriceRequest",
    "AiohttpSender",
    "HttpResponse",
    "HttpSender",
    "ProxyConfig",
    "BaseExchange",
    "create_exchange",
    "EXCHANGES",
]
