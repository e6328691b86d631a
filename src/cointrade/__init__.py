"""cointrade: unified client for cryptocurrency exchange REST APIs."""

from .settings import Settings
from .errors import ExchangeError
from .exchanges import Exchange, create_exchange, canonicalize

__all__ = [
    "Settings",
    "ExchangeError",
    "Exchange",
    "create_exchange",
    "canonicalize",
]
