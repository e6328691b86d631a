"""Bithumb exchange facade."""

from __future__ import annotations

from .signing import HashedTokenSigner, Signer
from .upbit import UpbitExchange


class BithumbExchange(UpbitExchange):
    """Bithumb v1 REST API.

    Shares Upbit's wire format and token scheme; the token additionally
    carries a millisecond ``timestamp`` claim.
    """

    name = "Bithumb"
    default_base_url = "https://api.bithumb.com"
    order_book_params = {}

    def create_signer(self) -> Signer:
        return HashedTokenSigner(include_timestamp=True)
