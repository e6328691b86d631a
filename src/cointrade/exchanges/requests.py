"""Request models validated at the facade boundary."""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

from ..errors import RequestValidationError
from .normalization import split_symbol

_Model = TypeVar("_Model", bound="FacadeRequest")


def _normalize_symbol(value: str) -> str:
    symbol = value.strip().upper()
    split_symbol(symbol)
    return symbol


Symbol = Annotated[str, AfterValidator(_normalize_symbol)]


class FacadeRequest(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )

    @classmethod
    def coerce(cls: type[_Model], payload: Any) -> _Model:
        """Accept an instance of the model or a loosely-typed mapping."""
        if isinstance(payload, cls):
            return payload
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise RequestValidationError(f"Invalid {cls.__name__}: {exc}") from exc


class PlaceOrderRequest(FacadeRequest):
    """Order to place.

    ``side`` and ``order_type`` accept generic values (buy/sell, limit/market)
    or the provider's own vocabulary, which passes through unchanged.
    """

    symbol: Symbol
    side: str = Field(min_length=1)
    order_type: str = Field(default="limit", min_length=1)
    price: str | None = None
    amount: str | None = None


class CancelOrderRequest(FacadeRequest):
    order_id: str = Field(min_length=1)
    symbol: Symbol | None = None


class OrderBookRequest(FacadeRequest):
    symbol: Symbol
    depth: int | None = Field(default=None, gt=0)


class PriceRequest(FacadeRequest):
    symbol: Symbol
