"""Base class for exchange facades."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping

from ..errors import ExchangeAPIError, MalformedResponse, RequestValidationError
from .endpoints import Endpoint, EndpointRegistry
from .normalization import SymbolCodec, decode_json
from .protocol import CoinList, Credentials, Order, OrderBook, Price
from .request import JSON_CONTENT_TYPE, RequestDescriptor, build_request, with_query
from .signing import Signer, SigningContext
from .transport import DEFAULT_TIMEOUT, AiohttpSender, HttpSender, ProxyConfig


class BaseExchange(ABC):
    """Shared plumbing for all exchange facades.

    Subclasses declare their endpoint table, symbol codec, body encoding and
    signer, translate request payloads into provider parameters and normalize
    the responses. Network I/O is delegated to the injected HttpSender.
    """

    name: ClassVar[str] = ""
    default_base_url: ClassVar[str] = ""
    endpoint_table: ClassVar[Mapping[str, tuple[str, str]]] = {}
    requires_passphrase: ClassVar[bool] = False
    content_type: ClassVar[str] = JSON_CONTENT_TYPE
    # Methods whose parameters travel in the URL instead of the body.
    query_methods: ClassVar[tuple[str, ...]] = ("GET",)
    codec: ClassVar[SymbolCodec] = SymbolCodec("/")
    sides: ClassVar[Mapping[str, str]] = {}
    order_types: ClassVar[Mapping[str, str]] = {}

    def __init__(
        self,
        api_key: str,
        secret: str,
        *,
        passphrase: str | None = None,
        sender: HttpSender | None = None,
        base_url: str | None = None,
        proxy: ProxyConfig | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        **options: Any,
    ):
        """Initialize exchange facade.

        Args:
            api_key: API key
            secret: API secret
            passphrase: API passphrase (OKX)
            sender: HTTP sender; an AiohttpSender is created when omitted
            base_url: Override of the provider's REST base URL
            proxy: Proxy for the default sender
            timeout: Total request timeout for the default sender, in seconds
            **options: Additional exchange-specific options

        Raises:
            CredentialError: If a required credential is empty
        """
        self.credentials = Credentials(api_key, secret, passphrase)
        self.credentials.validate(self.name, self.requires_passphrase)
        self.endpoints = EndpointRegistry(self.name, self.endpoint_table)
        self.api_url = (base_url or self.default_base_url).rstrip("/")
        self._owns_sender = sender is None
        self.sender: HttpSender = sender or AiohttpSender(timeout=timeout, proxy=proxy)
        self.signer = self.create_signer()
        self.options = options

    @abstractmethod
    def create_signer(self) -> Signer:
        ...

    def get_name(self) -> str:
        return self.name

    def get_base_url(self) -> str:
        return self.api_url

    @abstractmethod
    async def place_order(self, request: Any) -> Order:
        """Place an order."""
        ...

    @abstractmethod
    async def cancel_order(self, request: Any) -> Order:
        """Cancel an open order."""
        ...

    @abstractmethod
    async def get_order_book(self, request: Any) -> OrderBook:
        """Fetch order book depth."""
        ...

    @abstractmethod
    async def get_current_price(self, request: Any) -> Price:
        """Fetch the last traded price."""
        ...

    @abstractmethod
    async def get_coin_list(self) -> CoinList:
        """Fetch tradable markets."""
        ...

    def encode_symbol(self, symbol: str) -> str:
        try:
            return self.codec.encode(symbol)
        except ValueError as exc:
            raise RequestValidationError(f"{self.name}: {exc}") from exc

    def translate_side(self, side: str) -> str:
        return self.sides.get(side.lower(), side)

    def translate_order_type(self, order_type: str) -> str:
        return self.order_types.get(order_type.lower(), order_type)

    def require_symbol(self, symbol: str | None, operation: str) -> str:
        if not symbol:
            raise RequestValidationError(f"{self.name} requires symbol to {operation}")
        return symbol

    def prepare_signed_params(self, params: dict[str, str]) -> dict[str, str]:
        """Hook for parameters every signed request carries (timestamps)."""
        return params

    def build_public_request(self, operation: str, params: Mapping[str, str] | None = None) -> RequestDescriptor:
        endpoint = self.endpoints.lookup(operation)
        return build_request(
            endpoint.method,
            with_query(self._url(endpoint), params),
            {"Accept": "application/json"},
        )

    def build_signed_request(self, operation: str, params: Mapping[str, str]) -> RequestDescriptor:
        endpoint = self.endpoints.lookup(operation)
        # Canonical order first so a form body matches the signed string byte for byte.
        params = dict(sorted(self.prepare_signed_params(dict(params)).items()))
        artifact = self.signer.sign(
            params,
            self.credentials,
            SigningContext(method=endpoint.method, path=endpoint.path),
        )
        params.update(artifact.params)
        headers = {"Accept": "application/json", **artifact.headers}

        if endpoint.method in self.query_methods:
            return build_request(endpoint.method, with_query(self._url(endpoint), params), headers)
        return build_request(
            endpoint.method,
            self._url(endpoint),
            headers,
            params,
            self.content_type,
        )

    async def public_call(self, operation: str, params: Mapping[str, str] | None = None) -> Any:
        return await self.execute(self.build_public_request(operation, params))

    async def signed_call(self, operation: str, params: Mapping[str, str]) -> Any:
        return await self.execute(self.build_signed_request(operation, params))

    async def execute(self, request: RequestDescriptor) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            TransportError: Propagated from the sender
            ExchangeAPIError: If the exchange answered with an error
            MalformedResponse: If a successful response is not JSON
        """
        response = await self.sender.send(
            request.method,
            request.url,
            request.headers,
            request.body,
            request.content_type,
        )

        if response.status >= 400:
            try:
                payload = decode_json(response.body)
            except MalformedResponse:
                payload = response.body.decode(errors="replace")
            raise ExchangeAPIError(
                self.name, response.status, self.error_message(payload), payload
            )

        payload = decode_json(response.body)
        self.check_payload(payload)
        return payload

    def error_message(self, payload: Any) -> str:
        return str(payload)[:200]

    def check_payload(self, payload: Any) -> None:
        """Hook for providers that report errors inside a 2xx response."""

    def _url(self, endpoint: Endpoint) -> str:
        return f"{self.api_url}{endpoint.path}"

    async def close(self) -> None:
        """Close the default sender if this facade created it."""
        if self._owns_sender:
            close = getattr(self.sender, "close", None)
            if close is not None:
                await close()

    async def __aenter__(self) -> "BaseExchange":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
