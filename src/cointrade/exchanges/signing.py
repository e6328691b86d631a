"""Request signers, one variant per authentication discipline."""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import jwt

from ..errors import SigningError
from .canonical import canonicalize
from .protocol import Credentials


def now_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_nonce() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class SigningContext:
    """Request facts some signers include in the signed message."""

    method: str = "GET"
    path: str = ""


@dataclass(frozen=True, slots=True)
class AuthArtifact:
    """Headers and extra parameters that authenticate one request."""

    headers: dict[str, str] = field(default_factory=dict, repr=False)
    params: dict[str, str] = field(default_factory=dict, repr=False)


def _hmac_digest(secret: str, message: str, digestmod: Any) -> bytes:
    try:
        return hmac.new(secret.encode(), message.encode(), digestmod).digest()
    except (TypeError, ValueError) as exc:
        raise SigningError(f"Secret rejected by HMAC: {exc}") from exc


class Signer:
    """Base class for signers.

    Subclasses compute an AuthArtifact from request parameters, credentials and
    a SigningContext. Signers hold no per-call state and are safe to share.
    """

    def __init__(self, clock: Callable[[], int] = now_ms):
        self.clock = clock

    def sign(
        self,
        params: Mapping[str, str],
        credentials: Credentials,
        context: SigningContext | None = None,
    ) -> AuthArtifact:
        raise NotImplementedError


class HmacQuerySigner(Signer):
    """Hex HMAC-SHA256 over the canonical query string (Binance).

    The signature travels as an extra parameter; the API key as a header.
    """

    def __init__(
        self,
        *,
        api_key_header: str = "X-MBX-APIKEY",
        signature_key: str = "signature",
        clock: Callable[[], int] = now_ms,
    ):
        super().__init__(clock)
        self.api_key_header = api_key_header
        self.signature_key = signature_key

    def signature(self, params: Mapping[str, str], secret: str) -> str:
        query_string = canonicalize(params, exclude=(self.signature_key,))
        return _hmac_digest(secret, query_string, hashlib.sha256).hex()

    def sign(
        self,
        params: Mapping[str, str],
        credentials: Credentials,
        context: SigningContext | None = None,
    ) -> AuthArtifact:
        return AuthArtifact(
            headers={self.api_key_header: credentials.api_key},
            params={self.signature_key: self.signature(params, credentials.secret)},
        )


class HmacTimestampedSigner(Signer):
    """Base64 HMAC-SHA256 over timestamp + method + path + query (OKX)."""

    def __init__(self, *, header_prefix: str = "OK-ACCESS-", clock: Callable[[], int] = now_ms):
        super().__init__(clock)
        self.header_prefix = header_prefix

    def signature(
        self,
        params: Mapping[str, str],
        secret: str,
        timestamp: str,
        method: str,
        path: str,
    ) -> str:
        message = f"{timestamp}{method.upper()}{path}?{canonicalize(params)}"
        return base64.b64encode(_hmac_digest(secret, message, hashlib.sha256)).decode()

    def sign(
        self,
        params: Mapping[str, str],
        credentials: Credentials,
        context: SigningContext | None = None,
    ) -> AuthArtifact:
        context = context or SigningContext()
        # Read once: the signed message and the header must carry the same value.
        timestamp = str(self.clock())
        signature = self.signature(
            params, credentials.secret, timestamp, context.method, context.path
        )
        prefix = self.header_prefix
        return AuthArtifact(
            headers={
                f"{prefix}KEY": credentials.api_key,
                f"{prefix}SIGN": signature,
                f"{prefix}TIMESTAMP": timestamp,
                f"{prefix}PASSPHRASE": credentials.passphrase or "",
            }
        )


class HashedTokenSigner(Signer):
    """HS512 JWT carrying a SHA-512 hash of the canonical query (Upbit, Bithumb)."""

    algorithm = "HS512"

    def __init__(
        self,
        *,
        include_timestamp: bool = False,
        nonce_factory: Callable[[], str] = new_nonce,
        clock: Callable[[], int] = now_ms,
    ):
        super().__init__(clock)
        self.include_timestamp = include_timestamp
        self.nonce_factory = nonce_factory

    @staticmethod
    def query_hash(params: Mapping[str, str]) -> str:
        return hashlib.sha512(canonicalize(params).encode()).hexdigest()

    def claims(self, params: Mapping[str, str], api_key: str) -> dict[str, Any]:
        claims: dict[str, Any] = {
            "access_key": api_key,
            "nonce": self.nonce_factory(),
            "query_hash": self.query_hash(params),
            "query_hash_alg": "SHA512",
        }
        if self.include_timestamp:
            claims["timestamp"] = self.clock()
        return claims

    def token(self, params: Mapping[str, str], credentials: Credentials) -> str:
        claims = self.claims(params, credentials.api_key)
        try:
            return jwt.encode(claims, credentials.secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningError(f"Failed to sign token: {exc}") from exc

    def sign(
        self,
        params: Mapping[str, str],
        credentials: Credentials,
        context: SigningContext | None = None,
    ) -> AuthArtifact:
        return AuthArtifact(
            headers={"Authorization": f"Bearer {self.token(params, credentials)}"}
        )
