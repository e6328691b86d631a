"""Transport-agnostic request assembly."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlencode

from ..errors import UnsupportedContentType
from .canonical import canonicalize

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Everything the HTTP sender needs to execute one request."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict, repr=False)
    body: bytes | None = field(default=None, repr=False)
    content_type: str | None = None


def encode_body(params: Mapping[str, Any], content_type: str) -> bytes:
    if content_type == FORM_CONTENT_TYPE:
        # Insertion order is kept so a trailing signature stays last.
        return urlencode(list(params.items())).encode()
    if content_type == JSON_CONTENT_TYPE:
        return json.dumps(dict(params), separators=(",", ":")).encode()
    raise UnsupportedContentType(content_type)


def with_query(url: str, params: Mapping[str, Any] | None) -> str:
    """Append the canonical query string to a URL."""
    if not params:
        return url
    return f"{url}?{canonicalize(params)}"


def build_request(
    method: str,
    url: str,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
    content_type: str | None = None,
) -> RequestDescriptor:
    """Build a RequestDescriptor.

    Args:
        method: HTTP method
        url: Absolute URL, query string included
        headers: Extra headers (auth headers, Accept, ...)
        params: Parameters to encode as the body
        content_type: Body encoding; form and JSON are the only ones supported

    Returns:
        RequestDescriptor with the encoded body and a Content-Type header

    Raises:
        UnsupportedContentType: If content_type is outside the supported set
    """
    request_headers = dict(headers or {})
    body = None

    if content_type is not None:
        body = encode_body(params or {}, content_type)
        request_headers["Content-Type"] = content_type
    elif params:
        raise UnsupportedContentType("<none>")

    return RequestDescriptor(
        method=method.upper(),
        url=url,
        headers=request_headers,
        body=body,
        content_type=content_type,
    )
