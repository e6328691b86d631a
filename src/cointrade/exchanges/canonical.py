"""Deterministic query strings used as signing input."""

from __future__ import annotations

from typing import Any, Collection, Mapping


def canonicalize(params: Mapping[str, Any], exclude: Collection[str] = ()) -> str:
    """Join parameters as ``k1=v1&k2=v2`` with keys in ascending order.

    No percent-encoding is applied; values must already be safe ASCII tokens.

    Args:
        params: Parameter mapping. Non-string values are passed through ``str()``.
        exclude: Keys left out of the result (e.g. a signature being computed).

    Returns:
        Canonical query string, empty for an empty mapping.
    """
    return "&".join(
        f"{key}={value}"
        for key, value in sorted(params.items())
        if key not in exclude
    )
