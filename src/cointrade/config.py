"""Settings loading from YAML with environment overrides."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .settings import Settings

ENV_PREFIX = "COINTRADE_"
DEFAULT_CONFIG = "config.yml"

# Handled elsewhere, never merged into the settings tree.
_RESERVED_VARS = {"CONFIG", "LOG_LEVEL"}

# Key material is taken verbatim; "0123" must not become 123.
_RAW_STRING_KEYS = {"api_key", "secret", "passphrase", "password", "username", "url", "base_url"}


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def _env_value(key: str, raw: str) -> Any:
    if key in _RAW_STRING_KEYS:
        return raw
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _env_overrides(environ: Mapping[str, str], prefix: str) -> list[tuple[list[str], Any]]:
    overrides = []
    for name, raw in environ.items():
        if not name.startswith(prefix):
            continue
        remainder = name[len(prefix):]
        if remainder in _RESERVED_VARS:
            continue
        path = [part.lower() for part in remainder.split("__") if part]
        if path:
            overrides.append((path, _env_value(path[-1], raw)))
    return overrides


def apply_env_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str] | None = None,
    *,
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:
    """Overlay ``COINTRADE_SECTION__KEY=value`` variables onto config data.

    ``COINTRADE_EXCHANGES__OKX__CREDENTIALS__PASSPHRASE=...`` sets
    ``exchanges.okx.credentials.passphrase``. ``data`` is left untouched.
    """
    merged = copy.deepcopy(data)

    for path, value in _env_overrides(os.environ if environ is None else environ, prefix):
        node = merged
        for key in path[:-1]:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[path[-1]] = value

    return merged


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from ``config_path`` (default: COINTRADE_CONFIG or ./config.yml).

    A missing file yields defaults plus environment overrides.

    Raises:
        ValueError: If the file root is not a mapping or validation fails
    """
    if config_path is None:
        config_path = os.environ.get(f"{ENV_PREFIX}CONFIG", DEFAULT_CONFIG)

    data = apply_env_overrides(_read_config_file(Path(config_path)))

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
