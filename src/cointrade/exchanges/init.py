"""Exchange facade initialization from settings."""

from __future__ import annotations

import logging

from ..errors import CredentialError
from ..settings import Settings
from .base import BaseExchange
from .factory import create_exchange
from .transport import HttpSender

logger = logging.getLogger(__name__)


def create_exchanges_from_settings(
    settings: Settings,
    sender: HttpSender | None = None,
) -> dict[str, BaseExchange]:
    """Create facades for every enabled exchange that has credentials.

    Exchanges with invalid credentials are skipped with an error log so one
    bad entry does not prevent the others from loading.
    """
    exchanges: dict[str, BaseExchange] = {}
    proxy = settings.transport.proxy

    for exchange_name, exchange_config in settings.exchanges.items():
        if not exchange_config.enabled:
            logger.debug("Exchange %s is disabled, skipping", exchange_name)
            continue

        if not exchange_config.credentials:
            logger.warning("Exchange %s has no credentials configured, skipping", exchange_name)
            continue

        credentials = exchange_config.credentials
        try:
            exchange = create_exchange(
                exchange_name,
                credentials.api_key.get_secret_value(),
                credentials.secret.get_secret_value(),
                passphrase=credentials.passphrase.get_secret_value() if credentials.passphrase else None,
                sender=sender,
                base_url=exchange_config.base_url,
                proxy=proxy.as_dict() if proxy.enabled else None,
                **{"timeout": settings.transport.timeout, **exchange_config.options},
            )
        except (CredentialError, TypeError, ValueError) as e:
            logger.error("Failed to initialize exchange %s: %s", exchange_name, e)
            continue

        exchanges[exchange_name] = exchange
        logger.info("Initialized exchange %s", exchange_name)

    return exchanges
