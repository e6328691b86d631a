"""Tests for the application container and logging setup."""

import logging

import pytest

from cointrade.di import build_container, build_sender
from cointrade.logging import configure_logging
from cointrade.settings import Settings


@pytest.fixture
def settings():
    return Settings.model_validate({
        "transport": {"timeout": 4, "proxy": {"enabled": True, "url": "http://proxy:3128"}},
        "exchanges": {
            "Binance": {"credentials": {"api_key": "k", "secret": "s"}},
            "upbit": {"enabled": False},
        },
    })


class TestContainer:
    """Tests for AppContainer."""

    def test_build_sender(self, settings):
        sender = build_sender(settings)

        assert sender.timeout == 4
        assert sender.proxy.proxy_url == "http://proxy:3128"

    def test_get_exchange(self, settings, stub_sender):
        container = build_container(settings, sender=stub_sender)

        assert container.get_exchange("BINANCE").get_name() == "Binance"
        assert container.get_exchange("binance").sender is stub_sender

    def test_unknown_exchange(self, settings, stub_sender):
        container = build_container(settings, sender=stub_sender)

        with pytest.raises(KeyError, match="configured: binance"):
            container.get_exchange("upbit")

    @pytest.mark.asyncio
    async def test_close_without_close_method(self, settings, stub_sender):
        container = build_container(settings, sender=stub_sender)
        await container.close()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_file_handler(self, tmp_path):
        configure_logging(tmp_path, "debug")

        logging.getLogger("cointrade.test").debug("hello")

        assert logging.getLogger().level == logging.DEBUG
        assert (tmp_path / "cointrade.log").exists()
        assert logging.getLogger("aiohttp").level == logging.INFO

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("COINTRADE_LOG_LEVEL", "WARNING")

        configure_logging()

        assert logging.getLogger().level == logging.WARNING
