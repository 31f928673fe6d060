import logging

from storefront import main
from storefront.repos.storage import MemoryStorage
from storefront.utils import logging as storefront_logging


def test_get_logger_leaves_root_logger_alone(monkeypatch):
    calls = []
    monkeypatch.setattr(storefront_logging, "_configured", False)
    monkeypatch.setattr(storefront_logging.logging, "basicConfig", lambda **kw: calls.append(kw))
    root_handlers = list(logging.getLogger().handlers)

    logger = storefront_logging.get_logger("storefront.services.cart_service")

    assert logger.name == "storefront.services.cart_service"
    assert calls == []
    assert logging.getLogger().handlers == root_handlers


def test_configure_logging_runs_once(monkeypatch):
    calls = []
    monkeypatch.setattr(storefront_logging, "_configured", False)
    monkeypatch.setattr(storefront_logging.logging, "basicConfig", lambda **kw: calls.append(kw))

    storefront_logging.configure_logging("debug")
    storefront_logging.configure_logging("info")

    assert len(calls) == 1
    assert calls[0]["level"] == "DEBUG"


def test_create_storefront_configures_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "configure_logging", lambda: calls.append(True))

    shop = main.create_storefront(storage=MemoryStorage())

    assert calls == [True]
    assert shop.cart.items == []
    shop.close()
