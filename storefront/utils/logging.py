# storefront/utils/logging.py
import logging

from storefront.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """
    Konfiguruje root logger raz na proces.

    Wolane tylko z punktow wejscia (create_storefront, mock API), nigdy przy
    imporcie, zeby nie nadpisywac konfiguracji aplikacji-hosta.
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=_FORMAT)
    _configured = True
