# storefront/services/notification_service.py
from typing import Callable

from storefront.domain.schemas import Notification
from storefront.utils.listeners import Listeners
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia o wyniku operacji (odpowiednik toastow w UI).
    Warstwa prezentacji subskrybuje i sama decyduje, jak je pokazac.
    """

    def __init__(self):
        self._listeners: Listeners[Notification] = Listeners()

    def subscribe(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    def success(self, description: str, title: str | None = None) -> None:
        self._send(Notification(level="success", title=title, description=description))

    def error(self, description: str, title: str | None = "Error") -> None:
        self._send(Notification(level="error", title=title, description=description))

    def _send(self, notification: Notification) -> None:
        logger.info(f"[NOTIFICATION] {notification.level}: {notification.description}")
        self._listeners.emit(notification)
