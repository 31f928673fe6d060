# storefront/utils/listeners.py
from typing import Callable, Generic, List, TypeVar

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Listeners(Generic[T]):
    """Lista subskrybentow zmian stanu (zamiast globalnego kontekstu)."""

    def __init__(self):
        self._listeners: List[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, value: T) -> None:
        for listener in list(self._listeners):
            listener(value)
