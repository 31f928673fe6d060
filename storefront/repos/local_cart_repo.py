# storefront/repos/local_cart_repo.py
import json
from typing import Dict, Iterable, List

from pydantic import TypeAdapter, ValidationError

from storefront.domain.schemas import PersistedCartEntry
from storefront.repos.storage import KeyValueStorage
from storefront.utils.settings import CART_STORAGE_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ENTRIES = TypeAdapter(List[PersistedCartEntry])


class LocalCartRepo:
    """
    Koszyk uzytkownika niezalogowanego w magazynie lokalnym.
    Trzyma tylko pary (productId, quantity), bez danych katalogu.
    """

    def __init__(self, storage: KeyValueStorage, key: str | None = None):
        self.storage = storage
        self.key = key or CART_STORAGE_KEY

    def load(self) -> List[PersistedCartEntry]:
        raw = self.storage.get(self.key)
        if raw is None:
            return []

        try:
            entries = _ENTRIES.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as e:
            # uszkodzony snapshot = pusty koszyk
            logger.warning(f"Corrupt cart snapshot under '{self.key}', purging: {e}")
            self.storage.delete(self.key)
            return []

        return _collapse(entries)

    def save(self, entries: Iterable[PersistedCartEntry]) -> None:
        payload = [e.to_wire() for e in entries]
        self.storage.set(self.key, json.dumps(payload))
        logger.debug(f"Saved {len(payload)} cart entries under '{self.key}'")

    def clear(self) -> None:
        self.storage.delete(self.key)


def _collapse(entries: List[PersistedCartEntry]) -> List[PersistedCartEntry]:
    merged: Dict[str, int] = {}
    for e in entries:
        merged[e.product_id] = merged.get(e.product_id, 0) + e.quantity
    return [PersistedCartEntry(product_id=pid, quantity=qty) for pid, qty in merged.items()]
