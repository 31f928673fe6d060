# storefront/repos/storage.py
from typing import Dict, Optional, Protocol

import redis

from storefront.utils.retry import storage_retry
from storefront.utils.settings import STORAGE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Trwaly magazyn klient-lokalny: jeden klucz -> jeden string."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Magazyn w pamieci procesu (dev, testy)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._store: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)


class RedisStorage:
    """
    Magazyn w Redis. Kazdy zapis to jedno polecenie SET,
    wiec z punktu widzenia wywolujacego jest atomowy.
    """

    def __init__(self, url: str, namespace: str = "storefront"):
        self.redis = redis.Redis.from_url(url, decode_responses=True)
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @storage_retry()
    def get(self, key: str) -> Optional[str]:
        return self.redis.get(self._key(key))

    @storage_retry()
    def set(self, key: str, value: str) -> None:
        logger.debug(f"SET {self._key(key)}")
        self.redis.set(name=self._key(key), value=value)

    @storage_retry()
    def delete(self, key: str) -> None:
        logger.debug(f"DEL {self._key(key)}")
        self.redis.delete(self._key(key))


def build_storage(url: str | None = None) -> KeyValueStorage:
    url = url or STORAGE_URL
    if url.startswith("memory://"):
        return MemoryStorage()
    if url.startswith(("redis://", "rediss://", "unix://")):
        return RedisStorage(url)
    raise ValueError(f"Unsupported storage url: {url}")
