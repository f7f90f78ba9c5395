"""Key-value stores for session state (timer snapshot, unit preference).

Stores hold plain strings. Any backend failure surfaces as
``StorageUnavailable`` so callers can degrade to in-memory behaviour.
"""

import logging
from typing import Optional, Protocol

from redis.exceptions import RedisError

from ..errors import StorageUnavailable
from ..settings import settings
from .redis_client import get_sync_redis

logger = logging.getLogger("doughformula.storage")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store. Used in tests and as the fallback when Redis is off."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class RedisStore:
    """Redis-backed store. Keys are namespaced with ``settings.storage_prefix``."""

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = settings.storage_prefix if prefix is None else prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return get_sync_redis().get(self._key(key))
        except RedisError as e:
            raise StorageUnavailable(f"Failed to read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            get_sync_redis().set(self._key(key), value)
        except RedisError as e:
            raise StorageUnavailable(f"Failed to write {key}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            get_sync_redis().delete(self._key(key))
        except RedisError as e:
            raise StorageUnavailable(f"Failed to remove {key}: {e}") from e
