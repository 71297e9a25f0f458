"""Key/value cache stores used to memoize query results."""

from __future__ import annotations

import copy
import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

import redis

logger = logging.getLogger(__name__)

_MISSING = object()


def encode_cache_key(key: Any) -> str:
    """Return a stable string form of a structured cache key."""
    return json.dumps(key, sort_keys=True, separators=(",", ":"), default=str)


@dataclass
class CacheEntry:
    key: str
    value: Any
    stored_at: float
    expires_at: Optional[float]

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryCacheStore:
    """Process-local cache with per-entry expiry and a size bound.

    ``clock`` returns the current time in seconds and defaults to
    :func:`time.monotonic`. Expired entries are swept on every write; when
    ``max_size`` live entries are held the oldest ones are evicted. Values
    are copied on the way in and on the way out so callers never share the
    stored object.
    """

    def __init__(
        self, clock: Callable[[], float] = time.monotonic, max_size: int = 1024
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._clock = clock
        self.max_size = max_size
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _get_unlocked(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return _MISSING
        return entry.value

    def _purge_expired_unlocked(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

    def read(self, key: Any, default: Any = None) -> Any:
        encoded = encode_cache_key(key)
        with self._lock:
            value = self._get_unlocked(encoded)
        return default if value is _MISSING else copy.deepcopy(value)

    def write(self, key: Any, value: Any, ttl: Optional[float] = None) -> None:
        encoded = encode_cache_key(key)
        now = self._clock()
        expires_at = now + ttl if ttl is not None else None
        entry = CacheEntry(encoded, copy.deepcopy(value), now, expires_at)
        with self._lock:
            self._purge_expired_unlocked(now)
            self._entries.pop(encoded, None)
            while len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s from query cache", evicted)
            self._entries[encoded] = entry

    def delete(self, key: Any) -> bool:
        encoded = encode_cache_key(key)
        with self._lock:
            return self._entries.pop(encoded, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def fetch(self, key: Any, ttl: Optional[float], compute: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or store the result of ``compute``.

        ``compute`` runs outside the lock; concurrent misses for the same key
        may each compute, and the last write wins.
        """

        encoded = encode_cache_key(key)
        with self._lock:
            value = self._get_unlocked(encoded)
        if value is not _MISSING:
            logger.debug("Cache hit for %s", encoded)
            return copy.deepcopy(value)
        logger.debug("Cache miss for %s", encoded)
        value = compute()
        self.write(key, value, ttl)
        return value


class RedisCacheStore:
    """Cache store backed by a redis server.

    Values must be JSON serializable. Expiry is delegated to redis.
    """

    def __init__(self, client, prefix: str = "invoice-manager:") -> None:
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisCacheStore":
        return cls(redis.Redis.from_url(url), **kwargs)

    def _key(self, key: Any) -> str:
        return self.prefix + encode_cache_key(key)

    def read(self, key: Any, default: Any = None) -> Any:
        data = self.client.get(self._key(key))
        if data is None:
            return default
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)

    def write(self, key: Any, value: Any, ttl: Optional[float] = None) -> None:
        payload = json.dumps(value, default=str)
        if ttl is None:
            self.client.set(self._key(key), payload)
        else:
            self.client.set(self._key(key), payload, ex=max(int(ttl), 1))

    def delete(self, key: Any) -> bool:
        return bool(self.client.delete(self._key(key)))

    def fetch(self, key: Any, ttl: Optional[float], compute: Callable[[], Any]) -> Any:
        value = self.read(key, _MISSING)
        if value is not _MISSING:
            logger.debug("Cache hit for %s", self._key(key))
            return value
        logger.debug("Cache miss for %s", self._key(key))
        value = compute()
        self.write(key, value, ttl)
        return value


def create_cache_store(url: Optional[str], max_size: int = 1024):
    """Return a cache store for ``url`` (``memory://`` or ``redis://...``).

    ``max_size`` bounds the in-process store and is ignored for redis.
    """

    if not url or url.startswith("memory://"):
        return MemoryCacheStore(max_size=max_size)
    if url.startswith(("redis://", "rediss://", "unix://")):
        logger.info("Using redis query cache at %s", url.split("@")[-1])
        return RedisCacheStore.from_url(url)
    raise ValueError(f"Unsupported query cache URL: {url}")
