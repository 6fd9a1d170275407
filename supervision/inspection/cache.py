"""Analysis result caches keyed by document-text fingerprint."""

import json
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import redis

from supervision.config.settings import Settings
from supervision.logging.logger import Log

CachedPayload = list[dict[str, Any]]

DEFAULT_MAX_ENTRIES = 1024


class BaseAnalysisCache(ABC):
    """Contract for the analyzer cache (key -> JSON-able payload with TTL)."""

    @abstractmethod
    def get(self, key: str) -> CachedPayload | None:
        """Return the cached payload, or None on a miss or expiry."""

    @abstractmethod
    def set(self, key: str, value: CachedPayload, ttl_seconds: int) -> None:
        """Store a payload for ttl_seconds."""

    @abstractmethod
    def invalidate(self, key: str) -> None:
        """Drop a single entry if present."""


class NullAnalysisCache(BaseAnalysisCache):
    """Never stores anything; every lookup is a miss."""

    def get(self, key: str) -> CachedPayload | None:
        return None

    def set(self, key: str, value: CachedPayload, ttl_seconds: int) -> None:
        return None

    def invalidate(self, key: str) -> None:
        return None


class InMemoryAnalysisCache(BaseAnalysisCache):
    """Process-local TTL cache guarded by a lock (shared by worker threads).

    Expired entries are dropped on every write; past max_entries the entry
    closest to expiry is evicted.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, CachedPayload]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> CachedPayload | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: CachedPayload, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries.pop(key, None)
            while self._entries and len(self._entries) >= self._max_entries:
                oldest = min(self._entries, key=lambda name: self._entries[name][0])
                del self._entries[oldest]
            self._entries[key] = (now + ttl_seconds, value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def _purge_expired(self, now: float) -> None:
        expired = [name for name, (expires_at, _) in self._entries.items() if now >= expires_at]
        for name in expired:
            del self._entries[name]


class RedisAnalysisCache(BaseAnalysisCache):
    """Redis-backed cache; entries survive restarts and are shared across processes."""

    def __init__(self, client: redis.Redis, prefix: str = "supervision:analysis:") -> None:
        self._client = client
        self._prefix = prefix

    def get(self, key: str) -> CachedPayload | None:
        try:
            raw = self._client.get(self._prefix + key)
        except redis.RedisError as exc:
            Log.warning(f"Analysis cache read failed, treating as miss: {exc}")
            return None
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: CachedPayload, ttl_seconds: int) -> None:
        try:
            self._client.set(self._prefix + key, json.dumps(value), ex=ttl_seconds)
        except redis.RedisError as exc:
            Log.warning(f"Analysis cache write failed: {exc}")

    def invalidate(self, key: str) -> None:
        try:
            self._client.delete(self._prefix + key)
        except redis.RedisError as exc:
            Log.warning(f"Analysis cache invalidation failed: {exc}")


class AnalysisCacheFactory:
    """Creates the configured analysis cache."""

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalysisCache:
        backend = settings.analysis_cache_backend.lower()
        if backend == "memory":
            return InMemoryAnalysisCache()
        if backend == "none":
            return NullAnalysisCache()
        if backend == "redis":
            return RedisAnalysisCache(redis.Redis.from_url(settings.redis_url))
        raise ValueError(
            f"Unknown analysis cache backend '{backend}'. Choose from: ['memory', 'none', 'redis']"
        )
