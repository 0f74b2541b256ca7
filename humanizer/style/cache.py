"""Content-addressed LRU cache for stylometric profiles.

Shared by every run in the process, so all access goes through one lock.
"""

import hashlib
import threading
import time
import unicodedata
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SECONDS = 600.0


@dataclass
class CacheEntry:
    profile: object
    created_at: float
    last_access_at: float


def cache_key(text: str) -> str:
    """Hash of the normalized text plus its length."""
    normalized = unicodedata.normalize("NFC", text or "").strip()
    digest = hashlib.md5(normalized.encode("utf-8")).hexdigest()
    return f"{digest}-{len(normalized)}"


class ProfileCache:
    """Bounded, TTL-expiring, least-recently-used profile cache.

    Entries are kept in access order, so the first entry is always the
    eviction candidate.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, text: str):
        """Return the cached profile for text, or None if absent or expired."""
        key = cache_key(text)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            now = self._clock()
            if now - entry.created_at > self.ttl_seconds:
                del self._entries[key]
                self.misses += 1
                return None

            entry.last_access_at = now
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.profile

    def set(self, text: str, profile) -> None:
        """Insert or replace the profile for text, evicting the LRU entry if full."""
        key = cache_key(text)
        with self._lock:
            now = self._clock()
            if key in self._entries:
                del self._entries[key]
            while len(self._entries) >= self.max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Evicted profile {evicted_key}")
            self._entries[key] = CacheEntry(profile=profile, created_at=now, last_access_at=now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def resize(self, max_size: int, ttl_seconds: Optional[float] = None) -> None:
        """Change capacity (and TTL), evicting LRU entries that no longer fit."""
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        with self._lock:
            self.max_size = max_size
            if ttl_seconds is not None:
                self.ttl_seconds = ttl_seconds
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
                self.evictions += 1

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "size": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
            }


default_cache = ProfileCache()


def configure_default_cache(config: Optional[Dict] = None) -> ProfileCache:
    """Resize the process-wide cache from the "cache" config section."""
    cache_config = (config or {}).get("cache", {})
    default_cache.resize(
        cache_config.get("max_size", DEFAULT_MAX_SIZE),
        cache_config.get("ttl_seconds", DEFAULT_TTL_SECONDS),
    )
    return default_cache
