"""Session-scoped storage for fetched translations."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Protocol

from menuku.config.storefront import SESSION_IDLE_SECONDS
from menuku.config.translate_client import CACHE_KEY_PREFIX_CHARS


class TranslationCache(Protocol):
    """Minimal key/value contract the display binding relies on."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryTranslationCache:
    """Unbounded dict-backed cache living as long as its session."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def __len__(self) -> int:
        return len(self._entries)


class SessionCacheRegistry:
    """Hand out one translation cache per browsing session.

    A session that has not been seen for ``idle_seconds`` is treated as ended
    and its cache is dropped on the next lookup.
    """

    def __init__(
        self,
        idle_seconds: float = SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._caches: Dict[str, InMemoryTranslationCache] = {}
        self._last_seen: Dict[str, float] = {}

    def _prune(self, now: float) -> None:
        for session_id, seen in list(self._last_seen.items()):
            if now - seen > self._idle_seconds:
                self._last_seen.pop(session_id, None)
                self._caches.pop(session_id, None)

    def for_session(self, session_id: str) -> InMemoryTranslationCache:
        with self._lock:
            now = self._clock()
            self._prune(now)
            cache = self._caches.get(session_id)
            if cache is None:
                cache = InMemoryTranslationCache()
                self._caches[session_id] = cache
            self._last_seen[session_id] = now
            return cache

    def clear(self, session_id: str) -> bool:
        """Drop every entry of a session. Returns False if it was unknown."""

        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._caches.pop(session_id, None) is not None

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._caches


def derive_cache_key(source_text: str, cache_key: Optional[str] = None) -> str:
    """Return the explicit key, or one derived from the start of the source text.

    Derived keys only look at a prefix, so texts that differ after it collide.
    """

    if cache_key:
        return cache_key
    return f"translate_{source_text[:CACHE_KEY_PREFIX_CHARS]}"


__all__ = [
    "InMemoryTranslationCache",
    "SessionCacheRegistry",
    "TranslationCache",
    "derive_cache_key",
]
