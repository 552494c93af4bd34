"""Auto-translate binding: resolver, session cache and fetcher wired together.

A binding mirrors one translated field on screen (a menu item name, a
description...). Every time its inputs change it restarts resolution:

* source language or translation disabled: show the source text (``IDLE``).
* precomputed translation or cache hit: show it right away (``RESOLVED``).
* otherwise start a fetch (``PENDING``), then either cache and show the
  result (``RESOLVED``) or log the failure and keep the source text
  (``FAILED``).

Bindings of the same session share the translation cache and in-flight
fetches, so a given cache key is fetched at most once per session.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Sequence

from menuku.config.translate_client import SOURCE_LANGUAGE, TARGET_LANGUAGE
from menuku.services.text_resolver import (
    DEFAULT_POLICY,
    Language,
    ResolutionRequest,
    ResolverStrategy,
    resolve_text,
)
from menuku.services.translate_service import TranslationError, translate_text
from menuku.services.translation_cache import (
    InMemoryTranslationCache,
    SessionCacheRegistry,
    TranslationCache,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[str]]

# Translates from the configured source language into the configured target.
default_fetcher: Fetcher = functools.partial(
    translate_text, source=SOURCE_LANGUAGE, target=TARGET_LANGUAGE
)


class BindingState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class TranslationResult:
    display_text: str
    is_translating: bool
    error: Optional[str]
    state: BindingState


class TranslationSession:
    """Translation cache and in-flight fetches of one browsing session."""

    def __init__(
        self,
        cache: Optional[TranslationCache] = None,
        fetcher: Fetcher = default_fetcher,
    ) -> None:
        self.cache: TranslationCache = cache if cache is not None else InMemoryTranslationCache()
        self._fetcher = fetcher
        self._inflight: Dict[str, "asyncio.Task[str]"] = {}

    def fetch(self, cache_key: str, source_text: str) -> "asyncio.Task[str]":
        """Return the fetch task for ``cache_key``, starting one if none is running."""

        task = self._inflight.get(cache_key)
        if task is None:
            task = asyncio.get_running_loop().create_task(
                self._fetch_and_store(cache_key, source_text)
            )
            self._inflight[cache_key] = task
        return task

    async def _fetch_and_store(self, cache_key: str, source_text: str) -> str:
        try:
            translated = await self._fetcher(source_text)
        finally:
            self._inflight.pop(cache_key, None)
        if translated:
            self.cache.set(cache_key, translated)
        return translated

    def binding(self, policy: Sequence[ResolverStrategy] = DEFAULT_POLICY) -> "AutoTranslateBinding":
        return AutoTranslateBinding(self, policy=policy)


class AutoTranslateBinding:
    """Track the displayed value of one translatable field."""

    def __init__(
        self,
        session: TranslationSession,
        *,
        policy: Sequence[ResolverStrategy] = DEFAULT_POLICY,
    ) -> None:
        self._session = session
        self._policy = policy
        self._request: Optional[ResolutionRequest] = None
        self._generation = 0
        self._task: Optional["asyncio.Task[None]"] = None
        self._state = BindingState.IDLE
        self._value = ""
        self._error: Optional[str] = None

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def snapshot(self) -> TranslationResult:
        source_text = self._request.source_text if self._request else ""
        if self._state == BindingState.RESOLVED:
            display_text = self._value or source_text
        else:
            display_text = source_text
        return TranslationResult(
            display_text=display_text,
            is_translating=self._state == BindingState.PENDING,
            error=self._error,
            state=self._state,
        )

    def update(
        self,
        source_text: Optional[str],
        precomputed_target: Optional[str],
        language: Language,
        cache_key: Optional[str] = None,
        *,
        enabled: bool = True,
    ) -> TranslationResult:
        """Feed new inputs and return the immediate snapshot.

        Must be called from a running event loop when a fetch may be needed.
        """

        request = ResolutionRequest.build(
            source_text, precomputed_target, language, cache_key, enabled=enabled
        )
        if request == self._request:
            return self.snapshot

        self._request = request
        self._generation += 1
        self._error = None
        self._value = ""

        resolved = resolve_text(request, self._session.cache, self._policy)
        if resolved is not None:
            translating = request.enabled and request.language != SOURCE_LANGUAGE
            self._state = BindingState.RESOLVED if translating else BindingState.IDLE
            self._value = resolved
            return self.snapshot

        self._state = BindingState.PENDING
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation, request))
        return self.snapshot

    async def settle(self) -> TranslationResult:
        """Wait until no fetch is pending for the current inputs."""

        while self._task is not None and not self._task.done():
            await self._task
        return self.snapshot

    async def resolve(
        self,
        source_text: Optional[str],
        precomputed_target: Optional[str],
        language: Language,
        cache_key: Optional[str] = None,
        *,
        enabled: bool = True,
    ) -> TranslationResult:
        self.update(source_text, precomputed_target, language, cache_key, enabled=enabled)
        return await self.settle()

    async def _run(self, generation: int, request: ResolutionRequest) -> None:
        fetch = self._session.fetch(request.cache_key, request.source_text)
        try:
            translated = await asyncio.shield(fetch)
        except TranslationError as exc:
            logger.warning("Translation failed for %s: %s", request.cache_key, exc)
            self._settle_failure(generation, str(exc) or "Translation failed")
            return
        except Exception as exc:
            logger.exception("Unexpected translation failure for %s", request.cache_key)
            self._settle_failure(generation, str(exc) or "Translation failed")
            return

        if generation != self._generation:
            logger.debug("Ignoring superseded translation for %s", request.cache_key)
            return
        self._value = translated
        self._state = BindingState.RESOLVED

    def _settle_failure(self, generation: int, message: str) -> None:
        if generation != self._generation:
            return
        self._error = message
        self._value = ""
        self._state = BindingState.FAILED


class TranslationSessionRegistry:
    """Keep one TranslationSession per browsing session id.

    Sessions follow the lifetime of their cache in ``caches``: once a cache
    expires from inactivity the session and its in-flight bookkeeping go too.
    """

    def __init__(
        self,
        fetcher: Fetcher = default_fetcher,
        caches: Optional[SessionCacheRegistry] = None,
    ) -> None:
        self._fetcher = fetcher
        self._caches = caches if caches is not None else SessionCacheRegistry()
        self._sessions: Dict[str, TranslationSession] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> TranslationSession:
        with self._lock:
            cache = self._caches.for_session(session_id)
            for known_id in list(self._sessions):
                if known_id not in self._caches:
                    del self._sessions[known_id]
            session = self._sessions.get(session_id)
            if session is None or session.cache is not cache:
                session = TranslationSession(cache, self._fetcher)
                self._sessions[session_id] = session
            return session

    def clear(self, session_id: str) -> bool:
        with self._lock:
            self._sessions.pop(session_id, None)
        return self._caches.clear(session_id)


async def auto_translate(
    session: TranslationSession,
    source_text: Optional[str],
    precomputed_target: Optional[str],
    language: Language,
    cache_key: Optional[str] = None,
    *,
    enabled: bool = True,
) -> TranslationResult:
    """One-shot resolution of a single field."""

    binding = session.binding()
    return await binding.resolve(source_text, precomputed_target, language, cache_key, enabled=enabled)


__all__ = [
    "AutoTranslateBinding",
    "BindingState",
    "Fetcher",
    "TranslationResult",
    "TranslationSession",
    "TranslationSessionRegistry",
    "auto_translate",
    "default_fetcher",
]
