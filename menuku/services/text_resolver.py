"""Pick which text to display for a bilingual field without doing any I/O."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from menuku.config.translate_client import SOURCE_LANGUAGE
from menuku.schemas import Language
from menuku.services.translation_cache import TranslationCache, derive_cache_key


@dataclass(frozen=True)
class ResolutionRequest:
    """Inputs of a single resolution; a change in any field restarts it."""

    source_text: str
    precomputed_target: Optional[str]
    language: Language
    cache_key: str
    enabled: bool = True

    @classmethod
    def build(
        cls,
        source_text: Optional[str],
        precomputed_target: Optional[str],
        language: Language,
        cache_key: Optional[str] = None,
        *,
        enabled: bool = True,
    ) -> "ResolutionRequest":
        text = source_text or ""
        return cls(
            source_text=text,
            precomputed_target=precomputed_target,
            language=language,
            cache_key=derive_cache_key(text, cache_key),
            enabled=enabled,
        )


ResolverStrategy = Callable[[ResolutionRequest, Optional[TranslationCache]], Optional[str]]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def source_language_strategy(
    request: ResolutionRequest, _cache: Optional[TranslationCache]
) -> Optional[str]:
    if request.language == SOURCE_LANGUAGE or not request.enabled:
        return request.source_text
    return None


def precomputed_strategy(
    request: ResolutionRequest, _cache: Optional[TranslationCache]
) -> Optional[str]:
    if not _is_blank(request.precomputed_target):
        return request.precomputed_target
    return None


def cached_strategy(
    request: ResolutionRequest, cache: Optional[TranslationCache]
) -> Optional[str]:
    if cache is None:
        return None
    cached = cache.get(request.cache_key)
    return cached or None


def blank_source_strategy(
    request: ResolutionRequest, _cache: Optional[TranslationCache]
) -> Optional[str]:
    if _is_blank(request.source_text):
        return request.source_text
    return None


DEFAULT_POLICY: Sequence[ResolverStrategy] = (
    source_language_strategy,
    precomputed_strategy,
    cached_strategy,
    blank_source_strategy,
)


def resolve_text(
    request: ResolutionRequest,
    cache: Optional[TranslationCache] = None,
    policy: Sequence[ResolverStrategy] = DEFAULT_POLICY,
) -> Optional[str]:
    """Return the first value any strategy produces, or None when a fetch is needed."""

    for strategy in policy:
        resolved = strategy(request, cache)
        if resolved is not None:
            return resolved
    return None


__all__ = [
    "DEFAULT_POLICY",
    "Language",
    "ResolutionRequest",
    "ResolverStrategy",
    "blank_source_strategy",
    "cached_strategy",
    "precomputed_strategy",
    "resolve_text",
    "source_language_strategy",
]
