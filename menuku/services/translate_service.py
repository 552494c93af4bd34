"""Client for the free Google translate web endpoint."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from menuku.config.translate_client import (
    SOURCE_LANGUAGE,
    TARGET_LANGUAGE,
    TRANSLATE_ENDPOINT,
    TRANSLATE_HEADERS,
    TRANSLATE_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Gagal menerjemahkan teks. Pastikan koneksi internet Anda stabil."


class TranslationError(RuntimeError):
    """Raised when the translate endpoint fails or answers with garbage."""


def parse_translation_payload(payload: Any) -> Optional[str]:
    """Join the text fragments of the first segment of a translate response.

    The endpoint answers with nested arrays such as
    ``[[["Fried ", "Nasi ", ...], ["rice", "goreng", ...]], None, "id"]``.
    Returns None when no fragment could be extracted.
    """

    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        return None
    fragments: List[str] = []
    for item in payload[0]:
        if isinstance(item, list) and item and isinstance(item[0], str) and item[0]:
            fragments.append(item[0])
    joined = "".join(fragments)
    return joined or None


async def translate_text(
    text: str,
    source: str = SOURCE_LANGUAGE,
    target: str = TARGET_LANGUAGE,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Translate ``text`` from ``source`` to ``target`` with a single request."""

    if not text or not text.strip():
        return ""

    params = {"client": "gtx", "sl": source, "tl": target, "dt": "t", "q": text}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=TRANSLATE_TIMEOUT_SECONDS) as owned_client:
                response = await owned_client.get(
                    TRANSLATE_ENDPOINT, params=params, headers=TRANSLATE_HEADERS
                )
        else:
            response = await client.get(TRANSLATE_ENDPOINT, params=params, headers=TRANSLATE_HEADERS)
    except httpx.HTTPError as exc:
        logger.error("Translate endpoint unreachable (%s -> %s): %s", source, target, exc)
        raise TranslationError(DEFAULT_ERROR_MESSAGE) from exc

    if response.status_code != 200:
        logger.error(
            "Translate endpoint answered %s (%s -> %s)", response.status_code, source, target
        )
        raise TranslationError("Gagal menghubungi layanan translate.")

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("Translate endpoint returned a non JSON body: %s", exc)
        raise TranslationError(DEFAULT_ERROR_MESSAGE) from exc

    translated = parse_translation_payload(payload)
    if translated is None:
        logger.error("Translate payload has no text fragments (%s -> %s)", source, target)
        raise TranslationError(DEFAULT_ERROR_MESSAGE)
    return translated


async def translate_id_to_en(text: str, *, client: Optional[httpx.AsyncClient] = None) -> str:
    return await translate_text(text, "id", "en", client=client)


async def translate_en_to_id(text: str, *, client: Optional[httpx.AsyncClient] = None) -> str:
    return await translate_text(text, "en", "id", client=client)


__all__ = [
    "TranslationError",
    "parse_translation_payload",
    "translate_en_to_id",
    "translate_id_to_en",
    "translate_text",
]
