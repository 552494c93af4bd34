"""Configuration for the remote translation endpoint."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

TRANSLATE_ENDPOINT = os.getenv(
    "TRANSLATE_ENDPOINT", "https://translate.googleapis.com/translate_a/single"
)
SOURCE_LANGUAGE = os.getenv("SOURCE_LANGUAGE", "id")
TARGET_LANGUAGE = os.getenv("TARGET_LANGUAGE", "en")

# Prefix length used to derive cache keys when callers do not supply one.
CACHE_KEY_PREFIX_CHARS = int(os.getenv("TRANSLATE_CACHE_KEY_CHARS", "50"))

TRANSLATE_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/133.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


def _read_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


# None keeps the request open until the remote side answers.
TRANSLATE_TIMEOUT_SECONDS = _read_timeout(os.getenv("TRANSLATE_TIMEOUT_SECONDS"))

__all__ = [
    "CACHE_KEY_PREFIX_CHARS",
    "SOURCE_LANGUAGE",
    "TARGET_LANGUAGE",
    "TRANSLATE_ENDPOINT",
    "TRANSLATE_HEADERS",
    "TRANSLATE_TIMEOUT_SECONDS",
]
