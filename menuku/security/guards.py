"""Request guards for the admin and public endpoints."""

from __future__ import annotations

import hmac
import os
import threading
import time
from collections import defaultdict, deque
from typing import Deque, DefaultDict, Optional

from fastapi import HTTPException, Request

from menuku.config.storefront import ADMIN_API_TOKEN


def _normalize_origin(value: str) -> str:
    return value.rstrip("/").lower()


TRUSTED_ORIGINS = tuple(
    _normalize_origin(entry)
    for entry in os.getenv("TRUSTED_ORIGINS", "").split(",")
    if entry.strip()
)

_RATE_LOCK = threading.Lock()
_RATE_BUCKETS: DefaultDict[str, Deque[float]] = defaultdict(deque)


def extract_bearer_token(header_value: Optional[str]) -> str:
    """Return the Bearer token from an Authorization header."""

    if not header_value:
        raise HTTPException(status_code=401, detail="Autentikasi diperlukan.")
    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Token Bearer tidak valid.")
    token = parts[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Token Bearer kosong.")
    return token


def verify_admin_token(header_value: Optional[str], expected: Optional[str] = None) -> str:
    """Check the admin bearer token against ``ADMIN_API_TOKEN``."""

    token = extract_bearer_token(header_value)
    configured = expected if expected is not None else ADMIN_API_TOKEN
    if not configured:
        raise HTTPException(status_code=503, detail="Akses admin belum dikonfigurasi.")
    if not hmac.compare_digest(token.encode("utf-8"), configured.encode("utf-8")):
        raise HTTPException(status_code=403, detail="Token admin salah.")
    return token


def get_client_ip(request: Request) -> str:
    """Best effort extraction of the requester IP address."""

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        candidate = forwarded.split(",")[0].strip()
        if candidate:
            return candidate
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_same_origin(request: Request) -> None:
    """Block cross-site posts unless explicitly allowed."""

    origin = request.headers.get("origin")
    if not origin:
        return
    normalized_origin = _normalize_origin(origin)
    if normalized_origin in TRUSTED_ORIGINS:
        return
    host = request.headers.get("host")
    scheme = request.url.scheme or "http"
    if host:
        expected = _normalize_origin(f"{scheme}://{host}")
        if normalized_origin == expected:
            return
    raise HTTPException(status_code=403, detail="Asal permintaan tidak diizinkan.")


def _prune_idle_buckets(prefix: str, now: float, window_seconds: int) -> None:
    """Forget clients of one scope whose last hit left the window."""

    idle = [
        identifier
        for identifier, bucket in _RATE_BUCKETS.items()
        if identifier.startswith(prefix) and (not bucket or now - bucket[-1] > window_seconds)
    ]
    for identifier in idle:
        del _RATE_BUCKETS[identifier]


def rate_limit_request(
    request: Request,
    *,
    scope: str,
    limit: int,
    window_seconds: int,
) -> None:
    """Apply an in-memory sliding window per client IP and scope."""

    identifier = f"{scope}:{get_client_ip(request)}"
    now = time.monotonic()
    with _RATE_LOCK:
        _prune_idle_buckets(f"{scope}:", now, window_seconds)
        bucket = _RATE_BUCKETS[identifier]
        while bucket and now - bucket[0] > window_seconds:
            bucket.popleft()
        if len(bucket) >= limit:
            raise HTTPException(status_code=429, detail="Terlalu banyak permintaan. Coba lagi nanti.")
        bucket.append(now)


def reset_rate_limits() -> None:
    with _RATE_LOCK:
        _RATE_BUCKETS.clear()


__all__ = [
    "enforce_same_origin",
    "extract_bearer_token",
    "get_client_ip",
    "rate_limit_request",
    "reset_rate_limits",
    "verify_admin_token",
]
