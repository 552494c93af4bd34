"""Map Supabase/PostgREST failures to HTTP errors."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import HTTPException
from postgrest import APIError as PostgrestAPIError

logger = logging.getLogger(__name__)


def raise_postgrest_error(exc: PostgrestAPIError, *, context: str) -> NoReturn:
    """Map PostgREST errors to FastAPI HTTP exceptions with logging."""

    status_code = postgrest_status(exc)
    detail = exc.message or "Gagal berkomunikasi dengan Supabase."
    logger.error("%s failed (%s): %s", context, status_code, detail)
    if status_code == 401:
        raise HTTPException(status_code=401, detail="Autentikasi Supabase diperlukan.") from exc
    if status_code == 403:
        raise HTTPException(status_code=403, detail="Akses ke data ditolak.") from exc
    if status_code == 404:
        raise HTTPException(status_code=404, detail="Data tidak ditemukan.") from exc
    raise HTTPException(status_code=502, detail="Gagal berkomunikasi dengan Supabase.") from exc


def postgrest_status(exc: PostgrestAPIError) -> int:
    """Best effort extraction of an HTTP status code from the API error."""

    try:
        return int(exc.code) if exc.code else 502
    except (TypeError, ValueError):
        return 502


__all__ = ["postgrest_status", "raise_postgrest_error"]
