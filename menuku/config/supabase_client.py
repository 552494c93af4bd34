"""Supabase client configuration and helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from supabase import Client, create_client

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

MENUS_TABLE = os.getenv("SUPABASE_MENUS_TABLE", "menus")
MENU_PHOTOS_TABLE = os.getenv("SUPABASE_MENU_PHOTOS_TABLE", "menu_photos")

# Extra attempts for idempotent calls after a transport error, and the waits between them.
SUPABASE_RETRIES = int(os.getenv("SUPABASE_RETRIES", "2"))
SUPABASE_RETRY_BACKOFF = tuple(
    float(entry) for entry in os.getenv("SUPABASE_RETRY_BACKOFF", "0.2,0.5,1.0").split(",") if entry.strip()
) or (0.2,)


@lru_cache(maxsize=1)
def get_supabase_client() -> Optional[Client]:
    """Instantiate the Supabase client if credentials are configured."""
    api_key = SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY
    if not SUPABASE_URL or not api_key:
        return None
    return create_client(SUPABASE_URL, api_key)


__all__ = [
    "get_supabase_client",
    "MENUS_TABLE",
    "MENU_PHOTOS_TABLE",
    "SUPABASE_RETRIES",
    "SUPABASE_RETRY_BACKOFF",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
]
