"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

import re
from typing import Optional

from fastapi import Header, HTTPException

from menuku.security.guards import verify_admin_token
from menuku.services.analytics_service import AnalyticsTracker
from menuku.services.auto_translate import TranslationSessionRegistry
from menuku.services.cart_service import CartStore
from menuku.services.settings_service import SettingsStore

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,128}$")

_translation_registry: Optional[TranslationSessionRegistry] = None
_cart_store: Optional[CartStore] = None
_settings_store: Optional[SettingsStore] = None
_analytics_tracker: Optional[AnalyticsTracker] = None


async def get_session_id(
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
) -> str:
    """Identify the browsing session that owns the cart and translation cache."""

    if not x_session_id:
        raise HTTPException(status_code=400, detail="Header X-Session-Id wajib diisi.")
    if not _SESSION_ID_PATTERN.match(x_session_id):
        raise HTTPException(status_code=400, detail="X-Session-Id tidak valid.")
    return x_session_id


async def require_admin(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> str:
    return verify_admin_token(authorization)


def get_translation_registry() -> TranslationSessionRegistry:
    global _translation_registry
    if _translation_registry is None:
        _translation_registry = TranslationSessionRegistry()
    return _translation_registry


def get_cart_store() -> CartStore:
    global _cart_store
    if _cart_store is None:
        _cart_store = CartStore()
    return _cart_store


def get_settings_store() -> SettingsStore:
    global _settings_store
    if _settings_store is None:
        _settings_store = SettingsStore()
    return _settings_store


def get_analytics_tracker() -> AnalyticsTracker:
    global _analytics_tracker
    if _analytics_tracker is None:
        _analytics_tracker = AnalyticsTracker()
    return _analytics_tracker


__all__ = [
    "get_analytics_tracker",
    "get_cart_store",
    "get_session_id",
    "get_settings_store",
    "get_translation_registry",
    "require_admin",
]
