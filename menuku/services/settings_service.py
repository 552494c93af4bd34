"""Storefront settings shared by the admin and public views."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from menuku.config.storefront import (
    DEFAULT_ADDRESS,
    DEFAULT_OPEN_HOURS,
    DEFAULT_RESTAURANT_NAME,
    DEFAULT_RESTAURANT_NAME_EN,
    DEFAULT_TEMPLATE,
    DEFAULT_WHATSAPP_NUMBER,
)
from menuku.schemas import MenuSettings, MenuSettingsUpdatePayload

logger = logging.getLogger(__name__)

LEGACY_RESTAURANT_NAMES = {"Rumah Makan Saya"}
LEGACY_RESTAURANT_NAMES_EN = {"My Restaurant"}


def default_settings() -> MenuSettings:
    return MenuSettings(
        restaurant_name=DEFAULT_RESTAURANT_NAME,
        restaurant_name_en=DEFAULT_RESTAURANT_NAME_EN,
        whatsapp_number=DEFAULT_WHATSAPP_NUMBER,
        template=DEFAULT_TEMPLATE,
        open_hours=DEFAULT_OPEN_HOURS,
        address=DEFAULT_ADDRESS,
    )


def migrate_settings(raw: Optional[Dict[str, Any]]) -> MenuSettings:
    """Build settings from stored data, replacing placeholder names left by older versions."""

    defaults = default_settings()
    if not raw:
        return defaults

    data = defaults.model_dump()
    data.update({key: value for key, value in raw.items() if key in data and value is not None})

    name = (data.get("restaurant_name") or "").strip()
    if not name or name in LEGACY_RESTAURANT_NAMES:
        logger.info("Migrating legacy restaurant name %r", name)
        data["restaurant_name"] = defaults.restaurant_name
    name_en = (data.get("restaurant_name_en") or "").strip()
    if not name_en or name_en in LEGACY_RESTAURANT_NAMES_EN:
        data["restaurant_name_en"] = defaults.restaurant_name_en
    return MenuSettings(**data)


class SettingsStore:
    """Process-wide settings with partial updates."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._lock = threading.Lock()
        self._settings = migrate_settings(initial)

    def get(self) -> MenuSettings:
        with self._lock:
            return self._settings.model_copy()

    def update(self, payload: MenuSettingsUpdatePayload) -> MenuSettings:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with self._lock:
            self._settings = self._settings.model_copy(update=changes)
            logger.info("Settings updated: %s", sorted(changes))
            return self._settings.model_copy()


def restaurant_display_name(settings: MenuSettings, language: str) -> str:
    if language == "en" and settings.restaurant_name_en:
        return settings.restaurant_name_en
    return settings.restaurant_name


__all__ = [
    "SettingsStore",
    "default_settings",
    "migrate_settings",
    "restaurant_display_name",
]
