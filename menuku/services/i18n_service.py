"""Internationalization helpers for the public menu."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Tuple

from menuku.schemas import Language, MenuItem, PublicMenuItem
from menuku.services.auto_translate import AutoTranslateBinding, TranslationSession


def menu_cache_key(item_id: str, field: str) -> str:
    return f"menu_{item_id}_{field}"


def _first_error(*errors: Optional[str]) -> Optional[str]:
    for error in errors:
        if error:
            return error
    return None


async def translate_menu_items(
    items: Sequence[MenuItem],
    language: Language,
    session: TranslationSession,
) -> List[PublicMenuItem]:
    """Resolve the displayed name and description of every item for ``language``.

    Fetches for missing English texts run concurrently and share the session cache.
    """

    pairs: List[Tuple[MenuItem, AutoTranslateBinding, AutoTranslateBinding]] = []
    for item in items:
        name_binding = session.binding()
        name_binding.update(item.name, item.name_en, language, menu_cache_key(item.id, "name"))
        description_binding = session.binding()
        description_binding.update(
            item.description,
            item.description_en,
            language,
            menu_cache_key(item.id, "description"),
        )
        pairs.append((item, name_binding, description_binding))

    await asyncio.gather(
        *(binding.settle() for _, name_binding, description_binding in pairs
          for binding in (name_binding, description_binding))
    )

    translated: List[PublicMenuItem] = []
    for item, name_binding, description_binding in pairs:
        name = name_binding.snapshot
        description = description_binding.snapshot
        translated.append(
            PublicMenuItem(
                id=item.id,
                name=name.display_text,
                description=description.display_text,
                price=item.price,
                category=item.category,
                image=item.image,
                order=item.order,
                translation_error=_first_error(name.error, description.error),
            )
        )
    return translated


def menu_categories(items: Sequence[MenuItem]) -> List[str]:
    """Distinct non-empty categories in menu order."""

    seen: List[str] = []
    for item in items:
        if item.category and item.category not in seen:
            seen.append(item.category)
    return seen


__all__ = ["menu_cache_key", "menu_categories", "translate_menu_items"]
