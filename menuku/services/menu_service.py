"""Menu items stored in Supabase (``menus`` plus the ``menu_photos`` side table)."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import logging
import threading
import time

from httpx import HTTPError as HttpxError
from postgrest import APIError as PostgrestAPIError

from menuku.config.supabase_client import (
    MENU_PHOTOS_TABLE,
    MENUS_TABLE,
    SUPABASE_RETRIES,
    SUPABASE_RETRY_BACKOFF,
    get_supabase_client,
)
from menuku.schemas import MenuItem, MenuItemCreatePayload, MenuItemUpdatePayload

logger = logging.getLogger(__name__)
T = TypeVar("T")

# Display order chosen by the admin; kept in process, never written to Supabase.
_ORDER_LOCK = threading.Lock()
_LOCAL_ORDER: Dict[str, int] = {}


class SupabaseUnavailableError(RuntimeError):
    """Raised when Supabase is not configured or cannot be reached."""


def _retry_supabase_call(
    operation: Callable[[], T],
    *,
    label: str,
    table: str = MENUS_TABLE,
    idempotent: bool = True,
) -> T:
    """Run a Supabase call, retrying transport failures of idempotent calls.

    Inserts run once: a timed out insert may still have been stored.
    """

    attempts = SUPABASE_RETRIES + 1 if idempotent else 1
    last_error: Optional[HttpxError] = None
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            time.sleep(SUPABASE_RETRY_BACKOFF[min(attempt - 2, len(SUPABASE_RETRY_BACKOFF) - 1)])
        start = time.monotonic()
        try:
            result = operation()
        except HttpxError as exc:
            last_error = exc
            logger.warning(
                "Supabase %s failed",
                label,
                extra={
                    "table": table,
                    "attempt": attempt,
                    "attempts": attempts,
                    "duration_ms": round((time.monotonic() - start) * 1000, 2),
                    "error": str(exc),
                },
            )
            continue
        logger.debug(
            "Supabase %s succeeded",
            label,
            extra={"table": table, "duration_ms": round((time.monotonic() - start) * 1000, 2)},
        )
        return result
    raise SupabaseUnavailableError(f"Supabase table {table} unreachable.") from last_error


def _require_client() -> Any:
    client = get_supabase_client()
    if client is None:
        raise SupabaseUnavailableError("Supabase client is not configured.")
    return client


def _row_to_menu_item(row: Dict[str, Any], photos: List[str], **fallbacks: Optional[str]) -> MenuItem:
    """Map a ``menus`` row to the API model, accepting legacy camelCase columns."""

    return MenuItem(
        id=str(row["id"]),
        name=row.get("name") or "",
        name_en=row.get("name_en") or row.get("nameEn") or fallbacks.get("name_en") or None,
        price=float(row.get("price") or 0),
        description=row.get("description") or "",
        description_en=(
            row.get("description_en")
            or row.get("descriptionEn")
            or fallbacks.get("description_en")
            or None
        ),
        category=row.get("category") or "",
        image=photos[0] if photos else fallbacks.get("image") or None,
        photos=photos,
        order=int(row.get("order") or 0),
    )


def get_menu_photos(menu_id: str) -> List[str]:
    """Return photo urls for a menu item, oldest first. Read failures yield []."""

    client = _require_client()

    def _fetch() -> Any:
        return (
            client.table(MENU_PHOTOS_TABLE)
            .select("url")
            .eq("menu_id", menu_id)
            .order("created_at", desc=False)
            .execute()
        )

    try:
        response = _retry_supabase_call(_fetch, label="get_menu_photos", table=MENU_PHOTOS_TABLE)
    except (PostgrestAPIError, SupabaseUnavailableError) as exc:
        logger.error("Error fetching menu photos for %s: %s", menu_id, exc)
        return []
    return [row["url"] for row in response.data or [] if row.get("url")]


def add_menu_photo(menu_id: str, photo_url: str) -> List[str]:
    """Attach a photo to a menu item and return the refreshed photo list."""

    client = _require_client()

    def _insert() -> Any:
        return client.table(MENU_PHOTOS_TABLE).insert([{"menu_id": menu_id, "url": photo_url}]).execute()

    _retry_supabase_call(_insert, label="add_menu_photo", table=MENU_PHOTOS_TABLE, idempotent=False)
    return get_menu_photos(menu_id)


def delete_menu_photos(menu_id: str) -> None:
    client = _require_client()

    def _delete() -> Any:
        return client.table(MENU_PHOTOS_TABLE).delete().eq("menu_id", menu_id).execute()

    _retry_supabase_call(_delete, label="delete_menu_photos", table=MENU_PHOTOS_TABLE)


def get_all_menus() -> List[MenuItem]:
    """Return every menu item ordered by creation date, with its photos."""

    client = _require_client()

    def _fetch() -> Any:
        return client.table(MENUS_TABLE).select("*").order("created_at", desc=False).execute()

    response = _retry_supabase_call(_fetch, label="get_all_menus")
    rows = response.data or []
    items = [_row_to_menu_item(row, get_menu_photos(str(row["id"]))) for row in rows]
    return apply_local_order(items)


def get_menu_by_id(menu_id: str) -> Optional[MenuItem]:
    client = _require_client()

    def _fetch() -> Any:
        return client.table(MENUS_TABLE).select("*").eq("id", menu_id).limit(1).execute()

    response = _retry_supabase_call(_fetch, label="get_menu_by_id")
    rows = response.data or []
    if not rows:
        return None
    return _row_to_menu_item(rows[0], get_menu_photos(menu_id))


def create_menu(payload: MenuItemCreatePayload) -> MenuItem:
    """Insert a menu row, then register its photo when an image url is given."""

    client = _require_client()
    body = {
        "name": payload.name,
        "name_en": payload.name_en or None,
        "price": payload.price,
        "description": payload.description,
        "description_en": payload.description_en or None,
        "category": payload.category,
    }

    def _insert() -> Any:
        return client.table(MENUS_TABLE).insert([body]).execute()

    response = _retry_supabase_call(_insert, label="create_menu", idempotent=False)
    rows = response.data or []
    if not rows:
        raise SupabaseUnavailableError("Supabase did not return the created menu.")
    row = rows[0]

    photos: List[str] = []
    if payload.image:
        photos = add_menu_photo(str(row["id"]), payload.image)

    item = _row_to_menu_item(
        row,
        photos,
        name_en=payload.name_en,
        description_en=payload.description_en,
        image=payload.image,
    )
    item.order = 0
    logger.info("Menu item created: %s", item.id)
    return item


def _build_update_body(updates: MenuItemUpdatePayload) -> Dict[str, Any]:
    provided = updates.model_fields_set
    body: Dict[str, Any] = {}
    if updates.name:
        body["name"] = updates.name
    if "name_en" in provided:
        body["name_en"] = updates.name_en or None
    if updates.price:
        body["price"] = updates.price
    if "description" in provided and updates.description is not None:
        body["description"] = updates.description
    if "description_en" in provided:
        body["description_en"] = updates.description_en or None
    if updates.category:
        body["category"] = updates.category
    return body


def update_menu(menu_id: str, updates: MenuItemUpdatePayload) -> Optional[MenuItem]:
    """Apply the provided fields; a new image replaces every existing photo.

    Returns None when no row matches ``menu_id``.
    """

    client = _require_client()
    body = _build_update_body(updates)

    if body:
        def _update() -> Any:
            return client.table(MENUS_TABLE).update(body).eq("id", menu_id).execute()

        response = _retry_supabase_call(_update, label="update_menu")
    else:
        def _fetch() -> Any:
            return client.table(MENUS_TABLE).select("*").eq("id", menu_id).limit(1).execute()

        response = _retry_supabase_call(_fetch, label="update_menu:fetch")

    rows = response.data or []
    if not rows:
        return None

    photos = get_menu_photos(menu_id)
    if updates.image and (not photos or updates.image != photos[0]):
        delete_menu_photos(menu_id)
        photos = add_menu_photo(menu_id, updates.image)

    return _row_to_menu_item(
        rows[0],
        photos,
        name_en=updates.name_en,
        description_en=updates.description_en,
    )


def delete_menu(menu_id: str) -> None:
    """Delete a menu item after its photos."""

    client = _require_client()
    delete_menu_photos(menu_id)

    def _delete() -> Any:
        return client.table(MENUS_TABLE).delete().eq("id", menu_id).execute()

    _retry_supabase_call(_delete, label="delete_menu")
    logger.info("Menu item deleted: %s", menu_id)


def reorder_menu_items(items: Sequence[MenuItem], ordered_ids: Sequence[str]) -> List[MenuItem]:
    """Return ``items`` sorted as ``ordered_ids`` with ``order`` set to the position.

    Items missing from ``ordered_ids`` keep their relative order after the listed ones.
    The order is not written back to Supabase.
    """

    by_id = {item.id: item for item in items}
    seen = set()
    ordered: List[MenuItem] = []
    for item_id in ordered_ids:
        item = by_id.get(item_id)
        if item is None or item_id in seen:
            continue
        seen.add(item_id)
        ordered.append(item)
    ordered.extend(item for item in items if item.id not in seen)
    reordered = [item.model_copy(update={"order": index}) for index, item in enumerate(ordered)]
    with _ORDER_LOCK:
        _LOCAL_ORDER.clear()
        _LOCAL_ORDER.update({item.id: item.order for item in reordered})
    return reordered


def apply_local_order(items: Sequence[MenuItem]) -> List[MenuItem]:
    """Sort freshly loaded items by the last order chosen in the admin view."""

    with _ORDER_LOCK:
        positions = dict(_LOCAL_ORDER)
    if not positions:
        return list(items)
    fallback = len(positions)
    ranked = sorted(
        enumerate(items),
        key=lambda pair: (positions.get(pair[1].id, fallback), pair[0]),
    )
    return [item.model_copy(update={"order": index}) for index, (_, item) in enumerate(ranked)]


__all__ = [
    "SupabaseUnavailableError",
    "add_menu_photo",
    "apply_local_order",
    "create_menu",
    "delete_menu",
    "delete_menu_photos",
    "get_all_menus",
    "get_menu_by_id",
    "get_menu_photos",
    "reorder_menu_items",
    "update_menu",
]
