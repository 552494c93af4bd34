import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from menuku.api.deps import (
    get_analytics_tracker,
    get_session_id,
    get_settings_store,
    get_translation_registry,
)
from menuku.api.routes.menus import SupabaseMenuRepository, get_menu_repository
from menuku.schemas import Language, PublicMenuResponse, TrackViewPayload
from menuku.security.guards import rate_limit_request
from menuku.services.analytics_service import AnalyticsTracker
from menuku.services.auto_translate import TranslationSessionRegistry
from menuku.services.i18n_service import menu_categories, translate_menu_items
from menuku.services.settings_service import SettingsStore, restaurant_display_name

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/public/menu", response_model=PublicMenuResponse)
async def public_menu(
    request: Request,
    lang: Language = Query(default="id"),
    category: Optional[str] = Query(default=None),
    session_id: str = Depends(get_session_id),
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
    registry: TranslationSessionRegistry = Depends(get_translation_registry),
    store: SettingsStore = Depends(get_settings_store),
) -> PublicMenuResponse:
    rate_limit_request(request, scope="public-menu", limit=30, window_seconds=60)
    items = await repository.list_menus()
    categories = menu_categories(items)
    if category and category != "all":
        items = [item for item in items if item.category == category]

    translated = await translate_menu_items(items, lang, registry.get(session_id))
    failures = sum(1 for item in translated if item.translation_error)
    if failures:
        logger.warning("Public menu served with %s untranslated items", failures)

    settings = store.get()
    return PublicMenuResponse(
        language=lang,
        restaurant_name=restaurant_display_name(settings, lang),
        whatsapp_number=settings.whatsapp_number,
        template=settings.template,
        open_hours=settings.open_hours,
        address=settings.address,
        categories=categories,
        items=translated,
    )


@router.post("/public/menu/{item_id}/view", status_code=204)
def track_menu_view(
    item_id: str,
    request: Request,
    payload: Optional[TrackViewPayload] = None,
    tracker: AnalyticsTracker = Depends(get_analytics_tracker),
) -> None:
    rate_limit_request(request, scope="menu-view", limit=120, window_seconds=60)
    tracker.track_view(item_id, payload.item_name if payload else None)
