"""Admin endpoints for storefront settings and view analytics."""

import logging

from fastapi import APIRouter, Depends

from menuku.api.deps import get_analytics_tracker, get_settings_store, require_admin
from menuku.api.routes.menus import SupabaseMenuRepository, get_menu_repository
from menuku.schemas import AnalyticsSummaryResponse, MenuSettings, MenuSettingsUpdatePayload
from menuku.services.analytics_service import AnalyticsTracker, summarize
from menuku.services.settings_service import SettingsStore

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=MenuSettings)
def read_settings(store: SettingsStore = Depends(get_settings_store)) -> MenuSettings:
    return store.get()


@router.patch("/settings", response_model=MenuSettings)
def update_settings(
    payload: MenuSettingsUpdatePayload,
    store: SettingsStore = Depends(get_settings_store),
) -> MenuSettings:
    return store.update(payload)


@router.get("/analytics", response_model=AnalyticsSummaryResponse)
async def read_analytics(
    tracker: AnalyticsTracker = Depends(get_analytics_tracker),
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
) -> AnalyticsSummaryResponse:
    menu_items = await repository.list_menus()
    return summarize(tracker.snapshot(), menu_items)


@router.post("/analytics/reset", response_model=AnalyticsSummaryResponse)
def reset_analytics(tracker: AnalyticsTracker = Depends(get_analytics_tracker)) -> AnalyticsSummaryResponse:
    logger.info("Analytics reset from admin view")
    return summarize(tracker.reset(), [])
