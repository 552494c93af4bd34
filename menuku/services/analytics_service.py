"""Menu view counters for the admin analytics dashboard."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from menuku.schemas import AnalyticsSnapshot, AnalyticsSummaryResponse, MenuItem, TopMenuItemViews

MAX_TOP_ITEMS = 10


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AnalyticsTracker:
    """In-process view counters, reset on demand from the admin view."""

    def __init__(self, clock: Callable[[], str] = _utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._data = self._fresh()

    def _fresh(self) -> AnalyticsSnapshot:
        return AnalyticsSnapshot(last_viewed=self._clock())

    def track_view(self, item_id: Optional[str] = None, item_name: Optional[str] = None) -> AnalyticsSnapshot:
        with self._lock:
            data = self._data
            data.total_views += 1
            data.last_viewed = self._clock()
            if item_id:
                data.item_views[item_id] = data.item_views.get(item_id, 0) + 1
                if item_name:
                    data.item_names[item_id] = item_name
            return data.model_copy(deep=True)

    def reset(self) -> AnalyticsSnapshot:
        with self._lock:
            self._data = self._fresh()
            return self._data.model_copy(deep=True)

    def snapshot(self) -> AnalyticsSnapshot:
        with self._lock:
            return self._data.model_copy(deep=True)


def summarize(snapshot: AnalyticsSnapshot, menu_items: Sequence[MenuItem]) -> AnalyticsSummaryResponse:
    """Aggregate item views, naming items from the live menu first."""

    live_names = {item.id: item.name for item in menu_items}
    top: List[TopMenuItemViews] = []
    for item_id, views in snapshot.item_views.items():
        name = live_names.get(item_id) or snapshot.item_names.get(item_id)
        if not name:
            continue
        top.append(TopMenuItemViews(id=item_id, name=name, views=views))
    top.sort(key=lambda entry: entry.views, reverse=True)

    return AnalyticsSummaryResponse(
        total_views=sum(snapshot.item_views.values()),
        unique_items_viewed=len(snapshot.item_views),
        last_viewed=snapshot.last_viewed,
        top_items=top[:MAX_TOP_ITEMS],
    )


__all__ = ["AnalyticsTracker", "MAX_TOP_ITEMS", "summarize"]
