import itertools

from menuku.schemas import MenuItem, MenuSettingsUpdatePayload
from menuku.services.analytics_service import AnalyticsTracker, summarize
from menuku.services.settings_service import (
    SettingsStore,
    default_settings,
    migrate_settings,
    restaurant_display_name,
)


def _clock():
    ticks = itertools.count(1)
    return lambda: f"2024-05-0{next(ticks)}T12:00:00+00:00"


def test_track_view_counts_items_and_remembers_names():
    tracker = AnalyticsTracker(clock=_clock())
    tracker.track_view("1", "Nasi Goreng")
    tracker.track_view("1")
    tracker.track_view()
    snapshot = tracker.track_view("2", "Es Teh")

    assert snapshot.total_views == 4
    assert snapshot.item_views == {"1": 2, "2": 1}
    assert snapshot.item_names == {"1": "Nasi Goreng", "2": "Es Teh"}
    assert snapshot.last_viewed == "2024-05-05T12:00:00+00:00"


def test_summary_prefers_live_names_and_drops_unknown_items():
    tracker = AnalyticsTracker()
    tracker.track_view("1", "Old name")
    tracker.track_view("1")
    tracker.track_view("2", "Es Teh")
    tracker.track_view("ghost")
    menu = [MenuItem(id="1", name="Nasi Goreng Spesial", price=25000)]

    summary = summarize(tracker.snapshot(), menu)

    assert [(entry.name, entry.views) for entry in summary.top_items] == [
        ("Nasi Goreng Spesial", 2),
        ("Es Teh", 1),
    ]
    assert summary.total_views == 4
    assert summary.unique_items_viewed == 3


def test_summary_keeps_top_ten():
    tracker = AnalyticsTracker()
    for index in range(12):
        for _ in range(index + 1):
            tracker.track_view(str(index), f"Item {index}")

    summary = summarize(tracker.snapshot(), [])

    assert len(summary.top_items) == 10
    assert summary.top_items[0].name == "Item 11"


def test_reset_clears_counters():
    tracker = AnalyticsTracker()
    tracker.track_view("1", "Sate")

    fresh = tracker.reset()

    assert fresh.total_views == 0
    assert fresh.item_views == {}
    assert tracker.snapshot().item_names == {}


def test_legacy_placeholder_names_are_migrated():
    settings = migrate_settings(
        {"restaurant_name": "Rumah Makan Saya", "restaurant_name_en": "My Restaurant", "whatsapp_number": "62811"}
    )
    defaults = default_settings()

    assert settings.restaurant_name == defaults.restaurant_name
    assert settings.restaurant_name_en == defaults.restaurant_name_en
    assert settings.whatsapp_number == "62811"


def test_settings_store_merges_partial_updates():
    store = SettingsStore({"restaurant_name": "Warung Bu Sri"})

    updated = store.update(MenuSettingsUpdatePayload(whatsapp_number="+62 811-111", template="elegant"))

    assert updated.restaurant_name == "Warung Bu Sri"
    assert updated.whatsapp_number == "62811111"
    assert updated.template == "elegant"
    assert store.get() == updated


def test_display_name_falls_back_to_source_language_name():
    settings = default_settings().model_copy(update={"restaurant_name": "Warung", "restaurant_name_en": None})

    assert restaurant_display_name(settings, "en") == "Warung"
    assert restaurant_display_name(settings, "id") == "Warung"
