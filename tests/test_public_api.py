from typing import List

import pytest
from fastapi.testclient import TestClient

from menuku.api import deps
from menuku.api.routes import menus as menu_routes
from menuku.api.routes.menus import SupabaseMenuRepository
from menuku.main import app
from menuku.schemas import MenuItem, MenuItemCreatePayload
from menuku.security.guards import reset_rate_limits
from menuku.services.analytics_service import AnalyticsTracker
from menuku.services.auto_translate import TranslationSessionRegistry
from menuku.services.cart_service import CartStore
from menuku.services.settings_service import SettingsStore
from menuku.services.translate_service import TranslationError

SESSION_HEADERS = {"X-Session-Id": "session-1234"}


class FakeFetcher:
    def __init__(self):
        self.calls: List[str] = []
        self.failing = set()

    async def __call__(self, text: str) -> str:
        self.calls.append(text)
        if text in self.failing:
            raise TranslationError("network down")
        return {"Nasi Goreng": "Fried Rice", "Nasi goreng spesial": "Special fried rice"}.get(text, text)


class FakeMenuRepository(SupabaseMenuRepository):
    def __init__(self):
        self.items = [
            MenuItem(id="1", name="Nasi Goreng", price=25000, description="Nasi goreng spesial", category="Makanan"),
            MenuItem(
                id="2",
                name="Es Teh",
                name_en="Iced Tea",
                price=5000,
                description="Teh manis",
                description_en="Sweet tea",
                category="Minuman",
            ),
        ]

    async def list_menus(self):
        return list(self.items)

    async def create_menu(self, payload: MenuItemCreatePayload):
        item = MenuItem(id=str(len(self.items) + 1), **payload.model_dump(exclude={"image"}))
        self.items.append(item)
        return item


@pytest.fixture(name="api")
def client_fixture():
    fetcher = FakeFetcher()
    repository = FakeMenuRepository()
    registry = TranslationSessionRegistry(fetcher=fetcher)
    carts = CartStore()
    settings = SettingsStore({"restaurant_name": "Warung Bu Sri", "restaurant_name_en": "Mrs Sri's Diner"})
    tracker = AnalyticsTracker()

    async def override_repository():
        return repository

    app.dependency_overrides[menu_routes.get_menu_repository] = override_repository
    app.dependency_overrides[deps.get_translation_registry] = lambda: registry
    app.dependency_overrides[deps.get_cart_store] = lambda: carts
    app.dependency_overrides[deps.get_settings_store] = lambda: settings
    app.dependency_overrides[deps.get_analytics_tracker] = lambda: tracker
    reset_rate_limits()

    with TestClient(app) as client:
        client.fetcher = fetcher  # type: ignore[attr-defined]
        client.repository = repository  # type: ignore[attr-defined]
        yield client

    app.dependency_overrides.clear()


def test_health(api: TestClient) -> None:
    assert api.get("/health").json() == {"status": "ok"}


def test_public_menu_in_indonesian_never_translates(api: TestClient) -> None:
    response = api.get("/api/public/menu", params={"lang": "id"}, headers=SESSION_HEADERS)

    assert response.status_code == 200
    payload = response.json()
    assert payload["restaurant_name"] == "Warung Bu Sri"
    assert payload["categories"] == ["Makanan", "Minuman"]
    assert [item["name"] for item in payload["items"]] == ["Nasi Goreng", "Es Teh"]
    assert api.fetcher.calls == []  # type: ignore[attr-defined]


def test_public_menu_in_english_translates_missing_fields_once(api: TestClient) -> None:
    first = api.get("/api/public/menu", params={"lang": "en"}, headers=SESSION_HEADERS).json()
    second = api.get("/api/public/menu", params={"lang": "en"}, headers=SESSION_HEADERS).json()

    assert first == second
    assert first["restaurant_name"] == "Mrs Sri's Diner"
    items = {item["id"]: item for item in first["items"]}
    assert items["1"]["name"] == "Fried Rice"
    assert items["1"]["description"] == "Special fried rice"
    assert items["2"]["name"] == "Iced Tea"
    assert items["2"]["description"] == "Sweet tea"
    assert sorted(api.fetcher.calls) == ["Nasi Goreng", "Nasi goreng spesial"]  # type: ignore[attr-defined]


def test_public_menu_falls_back_when_translation_fails(api: TestClient) -> None:
    api.fetcher.failing.add("Nasi Goreng")  # type: ignore[attr-defined]

    payload = api.get("/api/public/menu", params={"lang": "en", "category": "Makanan"}, headers=SESSION_HEADERS).json()

    assert len(payload["items"]) == 1
    assert payload["items"][0]["name"] == "Nasi Goreng"
    assert payload["items"][0]["translation_error"] == "network down"


def test_public_menu_requires_session_header(api: TestClient) -> None:
    assert api.get("/api/public/menu").status_code == 400
    assert api.get("/api/public/menu", headers={"X-Session-Id": "bad id!"}).status_code == 400


def test_public_menu_is_rate_limited_per_client(api: TestClient) -> None:
    statuses = [
        api.get("/api/public/menu", params={"lang": "en"}, headers={"X-Session-Id": f"visitor-{index:04d}"}).status_code
        for index in range(31)
    ]

    assert statuses[:30] == [200] * 30
    assert statuses[30] == 429
    assert len(api.fetcher.calls) == 60  # type: ignore[attr-defined]


def test_translate_endpoint_and_cache_reset(api: TestClient) -> None:
    body = {"text": "Nasi Goreng", "language": "en", "cache_key": "menu_1_name"}

    first = api.post("/api/translate", json=body, headers=SESSION_HEADERS)
    second = api.post("/api/translate", json=body, headers=SESSION_HEADERS)

    assert first.json() == {"display_text": "Fried Rice", "is_translating": False, "error": None}
    assert second.json() == first.json()
    assert len(api.fetcher.calls) == 1  # type: ignore[attr-defined]

    assert api.delete("/api/translate/cache", headers=SESSION_HEADERS).status_code == 204
    api.post("/api/translate", json=body, headers=SESSION_HEADERS)
    assert len(api.fetcher.calls) == 2  # type: ignore[attr-defined]


def test_cart_flow_and_checkout(api: TestClient) -> None:
    api.post("/api/cart/items", json={"id": "1", "name": "Nasi Goreng", "price": 25000}, headers=SESSION_HEADERS)
    api.post("/api/cart/items", json={"id": "1", "name": "Nasi Goreng", "price": 25000}, headers=SESSION_HEADERS)
    cart = api.post(
        "/api/cart/items", json={"id": "2", "name": "Es Teh", "price": 5000}, headers=SESSION_HEADERS
    ).json()

    assert cart["total_items"] == 3
    assert cart["total_price"] == 55000

    cart = api.patch("/api/cart/items/2", json={"qty": 0}, headers=SESSION_HEADERS).json()
    assert [item["id"] for item in cart["items"]] == ["1"]

    checkout = api.post("/api/cart/checkout", json={"language": "id"}, headers=SESSION_HEADERS)
    assert checkout.status_code == 200
    payload = checkout.json()
    assert payload["message"].startswith("Halo Warung Bu Sri")
    assert payload["whatsapp_url"].startswith("https://wa.me/")
    assert payload["total_price"] == 50000

    assert api.patch("/api/cart/items/99", json={"qty": 2}, headers=SESSION_HEADERS).status_code == 404
    assert api.delete("/api/cart", headers=SESSION_HEADERS).json()["total_items"] == 0
    assert api.post("/api/cart/checkout", json={}, headers=SESSION_HEADERS).status_code == 422


def test_admin_routes_require_token(api: TestClient) -> None:
    assert api.get("/api/admin/menus").status_code == 401


def test_admin_menu_and_analytics(api: TestClient) -> None:
    app.dependency_overrides[deps.require_admin] = lambda: "admin-token"

    created = api.post("/api/admin/menus", json={"name": "Sate Ayam", "price": 20000, "category": "Makanan"})
    assert created.status_code == 201
    assert created.json()["name"] == "Sate Ayam"

    api.post("/api/public/menu/1/view", json={"item_name": "Nasi Goreng"})
    api.post("/api/public/menu/1/view")
    api.post("/api/public/menu/ghost/view")

    summary = api.get("/api/admin/analytics").json()
    assert summary["total_views"] == 3
    assert summary["top_items"] == [{"id": "1", "name": "Nasi Goreng", "views": 2}]

    reset = api.post("/api/admin/analytics/reset").json()
    assert reset["total_views"] == 0

    settings = api.patch("/api/admin/settings", json={"template": "colorful"}).json()
    assert settings["template"] == "colorful"
    assert api.get("/api/admin/settings").json()["restaurant_name"] == "Warung Bu Sri"
