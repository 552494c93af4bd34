from urllib.parse import unquote

import pytest

from menuku.schemas import CartItem, CartItemAddPayload
from menuku.services.cart_service import Cart, CartError, CartStore
from menuku.services.checkout_service import (
    EmptyCartError,
    build_checkout,
    build_order_message,
    format_rupiah,
)
from menuku.services.settings_service import default_settings


def _cart_with_items() -> Cart:
    cart = Cart()
    cart.add(CartItemAddPayload(id="1", name="Nasi Goreng", price=25000))
    cart.add(CartItemAddPayload(id="2", name="Es Teh", price=5000))
    cart.add(CartItemAddPayload(id="1", name="Nasi Goreng", price=25000))
    return cart


def test_adding_same_item_increments_quantity():
    cart = _cart_with_items()

    assert [(item.id, item.qty) for item in cart.items] == [("1", 2), ("2", 1)]
    assert cart.total_items() == 3
    assert cart.total_price() == 55000


def test_update_qty_to_zero_removes_line():
    cart = _cart_with_items()

    cart.update_qty("2", 0)
    cart.update_qty("1", 4)

    assert [(item.id, item.qty) for item in cart.items] == [("1", 4)]
    with pytest.raises(CartError):
        cart.update_qty("missing", 1)


def test_remove_and_clear():
    cart = _cart_with_items()
    cart.remove("1")
    assert [item.id for item in cart.items] == ["2"]

    cart.clear()
    response = cart.to_response()
    assert response.items == []
    assert response.total_items == 0
    assert response.total_price == 0


def test_cart_store_isolates_sessions():
    store = CartStore()
    store.get("alpha").add(CartItemAddPayload(id="1", name="Sate", price=20000))

    assert store.get("beta").items == []
    assert store.get("alpha").total_items() == 1


def test_format_rupiah_uses_dot_grouping():
    assert format_rupiah(25000) == "Rp 25.000"
    assert format_rupiah(1250000) == "Rp 1.250.000"
    assert format_rupiah(500) == "Rp 500"


def test_order_message_in_indonesian():
    settings = default_settings().model_copy(update={"restaurant_name": "Warung Bu Sri"})
    items = [
        CartItem(id="1", name="Nasi Goreng", price=25000, qty=2),
        CartItem(id="2", name="Es Teh", price=5000, qty=1),
    ]

    message = build_order_message(items, settings, "id")

    assert message.splitlines() == [
        "Halo Warung Bu Sri, saya ingin memesan:",
        "",
        "• 2x Nasi Goreng – Rp 50.000",
        "• 1x Es Teh – Rp 5.000",
        "",
        "Total: Rp 55.000",
    ]


def test_english_message_prefers_english_restaurant_name():
    settings = default_settings().model_copy(
        update={"restaurant_name": "Warung Bu Sri", "restaurant_name_en": "Mrs Sri's Diner"}
    )
    items = [CartItem(id="1", name="Fried Rice", price=25000, qty=1)]

    message = build_order_message(items, settings, "en")

    assert message.startswith("Hello Mrs Sri's Diner, I would like to order:")


def test_checkout_builds_whatsapp_link():
    settings = default_settings().model_copy(update={"whatsapp_number": "+62 812-2728"})
    items = [CartItem(id="1", name="Nasi Goreng", price=25000, qty=1)]

    checkout = build_checkout(items, settings, "id")

    assert checkout.whatsapp_url.startswith("https://wa.me/628122728?text=")
    assert unquote(checkout.whatsapp_url.split("?text=", 1)[1]) == checkout.message
    assert checkout.total_price == 25000


def test_empty_cart_cannot_checkout():
    with pytest.raises(EmptyCartError):
        build_checkout([], default_settings(), "id")


def test_idle_carts_expire():
    now = [0.0]
    store = CartStore(idle_seconds=60, clock=lambda: now[0])
    store.get("alpha").add(CartItemAddPayload(id="1", name="Nasi Goreng", price=25000))
    store.get("beta")

    now[0] = 61.0
    store.get("beta")

    assert len(store) == 1
    assert store.get("alpha").items == []
