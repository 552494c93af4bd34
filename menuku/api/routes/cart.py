"""Customer cart and WhatsApp checkout."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from menuku.api.deps import get_cart_store, get_session_id, get_settings_store
from menuku.schemas import (
    CartItemAddPayload,
    CartQuantityPayload,
    CartResponse,
    CheckoutPayload,
    CheckoutResponse,
)
from menuku.security.guards import enforce_same_origin
from menuku.services.cart_service import CartError, CartStore
from menuku.services.checkout_service import EmptyCartError, build_checkout
from menuku.services.settings_service import SettingsStore

router = APIRouter(prefix="/api/cart", tags=["cart"])
logger = logging.getLogger(__name__)


@router.get("", response_model=CartResponse)
def read_cart(
    session_id: str = Depends(get_session_id),
    carts: CartStore = Depends(get_cart_store),
) -> CartResponse:
    return carts.get(session_id).to_response()


@router.post("/items", response_model=CartResponse)
def add_cart_item(
    payload: CartItemAddPayload,
    request: Request,
    session_id: str = Depends(get_session_id),
    carts: CartStore = Depends(get_cart_store),
) -> CartResponse:
    enforce_same_origin(request)
    cart = carts.get(session_id)
    cart.add(payload)
    return cart.to_response()


@router.patch("/items/{item_id}", response_model=CartResponse)
def update_cart_item(
    item_id: str,
    payload: CartQuantityPayload,
    session_id: str = Depends(get_session_id),
    carts: CartStore = Depends(get_cart_store),
) -> CartResponse:
    cart = carts.get(session_id)
    try:
        cart.update_qty(item_id, payload.qty)
    except CartError as exc:
        raise HTTPException(status_code=404, detail="Item tidak ada di keranjang.") from exc
    return cart.to_response()


@router.delete("/items/{item_id}", response_model=CartResponse)
def remove_cart_item(
    item_id: str,
    session_id: str = Depends(get_session_id),
    carts: CartStore = Depends(get_cart_store),
) -> CartResponse:
    cart = carts.get(session_id)
    cart.remove(item_id)
    return cart.to_response()


@router.delete("", response_model=CartResponse)
def clear_cart(
    session_id: str = Depends(get_session_id),
    carts: CartStore = Depends(get_cart_store),
) -> CartResponse:
    cart = carts.get(session_id)
    cart.clear()
    return cart.to_response()


@router.post("/checkout", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutPayload,
    session_id: str = Depends(get_session_id),
    carts: CartStore = Depends(get_cart_store),
    store: SettingsStore = Depends(get_settings_store),
) -> CheckoutResponse:
    cart = carts.get(session_id)
    try:
        result = build_checkout(cart.items, store.get(), payload.language)
    except EmptyCartError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    logger.info("Checkout link built for %s items", cart.total_items())
    return result
