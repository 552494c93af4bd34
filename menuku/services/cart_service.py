"""Per-session shopping carts."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List

from menuku.config.storefront import SESSION_IDLE_SECONDS
from menuku.schemas import CartItem, CartItemAddPayload, CartResponse


class CartError(RuntimeError):
    """Raised when a cart operation targets an item that is not in the cart."""


class Cart:
    def __init__(self) -> None:
        self._items: List[CartItem] = []

    @property
    def items(self) -> List[CartItem]:
        return [item.model_copy() for item in self._items]

    def add(self, payload: CartItemAddPayload) -> None:
        """Add one unit, merging with an existing line for the same item."""

        for index, existing in enumerate(self._items):
            if existing.id == payload.id:
                self._items[index] = existing.model_copy(update={"qty": existing.qty + 1})
                return
        self._items.append(CartItem(id=payload.id, name=payload.name, price=payload.price, qty=1))

    def remove(self, item_id: str) -> None:
        self._items = [item for item in self._items if item.id != item_id]

    def update_qty(self, item_id: str, qty: int) -> None:
        """Set the quantity of a line; zero or less drops it."""

        if not any(item.id == item_id for item in self._items):
            raise CartError(f"Item {item_id} is not in the cart.")
        if qty <= 0:
            self.remove(item_id)
            return
        self._items = [
            item.model_copy(update={"qty": qty}) if item.id == item_id else item
            for item in self._items
        ]

    def clear(self) -> None:
        self._items = []

    def total_items(self) -> int:
        return sum(item.qty for item in self._items)

    def total_price(self) -> float:
        return sum(item.qty * item.price for item in self._items)

    def to_response(self) -> CartResponse:
        return CartResponse(
            items=self.items,
            total_items=self.total_items(),
            total_price=self.total_price(),
        )


class CartStore:
    """Carts keyed by the browsing session id; idle carts expire."""

    def __init__(
        self,
        idle_seconds: float = SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._carts: Dict[str, Cart] = {}
        self._last_seen: Dict[str, float] = {}

    def get(self, session_id: str) -> Cart:
        with self._lock:
            now = self._clock()
            for known_id, seen in list(self._last_seen.items()):
                if now - seen > self._idle_seconds:
                    self._last_seen.pop(known_id, None)
                    self._carts.pop(known_id, None)
            cart = self._carts.get(session_id)
            if cart is None:
                cart = Cart()
                self._carts[session_id] = cart
            self._last_seen[session_id] = now
            return cart

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)


__all__ = ["Cart", "CartError", "CartStore"]
