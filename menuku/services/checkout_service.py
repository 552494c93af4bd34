"""WhatsApp checkout message for the customer's cart."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from menuku.schemas import CartItem, CheckoutResponse, MenuSettings
from menuku.services.settings_service import restaurant_display_name

WHATSAPP_BASE_URL = "https://wa.me"

GREETINGS = {
    "id": "Halo {name}, saya ingin memesan:",
    "en": "Hello {name}, I would like to order:",
}


class EmptyCartError(ValueError):
    """Raised when checking out a cart without items."""


def format_rupiah(amount: float) -> str:
    """Format an amount the way ``id-ID`` locales do: ``Rp 25.000``."""

    rounded = int(round(amount))
    grouped = f"{abs(rounded):,}".replace(",", ".")
    sign = "-" if rounded < 0 else ""
    return f"Rp {sign}{grouped}"


def build_order_message(items: Sequence[CartItem], settings: MenuSettings, language: str) -> str:
    if not items:
        raise EmptyCartError("Keranjang masih kosong.")

    name = restaurant_display_name(settings, language)
    greeting = GREETINGS.get(language, GREETINGS["id"]).format(name=name)
    lines = [greeting, ""]
    for item in items:
        lines.append(f"• {item.qty}x {item.name} – {format_rupiah(item.qty * item.price)}")
    total = sum(item.qty * item.price for item in items)
    lines.append("")
    lines.append(f"Total: {format_rupiah(total)}")
    return "\n".join(lines)


def build_whatsapp_url(whatsapp_number: str, message: str) -> str:
    number = "".join(ch for ch in whatsapp_number if ch.isdigit())
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(message, safe='')}"


def build_checkout(items: Sequence[CartItem], settings: MenuSettings, language: str) -> CheckoutResponse:
    message = build_order_message(items, settings, language)
    return CheckoutResponse(
        message=message,
        whatsapp_url=build_whatsapp_url(settings.whatsapp_number, message),
        total_price=sum(item.qty * item.price for item in items),
    )


__all__ = [
    "EmptyCartError",
    "build_checkout",
    "build_order_message",
    "build_whatsapp_url",
    "format_rupiah",
]
