"""Default storefront settings for the public menu."""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RESTAURANT_NAME = os.getenv("RESTAURANT_NAME", "DSAI Kitchen")
DEFAULT_RESTAURANT_NAME_EN = os.getenv("RESTAURANT_NAME_EN", DEFAULT_RESTAURANT_NAME)
DEFAULT_WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "6281227281923")
DEFAULT_TEMPLATE = os.getenv("MENU_TEMPLATE", "modern")
DEFAULT_OPEN_HOURS = os.getenv("OPEN_HOURS", "10:00 - 22:00")
DEFAULT_ADDRESS = os.getenv("RESTAURANT_ADDRESS", "Jl. Contoh No. 123, Jakarta")

ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN")

# Carts and translation caches of a session are dropped after this much inactivity.
SESSION_IDLE_SECONDS = float(os.getenv("SESSION_IDLE_SECONDS", "3600"))

__all__ = [
    "ADMIN_API_TOKEN",
    "DEFAULT_ADDRESS",
    "DEFAULT_OPEN_HOURS",
    "DEFAULT_RESTAURANT_NAME",
    "DEFAULT_RESTAURANT_NAME_EN",
    "DEFAULT_TEMPLATE",
    "DEFAULT_WHATSAPP_NUMBER",
    "SESSION_IDLE_SECONDS",
]
