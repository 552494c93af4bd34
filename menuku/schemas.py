from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Language = Literal["id", "en"]
TemplateName = Literal["minimalist", "colorful", "elegant", "modern"]


class MenuItem(BaseModel):
    id: str
    name: str
    name_en: Optional[str] = None
    price: float
    description: str = ""
    description_en: Optional[str] = None
    category: str = ""
    image: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    order: int = 0


class MenuItemCreatePayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    name_en: Optional[str] = Field(default=None, max_length=200)
    price: float = Field(..., ge=0)
    description: str = Field(default="", max_length=2000)
    description_en: Optional[str] = Field(default=None, max_length=2000)
    category: str = Field(default="", max_length=100)
    image: Optional[str] = None


class MenuItemUpdatePayload(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    name_en: Optional[str] = Field(default=None, max_length=200)
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=2000)
    description_en: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = None


class ReorderPayload(BaseModel):
    item_ids: List[str] = Field(..., min_length=1)


class MenuSettings(BaseModel):
    restaurant_name: str
    restaurant_name_en: Optional[str] = None
    whatsapp_number: str
    template: TemplateName = "modern"
    open_hours: Optional[str] = None
    address: Optional[str] = None


class MenuSettingsUpdatePayload(BaseModel):
    restaurant_name: Optional[str] = Field(default=None, max_length=120)
    restaurant_name_en: Optional[str] = Field(default=None, max_length=120)
    whatsapp_number: Optional[str] = Field(default=None, max_length=32)
    template: Optional[TemplateName] = None
    open_hours: Optional[str] = Field(default=None, max_length=64)
    address: Optional[str] = Field(default=None, max_length=240)

    @field_validator("whatsapp_number")
    @classmethod
    def _digits_only(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        digits = "".join(ch for ch in value if ch.isdigit())
        if not digits:
            raise ValueError("Nomor WhatsApp tidak valid.")
        return digits


class TranslateRequest(BaseModel):
    """Ad-hoc translation of one storefront text.

    Without ``cache_key`` the key is derived from the first 50 characters of
    ``text``, so long texts sharing that prefix share one cached translation.
    Send a ``cache_key`` for anything longer.
    """

    text: str = Field(..., max_length=5000)
    text_en: Optional[str] = None
    language: Language = "en"
    cache_key: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Stable key for the cached translation; recommended for texts over 50 characters.",
    )


class TranslateResponse(BaseModel):
    display_text: str
    is_translating: bool
    error: Optional[str] = None


class PublicMenuItem(BaseModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    image: Optional[str] = None
    order: int = 0
    translation_error: Optional[str] = None


class PublicMenuResponse(BaseModel):
    language: Language
    restaurant_name: str
    whatsapp_number: str
    template: TemplateName
    open_hours: Optional[str] = None
    address: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    items: List[PublicMenuItem] = Field(default_factory=list)


class CartItem(BaseModel):
    id: str
    name: str
    price: float = Field(..., ge=0)
    qty: int = Field(default=1, ge=1)


class CartItemAddPayload(BaseModel):
    id: str
    name: str
    price: float = Field(..., ge=0)


class CartQuantityPayload(BaseModel):
    qty: int


class CartResponse(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    total_items: int = 0
    total_price: float = 0


class CheckoutPayload(BaseModel):
    language: Language = "id"


class CheckoutResponse(BaseModel):
    message: str
    whatsapp_url: str
    total_price: float


class TopMenuItemViews(BaseModel):
    id: str
    name: str
    views: int


class AnalyticsSummaryResponse(BaseModel):
    total_views: int
    unique_items_viewed: int
    last_viewed: str
    top_items: List[TopMenuItemViews] = Field(default_factory=list)


class TrackViewPayload(BaseModel):
    item_name: Optional[str] = None


class AnalyticsSnapshot(BaseModel):
    total_views: int = 0
    item_views: Dict[str, int] = Field(default_factory=dict)
    item_names: Dict[str, str] = Field(default_factory=dict)
    last_viewed: str
