# storefront/domain/schemas.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field


CART = "cart"
WISHLIST = "wishlist"
LIST_NAMES = (CART, WISHLIST)


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StoredItem(BaseModel):
    """Wspolna baza elementu listy - tozsamosc po id, nieznane pola zostaja."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., min_length=1)
    name: str = ""
    added_at: str = Field(default_factory=now_utc_iso, alias="addedAt")

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CartItem(StoredItem):
    """
    Pozycja koszyka.
    price/image/category to tylko podpowiedzi do wyswietlania offline,
    prawdziwe dane daje katalog.
    """

    quantity: int = Field(default=1, ge=1)
    price: float | str | None = None
    image: str | None = None
    category: str | None = None


class WishlistItem(StoredItem):
    """Pozycja listy zyczen, bez ilosci."""

    price: float | str | None = None
    image: str | None = None


ITEM_TYPES = {CART: CartItem, WISHLIST: WishlistItem}


def item_model(list_name: str) -> type[StoredItem]:
    try:
        return ITEM_TYPES[list_name]
    except KeyError:
        raise ValueError(f"Unknown list: {list_name}")


# =====================================================
# HTTP
# =====================================================
class ProductIn(BaseModel):
    """Schema dla dodawania produktu do koszyka / listy zyczen."""

    id: str = Field(..., min_length=1, description="ID produktu")
    name: str = Field("", max_length=200)
    quantity: int = Field(1, gt=0, description="Ilosc (tylko koszyk)")
    price: float | str | None = None
    image: str | None = None


class QuantityIn(BaseModel):
    quantity: int = Field(..., description="Nowa ilosc, <= 0 usuwa pozycje")


class QuantityChangeIn(BaseModel):
    delta: int = Field(..., description="Zmiana ilosci, np. +1 / -1")


class SessionIn(BaseModel):
    """Zmiana sesji wypychana przez dostawce tozsamosci. user_id None = gosc."""

    user_id: str | None = Field(None, min_length=1)


class SessionOut(BaseModel):
    authenticated: bool
    user_id: str | None = None


class ListOut(BaseModel):
    """Schema dla koszyka / listy zyczen (response)."""

    list_name: str
    items: List[dict]
    count: int
    stale: bool = False


class SummaryLineOut(BaseModel):
    id: str
    name: str
    quantity: int
    price: Decimal
    image: str = ""
    category: str = ""
    line_total: Decimal


class CartSummaryOut(BaseModel):
    items: List[SummaryLineOut]
    total_items: int
    subtotal: Decimal
    shipping: Decimal
    total: Decimal


class CheckoutOut(BaseModel):
    """Zamowione pozycje, koszyk po checkoucie jest pusty."""

    items: List[dict]
    total_items: int
