# storefront/domain/lists.py
"""Czyste operacje na listach - wspolne dla magazynu lokalnego i zdalnego."""
from typing import List

from storefront.domain.schemas import CART, StoredItem


def find(items: List[StoredItem], item_id: str) -> StoredItem | None:
    return next((i for i in items if i.id == item_id), None)


def add(items: List[StoredItem], item: StoredItem) -> List[StoredItem]:
    """
    Dopisuje produkt na koniec listy.
    Id juz obecne: lista bez zmian (ilosc zmienia sie tylko przez +/-).
    """
    if find(items, item.id) is None:
        return [*items, item]
    return list(items)


def remove(items: List[StoredItem], item_id: str) -> List[StoredItem] | None:
    """None gdy nie ma takiego id."""
    remaining = [i for i in items if i.id != item_id]
    if len(remaining) == len(items):
        return None
    return remaining


def set_quantity(items: List[StoredItem], item_id: str, quantity: int) -> List[StoredItem] | None:
    """quantity <= 0 usuwa pozycje; None gdy nie ma takiego id."""
    if find(items, item_id) is None:
        return None

    if quantity <= 0:
        return [i for i in items if i.id != item_id]

    return [i.model_copy(update={"quantity": quantity}) if i.id == item_id else i for i in items]


def count(list_name: str, items: List[StoredItem]) -> int:
    if list_name == CART:
        return sum(getattr(i, "quantity", 1) or 1 for i in items)
    return len(items)
