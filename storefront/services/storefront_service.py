# storefront/services/storefront_service.py
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List

import requests

from storefront.domain import lists
from storefront.domain.result import ErrorKind, Result
from storefront.domain.schemas import CART, WISHLIST, StoredItem
from storefront.services.catalog_client import CatalogClient
from storefront.services.notification_service import NotificationService
from storefront.services.reconciliation import ReconciliationEngine
from storefront.utils.settings import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Renderer = Callable[[str, List[StoredItem]], object]


def parse_price(value: Any) -> Decimal:
    """Cena z katalogu bywa tekstem do wyswietlenia (np. "₹1,299"), zostawiamy tylko cyfry i kropke."""
    if value is None:
        return Decimal("0.00")

    digits = re.sub(r"[^0-9.]", "", str(value))
    try:
        return Decimal(digits)
    except InvalidOperation:
        return Decimal("0.00")


class StorefrontService:
    """
    Operacje wolane przez UI (koszyk + lista zyczen).
    Wszystko idzie przez silnik; po sukcesie render + komunikat,
    po bledzie tylko komunikat o bledzie, UI nie dostaje polowicznego stanu.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        notifier: NotificationService | None = None,
        catalog: CatalogClient | None = None,
        render: Renderer | None = None,
    ):
        self.engine = engine
        self.notifier = notifier or NotificationService()
        self.catalog = catalog or CatalogClient()
        self.render = render

    def _dispatch(self, list_name: str, result: Result, message: str, unchanged: str | None = None) -> Result:
        if result.ok and not result.changed and unchanged:
            self.notifier.info(unchanged)
        elif result.ok:
            if self.render is not None:
                self.render(list_name, result.items)
            self.notifier.success(message)
        else:
            logger.warning(f"{list_name} operation failed ({result.kind.value}): {result.message}")
            self.notifier.error(result.message)
        return result

    #commands - koszyk
    def add_to_cart(self, product: Dict[str, Any], quantity: int = 1) -> Result:
        result = self.engine.add_item(CART, {**product, "quantity": quantity})
        return self._dispatch(CART, result, "Product added to cart!", unchanged="Product is already in your cart")

    def remove_from_cart(self, product_id: str) -> Result:
        result = self.engine.remove_item(CART, product_id)
        return self._dispatch(CART, result, "Product removed from cart")

    def update_cart_item_quantity(self, product_id: str, quantity: int) -> Result:
        result = self.engine.set_quantity(product_id, quantity)
        message = "Cart updated" if quantity > 0 else "Product removed from cart"
        return self._dispatch(CART, result, message)

    def change_cart_item_quantity(self, product_id: str, delta: int) -> Result:
        result = self.engine.change_quantity(product_id, delta)
        return self._dispatch(CART, result, "Cart updated")

    def checkout(self) -> Result:
        result = self.engine.checkout()

        if result.ok:
            if self.render is not None:
                self.render(CART, [])
            self.notifier.success("Order placed successfully!")
        else:
            logger.warning(f"Checkout failed ({result.kind.value}): {result.message}")
            self.notifier.error(result.message)
        return result

    #commands - lista zyczen
    def add_to_wishlist(self, product: Dict[str, Any]) -> Result:
        data = {k: v for k, v in product.items() if k != "quantity"}
        result = self.engine.add_item(WISHLIST, data)
        return self._dispatch(WISHLIST, result, "Added to wishlist", unchanged="Already in your wishlist")

    def remove_from_wishlist(self, product_id: str) -> Result:
        result = self.engine.remove_item(WISHLIST, product_id)
        return self._dispatch(WISHLIST, result, "Removed from wishlist")

    def toggle_wishlist(self, product: Dict[str, Any]) -> Result:
        data = {k: v for k, v in product.items() if k != "quantity"}
        result = self.engine.toggle_item(WISHLIST, data)
        added = result.ok and lists.find(result.items, data.get("id")) is not None
        return self._dispatch(WISHLIST, result, "Added to wishlist" if added else "Removed from wishlist")

    #query
    def _read(self, list_name: str) -> Result:
        result = self.engine.load(list_name)

        if not result.ok and result.kind == ErrorKind.TRANSPORT_FAILURE:
            #offline: pokazujemy ostatnia kopie, ale user wie ze moze byc nieaktualna
            if self.render is not None:
                self.render(list_name, result.items)
            self.notifier.error(f"Could not sync your {list_name}, showing the saved copy")
        elif result.ok and self.render is not None:
            self.render(list_name, result.items)

        return result

    def get_cart(self) -> Result:
        return self._read(CART)

    def get_wishlist(self) -> Result:
        return self._read(WISHLIST)

    def cart_count(self) -> int:
        return self.engine.count(CART)

    def wishlist_count(self) -> int:
        return self.engine.count(WISHLIST)

    def _product_details(self, item: StoredItem) -> Dict[str, Any]:
        unavailable = {"name": item.name, "price": Decimal("0.00"), "image": "", "category": "Unavailable"}

        try:
            data = self.catalog.fetch_product(item.id)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Catalog lookup for {item.id} failed: {e}")
            return unavailable

        if not isinstance(data, dict):
            logger.warning(f"Catalog returned {type(data).__name__} for {item.id}, expected an object")
            return unavailable

        return {
            "name": data.get("name") or item.name,
            "price": parse_price(data.get("price")),
            "image": data.get("image") or "",
            "category": data.get("category") or "Uncategorized",
        }

    def cart_summary(self) -> Dict[str, Any]:
        """
        Wycena koszyka na podstawie katalogu:
        -subtotal = suma cena * ilosc
        -darmowa dostawa powyzej progu, pusty koszyk bez dostawy
        """
        items = self.engine.load(CART).items
        lines = []

        for item in items:
            details = self._product_details(item)
            lines.append(
                {
                    "id": item.id,
                    "quantity": item.quantity,
                    **details,
                    "line_total": details["price"] * item.quantity,
                }
            )

        subtotal = sum((line["line_total"] for line in lines), Decimal("0.00"))

        if not lines or subtotal > FREE_SHIPPING_THRESHOLD:
            shipping = Decimal("0.00")
        else:
            shipping = Decimal(SHIPPING_FEE)

        return {
            "items": lines,
            "total_items": lists.count(CART, items),
            "subtotal": subtotal,
            "shipping": shipping,
            "total": subtotal + shipping,
        }
