# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_storefront, raise_for_error
from storefront.domain import lists
from storefront.domain.schemas import (
    CART,
    CartSummaryOut,
    CheckoutOut,
    ListOut,
    ProductIn,
    QuantityChangeIn,
    QuantityIn,
)
from storefront.services.storefront_service import StorefrontService

router = APIRouter(prefix="/cart", tags=["cart"])


def cart_out(result) -> ListOut:
    return ListOut(
        list_name=CART,
        items=[i.to_doc() for i in result.items],
        count=lists.count(CART, result.items),
        stale=not result.ok,
    )


@router.get("", response_model=ListOut)
def get_cart(svc: StorefrontService = Depends(get_storefront)):
    result = svc.get_cart()
    #przy bledzie sieci oddajemy mirror oznaczony jako stale
    if not result.ok and not result.items:
        raise_for_error(result)
    return cart_out(result)


@router.get("/summary", response_model=CartSummaryOut)
def get_cart_summary(svc: StorefrontService = Depends(get_storefront)):
    return svc.cart_summary()


@router.post("/items", response_model=ListOut)
def add_item(payload: ProductIn, svc: StorefrontService = Depends(get_storefront)):
    result = svc.add_to_cart(payload.model_dump(exclude={"quantity"}, exclude_none=True), payload.quantity)
    if not result.ok:
        raise_for_error(result)
    return cart_out(result)


@router.put("/items/{product_id}", response_model=ListOut)
def set_quantity(product_id: str, payload: QuantityIn, svc: StorefrontService = Depends(get_storefront)):
    result = svc.update_cart_item_quantity(product_id, payload.quantity)
    if not result.ok:
        raise_for_error(result)
    return cart_out(result)


@router.post("/items/{product_id}/change", response_model=ListOut)
def change_quantity(product_id: str, payload: QuantityChangeIn, svc: StorefrontService = Depends(get_storefront)):
    result = svc.change_cart_item_quantity(product_id, payload.delta)
    if not result.ok:
        raise_for_error(result)
    return cart_out(result)


@router.delete("/items/{product_id}", response_model=ListOut)
def remove_item(product_id: str, svc: StorefrontService = Depends(get_storefront)):
    result = svc.remove_from_cart(product_id)
    if not result.ok:
        raise_for_error(result)
    return cart_out(result)


@router.post("/checkout", response_model=CheckoutOut)
def checkout(svc: StorefrontService = Depends(get_storefront)):
    """
    Wymaga zalogowanego usera i niepustego koszyka.
    Po sukcesie koszyk (zdalny i lokalny) jest pusty.
    """
    result = svc.checkout()
    if not result.ok:
        raise_for_error(result)
    return CheckoutOut(
        items=[i.to_doc() for i in result.items],
        total_items=lists.count(CART, result.items),
    )
