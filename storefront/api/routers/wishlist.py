# storefront/api/routers/wishlist.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_storefront, raise_for_error
from storefront.domain.schemas import WISHLIST, ListOut, ProductIn
from storefront.services.storefront_service import StorefrontService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def wishlist_out(result) -> ListOut:
    return ListOut(
        list_name=WISHLIST,
        items=[i.to_doc() for i in result.items],
        count=len(result.items),
        stale=not result.ok,
    )


@router.get("", response_model=ListOut)
def get_wishlist(svc: StorefrontService = Depends(get_storefront)):
    result = svc.get_wishlist()
    if not result.ok and not result.items:
        raise_for_error(result)
    return wishlist_out(result)


@router.post("/items", response_model=ListOut)
def add_item(payload: ProductIn, svc: StorefrontService = Depends(get_storefront)):
    result = svc.add_to_wishlist(payload.model_dump(exclude={"quantity"}, exclude_none=True))
    if not result.ok:
        raise_for_error(result)
    return wishlist_out(result)


@router.post("/toggle", response_model=ListOut)
def toggle_item(payload: ProductIn, svc: StorefrontService = Depends(get_storefront)):
    result = svc.toggle_wishlist(payload.model_dump(exclude={"quantity"}, exclude_none=True))
    if not result.ok:
        raise_for_error(result)
    return wishlist_out(result)


@router.delete("/items/{product_id}", response_model=ListOut)
def remove_item(product_id: str, svc: StorefrontService = Depends(get_storefront)):
    result = svc.remove_from_wishlist(product_id)
    if not result.ok:
        raise_for_error(result)
    return wishlist_out(result)
