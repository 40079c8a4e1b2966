from __future__ import annotations

from fastapi import APIRouter, Depends

from laundry_app.core.session_store import SessionContext

from .common import (
    AddAddonItemRequest,
    AddLaundryItemRequest,
    AppServices,
    CartResponse,
    UpdateQuantityRequest,
    get_services,
    get_session,
)

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(session: SessionContext) -> CartResponse:
    return CartResponse.from_cart(session.session_id, session.cart)


@router.get("", response_model=CartResponse)
async def get_cart(session: SessionContext = Depends(get_session)):
    return _cart_response(session)


@router.post("/laundry", response_model=CartResponse)
async def add_laundry_item(
    payload: AddLaundryItemRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    """Add garments for one service; price comes from the catalog."""
    await services.orders.add_laundry_item(
        session, payload.laundry_feature_id, payload.service_type, payload.quantity
    )
    return _cart_response(session)


@router.post("/addons", response_model=CartResponse)
async def add_addon_item(
    payload: AddAddonItemRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.orders.add_addon_item(session, payload.addon_service_id, payload.quantity)
    return _cart_response(session)


@router.put("/items/{line_id}", response_model=CartResponse)
async def update_item_quantity(
    line_id: str,
    payload: UpdateQuantityRequest,
    session: SessionContext = Depends(get_session),
):
    session.cart.update_quantity(line_id, payload.quantity)
    return _cart_response(session)


@router.delete("/items/{line_id}", response_model=CartResponse)
async def remove_item(line_id: str, session: SessionContext = Depends(get_session)):
    session.cart.remove(line_id)
    return _cart_response(session)


@router.delete("", response_model=CartResponse)
async def clear_cart(session: SessionContext = Depends(get_session)):
    session.cart.clear()
    return _cart_response(session)
