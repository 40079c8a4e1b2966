from __future__ import annotations

from fastapi import APIRouter, Depends

from laundry_app.core.session_store import SessionContext

from .common import (
    AppServices,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    get_services,
    get_session,
)

router = APIRouter(tags=["orders"])


@router.post("/orders", response_model=CheckoutResponse)
async def place_order(
    payload: CheckoutRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    """Submit the session cart as one order.

    An empty cart is not an error: nothing is sent and ``placed`` is false.
    Failures surface as error notifications and leave the cart untouched.
    """
    result = await services.orders.place_order(session, payload.notes)
    return CheckoutResponse(
        placed=result.placed,
        order_id=result.order_id,
        total=result.total,
        items_count=result.items_count,
        message=result.message,
        cart=CartResponse.from_cart(session.session_id, session.cart),
    )
