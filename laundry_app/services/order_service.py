"""Cart filling from the catalog and order checkout."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from laundry_app.backend.protocol import BackendProtocol
from laundry_app.core.cart import (
    ITEM_TYPE_ADDON,
    ITEM_TYPE_LAUNDRY,
    SERVICE_TYPES,
    CartLine,
)
from laundry_app.core.exceptions import ValidationException
from laundry_app.core.order_math import (
    build_order_header,
    build_order_items,
    calc_items_total,
    calc_quantity,
)
from laundry_app.core.session_store import SessionContext
from laundry_app.domain.catalog import SERVICE_LABELS

from .auth_service import AuthService
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)

ORDER_PLACED_MESSAGE = "Order placed successfully! We'll contact you shortly."


@dataclass(slots=True)
class CheckoutResult:
    placed: bool
    order_id: str | None = None
    total: float = 0.0
    items_count: int = 0
    message: str | None = None


def _require_quantity(quantity: int) -> int:
    if quantity <= 0:
        raise ValidationException("Quantity must be at least 1")
    return quantity


class OrderService:
    """Put catalog items into a session cart and turn the cart into an order."""

    def __init__(self, backend: BackendProtocol, catalog: CatalogService, auth: AuthService):
        self._backend = backend
        self._catalog = catalog
        self._auth = auth

    async def add_laundry_item(
        self,
        session: SessionContext,
        feature_id: str,
        service_type: str,
        quantity: int = 1,
    ) -> CartLine:
        if service_type not in SERVICE_TYPES:
            raise ValidationException(f"Unknown service type: {service_type}")
        _require_quantity(quantity)
        feature = await self._catalog.get_laundry_feature(session, feature_id)
        price = feature.price_for(service_type)
        if not price:
            raise ValidationException(
                f"{SERVICE_LABELS[service_type]} is not available for {feature.name}"
            )
        return session.cart.add(
            type=ITEM_TYPE_LAUNDRY,
            name=feature.name,
            unit_price=price,
            quantity=quantity,
            service_type=service_type,
            laundry_feature_id=feature.id,
        )

    async def add_addon_item(
        self, session: SessionContext, service_id: str, quantity: int = 1
    ) -> CartLine:
        _require_quantity(quantity)
        service = await self._catalog.get_addon_service(session, service_id)
        return session.cart.add(
            type=ITEM_TYPE_ADDON,
            name=service.name,
            unit_price=service.booking_charge,
            quantity=quantity,
            addon_service_id=service.id,
        )

    async def place_order(self, session: SessionContext, notes: str | None = None) -> CheckoutResult:
        """Submit the cart as one order; the cart is cleared only on success."""
        cart = session.cart
        if cart.is_empty():
            return CheckoutResult(placed=False)

        user = await self._auth.require_user(session)
        lines = cart.lines
        header = build_order_header(user.id, calc_items_total(lines), notes)
        order = await self._backend.create_order(
            session.access_token, header, build_order_items(lines)
        )

        result = CheckoutResult(
            placed=True,
            order_id=str(order.get("id")),
            total=header["total_amount"],
            items_count=calc_quantity(lines),
            message=ORDER_PLACED_MESSAGE,
        )
        cart.clear()
        logger.info(
            f"Order {result.order_id} placed by {user.id}: "
            f"{len(lines)} lines, total={result.total}"
        )
        return result
