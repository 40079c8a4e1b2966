from __future__ import annotations

from fastapi import APIRouter

from . import (
    routes_admin,
    routes_auth,
    routes_bookings,
    routes_cart,
    routes_catalog,
    routes_orders,
)
from .common import build_services, set_app_services

router = APIRouter(prefix="/api/v1", tags=["webapp"])

router.include_router(routes_auth.router)
router.include_router(routes_catalog.router)
router.include_router(routes_cart.router)
router.include_router(routes_orders.router)
router.include_router(routes_bookings.router)
router.include_router(routes_admin.router)

__all__ = ["build_services", "router", "set_app_services"]
