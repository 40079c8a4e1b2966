"""Business services sitting between the API routes and the backend."""
from __future__ import annotations

from .admin_service import AdminService
from .auth_service import AuthService
from .booking_service import BookingService
from .catalog_service import CatalogService
from .order_service import CheckoutResult, OrderService

__all__ = [
    "AdminService",
    "AuthService",
    "BookingService",
    "CatalogService",
    "CheckoutResult",
    "OrderService",
]
