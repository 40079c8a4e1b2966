"""Domain entities mirrored from the backend tables."""
from __future__ import annotations

from .accounts import (
    ADMIN_PANEL_ROLES,
    APP_ROLES,
    AuthSession,
    AuthUser,
    Profile,
    StaffMember,
    UserRole,
)
from .catalog import AddonService, LaundryFeature
from .locations import Panchayath, Ward
from .orders import Order, OrderItem, ServiceBooking

__all__ = [
    "ADMIN_PANEL_ROLES",
    "APP_ROLES",
    "AddonService",
    "AuthSession",
    "AuthUser",
    "LaundryFeature",
    "Order",
    "OrderItem",
    "Panchayath",
    "Profile",
    "ServiceBooking",
    "StaffMember",
    "UserRole",
    "Ward",
]
