from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import AsyncIterator, Union

from fastapi import Cookie, Depends, Header, HTTPException, Response
from pydantic import BaseModel, Field

from laundry_app.backend.protocol import BackendProtocol
from laundry_app.core.cart import CartLedger, CartLine
from laundry_app.core.config import Settings
from laundry_app.core.session_store import SessionContext, SessionStore, new_session_id
from laundry_app.services import (
    AdminService,
    AuthService,
    BookingService,
    CatalogService,
    OrderService,
)

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
SESSION_COOKIE = "session_id"
_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")

# Form fields arrive either as numbers or as raw input strings
PriceInput = Union[float, str, None]


# =============================================================================
# Pydantic Models
# =============================================================================


class CredentialsRequest(BaseModel):
    email: str = ""
    password: str = ""


class StaffSignInRequest(CredentialsRequest):
    role: str


class MessageResponse(BaseModel):
    message: str


class AuthResponse(BaseModel):
    user_id: str
    email: str | None = None
    role: str | None = None
    message: str


class MeResponse(BaseModel):
    user_id: str
    email: str | None = None
    name: str


class AppMetaResponse(BaseModel):
    brand: str
    tagline: str
    splash_delay_ms: int
    currency: str


class CartLineResponse(BaseModel):
    id: str
    type: str
    name: str
    service_type: str | None = None
    unit_price: float
    quantity: int
    line_total: float
    laundry_feature_id: str | None = None
    addon_service_id: str | None = None

    @classmethod
    def from_line(cls, line: CartLine) -> CartLineResponse:
        return cls(**line.to_dict(), line_total=line.line_total)


class CartResponse(BaseModel):
    session_id: str
    items: list[CartLineResponse]
    total: float
    items_count: int

    @classmethod
    def from_cart(cls, session_id: str, cart: CartLedger) -> CartResponse:
        return cls(
            session_id=session_id,
            items=[CartLineResponse.from_line(line) for line in cart.lines],
            total=cart.total(),
            items_count=cart.item_count(),
        )


class AddLaundryItemRequest(BaseModel):
    laundry_feature_id: str
    service_type: str
    quantity: int = Field(1, ge=1)


class AddAddonItemRequest(BaseModel):
    addon_service_id: str
    quantity: int = Field(1, ge=1)


class UpdateQuantityRequest(BaseModel):
    # zero or below removes the line
    quantity: int


class CheckoutRequest(BaseModel):
    notes: str | None = None


class CheckoutResponse(BaseModel):
    placed: bool
    order_id: str | None = None
    total: float = 0.0
    items_count: int = 0
    message: str | None = None
    cart: CartResponse


class BookingRequest(BaseModel):
    addon_service_id: str
    notes: str | None = None


class RoleUpdateRequest(BaseModel):
    role: str


class PanchayathRequest(BaseModel):
    name: str
    ward_count: int = 0


class RenameRequest(BaseModel):
    name: str


class FeatureRequest(BaseModel):
    name: str
    category: str | None = None
    price_wash: PriceInput = None
    price_iron: PriceInput = None
    price_wash_iron: PriceInput = None


class ServiceRequest(BaseModel):
    name: str
    description: str | None = None
    category: str | None = None
    booking_charge: PriceInput = None
    icon_name: str | None = None


# =============================================================================
# Service container (injected from the app factory)
# =============================================================================


@dataclass(slots=True)
class AppServices:
    settings: Settings
    backend: BackendProtocol
    sessions: SessionStore
    auth: AuthService
    catalog: CatalogService
    orders: OrderService
    bookings: BookingService
    admin: AdminService


def build_services(
    settings: Settings, backend: BackendProtocol, sessions: SessionStore
) -> AppServices:
    auth = AuthService(backend, redirect_to=settings.webapp_url)
    catalog = CatalogService(backend)
    return AppServices(
        settings=settings,
        backend=backend,
        sessions=sessions,
        auth=auth,
        catalog=catalog,
        orders=OrderService(backend, catalog, auth),
        bookings=BookingService(backend, catalog, auth),
        admin=AdminService(backend, auth),
    )


_services: AppServices | None = None


def set_app_services(services: AppServices | None) -> None:
    """Bind the service container used by the route dependencies."""
    global _services
    _services = services


def get_services() -> AppServices:
    if _services is None:
        raise HTTPException(status_code=500, detail="Services not initialized")
    return _services


# =============================================================================
# Session dependency
# =============================================================================


def _pick_session_id(*candidates: str | None) -> str | None:
    for candidate in candidates:
        if candidate and _SESSION_ID_RE.match(candidate):
            return candidate
    return None


async def get_session(
    response: Response,
    x_session_id: str | None = Header(None, alias=SESSION_HEADER),
    session_cookie: str | None = Cookie(None, alias=SESSION_COOKIE),
    services: AppServices = Depends(get_services),
) -> AsyncIterator[SessionContext]:
    """Resolve the caller's session and persist it once the route is done."""
    session_id = _pick_session_id(x_session_id, session_cookie) or new_session_id()
    response.headers[SESSION_HEADER] = session_id
    response.set_cookie(
        SESSION_COOKIE,
        session_id,
        max_age=SessionStore.SESSION_EXPIRY_SECONDS,
        httponly=True,
        samesite="lax",
        secure=not services.settings.is_dev,
    )
    async with services.sessions.open(session_id) as session:
        yield session


__all__ = [
    "logger",
    "SESSION_COOKIE",
    "SESSION_HEADER",
    "AddAddonItemRequest",
    "AddLaundryItemRequest",
    "AppMetaResponse",
    "AppServices",
    "AuthResponse",
    "BookingRequest",
    "CartLineResponse",
    "CartResponse",
    "CheckoutRequest",
    "CheckoutResponse",
    "CredentialsRequest",
    "FeatureRequest",
    "MeResponse",
    "MessageResponse",
    "PanchayathRequest",
    "RenameRequest",
    "RoleUpdateRequest",
    "ServiceRequest",
    "StaffSignInRequest",
    "UpdateQuantityRequest",
    "build_services",
    "get_services",
    "get_session",
    "set_app_services",
]
