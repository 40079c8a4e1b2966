"""Direct booking of add-on home services."""
from __future__ import annotations

import logging

from laundry_app.backend.protocol import TABLE_SERVICE_BOOKINGS, BackendProtocol
from laundry_app.core.session_store import SessionContext
from laundry_app.domain import ServiceBooking

from .auth_service import AuthService
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, backend: BackendProtocol, catalog: CatalogService, auth: AuthService):
        self._backend = backend
        self._catalog = catalog
        self._auth = auth

    async def book_service(
        self, session: SessionContext, service_id: str, notes: str | None = None
    ) -> tuple[ServiceBooking, str]:
        """Reserve a visit at the service's booking charge; returns the booking and a message."""
        user = await self._auth.require_user(session)
        service = await self._catalog.get_addon_service(session, service_id)
        rows = await self._backend.insert(
            session.access_token,
            TABLE_SERVICE_BOOKINGS,
            [
                {
                    "user_id": user.id,
                    "addon_service_id": service.id,
                    "booking_charge": service.booking_charge,
                    "notes": (notes or "").strip() or None,
                }
            ],
        )
        booking = ServiceBooking.model_validate(rows[0])
        logger.info(f"Service {service.id} booked by {user.id}: booking={booking.id}")
        return booking, f"{service.name} booked! We'll contact you shortly."
