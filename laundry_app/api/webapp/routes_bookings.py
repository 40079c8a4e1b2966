from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from laundry_app.core.session_store import SessionContext
from laundry_app.domain import ServiceBooking

from .common import AppServices, BookingRequest, get_services, get_session

router = APIRouter(tags=["bookings"])


class BookingResponse(BaseModel):
    booking: ServiceBooking
    message: str


@router.post("/bookings", response_model=BookingResponse)
async def book_service(
    payload: BookingRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    booking, message = await services.bookings.book_service(
        session, payload.addon_service_id, payload.notes
    )
    return BookingResponse(booking=booking, message=message)
