from __future__ import annotations

import pytest

from laundry_app.backend.protocol import TABLE_SERVICE_BOOKINGS
from laundry_app.core.exceptions import AuthenticationException, NotFoundException


@pytest.mark.asyncio
async def test_booking_uses_service_charge(services, backend, session, sign_in):
    await sign_in(session)

    booking, message = await services.bookings.book_service(session, "svc-electrician", " 10am ")

    assert message == "Electrician booked! We'll contact you shortly."
    assert booking.booking_charge == 50
    assert booking.status == "pending"
    assert booking.notes == "10am"

    [row] = backend.rows(TABLE_SERVICE_BOOKINGS)
    assert row["user_id"] == session.user_id
    assert row["addon_service_id"] == "svc-electrician"


@pytest.mark.asyncio
async def test_booking_requires_sign_in(services, backend, session):
    with pytest.raises(AuthenticationException):
        await services.bookings.book_service(session, "svc-plumber")
    assert backend.rows(TABLE_SERVICE_BOOKINGS) == []


@pytest.mark.asyncio
async def test_inactive_service_cannot_be_booked(services, session, sign_in):
    await sign_in(session)
    with pytest.raises(NotFoundException):
        await services.bookings.book_service(session, "svc-painter")
