"""Sign-up, sign-in and staff role checks against the in-memory backend."""
from __future__ import annotations

import pytest

from laundry_app.backend.protocol import TABLE_PROFILES
from laundry_app.core.cart import ITEM_TYPE_ADDON
from laundry_app.core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BackendException,
    ValidationException,
)
from laundry_app.services.auth_service import (
    NO_PERMISSION_MESSAGE,
    SIGN_UP_MESSAGE,
    SUPER_ADMIN_DENIED_MESSAGE,
)

PASSWORD = "secret123"  # seeded users in conftest


class TestCustomerAuth:
    @pytest.mark.asyncio
    async def test_sign_up_creates_profile(self, services, backend) -> None:
        message = await services.auth.sign_up("new@example.com", "hunter22")

        assert message == SIGN_UP_MESSAGE
        assert len(backend.rows(TABLE_PROFILES)) == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "password", "expected"),
        [
            ("", "hunter22", "Enter your email"),
            ("   ", "hunter22", "Enter your email"),
            ("new@example.com", "", "Enter your password"),
        ],
    )
    async def test_sign_up_requires_credentials(self, services, email, password, expected) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await services.auth.sign_up(email, password)
        assert exc_info.value.message == expected

    @pytest.mark.asyncio
    async def test_sign_up_rejects_short_password(self, services) -> None:
        with pytest.raises(ValidationException):
            await services.auth.sign_up("new@example.com", "12345")

    @pytest.mark.asyncio
    async def test_duplicate_sign_up_surfaces_backend_message(self, services) -> None:
        with pytest.raises(BackendException) as exc_info:
            await services.auth.sign_up("asha@example.com", "hunter22")
        assert exc_info.value.message == "User already registered"

    @pytest.mark.asyncio
    async def test_sign_in_stores_identity_on_session(self, services, session) -> None:
        user = await services.auth.sign_in(session, "asha@example.com", PASSWORD)

        assert session.is_authenticated
        assert session.user_id == user.id
        assert session.email == "asha@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password_is_rejected(self, services, session) -> None:
        with pytest.raises(AuthenticationException):
            await services.auth.sign_in(session, "asha@example.com", "wrong-password")
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_sign_out_clears_session_and_cart(self, services, session, sign_in) -> None:
        await sign_in(session)
        session.cart.add(ITEM_TYPE_ADDON, "Plumber", 30)

        await services.auth.sign_out(session)

        assert not session.is_authenticated
        assert session.cart.is_empty()


class TestStaffAuth:
    @pytest.mark.asyncio
    async def test_admin_gets_welcome(self, services, session) -> None:
        message = await services.auth.staff_sign_in(
            session, "admin@example.com", PASSWORD, "admin"
        )
        assert message == "Welcome, Admin!"
        assert session.is_authenticated

    @pytest.mark.asyncio
    async def test_super_admin_gets_welcome(self, services, session) -> None:
        message = await services.auth.staff_sign_in(
            session, "boss@example.com", PASSWORD, "super_admin"
        )
        assert message == "Welcome, Super Admin!"

    @pytest.mark.asyncio
    async def test_customer_on_admin_panel_is_signed_out(self, services, session) -> None:
        with pytest.raises(AuthorizationException) as exc_info:
            await services.auth.staff_sign_in(session, "asha@example.com", PASSWORD, "admin")

        assert exc_info.value.message == NO_PERMISSION_MESSAGE
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_admin_on_super_admin_panel_is_denied(self, services, session) -> None:
        with pytest.raises(AuthorizationException) as exc_info:
            await services.auth.staff_sign_in(
                session, "admin@example.com", PASSWORD, "super_admin"
            )

        assert exc_info.value.message == SUPER_ADMIN_DENIED_MESSAGE
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_unknown_panel_is_validation_error(self, services, session) -> None:
        with pytest.raises(ValidationException):
            await services.auth.staff_sign_in(session, "admin@example.com", PASSWORD, "customer")

    @pytest.mark.asyncio
    async def test_panel_role_allows_staff(self, services, session, sign_in) -> None:
        await sign_in(session, "staff@example.com")
        assert await services.auth.require_panel_role(session) == "staff"

    @pytest.mark.asyncio
    async def test_panel_role_rejects_customer(self, services, session, sign_in) -> None:
        await sign_in(session)
        with pytest.raises(AuthorizationException):
            await services.auth.require_panel_role(session)


class TestRequireUser:
    @pytest.mark.asyncio
    async def test_anonymous_session_is_rejected(self, services, session) -> None:
        with pytest.raises(AuthenticationException):
            await services.auth.require_user(session)

    @pytest.mark.asyncio
    async def test_expired_token_drops_identity_but_keeps_cart(
        self, services, backend, session, sign_in
    ) -> None:
        await sign_in(session)
        session.cart.add(ITEM_TYPE_ADDON, "Plumber", 30)
        await backend.sign_out(session.access_token)

        with pytest.raises(AuthenticationException):
            await services.auth.require_user(session)

        assert not session.is_authenticated
        assert session.cart.item_count() == 1
