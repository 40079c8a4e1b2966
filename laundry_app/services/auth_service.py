"""Customer and staff sign-in flows backed by the external auth provider."""
from __future__ import annotations

import logging

from laundry_app.backend.protocol import TABLE_USER_ROLES, BackendProtocol
from laundry_app.core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ValidationException,
)
from laundry_app.core.sentry_integration import set_user_context
from laundry_app.core.session_store import SessionContext
from laundry_app.domain import ADMIN_PANEL_ROLES, AuthUser
from laundry_app.domain.accounts import ROLE_ADMIN, ROLE_SUPER_ADMIN

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

SIGN_UP_MESSAGE = "Check your email to confirm your account!"
SIGN_IN_MESSAGE = "Welcome back!"
STAFF_WELCOME = {
    ROLE_SUPER_ADMIN: "Welcome, Super Admin!",
    ROLE_ADMIN: "Welcome, Admin!",
}
NO_PERMISSION_MESSAGE = "You don't have permission to access this panel"
SUPER_ADMIN_DENIED_MESSAGE = "Access denied. Super Admin credentials required."


def _clean_credentials(email: str, password: str) -> tuple[str, str]:
    email = (email or "").strip()
    if not email:
        raise ValidationException("Enter your email")
    if not password:
        raise ValidationException("Enter your password")
    return email, password


class AuthService:
    """Sign users in and out, keeping the provider tokens on the session."""

    def __init__(self, backend: BackendProtocol, redirect_to: str | None = None):
        self._backend = backend
        self._redirect_to = redirect_to

    async def sign_up(self, email: str, password: str) -> str:
        email, password = _clean_credentials(email, password)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )
        user = await self._backend.sign_up(email, password, redirect_to=self._redirect_to)
        logger.info(f"Customer signed up: {user.id}")
        return SIGN_UP_MESSAGE

    async def sign_in(self, session: SessionContext, email: str, password: str) -> AuthUser:
        email, password = _clean_credentials(email, password)
        auth = await self._backend.sign_in_with_password(email, password)
        session.sign_in(
            user_id=auth.user.id,
            access_token=auth.access_token,
            refresh_token=auth.refresh_token,
            email=auth.user.email,
        )
        set_user_context(auth.user.id, email=auth.user.email)
        logger.info(f"User signed in: {auth.user.id}")
        return auth.user

    async def get_role(self, session: SessionContext, roles: tuple[str, ...]) -> str | None:
        """First of ``roles`` held by the signed-in user, or None."""
        if not session.is_authenticated:
            return None
        rows = await self._backend.select(
            session.access_token,
            TABLE_USER_ROLES,
            {"user_id": session.user_id, "role": list(roles)},
        )
        held = {row.get("role") for row in rows}
        for role in roles:
            if role in held:
                return role
        return None

    async def staff_sign_in(
        self,
        session: SessionContext,
        email: str,
        password: str,
        expected_role: str,
    ) -> str:
        """Sign in and verify ``expected_role``; returns the welcome message."""
        if expected_role not in STAFF_WELCOME:
            raise ValidationException(f"Unknown admin type: {expected_role}")

        await self.sign_in(session, email, password)
        role = await self.get_role(session, (expected_role,))
        if role is None:
            logger.warning(f"User {session.user_id} lacks role {expected_role}; signing out")
            await self.sign_out(session)
            if expected_role == ROLE_SUPER_ADMIN:
                raise AuthorizationException(SUPER_ADMIN_DENIED_MESSAGE)
            raise AuthorizationException(NO_PERMISSION_MESSAGE)
        return STAFF_WELCOME[expected_role]

    async def sign_out(self, session: SessionContext) -> None:
        if session.access_token:
            await self._backend.sign_out(session.access_token)
        session.sign_out()

    async def require_user(self, session: SessionContext) -> AuthUser:
        """Current identity; raises when the session has none or it expired."""
        if not session.is_authenticated:
            raise AuthenticationException()
        user = await self._backend.get_user(session.access_token)
        if user is None:
            session.forget_identity()
            raise AuthenticationException()
        return user

    async def require_panel_role(self, session: SessionContext) -> str:
        await self.require_user(session)
        role = await self.get_role(session, ADMIN_PANEL_ROLES)
        if role is None:
            raise AuthorizationException(NO_PERMISSION_MESSAGE)
        return role
