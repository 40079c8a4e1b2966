"""Sign-up, sign-in and sign-out; auth routes are rate limited per client IP."""
from fastapi import APIRouter, Depends, Request

from laundry_app.api.rate_limit import AUTH_RATE_LIMIT, limiter
from laundry_app.core.session_store import SessionContext
from laundry_app.services.auth_service import SIGN_IN_MESSAGE

from .common import (
    AppServices,
    AuthResponse,
    CredentialsRequest,
    MeResponse,
    MessageResponse,
    StaffSignInRequest,
    get_services,
    get_session,
    logger,
)

router = APIRouter(prefix="/auth", tags=["auth"])

SIGNED_OUT_MESSAGE = "Signed out"


@router.post("/sign-up", response_model=MessageResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def sign_up(
    request: Request,
    payload: CredentialsRequest,
    services: AppServices = Depends(get_services),
):
    """Register a customer; the provider emails a confirmation link."""
    message = await services.auth.sign_up(payload.email, payload.password)
    return MessageResponse(message=message)


@router.post("/sign-in", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def sign_in(
    request: Request,
    payload: CredentialsRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    user = await services.auth.sign_in(session, payload.email, payload.password)
    return AuthResponse(user_id=user.id, email=user.email, message=SIGN_IN_MESSAGE)


@router.post("/staff/sign-in", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def staff_sign_in(
    request: Request,
    payload: StaffSignInRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    """Admin / super admin entry: sign in and verify the requested role."""
    message = await services.auth.staff_sign_in(
        session, payload.email, payload.password, payload.role
    )
    logger.info(f"Staff sign-in as {payload.role}: {session.user_id}")
    return AuthResponse(
        user_id=session.user_id or "",
        email=session.email,
        role=payload.role,
        message=message,
    )


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.auth.sign_out(session)
    return MessageResponse(message=SIGNED_OUT_MESSAGE)


@router.get("/me", response_model=MeResponse)
async def get_me(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    user = await services.auth.require_user(session)
    name = await services.catalog.get_profile_name(session.access_token, user.id)
    return MeResponse(user_id=user.id, email=user.email, name=name)
