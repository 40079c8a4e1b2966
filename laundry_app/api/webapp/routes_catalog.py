from __future__ import annotations

from fastapi import APIRouter, Depends

from laundry_app.core.session_store import SessionContext
from laundry_app.domain import AddonService, LaundryFeature

from .common import AppMetaResponse, AppServices, get_services, get_session

router = APIRouter(tags=["catalog"])

BRAND_NAME = "LAUNDRY GIRL"
BRAND_TAGLINE = "DOOR TO DOOR DRY CLEAN SERVICE"
SPLASH_DELAY_MS = 2500
CURRENCY_SYMBOL = "₹"


@router.get("/app/meta", response_model=AppMetaResponse)
async def get_app_meta():
    """Branding shown by the splash screen and price labels."""
    return AppMetaResponse(
        brand=BRAND_NAME,
        tagline=BRAND_TAGLINE,
        splash_delay_ms=SPLASH_DELAY_MS,
        currency=CURRENCY_SYMBOL,
    )


@router.get("/catalog/laundry-features", response_model=list[LaundryFeature])
async def list_laundry_features(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.catalog.list_laundry_features(session)


@router.get("/catalog/addon-services", response_model=list[AddonService])
async def list_addon_services(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.catalog.list_addon_services(session)
