"""Admin console endpoints; every route requires a panel role."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from laundry_app.core.session_store import SessionContext
from laundry_app.domain import AddonService, LaundryFeature, Panchayath, Profile, StaffMember
from laundry_app.services.admin_service import feature_payload, service_payload

from .common import (
    AppServices,
    FeatureRequest,
    MessageResponse,
    PanchayathRequest,
    RenameRequest,
    RoleUpdateRequest,
    ServiceRequest,
    get_services,
    get_session,
)

router = APIRouter(prefix="/admin", tags=["admin"])


class PanchayathCreatedResponse(BaseModel):
    panchayath: Panchayath
    message: str


# =============================================================================
# Customers & staff
# =============================================================================


@router.get("/customers", response_model=list[Profile])
async def list_customers(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.list_customers(session)


@router.get("/staff", response_model=list[StaffMember])
async def list_staff(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.list_staff(session)


@router.put("/staff/{user_id}/role", response_model=MessageResponse)
async def update_role(
    user_id: str,
    payload: RoleUpdateRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.admin.update_role(session, user_id, payload.role)
    return MessageResponse(message="Role updated")


# =============================================================================
# Locations
# =============================================================================


@router.get("/panchayaths", response_model=list[Panchayath])
async def list_panchayaths(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.list_panchayaths(session)


@router.post("/panchayaths", response_model=PanchayathCreatedResponse)
async def create_panchayath(
    payload: PanchayathRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    panchayath, message = await services.admin.create_panchayath(
        session, payload.name, payload.ward_count
    )
    return PanchayathCreatedResponse(panchayath=panchayath, message=message)


@router.put("/panchayaths/{panchayath_id}", response_model=MessageResponse)
async def rename_panchayath(
    panchayath_id: str,
    payload: RenameRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.admin.rename_panchayath(session, panchayath_id, payload.name)
    return MessageResponse(message="Panchayath updated")


@router.delete("/panchayaths/{panchayath_id}", response_model=MessageResponse)
async def delete_panchayath(
    panchayath_id: str,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.admin.delete_panchayath(session, panchayath_id)
    return MessageResponse(message="Panchayath deleted")


@router.delete("/wards/{ward_id}", response_model=MessageResponse)
async def delete_ward(
    ward_id: str,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.admin.delete_ward(session, ward_id)
    return MessageResponse(message="Ward deleted")


# =============================================================================
# Laundry features
# =============================================================================


@router.get("/laundry-features", response_model=list[LaundryFeature])
async def list_features(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.list_features(session)


@router.post("/laundry-features", response_model=LaundryFeature)
async def create_feature(
    payload: FeatureRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.save_feature(session, feature_payload(**payload.model_dump()))


@router.put("/laundry-features/{feature_id}", response_model=LaundryFeature)
async def update_feature(
    feature_id: str,
    payload: FeatureRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.save_feature(
        session, feature_payload(**payload.model_dump()), feature_id=feature_id
    )


@router.delete("/laundry-features/{feature_id}", response_model=MessageResponse)
async def delete_feature(
    feature_id: str,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.admin.delete_feature(session, feature_id)
    return MessageResponse(message="Feature deleted")


# =============================================================================
# Add-on services
# =============================================================================


@router.get("/addon-services", response_model=list[AddonService])
async def list_services(
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.list_services(session)


@router.post("/addon-services", response_model=AddonService)
async def create_service(
    payload: ServiceRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.save_service(session, service_payload(**payload.model_dump()))


@router.put("/addon-services/{service_id}", response_model=AddonService)
async def update_service(
    service_id: str,
    payload: ServiceRequest,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    return await services.admin.save_service(
        session, service_payload(**payload.model_dump()), service_id=service_id
    )


@router.delete("/addon-services/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: str,
    session: SessionContext = Depends(get_session),
    services: AppServices = Depends(get_services),
):
    await services.admin.delete_service(session, service_id)
    return MessageResponse(message="Service deleted")
