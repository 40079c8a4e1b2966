"""Identity, profile and role entities."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
ROLE_DELIVERY_BOY = "delivery_boy"
ROLE_CUSTOMER = "customer"

APP_ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_STAFF, ROLE_DELIVERY_BOY, ROLE_CUSTOMER)
ADMIN_PANEL_ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_STAFF)


class AuthUser(BaseModel):
    """Identity returned by the auth provider."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None


class AuthSession(BaseModel):
    """Tokens issued by the auth provider on sign-in."""

    access_token: str
    refresh_token: Optional[str] = None
    user: AuthUser


class Profile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    name: str = ""
    mobile_number: Optional[str] = None
    panchayath_id: Optional[str] = None
    ward_id: Optional[str] = None
    created_at: Optional[datetime] = None


class UserRole(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str
    role: str


class StaffMember(BaseModel):
    """Profile of a non-customer user together with its role."""

    id: str
    user_id: str
    name: str
    mobile_number: Optional[str] = None
    role: Optional[str] = None
