"""Admin console services: customers, staff roles, locations and catalog CRUD."""
from __future__ import annotations

import logging
from typing import Any

from laundry_app.backend.protocol import (
    TABLE_ADDON_SERVICES,
    TABLE_LAUNDRY_FEATURES,
    TABLE_PANCHAYATHS,
    TABLE_PROFILES,
    TABLE_USER_ROLES,
    TABLE_WARDS,
    BackendProtocol,
)
from laundry_app.core.exceptions import AuthorizationException, NotFoundException, ValidationException
from laundry_app.core.session_store import SessionContext
from laundry_app.domain import (
    ADMIN_PANEL_ROLES,
    APP_ROLES,
    AddonService,
    LaundryFeature,
    Panchayath,
    Profile,
    StaffMember,
    Ward,
)
from laundry_app.domain.accounts import ROLE_SUPER_ADMIN
from laundry_app.domain.catalog import (
    DEFAULT_BOOKING_CHARGE,
    DEFAULT_FEATURE_CATEGORY,
    DEFAULT_ICON,
    DEFAULT_SERVICE_CATEGORY,
)

from .auth_service import AuthService

logger = logging.getLogger(__name__)

MAX_WARD_COUNT = 200


def _parse_price(value: Any) -> float | None:
    """Empty or missing form values mean "not offered"."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationException(f"Invalid price: {value}") from e
    if price < 0:
        raise ValidationException("Price cannot be negative")
    return price


def _parse_booking_charge(value: Any) -> float:
    try:
        charge = float(value)
    except (TypeError, ValueError):
        return DEFAULT_BOOKING_CHARGE
    return charge if charge > 0 else DEFAULT_BOOKING_CHARGE


def _require_name(name: str | None, what: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationException(f"{what} name is required")
    return cleaned


def feature_payload(
    name: str,
    category: str | None = None,
    price_wash: Any = None,
    price_iron: Any = None,
    price_wash_iron: Any = None,
) -> dict[str, Any]:
    return {
        "name": _require_name(name, "Feature"),
        "category": (category or "").strip() or DEFAULT_FEATURE_CATEGORY,
        "price_wash": _parse_price(price_wash),
        "price_iron": _parse_price(price_iron),
        "price_wash_iron": _parse_price(price_wash_iron),
    }


def service_payload(
    name: str,
    description: str | None = None,
    category: str | None = None,
    booking_charge: Any = DEFAULT_BOOKING_CHARGE,
    icon_name: str | None = None,
) -> dict[str, Any]:
    return {
        "name": _require_name(name, "Service"),
        "description": (description or "").strip() or None,
        "category": (category or "").strip() or DEFAULT_SERVICE_CATEGORY,
        "booking_charge": _parse_booking_charge(booking_charge),
        "icon_name": (icon_name or "").strip() or DEFAULT_ICON,
    }


class AdminService:
    """Operations behind the admin panel tabs.

    Every call checks that the session holds one of the panel roles;
    role changes additionally require a super admin.
    """

    def __init__(self, backend: BackendProtocol, auth: AuthService):
        self._backend = backend
        self._auth = auth

    async def _token(self, session: SessionContext) -> str | None:
        await self._auth.require_panel_role(session)
        return session.access_token

    # ---------------- customers & staff ----------------

    async def list_customers(self, session: SessionContext) -> list[Profile]:
        token = await self._token(session)
        rows = await self._backend.select(
            token, TABLE_PROFILES, order_by="created_at", descending=True
        )
        return [Profile.model_validate(row) for row in rows]

    async def list_staff(self, session: SessionContext) -> list[StaffMember]:
        token = await self._token(session)
        roles = await self._backend.select(
            token, TABLE_USER_ROLES, {"role": list(ADMIN_PANEL_ROLES)}
        )
        if not roles:
            return []
        role_by_user = {row["user_id"]: row["role"] for row in roles}
        profiles = await self._backend.select(
            token, TABLE_PROFILES, {"user_id": list(role_by_user)}
        )
        return [
            StaffMember(
                id=row["id"],
                user_id=row["user_id"],
                name=row.get("name") or "",
                mobile_number=row.get("mobile_number"),
                role=role_by_user.get(row["user_id"]),
            )
            for row in profiles
        ]

    async def update_role(self, session: SessionContext, user_id: str, role: str) -> None:
        current = await self._auth.require_panel_role(session)
        if current != ROLE_SUPER_ADMIN:
            raise AuthorizationException("Only a super admin can change roles")
        if role not in APP_ROLES:
            raise ValidationException(f"Unknown role: {role}")
        updated = await self._backend.update(
            session.access_token, TABLE_USER_ROLES, {"role": role}, {"user_id": user_id}
        )
        if not updated:
            raise NotFoundException("User role", user_id)
        logger.info(f"Role of {user_id} set to {role} by {session.user_id}")

    # ---------------- locations ----------------

    async def list_panchayaths(self, session: SessionContext) -> list[Panchayath]:
        token = await self._token(session)
        panchayaths = await self._backend.select(token, TABLE_PANCHAYATHS, order_by="name")
        wards = await self._backend.select(token, TABLE_WARDS, order_by="name")
        by_panchayath: dict[str, list[Ward]] = {}
        for row in wards:
            by_panchayath.setdefault(row["panchayath_id"], []).append(Ward.model_validate(row))
        return [
            Panchayath(id=row["id"], name=row["name"], wards=by_panchayath.get(row["id"], []))
            for row in panchayaths
        ]

    async def create_panchayath(
        self, session: SessionContext, name: str, ward_count: int = 0
    ) -> tuple[Panchayath, str]:
        """Create a panchayath with wards "Ward 1".."Ward N"; returns it and a message."""
        token = await self._token(session)
        cleaned = _require_name(name, "Panchayath")
        if ward_count < 0 or ward_count > MAX_WARD_COUNT:
            raise ValidationException(f"Ward count must be between 0 and {MAX_WARD_COUNT}")

        created = await self._backend.insert(token, TABLE_PANCHAYATHS, [{"name": cleaned}])
        if not created:
            raise ValidationException("Failed to add panchayath")
        panchayath_id = created[0]["id"]

        ward_rows = await self._backend.insert(
            token,
            TABLE_WARDS,
            [{"name": f"Ward {i}", "panchayath_id": panchayath_id} for i in range(1, ward_count + 1)],
        )
        wards = [Ward.model_validate(row) for row in ward_rows]
        message = "Panchayath added"
        if ward_count > 0:
            message += f" with {ward_count} wards"
        return Panchayath(id=panchayath_id, name=cleaned, wards=wards), message

    async def rename_panchayath(self, session: SessionContext, panchayath_id: str, name: str) -> None:
        token = await self._token(session)
        updated = await self._backend.update(
            token,
            TABLE_PANCHAYATHS,
            {"name": _require_name(name, "Panchayath")},
            {"id": panchayath_id},
        )
        if not updated:
            raise NotFoundException("Panchayath", panchayath_id)

    async def delete_panchayath(self, session: SessionContext, panchayath_id: str) -> None:
        token = await self._token(session)
        # wards reference the panchayath, so they go first
        await self._backend.delete(token, TABLE_WARDS, {"panchayath_id": panchayath_id})
        await self._backend.delete(token, TABLE_PANCHAYATHS, {"id": panchayath_id})

    async def delete_ward(self, session: SessionContext, ward_id: str) -> None:
        token = await self._token(session)
        await self._backend.delete(token, TABLE_WARDS, {"id": ward_id})

    # ---------------- laundry features ----------------

    async def list_features(self, session: SessionContext) -> list[LaundryFeature]:
        token = await self._token(session)
        rows = await self._backend.select(token, TABLE_LAUNDRY_FEATURES, order_by="sort_order")
        return [LaundryFeature.model_validate(row) for row in rows]

    async def save_feature(
        self, session: SessionContext, payload: dict[str, Any], feature_id: str | None = None
    ) -> LaundryFeature:
        token = await self._token(session)
        if feature_id:
            rows = await self._backend.update(
                token, TABLE_LAUNDRY_FEATURES, payload, {"id": feature_id}
            )
            if not rows:
                raise NotFoundException("Laundry feature", feature_id)
        else:
            rows = await self._backend.insert(token, TABLE_LAUNDRY_FEATURES, [payload])
        return LaundryFeature.model_validate(rows[0])

    async def delete_feature(self, session: SessionContext, feature_id: str) -> None:
        token = await self._token(session)
        await self._backend.delete(token, TABLE_LAUNDRY_FEATURES, {"id": feature_id})

    # ---------------- add-on services ----------------

    async def list_services(self, session: SessionContext) -> list[AddonService]:
        token = await self._token(session)
        rows = await self._backend.select(token, TABLE_ADDON_SERVICES, order_by="sort_order")
        return [AddonService.model_validate(row) for row in rows]

    async def save_service(
        self, session: SessionContext, payload: dict[str, Any], service_id: str | None = None
    ) -> AddonService:
        token = await self._token(session)
        if service_id:
            rows = await self._backend.update(
                token, TABLE_ADDON_SERVICES, payload, {"id": service_id}
            )
            if not rows:
                raise NotFoundException("Service", service_id)
        else:
            rows = await self._backend.insert(token, TABLE_ADDON_SERVICES, [payload])
        return AddonService.model_validate(rows[0])

    async def delete_service(self, session: SessionContext, service_id: str) -> None:
        token = await self._token(session)
        await self._backend.delete(token, TABLE_ADDON_SERVICES, {"id": service_id})
