"""Catalog reads: laundry pricing, add-on services and profile greeting."""
from __future__ import annotations

import logging

from laundry_app.backend.protocol import (
    TABLE_ADDON_SERVICES,
    TABLE_LAUNDRY_FEATURES,
    TABLE_PROFILES,
    BackendProtocol,
    Filters,
    Row,
)
from laundry_app.core.exceptions import AuthenticationException, NotFoundException
from laundry_app.core.session_store import SessionContext
from laundry_app.domain import AddonService, LaundryFeature

logger = logging.getLogger(__name__)

DEFAULT_GREETING_NAME = "Customer"


class CatalogService:
    """Read active catalog rows ordered the way the storefront lists them."""

    def __init__(self, backend: BackendProtocol):
        self._backend = backend

    async def _select_catalog(
        self,
        session: SessionContext,
        table: str,
        filters: Filters | None,
        order_by: str | None = None,
    ) -> list[Row]:
        """Select a public table; a rejected token is forgotten and the read retried."""
        try:
            return await self._backend.select(
                session.access_token, table, filters, order_by=order_by
            )
        except AuthenticationException as e:
            if session.access_token is None:
                raise
            logger.info(
                f"Token of session {session.session_id} rejected ({e.message}); "
                f"reading {table} anonymously"
            )
            session.forget_identity()
        return await self._backend.select(None, table, filters, order_by=order_by)

    async def list_laundry_features(self, session: SessionContext) -> list[LaundryFeature]:
        rows = await self._select_catalog(
            session, TABLE_LAUNDRY_FEATURES, {"is_active": True}, order_by="sort_order"
        )
        return [LaundryFeature.model_validate(row) for row in rows]

    async def list_addon_services(self, session: SessionContext) -> list[AddonService]:
        rows = await self._select_catalog(
            session, TABLE_ADDON_SERVICES, {"is_active": True}, order_by="sort_order"
        )
        return [AddonService.model_validate(row) for row in rows]

    async def get_laundry_feature(self, session: SessionContext, feature_id: str) -> LaundryFeature:
        rows = await self._select_catalog(
            session, TABLE_LAUNDRY_FEATURES, {"id": feature_id, "is_active": True}
        )
        if not rows:
            raise NotFoundException("Laundry feature", feature_id)
        return LaundryFeature.model_validate(rows[0])

    async def get_addon_service(self, session: SessionContext, service_id: str) -> AddonService:
        rows = await self._select_catalog(
            session, TABLE_ADDON_SERVICES, {"id": service_id, "is_active": True}
        )
        if not rows:
            raise NotFoundException("Service", service_id)
        return AddonService.model_validate(rows[0])

    async def get_profile_name(self, access_token: str | None, user_id: str) -> str:
        rows = await self._backend.select(access_token, TABLE_PROFILES, {"user_id": user_id})
        name = (rows[0].get("name") if rows else None) or ""
        return name.strip() or DEFAULT_GREETING_NAME
