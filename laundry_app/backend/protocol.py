"""
Backend Protocol - contract for the hosted database and auth provider.

Table access mirrors PostgREST: rows are plain dicts, ``filters`` maps a
column to a value (equality) or to a list/tuple of values (``in``). Every
data call carries the caller's access token so the backend can apply its
row-level rules.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from laundry_app.domain import AuthSession, AuthUser

Row = dict[str, Any]
Filters = dict[str, Any]

TABLE_PROFILES = "profiles"
TABLE_USER_ROLES = "user_roles"
TABLE_LAUNDRY_FEATURES = "laundry_features"
TABLE_ADDON_SERVICES = "addon_services"
TABLE_PANCHAYATHS = "panchayaths"
TABLE_WARDS = "wards"
TABLE_ORDERS = "orders"
TABLE_ORDER_ITEMS = "order_items"
TABLE_SERVICE_BOOKINGS = "service_bookings"


@runtime_checkable
class BackendProtocol(Protocol):
    """Methods every backend-as-a-service adapter must provide."""

    # ========== AUTH ==========
    async def sign_up(self, email: str, password: str, redirect_to: str | None = None) -> AuthUser:
        ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_out(self, access_token: str) -> None:
        ...

    async def get_user(self, access_token: str) -> AuthUser | None:
        """Resolve the identity behind a token, None when it is no longer valid."""
        ...

    # ========== TABLES ==========
    async def select(
        self,
        access_token: str | None,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        ...

    async def insert(self, access_token: str | None, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows and return them as stored (ids and defaults filled in)."""
        ...

    async def update(
        self, access_token: str | None, table: str, values: Row, filters: Filters
    ) -> list[Row]:
        ...

    async def delete(self, access_token: str | None, table: str, filters: Filters) -> None:
        ...

    # ========== ORDERS ==========
    async def create_order(
        self, access_token: str | None, header: Row, items: list[Row]
    ) -> Row:
        """Write one order header plus its lines; returns the header row.

        Either both writes land or neither does.
        """
        ...

    async def close(self) -> None:
        ...
