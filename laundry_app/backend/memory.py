"""In-process backend for local development and tests.

Implements the same contract as the hosted backend with plain dicts. No
row-level rules are applied: any valid token sees every row.
"""
from __future__ import annotations

import copy
import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any

from laundry_app.core.exceptions import AuthenticationException, BackendException
from laundry_app.domain import AuthSession, AuthUser

from .protocol import (
    TABLE_ADDON_SERVICES,
    TABLE_LAUNDRY_FEATURES,
    TABLE_ORDER_ITEMS,
    TABLE_ORDERS,
    TABLE_PROFILES,
    TABLE_SERVICE_BOOKINGS,
    TABLE_USER_ROLES,
    Filters,
    Row,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# column defaults of the hosted schema
TABLE_DEFAULTS: dict[str, Row] = {
    TABLE_LAUNDRY_FEATURES: {
        "category": "clothing",
        "price_wash": None,
        "price_iron": None,
        "price_wash_iron": None,
        "is_active": True,
        "sort_order": 0,
    },
    TABLE_ADDON_SERVICES: {
        "category": "home",
        "description": None,
        "booking_charge": 30,
        "icon_name": "wrench",
        "is_active": True,
        "sort_order": 0,
    },
    TABLE_PROFILES: {"name": "", "mobile_number": None, "panchayath_id": None, "ward_id": None},
    TABLE_SERVICE_BOOKINGS: {"status": "pending", "notes": None, "scheduled_at": None},
    TABLE_ORDERS: {"notes": None},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _matches(row: Row, filters: Filters | None) -> bool:
    for column, expected in (filters or {}).items():
        actual = row.get(column)
        if isinstance(expected, (list, tuple, set)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    # nulls sort last, like Postgres ascending order
    return (1, "") if value is None else (0, value)


class InMemoryBackend:
    """Dict-backed tables plus a minimal password auth provider."""

    def __init__(self) -> None:
        self._tables: dict[str, list[Row]] = {}
        self._users: dict[str, dict[str, str]] = {}
        self._tokens: dict[str, str] = {}

    # ========== SEEDING ==========

    def add_user(
        self,
        email: str,
        password: str,
        *,
        name: str = "",
        role: str | None = None,
        mobile_number: str | None = None,
    ) -> str:
        """Register a confirmed user with a profile and optional role; returns the user id."""
        user_id = str(uuid.uuid4())
        self._users[email.lower()] = {"id": user_id, "email": email, "password": password}
        self._insert_rows(
            TABLE_PROFILES,
            [{"user_id": user_id, "name": name, "mobile_number": mobile_number}],
        )
        if role:
            self._insert_rows(TABLE_USER_ROLES, [{"user_id": user_id, "role": role}])
        return user_id

    def seed(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows without a token check, for fixtures and local demo data."""
        return self._insert_rows(table, rows)

    def rows(self, table: str) -> list[Row]:
        return copy.deepcopy(self._tables.get(table, []))

    # ========== AUTH ==========

    async def sign_up(self, email: str, password: str, redirect_to: str | None = None) -> AuthUser:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise BackendException(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters", status=422
            )
        if email.lower() in self._users:
            raise BackendException("User already registered", status=422)
        user_id = self.add_user(email, password)
        logger.info(f"Registered user {user_id} (confirmation link to {redirect_to or 'default'})")
        return AuthUser(id=user_id, email=email)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        user = self._users.get(email.lower())
        if not user or not secrets.compare_digest(user["password"], password):
            raise AuthenticationException("Invalid login credentials")
        token = secrets.token_urlsafe(32)
        self._tokens[token] = user["id"]
        return AuthSession(
            access_token=token,
            refresh_token=secrets.token_urlsafe(16),
            user=AuthUser(id=user["id"], email=user["email"]),
        )

    async def sign_out(self, access_token: str) -> None:
        self._tokens.pop(access_token, None)

    async def get_user(self, access_token: str) -> AuthUser | None:
        user_id = self._tokens.get(access_token)
        if user_id is None:
            return None
        for user in self._users.values():
            if user["id"] == user_id:
                return AuthUser(id=user_id, email=user["email"])
        return None

    def _check_token(self, access_token: str | None) -> None:
        if access_token is not None and access_token not in self._tokens:
            raise AuthenticationException("JWT expired")

    # ========== TABLES ==========

    def _insert_rows(self, table: str, rows: list[Row]) -> list[Row]:
        stored: list[Row] = []
        for row in rows:
            record = {**TABLE_DEFAULTS.get(table, {}), **row}
            record.setdefault("id", str(uuid.uuid4()))
            record.setdefault("created_at", _now())
            stored.append(record)
        self._tables.setdefault(table, []).extend(stored)
        return copy.deepcopy(stored)

    async def select(
        self,
        access_token: str | None,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        self._check_token(access_token)
        rows = [row for row in self._tables.get(table, []) if _matches(row, filters)]
        if order_by:
            rows.sort(key=lambda row: _sort_key(row.get(order_by)), reverse=descending)
        return copy.deepcopy(rows)

    async def insert(self, access_token: str | None, table: str, rows: list[Row]) -> list[Row]:
        self._check_token(access_token)
        return self._insert_rows(table, rows)

    async def update(
        self, access_token: str | None, table: str, values: Row, filters: Filters
    ) -> list[Row]:
        self._check_token(access_token)
        updated: list[Row] = []
        for row in self._tables.get(table, []):
            if _matches(row, filters):
                row.update(values)
                row["updated_at"] = _now()
                updated.append(row)
        return copy.deepcopy(updated)

    async def delete(self, access_token: str | None, table: str, filters: Filters) -> None:
        self._check_token(access_token)
        self._tables[table] = [
            row for row in self._tables.get(table, []) if not _matches(row, filters)
        ]

    # ========== ORDERS ==========

    async def create_order(self, access_token: str | None, header: Row, items: list[Row]) -> Row:
        self._check_token(access_token)
        order_id = str(uuid.uuid4())
        order = self._insert_rows(TABLE_ORDERS, [{**header, "id": order_id}])[0]
        self._insert_rows(TABLE_ORDER_ITEMS, [{**item, "order_id": order_id} for item in items])
        return order

    async def close(self) -> None:
        return None
