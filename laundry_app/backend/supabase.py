"""
REST client for the hosted backend (PostgREST tables + GoTrue auth).

Only the handful of endpoints the app needs are wrapped; everything goes
through one shared aiohttp session.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from laundry_app.core.config import SupabaseConfig
from laundry_app.core.exceptions import (
    AuthenticationException,
    BackendException,
    LaundryException,
)
from laundry_app.domain import AuthSession, AuthUser

from .protocol import TABLE_ORDER_ITEMS, TABLE_ORDERS, Filters, Row

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(value: Any) -> str:
    text = _format_value(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def build_filter_params(filters: Filters | None) -> list[tuple[str, str]]:
    """Translate ``{column: value}`` filters into PostgREST query params."""
    params: list[tuple[str, str]] = []
    for column, value in (filters or {}).items():
        if value is None:
            params.append((column, "is.null"))
        elif isinstance(value, (list, tuple, set)):
            joined = ",".join(_quote(item) for item in value)
            params.append((column, f"in.({joined})"))
        else:
            params.append((column, f"eq.{_format_value(value)}"))
    return params


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = payload.get(key)
            if value:
                return str(value)
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return fallback


class SupabaseBackend:
    """Backend adapter talking to a Supabase project over HTTPS."""

    def __init__(self, config: SupabaseConfig, session: aiohttp.ClientSession | None = None):
        self._config = config
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=config.timeout)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"apikey": self._config.anon_key},
                timeout=self._timeout,
            )
        return self._session

    def _auth_headers(self, access_token: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token or self._config.anon_key}"}

    async def _request(
        self,
        method: str,
        url: str,
        *,
        access_token: str | None = None,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        extra_headers: dict[str, str] | None = None,
    ) -> tuple[int, Any]:
        headers = self._auth_headers(access_token)
        if extra_headers:
            headers.update(extra_headers)
        try:
            async with self._get_session().request(
                method, url, params=params, json=json, headers=headers
            ) as resp:
                if resp.status == 204:
                    return resp.status, None
                if resp.content_type == "application/json":
                    payload = await resp.json()
                else:
                    payload = await resp.text()
                return resp.status, payload
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Backend request {method} {url} failed: {e}")
            raise BackendException(f"Network error: {e}") from e

    @staticmethod
    def _raise_for_status(status: int, payload: Any, fallback: str) -> None:
        if status < 400:
            return
        message = _error_message(payload, fallback)
        if status in (401, 403):
            raise AuthenticationException(message)
        raise BackendException(message, status=status)

    # ========== AUTH ==========

    async def sign_up(self, email: str, password: str, redirect_to: str | None = None) -> AuthUser:
        params = [("redirect_to", redirect_to)] if redirect_to else None
        status, payload = await self._request(
            "POST",
            f"{self._config.auth_url}/signup",
            params=params,
            json={"email": email, "password": password},
        )
        if status >= 400:
            raise BackendException(_error_message(payload, "Sign up failed"), status=status)
        # with email confirmation on, the user object comes back unwrapped
        user = payload.get("user") if isinstance(payload, dict) and "user" in payload else payload
        return AuthUser.model_validate(user)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        status, payload = await self._request(
            "POST",
            f"{self._config.auth_url}/token",
            params=[("grant_type", "password")],
            json={"email": email, "password": password},
        )
        if status >= 400:
            raise AuthenticationException(_error_message(payload, "Invalid login credentials"))
        return AuthSession.model_validate(payload)

    async def sign_out(self, access_token: str) -> None:
        status, payload = await self._request(
            "POST", f"{self._config.auth_url}/logout", access_token=access_token
        )
        if status >= 400 and status not in (401, 403):
            raise BackendException(_error_message(payload, "Sign out failed"), status=status)

    async def get_user(self, access_token: str) -> AuthUser | None:
        status, payload = await self._request(
            "GET", f"{self._config.auth_url}/user", access_token=access_token
        )
        if status in (401, 403):
            return None
        self._raise_for_status(status, payload, "Could not load user")
        return AuthUser.model_validate(payload)

    # ========== TABLES ==========

    async def select(
        self,
        access_token: str | None,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        params = [("select", "*"), *build_filter_params(filters)]
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        status, payload = await self._request(
            "GET", f"{self._config.rest_url}/{table}", access_token=access_token, params=params
        )
        self._raise_for_status(status, payload, f"Could not load {table}")
        return list(payload or [])

    async def insert(self, access_token: str | None, table: str, rows: list[Row]) -> list[Row]:
        if not rows:
            return []
        status, payload = await self._request(
            "POST",
            f"{self._config.rest_url}/{table}",
            access_token=access_token,
            json=rows,
            extra_headers={"Prefer": "return=representation"},
        )
        self._raise_for_status(status, payload, f"Could not save {table}")
        return list(payload or [])

    async def update(
        self, access_token: str | None, table: str, values: Row, filters: Filters
    ) -> list[Row]:
        status, payload = await self._request(
            "PATCH",
            f"{self._config.rest_url}/{table}",
            access_token=access_token,
            params=build_filter_params(filters),
            json=values,
            extra_headers={"Prefer": "return=representation"},
        )
        self._raise_for_status(status, payload, f"Could not update {table}")
        return list(payload or [])

    async def delete(self, access_token: str | None, table: str, filters: Filters) -> None:
        status, payload = await self._request(
            "DELETE",
            f"{self._config.rest_url}/{table}",
            access_token=access_token,
            params=build_filter_params(filters),
        )
        self._raise_for_status(status, payload, f"Could not delete from {table}")

    # ========== ORDERS ==========

    async def create_order(self, access_token: str | None, header: Row, items: list[Row]) -> Row:
        created = await self.insert(access_token, TABLE_ORDERS, [header])
        if not created:
            raise BackendException("Order was not created")
        order = created[0]
        order_id = order["id"]

        try:
            await self.insert(
                access_token,
                TABLE_ORDER_ITEMS,
                [{**item, "order_id": order_id} for item in items],
            )
        except LaundryException as e:
            logger.warning(f"Order {order_id} lines failed, removing header: {e.message}")
            try:
                await self.delete(access_token, TABLE_ORDERS, {"id": order_id})
            except LaundryException as cleanup_error:
                logger.error(
                    f"Could not remove orphaned order {order_id}: {cleanup_error.message}"
                )
            raise

        return order

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
