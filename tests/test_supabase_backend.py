"""REST adapter: query building, error mapping and order compensation."""
from __future__ import annotations

from typing import Any

import pytest

from laundry_app.backend.protocol import TABLE_ORDER_ITEMS, TABLE_ORDERS
from laundry_app.backend.supabase import SupabaseBackend, build_filter_params
from laundry_app.core.config import SupabaseConfig
from laundry_app.core.exceptions import AuthenticationException, BackendException

CONFIG = SupabaseConfig(url="https://demo.supabase.co/", anon_key="anon-key")


class TestFilterParams:
    def test_equality_and_booleans(self) -> None:
        assert build_filter_params({"id": "abc", "is_active": True}) == [
            ("id", "eq.abc"),
            ("is_active", "eq.true"),
        ]

    def test_null_and_lists(self) -> None:
        assert build_filter_params({"ward_id": None, "role": ["admin", "staff"]}) == [
            ("ward_id", "is.null"),
            ("role", 'in.("admin","staff")'),
        ]

    def test_list_values_are_quoted(self) -> None:
        assert build_filter_params({"name": ['Say "hi"', "a,b"]}) == [
            ("name", 'in.("Say \\"hi\\"","a,b")'),
        ]

    def test_no_filters(self) -> None:
        assert build_filter_params(None) == []


def test_config_urls() -> None:
    assert CONFIG.rest_url == "https://demo.supabase.co/rest/v1"
    assert CONFIG.auth_url == "https://demo.supabase.co/auth/v1"


class ScriptedBackend(SupabaseBackend):
    """Replays canned (status, payload) pairs instead of calling the network."""

    def __init__(self, responses: list[tuple[int, Any]]):
        super().__init__(CONFIG)
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def _request(self, method, url, *, access_token=None, params=None, json=None, extra_headers=None):
        self.calls.append(
            {"method": method, "url": url, "token": access_token, "params": params, "json": json,
             "headers": extra_headers}
        )
        return self.responses.pop(0)


class TestTables:
    @pytest.mark.asyncio
    async def test_select_builds_query(self) -> None:
        backend = ScriptedBackend([(200, [{"id": "f1"}])])

        rows = await backend.select("tok", "laundry_features", {"is_active": True}, order_by="sort_order")

        assert rows == [{"id": "f1"}]
        call = backend.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == "https://demo.supabase.co/rest/v1/laundry_features"
        assert call["params"] == [
            ("select", "*"),
            ("is_active", "eq.true"),
            ("order", "sort_order.asc"),
        ]

    @pytest.mark.asyncio
    async def test_insert_asks_for_representation(self) -> None:
        backend = ScriptedBackend([(201, [{"id": "w1", "name": "Ward 1"}])])

        rows = await backend.insert("tok", "wards", [{"name": "Ward 1"}])

        assert rows[0]["id"] == "w1"
        assert backend.calls[0]["headers"] == {"Prefer": "return=representation"}

    @pytest.mark.asyncio
    async def test_insert_nothing_skips_request(self) -> None:
        backend = ScriptedBackend([])
        assert await backend.insert("tok", "wards", []) == []
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_database_error_message_is_surfaced(self) -> None:
        backend = ScriptedBackend([(409, {"message": "duplicate key value", "code": "23505"})])

        with pytest.raises(BackendException) as exc_info:
            await backend.insert("tok", "profiles", [{"user_id": "u1"}])

        assert exc_info.value.message == "duplicate key value"
        assert exc_info.value.status == 409

    @pytest.mark.asyncio
    async def test_expired_jwt_is_authentication_error(self) -> None:
        backend = ScriptedBackend([(401, {"message": "JWT expired"})])

        with pytest.raises(AuthenticationException):
            await backend.select("tok", "orders")


class TestAuth:
    @pytest.mark.asyncio
    async def test_sign_in_parses_session(self) -> None:
        backend = ScriptedBackend(
            [(200, {"access_token": "a", "refresh_token": "r", "user": {"id": "u1", "email": "x@y.z"}})]
        )

        session = await backend.sign_in_with_password("x@y.z", "secret")

        assert session.access_token == "a"
        assert session.user.id == "u1"
        assert backend.calls[0]["params"] == [("grant_type", "password")]

    @pytest.mark.asyncio
    async def test_bad_credentials(self) -> None:
        backend = ScriptedBackend([(400, {"error_description": "Invalid login credentials"})])

        with pytest.raises(AuthenticationException) as exc_info:
            await backend.sign_in_with_password("x@y.z", "nope")
        assert exc_info.value.message == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_sign_up_passes_redirect(self) -> None:
        backend = ScriptedBackend([(200, {"id": "u2", "email": "new@y.z"})])

        user = await backend.sign_up("new@y.z", "secret1", redirect_to="https://app.example/")

        assert user.id == "u2"
        assert backend.calls[0]["params"] == [("redirect_to", "https://app.example/")]

    @pytest.mark.asyncio
    async def test_invalid_token_resolves_to_none(self) -> None:
        backend = ScriptedBackend([(401, {"msg": "invalid JWT"})])
        assert await backend.get_user("stale") is None


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_lines_reference_new_header(self) -> None:
        backend = ScriptedBackend([(201, [{"id": "o1", "total_amount": 30}]), (201, [{}])])

        order = await backend.create_order("tok", {"total_amount": 30}, [{"item_name": "Shirt"}])

        assert order["id"] == "o1"
        assert backend.calls[1]["url"].endswith(f"/{TABLE_ORDER_ITEMS}")
        assert backend.calls[1]["json"] == [{"item_name": "Shirt", "order_id": "o1"}]

    @pytest.mark.asyncio
    async def test_failed_lines_remove_header(self) -> None:
        backend = ScriptedBackend(
            [
                (201, [{"id": "o1"}]),
                (400, {"message": "invalid input syntax for type uuid"}),
                (204, None),
            ]
        )

        with pytest.raises(BackendException) as exc_info:
            await backend.create_order("tok", {"total_amount": 30}, [{"item_name": "Shirt"}])

        assert exc_info.value.message == "invalid input syntax for type uuid"
        cleanup = backend.calls[2]
        assert cleanup["method"] == "DELETE"
        assert cleanup["url"].endswith(f"/{TABLE_ORDERS}")
        assert cleanup["params"] == [("id", "eq.o1")]

    @pytest.mark.asyncio
    async def test_cleanup_failure_still_reports_original_error(self) -> None:
        backend = ScriptedBackend(
            [
                (201, [{"id": "o1"}]),
                (400, {"message": "lines rejected"}),
                (500, {"message": "cleanup rejected"}),
            ]
        )

        with pytest.raises(BackendException) as exc_info:
            await backend.create_order("tok", {"total_amount": 30}, [{"item_name": "Shirt"}])

        assert exc_info.value.message == "lines rejected"

    @pytest.mark.asyncio
    async def test_rejected_lines_remove_header(self) -> None:
        backend = ScriptedBackend(
            [
                (201, [{"id": "o1"}]),
                (403, {"message": "new row violates row-level security policy"}),
                (204, None),
            ]
        )

        with pytest.raises(AuthenticationException):
            await backend.create_order("tok", {"total_amount": 30}, [{"item_name": "Shirt"}])

        assert [call["method"] for call in backend.calls] == ["POST", "POST", "DELETE"]
        assert backend.calls[2]["params"] == [("id", "eq.o1")]
