"""Shared pytest fixtures: seeded in-memory backend, services and API client."""
from __future__ import annotations

import os

os.environ.setdefault("RATE_LIMIT_DISABLED", "1")

import pytest

from laundry_app.api.webapp.common import AppServices, build_services, set_app_services
from laundry_app.backend.memory import InMemoryBackend
from laundry_app.backend.protocol import TABLE_ADDON_SERVICES, TABLE_LAUNDRY_FEATURES
from laundry_app.core.config import BACKEND_MEMORY, Settings
from laundry_app.core.session_store import SessionContext, SessionStore, new_session_id

PASSWORD = "secret123"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        backend=BACKEND_MEMORY,
        supabase=None,
        redis_url=None,
        environment="test",
        log_level="DEBUG",
        port=8000,
        webapp_url="http://localhost:5173",
    )


@pytest.fixture()
def backend() -> InMemoryBackend:
    """Backend with a small catalog and one user per role."""
    backend = InMemoryBackend()
    backend.seed(
        TABLE_LAUNDRY_FEATURES,
        [
            {
                "id": "feat-shirt",
                "name": "Shirt",
                "price_wash": 10,
                "price_iron": 15,
                "price_wash_iron": 22,
                "sort_order": 1,
            },
            {
                "id": "feat-saree",
                "name": "Saree",
                "price_wash": None,
                "price_iron": 40,
                "price_wash_iron": 80,
                "sort_order": 2,
            },
            {
                "id": "feat-blanket",
                "name": "Blanket",
                "price_wash": 120,
                "is_active": False,
                "sort_order": 0,
            },
        ],
    )
    backend.seed(
        TABLE_ADDON_SERVICES,
        [
            {"id": "svc-plumber", "name": "Plumber", "booking_charge": 30, "sort_order": 2},
            {
                "id": "svc-electrician",
                "name": "Electrician",
                "booking_charge": 50,
                "sort_order": 1,
            },
            {"id": "svc-painter", "name": "Painter", "is_active": False},
        ],
    )
    backend.add_user("asha@example.com", PASSWORD, name="Asha", role="customer")
    backend.add_user("admin@example.com", PASSWORD, name="Ravi", role="admin")
    backend.add_user("boss@example.com", PASSWORD, name="Meera", role="super_admin")
    backend.add_user("staff@example.com", PASSWORD, name="Joby", role="staff")
    return backend


@pytest.fixture()
def session_store() -> SessionStore:
    return SessionStore(redis_url=None)


@pytest.fixture()
def services(settings, backend, session_store) -> AppServices:
    container = build_services(settings, backend, session_store)
    set_app_services(container)
    yield container
    set_app_services(None)


@pytest.fixture()
def session() -> SessionContext:
    return SessionContext(session_id=new_session_id())


@pytest.fixture()
def sign_in(services):
    """Sign a session in as one of the seeded users."""

    async def _sign_in(session: SessionContext, email: str = "asha@example.com") -> SessionContext:
        await services.auth.sign_in(session, email, PASSWORD)
        return session

    return _sign_in


@pytest.fixture()
def client(settings, backend, session_store):
    from fastapi.testclient import TestClient

    from laundry_app.api.api_server import create_api_app

    app = create_api_app(settings, backend=backend, session_store=session_store)
    with TestClient(app) as test_client:
        yield test_client
    set_app_services(None)
