"""End-to-end requests through the FastAPI app with the in-memory backend."""
from __future__ import annotations

from laundry_app.api.webapp.common import SESSION_HEADER

PASSWORD = "secret123"  # seeded users in conftest


def _sign_in(client, email: str = "asha@example.com") -> dict[str, str]:
    response = client.post("/api/v1/auth/sign-in", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200
    return {SESSION_HEADER: response.headers[SESSION_HEADER]}


def test_meta_and_health(client):
    meta = client.get("/api/v1/app/meta")
    assert meta.status_code == 200
    assert meta.json()["brand"] == "LAUNDRY GIRL"

    health = client.get("/health")
    assert health.json() == {"status": "ok", "backend": "memory", "sessions": "memory"}
    assert health.headers["X-Content-Type-Options"] == "nosniff"


def test_new_session_id_is_issued(client):
    response = client.get("/api/v1/cart")

    assert response.status_code == 200
    session_id = response.headers[SESSION_HEADER]
    assert response.json() == {"session_id": session_id, "items": [], "total": 0.0, "items_count": 0}


def test_full_order_flow(client, backend):
    headers = _sign_in(client)

    client.post(
        "/api/v1/cart/laundry",
        json={"laundry_feature_id": "feat-shirt", "service_type": "iron", "quantity": 2},
        headers=headers,
    )
    cart = client.post(
        "/api/v1/cart/addons", json={"addon_service_id": "svc-plumber"}, headers=headers
    ).json()
    assert cart["items_count"] == 3
    assert cart["total"] == 60

    me = client.get("/api/v1/auth/me", headers=headers).json()
    assert me["name"] == "Asha"

    placed = client.post("/api/v1/orders", json={"notes": "gate code 42"}, headers=headers)
    assert placed.status_code == 200
    body = placed.json()
    assert body["placed"] is True
    assert body["message"] == "Order placed successfully! We'll contact you shortly."
    assert body["cart"]["items"] == []

    assert client.get("/api/v1/cart", headers=headers).json()["items_count"] == 0
    assert len(backend.rows("order_items")) == 2


def test_anonymous_checkout_returns_notification_and_keeps_cart(client):
    first = client.post("/api/v1/cart/addons", json={"addon_service_id": "svc-plumber"})
    headers = {SESSION_HEADER: first.headers[SESSION_HEADER]}

    response = client.post("/api/v1/orders", json={}, headers=headers)

    assert response.status_code == 401
    assert response.json() == {
        "detail": "Not authenticated",
        "notification": {"type": "error", "message": "Not authenticated"},
    }
    assert client.get("/api/v1/cart", headers=headers).json()["items_count"] == 1


def test_validation_errors_use_notification_shape(client):
    response = client.post(
        "/api/v1/cart/laundry",
        json={"laundry_feature_id": "feat-saree", "service_type": "wash"},
    )

    assert response.status_code == 400
    assert response.json()["notification"]["message"] == "Wash is not available for Saree"


def test_staff_panel_denies_customer(client):
    response = client.post(
        "/api/v1/auth/staff/sign-in",
        json={"email": "asha@example.com", "password": PASSWORD, "role": "super_admin"},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied. Super Admin credentials required."


def test_admin_creates_panchayath(client):
    response = client.post(
        "/api/v1/auth/staff/sign-in",
        json={"email": "admin@example.com", "password": PASSWORD, "role": "admin"},
    )
    assert response.json()["message"] == "Welcome, Admin!"
    headers = {SESSION_HEADER: response.headers[SESSION_HEADER]}

    created = client.post(
        "/api/v1/admin/panchayaths", json={"name": "Kumily", "ward_count": 3}, headers=headers
    )
    assert created.status_code == 200
    wards = created.json()["panchayath"]["wards"]
    assert [ward["name"] for ward in wards] == ["Ward 1", "Ward 2", "Ward 3"]

    role_change = client.put(
        "/api/v1/admin/staff/someone/role", json={"role": "staff"}, headers=headers
    )
    assert role_change.status_code == 403


def test_sign_out_empties_session(client):
    headers = _sign_in(client)
    client.post("/api/v1/cart/addons", json={"addon_service_id": "svc-plumber"}, headers=headers)

    response = client.post("/api/v1/auth/sign-out", headers=headers)

    assert response.json() == {"message": "Signed out"}
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401
    assert client.get("/api/v1/cart", headers=headers).json()["items"] == []
