"""Tests for the Flask application factory."""
from __future__ import annotations

import pytest

from storage import RestAccountStore, SqlAccountStore


def test_health_endpoint_returns_ok(client):
    """The health endpoint should respond with an OK payload and a request id."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    assert response.headers.get("X-Request-ID")


def test_blueprints_registered(app):
    """Application factory should register the auth and users blueprints."""
    assert {"auth", "users"}.issubset(app.blueprints.keys())
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert {"/api/auth/metamask", "/api/auth/email", "/users", "/users/<account_id>"} <= rules


def test_sql_store_selected_by_default(app):
    assert isinstance(app.extensions["auth_service"].store, SqlAccountStore)


def test_rest_store_selected(app_factory):
    app = app_factory(
        ACCOUNT_STORE="rest",
        SUPABASE_URL="https://project.supabase.co",
        SUPABASE_KEY="anon",
    )
    store = app.extensions["auth_service"].store
    assert isinstance(store, RestAccountStore)
    assert str(store.client.base_url).rstrip("/") == "https://project.supabase.co/rest/v1"


def test_rest_store_requires_credentials(app_factory):
    with pytest.raises(RuntimeError):
        app_factory(ACCOUNT_STORE="rest", SUPABASE_URL=None, SUPABASE_KEY=None)


def test_cors_allows_configured_origin(app_factory):
    app = app_factory(CORS_ORIGINS=["https://client.example"])
    client = app.test_client()

    response = client.get("/health", headers={"Origin": "https://client.example"})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"


def test_request_id_echoed_in_error_body(client):
    response = client.post(
        "/api/auth/email",
        json={"email": "a@x.com"},
        headers={"X-Request-ID": "req-123"},
    )

    assert response.status_code == 400
    assert response.get_json()["request_id"] == "req-123"
    assert response.headers["X-Request-ID"] == "req-123"


def test_non_json_body_is_rejected(client):
    response = client.post("/api/auth/email", data="email=a", content_type="text/plain")

    assert response.status_code == 400
