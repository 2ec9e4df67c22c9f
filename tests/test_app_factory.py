"""Tests for the Flask application factory."""
from __future__ import annotations


def test_health_endpoint_returns_ok(client):
    """The health endpoint should report status, time, and environment."""
    response = client.get("/api/health")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["environment"] == "testing"
    assert payload["timestamp"]


def test_blueprints_registered(app):
    """Application factory should register expected blueprints."""
    bps = set(app.blueprints.keys())
    assert {"auth", "products", "deliveries"}.issubset(bps)


def test_index_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    endpoints = response.get_json()["endpoints"]
    assert endpoints["auth"]["login"] == "POST /api/auth/login"
    assert endpoints["deliveries"]["accept"] == "POST /api/deliveries/accept/:productId"


def test_auth_service_is_attached(app):
    service = app.extensions["auth_service"]
    assert service.policy.max_attempts == 5
    assert service.tokens.refresh_secret == app.config["JWT_REFRESH_SECRET"]
