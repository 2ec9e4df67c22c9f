"""Tests for the demo seeding script."""

from __future__ import annotations

from models.user import User
from scripts.seed_demo import DEMO_PASSWORD, seed_demo_users


def test_seed_creates_verified_account_per_role(app, client):
    with app.app_context():
        first = seed_demo_users()
        second = seed_demo_users()

        assert [action for _, action in first] == ["created", "created"]
        assert [action for _, action in second] == ["updated", "updated"]
        assert User.query.count() == 2

    response = client.post(
        "/api/auth/login",
        json={"email": "courier@example.com", "password": DEMO_PASSWORD, "userType": "delivery"},
    )
    assert response.status_code == 200
    assert response.get_json()["user"]["isEmailVerified"] is True
