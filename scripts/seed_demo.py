"""Seed one verified demo account per role for local development."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from flask import current_app

from app import create_app
from models import db
from models.user import User

DEMO_PASSWORD = "DemoPass123"
DEMO_ACCOUNTS = (
    ("Demo Entrepreneur", "entrepreneur@example.com", "entrepreneur"),
    ("Demo Courier", "courier@example.com", "delivery"),
)


def seed_demo_users(password: str = DEMO_PASSWORD) -> list[tuple[str, str]]:
    """Create or reset the demo accounts; return ``(email, action)`` pairs."""

    method = current_app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    results = []
    for name, email, role in DEMO_ACCOUNTS:
        user = User.query.filter_by(email=email, role=role).first()
        if user is None:
            user = User(name=name, email=email, phone="9999999999", role=role)
            db.session.add(user)
            action = "created"
        else:
            action = "updated"
        user.is_email_verified = True
        user.set_email_verification(None)
        user.login_attempts = 0
        user.lock_until = None
        user.set_password(password, method=method)
        results.append((email, action))
    db.session.commit()
    return results


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()
        for email, action in seed_demo_users():
            print(f"Demo user {action}: {email}")
        print(f"Password for all demo users: {DEMO_PASSWORD}")


if __name__ == "__main__":
    main()
