"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from notifications import AbstractNotifier  # noqa: E402


class AppTestConfig(Config):
    TESTING = True
    APP_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
    JWT_SECRET_KEY = JWT_ACCESS_SECRET
    JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    RATE_LIMIT = "1000 per minute"
    AUTH_RATE_LIMIT = "1000 per minute"


class RecordingNotifier(AbstractNotifier):
    """Collect account emails instead of sending them."""

    def __init__(self):
        self.verifications: list[tuple[str, str]] = []
        self.resets: list[tuple[str, str]] = []

    def send_verification_email(self, recipient_email: str, token: str) -> None:
        self.verifications.append((recipient_email, token))

    def send_password_reset_email(self, recipient_email: str, token: str) -> None:
        self.resets.append((recipient_email, token))


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def app(notifier: RecordingNotifier) -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(AppTestConfig, notifier=notifier)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()
