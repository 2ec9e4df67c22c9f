"""Helpers for reading the authenticated caller inside a request."""

from __future__ import annotations

from functools import wraps

from flask import current_app
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from werkzeug.exceptions import Forbidden


def get_auth_service():
    return current_app.extensions["auth_service"]


def current_user_id() -> str:
    return str(get_jwt_identity())


def current_role() -> str | None:
    return get_jwt().get("role")


def role_required(role: str, message: str = "Access denied"):
    """Require a valid access token whose role claim equals ``role``."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_role() != role:
                raise Forbidden(message)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
