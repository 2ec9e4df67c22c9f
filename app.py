"""Application factory."""

from __future__ import annotations

import logging
import os
import traceback
import uuid

from flask import Flask, g, jsonify, request
from flask.logging import default_handler
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import jwt, limiter, migrate
from models import db
from notifications import AbstractNotifier
from routes.auth import auth_bp
from routes.deliveries import deliveries_bp
from routes.products import products_bp
from services.auth import AuthService
from services.errors import ServerError
from utils.clock import isoformat, utcnow

API_INDEX = {
    "auth": {
        "register": "POST /api/auth/register",
        "login": "POST /api/auth/login",
        "logout": "POST /api/auth/logout",
        "profile": "GET /api/auth/profile",
        "updateProfile": "PUT /api/auth/profile",
        "refreshToken": "POST /api/auth/refresh-token",
        "verifyEmail": "POST /api/auth/verify-email",
        "resendVerification": "POST /api/auth/resend-verification",
        "forgotPassword": "POST /api/auth/forgot-password",
        "resetPassword": "POST /api/auth/reset-password",
        "changePassword": "POST /api/auth/change-password",
    },
    "products": {
        "create": "POST /api/products",
        "myProducts": "GET /api/products/my-products",
        "getById": "GET /api/products/:id",
        "update": "PUT /api/products/:id",
        "delete": "DELETE /api/products/:id",
    },
    "deliveries": {
        "available": "GET /api/deliveries/available",
        "accept": "POST /api/deliveries/accept/:productId",
        "myDeliveries": "GET /api/deliveries/my-deliveries",
        "updateStatus": "PUT /api/deliveries/:id/status",
    },
    "general": {
        "health": "GET /api/health",
    },
}


def create_app(
    config_class: type[Config] = Config,
    notifier: AbstractNotifier | None = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    _configure_logging(app)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    if not app.config.get("RATELIMIT_KEY_PREFIX"):
        app.config["RATELIMIT_KEY_PREFIX"] = str(uuid.uuid4())
    limiter.init_app(app)

    app.extensions["auth_service"] = AuthService.from_config(app.config, notifier=notifier)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(products_bp, url_prefix="/api/products")
    app.register_blueprint(deliveries_bp, url_prefix="/api/deliveries")

    @app.route("/api/health", methods=["GET"])
    def health_check():
        return jsonify(
            {
                "status": "ok",
                "timestamp": isoformat(utcnow()),
                "environment": app.config.get("APP_ENV", "production"),
            }
        )

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({"message": "Logistics Platform API", "endpoints": API_INDEX})

    _register_jwt_handlers()
    _register_error_handlers(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.setLevel(level)
    for name in ("services", "notifications"):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if default_handler not in logger.handlers:
            logger.addHandler(default_handler)


def _register_jwt_handlers() -> None:
    """Render bearer-token failures with the API's message shape."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return jsonify({"message": "Access token required"}), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header: dict, jwt_payload: dict):
        return jsonify({"message": "Token expired", "expired": True}), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return jsonify({"message": "Invalid token"}), 403


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        payload = {
            "message": error.description,
            "error": getattr(error, "name", "Error"),
            "request_id": request_id,
        }
        payload.update(getattr(error, "payload", None) or {})
        response = jsonify(payload)
        response.status_code = error.code or 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        request_id = g.get("request_id") or str(uuid.uuid4())
        db.session.rollback()
        app.logger.exception("Unhandled application error", exc_info=error)
        server_error = ServerError()
        payload = {
            "message": server_error.description,
            "error": server_error.name,
            "request_id": request_id,
        }
        if app.config.get("APP_ENV") == "development":
            payload["detail"] = str(error)
            payload["stack"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        response = jsonify(payload)
        response.status_code = server_error.code
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
