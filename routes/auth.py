"""Authentication blueprint for account, token, and password endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from extensions import auth_rate_limit, limiter
from utils.auth import current_user_id, get_auth_service
from utils.request_validation import parse_json_request

auth_bp = Blueprint("auth", __name__)


def _token_response(message: str, result, include_last_login: bool = False) -> dict:
    return {
        "message": message,
        "accessToken": result.tokens.access_token,
        "refreshToken": result.tokens.refresh_token,
        "user": result.user.to_dict(include_last_login=include_last_login),
    }


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(auth_rate_limit)
def register():
    """Create an unverified account and return its first token pair."""
    payload = parse_json_request(request)
    result = get_auth_service().register(
        name=payload.get("name"),
        email=payload.get("email"),
        password=payload.get("password"),
        phone=payload.get("phone"),
        role=payload.get("userType"),
    )
    return (
        jsonify(_token_response("User registered successfully. Please verify your email.", result)),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(auth_rate_limit)
def login():
    """Authenticate with email, password, and user type."""
    payload = parse_json_request(request)
    result = get_auth_service().login(
        email=payload.get("email"),
        password=payload.get("password"),
        role=payload.get("userType"),
    )
    return jsonify(_token_response("Login successful", result, include_last_login=True))


@auth_bp.route("/refresh-token", methods=["POST"])
@limiter.limit(auth_rate_limit)
def refresh_token():
    """Exchange the current refresh token for a new token pair."""
    payload = parse_json_request(request, allow_empty=True)
    tokens = get_auth_service().refresh(payload.get("refreshToken"))
    return jsonify(
        {
            "message": "Token refreshed successfully",
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        }
    )


@auth_bp.route("/verify-email", methods=["POST"])
@limiter.limit(auth_rate_limit)
def verify_email():
    """Mark the account verified using its single-use token."""
    payload = parse_json_request(request, allow_empty=True)
    get_auth_service().verify_email(payload.get("token"))
    return jsonify({"message": "Email verified successfully"})


@auth_bp.route("/resend-verification", methods=["POST"])
@jwt_required()
def resend_verification():
    """Issue and send a fresh verification token."""
    get_auth_service().resend_verification(current_user_id())
    return jsonify({"message": "Verification email sent"})


@auth_bp.route("/forgot-password", methods=["POST"])
@limiter.limit(auth_rate_limit)
def forgot_password():
    """Start a password reset without revealing whether the account exists."""
    payload = parse_json_request(request, allow_empty=True)
    message = get_auth_service().forgot_password(
        email=payload.get("email"),
        role=payload.get("userType"),
    )
    return jsonify({"message": message})


@auth_bp.route("/reset-password", methods=["POST"])
@limiter.limit(auth_rate_limit)
def reset_password():
    """Set a new password using a single-use reset token."""
    payload = parse_json_request(request, allow_empty=True)
    get_auth_service().reset_password(
        token=payload.get("token"),
        new_password=payload.get("newPassword"),
    )
    return jsonify({"message": "Password reset successfully"})


@auth_bp.route("/change-password", methods=["POST"])
@limiter.limit(auth_rate_limit)
@jwt_required()
def change_password():
    """Replace the password after checking the current one."""
    payload = parse_json_request(request, allow_empty=True)
    get_auth_service().change_password(
        current_user_id(),
        current_password=payload.get("currentPassword"),
        new_password=payload.get("newPassword"),
    )
    return jsonify({"message": "Password changed successfully"})


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    """Revoke the stored refresh token."""
    get_auth_service().logout(current_user_id())
    return jsonify({"message": "Logged out successfully"})


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def get_profile():
    """Return the caller's account without secret fields."""
    user = get_auth_service().get_profile(current_user_id())
    return jsonify(user.to_profile_dict())


@auth_bp.route("/profile", methods=["PUT"])
@jwt_required()
def update_profile():
    """Update the caller's name or phone number."""
    payload = parse_json_request(request, allow_empty=True)
    user = get_auth_service().update_profile(
        current_user_id(),
        name=payload.get("name"),
        phone=payload.get("phone"),
    )
    return jsonify({"message": "Profile updated successfully", "user": user.to_dict()})
