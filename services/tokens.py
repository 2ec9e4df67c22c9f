"""Signed access/refresh tokens and opaque capability tokens."""

from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

REFRESH_TOKEN_TYPE = "refresh"
OPAQUE_TOKEN_BYTES = 32


class TokenExpired(Exception):
    """The token signature is valid but its expiry has passed."""


class TokenInvalid(Exception):
    """The token is malformed, tampered with, or of the wrong type."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """Issue and verify the two token kinds.

    Access tokens go through flask-jwt-extended so that ``jwt_required`` can
    guard routes; they are signed with the app's ``JWT_SECRET_KEY``. Refresh
    tokens are signed with a separate secret so one leaking does not allow
    forging the other. Issuing and verifying access tokens needs an active
    application context.
    """

    def __init__(
        self,
        refresh_secret: str,
        *,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ) -> None:
        if not refresh_secret:
            raise ValueError("A refresh token secret is required.")
        self.refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenService":
        return cls(
            config["JWT_REFRESH_SECRET"],
            access_ttl=config["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_ttl=config["JWT_REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def issue_token_pair(self, user_id: str, role: str) -> TokenPair:
        access_token = create_access_token(
            identity=str(user_id),
            additional_claims={"userId": str(user_id), "role": role},
            expires_delta=self.access_ttl,
        )
        now = datetime.now(timezone.utc)
        refresh_token = jwt.encode(
            {
                "sub": str(user_id),
                "userId": str(user_id),
                "role": role,
                "tokenType": REFRESH_TOKEN_TYPE,
                "jti": uuid.uuid4().hex,
                "iat": now,
                "exp": now + self.refresh_ttl,
            },
            self.refresh_secret,
            algorithm=self.algorithm,
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def verify_access_token(self, token: str) -> TokenClaims:
        try:
            claims = decode_token(token)
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token expired") from exc
        except (jwt.InvalidTokenError, JWTExtendedException) as exc:
            raise TokenInvalid("Invalid token") from exc

        if claims.get("type") != "access":
            raise TokenInvalid("Invalid token")
        return self._claims(claims)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        try:
            claims = jwt.decode(token, self.refresh_secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Refresh token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid("Invalid refresh token") from exc

        if claims.get("tokenType") != REFRESH_TOKEN_TYPE:
            raise TokenInvalid("Invalid refresh token")
        return self._claims(claims)

    @staticmethod
    def generate_opaque_token() -> str:
        return secrets.token_hex(OPAQUE_TOKEN_BYTES)

    @staticmethod
    def _claims(claims: dict) -> TokenClaims:
        user_id = claims.get("userId") or claims.get("sub")
        role = claims.get("role")
        if not user_id or not role:
            raise TokenInvalid("Token is missing identity claims")
        return TokenClaims(user_id=str(user_id), role=str(role))
