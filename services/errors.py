"""Authentication error taxonomy.

Each error is a werkzeug ``HTTPException`` carrying an optional ``payload``
that the application's error handler merges into the JSON body.
"""

from __future__ import annotations

from werkzeug.exceptions import HTTPException

from utils.clock import isoformat


class AuthError(HTTPException):
    code = 400
    description = "Request failed."

    def __init__(self, description: str | None = None, **payload) -> None:
        super().__init__(description or self.description)
        self.payload = {key: value for key, value in payload.items() if value is not None}


class ValidationError(AuthError):
    description = "Validation error"

    def __init__(self, description: str | None = None, errors: list[str] | None = None) -> None:
        errors = list(errors or ([description] if description else []))
        super().__init__(description, errors=errors or None)


class DuplicateEmail(AuthError):
    description = "User already exists with this email"


class InvalidCredentials(AuthError):
    description = "Invalid credentials"

    def __init__(self, attempts_remaining: int | None = None) -> None:
        super().__init__(attemptsRemaining=attempts_remaining)


class AccountLocked(AuthError):
    code = 423

    def __init__(self, description: str, lock_until=None, minutes_remaining: int | None = None) -> None:
        super().__init__(
            description,
            lockUntil=isoformat(lock_until),
            minutesRemaining=minutes_remaining,
        )


class InvalidOrExpiredToken(AuthError):
    description = "Invalid or expired token"


class InvalidRefreshToken(AuthError):
    code = 403
    description = "Invalid refresh token"


class AlreadyVerified(AuthError):
    description = "Email already verified"


class InvalidCurrentPassword(AuthError):
    description = "Current password is incorrect"


class Unauthorized(AuthError):
    code = 401
    description = "Authentication required"


class UserNotFound(AuthError):
    code = 404
    description = "User not found"


class ServerError(AuthError):
    code = 500
    description = "Server error"
