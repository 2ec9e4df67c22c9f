"""Authentication flows: registration, login, token rotation, and password recovery."""

from __future__ import annotations

import hmac
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from models.user import USER_ROLES, User
from notifications import AbstractNotifier, LogNotifier, redact_email
from utils.clock import utcnow
from utils.request_validation import (
    is_valid_email,
    is_valid_phone,
    normalize_email,
    password_error,
)

from .credential_store import CredentialStore
from .errors import (
    AccountLocked,
    AlreadyVerified,
    DuplicateEmail,
    InvalidCredentials,
    InvalidCurrentPassword,
    InvalidOrExpiredToken,
    InvalidRefreshToken,
    Unauthorized,
    UserNotFound,
    ValidationError,
)
from .lockout import LockoutPolicy
from .tokens import TokenExpired, TokenInvalid, TokenPair, TokenService

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists, a password reset link has been sent."


@dataclass(frozen=True)
class AuthResult:
    user: User
    tokens: TokenPair


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _secret(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _is_live(expires: datetime | None, now: datetime) -> bool:
    return expires is not None and expires > now


class AuthService:
    """Orchestrate every authentication operation.

    The service is the only component that reads and writes credential fields.
    Time comes from ``clock`` so lockout and token expiry can be exercised
    without waiting.
    """

    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenService,
        notifier: AbstractNotifier,
        policy: LockoutPolicy | None = None,
        *,
        verification_ttl: timedelta = timedelta(hours=24),
        reset_ttl: timedelta = timedelta(hours=1),
        password_hash_method: str = "scrypt",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.notifier = notifier
        self.policy = policy or LockoutPolicy()
        self.verification_ttl = verification_ttl
        self.reset_ttl = reset_ttl
        self.password_hash_method = password_hash_method
        self.clock = clock

    @classmethod
    def from_config(cls, config, notifier: AbstractNotifier | None = None) -> "AuthService":
        return cls(
            CredentialStore(),
            TokenService.from_config(config),
            notifier or LogNotifier(config.get("FRONTEND_URL", "http://localhost:3000")),
            LockoutPolicy(config["MAX_LOGIN_ATTEMPTS"], config["LOCKOUT_DURATION"]),
            verification_ttl=config["EMAIL_VERIFICATION_TTL"],
            reset_ttl=config["PASSWORD_RESET_TTL"],
            password_hash_method=config.get("PASSWORD_HASH_METHOD", "scrypt"),
        )

    # Registration and login

    def register(self, *, name, email, password, phone, role) -> AuthResult:
        name = _text(name)
        email = normalize_email(_text(email))
        password = _secret(password)
        phone = _text(phone)
        role = _text(role).lower()

        fields = {"name": name, "email": email, "password": password, "phone": phone, "userType": role}
        missing = [key for key, value in fields.items() if not value]
        if missing:
            raise ValidationError(
                "All fields are required",
                errors=[f"{key} is required" for key in missing],
            )

        errors = []
        if not is_valid_email(email):
            errors.append("Invalid email format")
        weak = password_error(password)
        if weak:
            errors.append(weak)
        if not is_valid_phone(phone):
            errors.append("Invalid phone number format")
        if role not in USER_ROLES:
            errors.append("userType must be one of: {}".format(", ".join(USER_ROLES)))
        if errors:
            raise ValidationError(errors[0], errors=errors)

        if self.store.find_by_email_and_role(email, role) is not None:
            raise DuplicateEmail()

        user = User(name=name, email=email, phone=phone, role=role, is_email_verified=False, login_attempts=0)
        user.set_password(password, method=self.password_hash_method)
        user.set_email_verification(
            self.tokens.generate_opaque_token(), self.clock() + self.verification_ttl
        )
        self.store.create(user)

        tokens = self.tokens.issue_token_pair(user.id, user.role)
        user.refresh_token = tokens.refresh_token
        self.store.save(user)

        logger.info("Registered %s account for %s", user.role, redact_email(user.email))
        self._notify(self.notifier.send_verification_email, user.email, user.email_verification_token)
        return AuthResult(user=user, tokens=tokens)

    def login(self, *, email, password, role) -> AuthResult:
        email = normalize_email(_text(email))
        password = _secret(password)
        role = _text(role).lower()
        if not email or not password or not role:
            raise ValidationError("Email, password, and user type are required")

        user = self.store.find_by_email_and_role(email, role)
        if user is None:
            raise InvalidCredentials()

        now = self.clock()
        state = user.lockout_state
        if self.policy.is_locked(state, now):
            minutes = self.policy.minutes_remaining(state, now)
            raise AccountLocked(
                f"Account is locked. Try again in {minutes} minutes.",
                lock_until=state.lock_until,
                minutes_remaining=minutes,
            )

        if not user.check_password(password):
            outcome = self.policy.on_failed_attempt(state, now)
            user.apply_lockout_state(outcome.state)
            self.store.save(user)
            if outcome.locked:
                minutes = math.ceil(self.policy.lock_duration.total_seconds() / 60)
                logger.warning("Locked %s account for %s", user.role, redact_email(user.email))
                raise AccountLocked(
                    "Account locked due to too many failed login attempts. "
                    f"Try again in {minutes} minutes.",
                    lock_until=outcome.state.lock_until,
                    minutes_remaining=minutes,
                )
            logger.info("Failed login for %s (%d remaining)", redact_email(user.email), outcome.attempts_remaining)
            raise InvalidCredentials(outcome.attempts_remaining)

        user.apply_lockout_state(self.policy.on_successful_attempt(state, now))
        tokens = self.tokens.issue_token_pair(user.id, user.role)
        user.refresh_token = tokens.refresh_token
        self.store.save(user)
        return AuthResult(user=user, tokens=tokens)

    def refresh(self, refresh_token) -> TokenPair:
        if not refresh_token or not isinstance(refresh_token, str):
            raise Unauthorized("Refresh token required")

        try:
            claims = self.tokens.verify_refresh_token(refresh_token)
        except (TokenExpired, TokenInvalid) as exc:
            raise InvalidRefreshToken("Invalid or expired refresh token") from exc

        user = self.store.find_by_id(claims.user_id)
        if user is None or not user.refresh_token:
            raise InvalidRefreshToken()
        if not hmac.compare_digest(user.refresh_token.encode(), refresh_token.encode()):
            raise InvalidRefreshToken()

        tokens = self.tokens.issue_token_pair(user.id, user.role)
        user.refresh_token = tokens.refresh_token
        self.store.save(user)
        return tokens

    def logout(self, user_id: str) -> None:
        user = self.store.find_by_id(user_id)
        if user is not None:
            user.refresh_token = None
            self.store.save(user)

    # Email verification

    def verify_email(self, token) -> User:
        token = _text(token)
        if not token:
            raise ValidationError("Verification token required")

        user = self.store.find_by_verification_token(token)
        if user is None or not _is_live(user.email_verification_expires, self.clock()):
            raise InvalidOrExpiredToken("Invalid or expired verification token")

        user.is_email_verified = True
        user.set_email_verification(None)
        self.store.save(user)
        return user

    def resend_verification(self, user_id: str) -> None:
        user = self._require_user(user_id)
        if user.is_email_verified:
            raise AlreadyVerified()

        user.set_email_verification(
            self.tokens.generate_opaque_token(), self.clock() + self.verification_ttl
        )
        self.store.save(user)
        self._notify(self.notifier.send_verification_email, user.email, user.email_verification_token)

    # Password recovery

    def forgot_password(self, *, email, role) -> str:
        email = normalize_email(_text(email))
        role = _text(role).lower()
        if not email or not role:
            raise ValidationError("Email and user type are required")

        user = self.store.find_by_email_and_role(email, role)
        if user is not None:
            user.set_password_reset(
                self.tokens.generate_opaque_token(), self.clock() + self.reset_ttl
            )
            self.store.save(user)
            self._notify(self.notifier.send_password_reset_email, user.email, user.password_reset_token)
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, *, token, new_password) -> None:
        token = _text(token)
        new_password = _secret(new_password)
        if not token or not new_password:
            raise ValidationError("Token and new password are required")
        weak = password_error(new_password)
        if weak:
            raise ValidationError(weak)

        user = self.store.find_by_reset_token(token)
        if user is None or not _is_live(user.password_reset_expires, self.clock()):
            raise InvalidOrExpiredToken("Invalid or expired reset token")

        user.set_password(new_password, method=self.password_hash_method)
        user.set_password_reset(None)
        user.apply_lockout_state(self.policy.on_password_reset(user.lockout_state))
        self.store.save(user)
        logger.info("Password reset completed for %s", redact_email(user.email))

    def change_password(self, user_id: str, *, current_password, new_password) -> None:
        current_password = _secret(current_password)
        new_password = _secret(new_password)
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        weak = password_error(new_password, label="New password")
        if weak:
            raise ValidationError(weak)

        user = self._require_user(user_id)
        if not user.check_password(current_password):
            raise InvalidCurrentPassword()

        user.set_password(new_password, method=self.password_hash_method)
        self.store.save(user)

    # Profile

    def get_profile(self, user_id: str) -> User:
        return self._require_user(user_id)

    def update_profile(self, user_id: str, *, name=None, phone=None) -> User:
        user = self._require_user(user_id)
        name = _text(name)
        phone = _text(phone)
        if phone and not is_valid_phone(phone):
            raise ValidationError("Invalid phone number format")

        if name:
            user.name = name
        if phone:
            user.phone = phone
        self.store.save(user)
        return user

    def _require_user(self, user_id: str) -> User:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user

    def _notify(self, send, recipient: str, token: str) -> None:
        try:
            send(recipient, token)
        except Exception:
            logger.exception("Failed to deliver account email to %s", redact_email(recipient))
