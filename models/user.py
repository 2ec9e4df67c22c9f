"""User model definition."""

import uuid

from werkzeug.security import check_password_hash, generate_password_hash

from services.lockout import LockoutState
from utils.clock import isoformat, utcnow

from . import db


USER_ROLES = ("entrepreneur", "delivery")


def _new_id() -> str:
    return str(uuid.uuid4())


class User(db.Model):
    """Represents a marketplace account for one role."""

    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", "role", name="uq_users_email_role"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(32), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(*USER_ROLES, name="user_role_enum"), nullable=False)
    is_email_verified = db.Column(db.Boolean, nullable=False, default=False)
    email_verification_token = db.Column(db.String(128), nullable=True, index=True)
    email_verification_expires = db.Column(db.DateTime, nullable=True)
    password_reset_token = db.Column(db.String(128), nullable=True, index=True)
    password_reset_expires = db.Column(db.DateTime, nullable=True)
    refresh_token = db.Column(db.Text, nullable=True)
    login_attempts = db.Column(db.Integer, nullable=False, default=0)
    lock_until = db.Column(db.DateTime, nullable=True)
    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def set_password(self, password: str, method: str = "scrypt") -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password, method=method)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    @property
    def lockout_state(self) -> LockoutState:
        return LockoutState(
            login_attempts=self.login_attempts or 0,
            lock_until=self.lock_until,
            last_login=self.last_login,
        )

    def apply_lockout_state(self, state: LockoutState) -> None:
        self.login_attempts = state.login_attempts
        self.lock_until = state.lock_until
        self.last_login = state.last_login

    def set_email_verification(self, token: str | None, expires=None) -> None:
        self.email_verification_token = token
        self.email_verification_expires = expires if token else None

    def set_password_reset(self, token: str | None, expires=None) -> None:
        self.password_reset_token = token
        self.password_reset_expires = expires if token else None

    def to_dict(self, include_last_login: bool = False) -> dict:
        """Serialize the fields returned alongside issued tokens."""

        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "userType": self.role,
            "isEmailVerified": bool(self.is_email_verified),
        }
        if include_last_login:
            data["lastLogin"] = isoformat(self.last_login)
        return data

    def to_profile_dict(self) -> dict:
        """Serialize the user without password, token, or expiry fields."""

        data = self.to_dict(include_last_login=True)
        data.update(
            {
                "loginAttempts": self.login_attempts or 0,
                "lockUntil": isoformat(self.lock_until),
                "createdAt": isoformat(self.created_at),
                "updatedAt": isoformat(self.updated_at),
            }
        )
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email} ({self.role})>"
