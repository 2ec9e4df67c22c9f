"""Persistence for user credentials."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User

from .errors import DuplicateEmail

logger = logging.getLogger(__name__)


class CredentialStore:
    """Look up and persist ``User`` records through the Flask-SQLAlchemy session.

    The unique ``(email, role)`` constraint on the table is what actually
    prevents duplicate registrations; ``create`` reports a violation as
    ``DuplicateEmail``.
    """

    @property
    def session(self):
        return db.session

    def find_by_email_and_role(self, email: str, role: str) -> User | None:
        return User.query.filter_by(email=email, role=role).first()

    def find_by_id(self, user_id: str) -> User | None:
        if not user_id:
            return None
        return self.session.get(User, str(user_id))

    def find_by_verification_token(self, token: str) -> User | None:
        return User.query.filter_by(email_verification_token=token).first()

    def find_by_reset_token(self, token: str) -> User | None:
        return User.query.filter_by(password_reset_token=token).first()

    def create(self, user: User) -> User:
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.info("Rejected duplicate registration for role %s", user.role)
            raise DuplicateEmail() from exc
        return user

    def save(self, user: User) -> User:
        self.session.add(user)
        self.session.commit()
        return user
