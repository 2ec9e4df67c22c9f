"""Notifier that writes account links to the application log."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from .abstract_notifier import AbstractNotifier

logger = logging.getLogger(__name__)


def redact_email(email: str) -> str:
    """Redact an email address for logging."""

    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class LogNotifier(AbstractNotifier):
    """Log verification and reset links instead of sending mail."""

    def __init__(self, frontend_url: str = "http://localhost:3000"):
        self.frontend_url = frontend_url.rstrip("/")

    def _link(self, path: str, token: str) -> str:
        return f"{self.frontend_url}/{path}?{urlencode({'token': token})}"

    def send_verification_email(self, recipient_email: str, token: str) -> None:
        logger.info(
            "Email verification for %s: %s",
            redact_email(recipient_email),
            self._link("verify-email", token),
        )

    def send_password_reset_email(self, recipient_email: str, token: str) -> None:
        logger.info(
            "Password reset for %s: %s",
            redact_email(recipient_email),
            self._link("reset-password", token),
        )
