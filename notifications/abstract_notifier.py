"""Notification abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractNotifier(ABC):
    """Interface for delivering account emails."""

    @abstractmethod
    def send_verification_email(self, recipient_email: str, token: str) -> None:
        """Deliver an email-verification token to the recipient."""

    @abstractmethod
    def send_password_reset_email(self, recipient_email: str, token: str) -> None:
        """Deliver a password-reset token to the recipient."""
