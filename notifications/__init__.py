"""Notification backends."""

from .abstract_notifier import AbstractNotifier
from .log_notifier import LogNotifier, redact_email

__all__ = ["AbstractNotifier", "LogNotifier", "redact_email"]
