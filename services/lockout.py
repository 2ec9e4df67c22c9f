"""Brute-force lockout bookkeeping.

The policy is pure: it takes the current counters and a timestamp and returns
new counters. Callers load the state from the user record and persist the
result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_LOCK_DURATION = timedelta(minutes=30)


@dataclass(frozen=True)
class LockoutState:
    login_attempts: int = 0
    lock_until: datetime | None = None
    last_login: datetime | None = None


@dataclass(frozen=True)
class FailedAttempt:
    """Outcome of recording a failed login."""

    state: LockoutState
    attempts_remaining: int

    @property
    def locked(self) -> bool:
        return self.state.lock_until is not None


class LockoutPolicy:
    """Lock an account for ``lock_duration`` once ``max_attempts`` failures accrue."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        lock_duration: timedelta = DEFAULT_LOCK_DURATION,
    ) -> None:
        self.max_attempts = max_attempts
        self.lock_duration = lock_duration

    def is_locked(self, state: LockoutState, now: datetime) -> bool:
        return state.lock_until is not None and state.lock_until > now

    def minutes_remaining(self, state: LockoutState, now: datetime) -> int:
        if not self.is_locked(state, now):
            return 0
        seconds = (state.lock_until - now).total_seconds()
        return math.ceil(seconds / 60)

    def on_failed_attempt(self, state: LockoutState, now: datetime) -> FailedAttempt:
        attempts = state.login_attempts + 1
        lock_until = now + self.lock_duration if attempts >= self.max_attempts else None
        new_state = replace(state, login_attempts=attempts, lock_until=lock_until)
        return FailedAttempt(
            state=new_state,
            attempts_remaining=max(0, self.max_attempts - attempts),
        )

    def on_successful_attempt(self, state: LockoutState, now: datetime) -> LockoutState:
        return LockoutState(login_attempts=0, lock_until=None, last_login=now)

    def on_password_reset(self, state: LockoutState) -> LockoutState:
        return replace(state, login_attempts=0, lock_until=None)
