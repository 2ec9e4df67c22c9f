"""Tests for the pure lockout policy."""

from datetime import datetime, timedelta

import pytest

from services.lockout import LockoutPolicy, LockoutState

NOW = datetime(2024, 5, 1, 12, 0, 0)


def test_failed_attempts_count_down_then_lock():
    policy = LockoutPolicy()
    state = LockoutState()

    remaining = []
    for _ in range(4):
        outcome = policy.on_failed_attempt(state, NOW)
        state = outcome.state
        remaining.append(outcome.attempts_remaining)
        assert outcome.locked is False
        assert state.lock_until is None

    assert remaining == [4, 3, 2, 1]

    outcome = policy.on_failed_attempt(state, NOW)
    assert outcome.locked is True
    assert outcome.attempts_remaining == 0
    assert outcome.state.login_attempts == 5
    assert outcome.state.lock_until == NOW + timedelta(minutes=30)
    assert policy.is_locked(outcome.state, NOW)


def test_attempts_remaining_is_floored_at_zero():
    policy = LockoutPolicy()
    outcome = policy.on_failed_attempt(LockoutState(login_attempts=7), NOW)

    assert outcome.attempts_remaining == 0
    assert outcome.locked is True


@pytest.mark.parametrize("attempts", [0, 3, 5, 12])
def test_success_and_reset_always_unlock(attempts):
    policy = LockoutPolicy()
    locked = LockoutState(login_attempts=attempts, lock_until=NOW + timedelta(minutes=10))

    after_login = policy.on_successful_attempt(locked, NOW)
    assert policy.is_locked(after_login, NOW) is False
    assert after_login.login_attempts == 0
    assert after_login.last_login == NOW

    after_reset = policy.on_password_reset(locked)
    assert policy.is_locked(after_reset, NOW) is False
    assert after_reset.login_attempts == 0
    assert after_reset.last_login is None


def test_lock_expires_with_time():
    policy = LockoutPolicy()
    state = LockoutState(login_attempts=5, lock_until=NOW + timedelta(minutes=30))

    assert policy.is_locked(state, NOW + timedelta(minutes=29, seconds=59))
    assert not policy.is_locked(state, NOW + timedelta(minutes=30))
    assert not policy.is_locked(state, NOW + timedelta(hours=1))


def test_minutes_remaining_rounds_up():
    policy = LockoutPolicy()
    state = LockoutState(login_attempts=5, lock_until=NOW + timedelta(minutes=12, seconds=1))

    assert policy.minutes_remaining(state, NOW) == 13
    assert policy.minutes_remaining(state, NOW + timedelta(hours=1)) == 0


def test_custom_threshold_and_duration():
    policy = LockoutPolicy(max_attempts=2, lock_duration=timedelta(minutes=5))

    first = policy.on_failed_attempt(LockoutState(), NOW)
    second = policy.on_failed_attempt(first.state, NOW)

    assert first.attempts_remaining == 1
    assert second.locked is True
    assert second.state.lock_until == NOW + timedelta(minutes=5)


def test_policy_does_not_mutate_input_state():
    policy = LockoutPolicy()
    state = LockoutState(login_attempts=1)

    policy.on_failed_attempt(state, NOW)

    assert state.login_attempts == 1
