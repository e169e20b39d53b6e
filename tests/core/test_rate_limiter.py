"""
Tests for the in-memory side of the rate limiter.
"""

import pytest

from app import rate_limiter
from app.rate_limiter import check_rate_limit


@pytest.fixture
def clock(mocker):
    """Fixed clock for the limiter module, starting from a clean cleanup schedule"""
    fake_time = mocker.patch.object(rate_limiter, "time")
    fake_time.time.return_value = 1_000_000
    mocker.patch.object(rate_limiter, "last_cleanup_time", 0)
    return fake_time


def test_counts_until_the_limit(clock):
    results = [check_rate_limit("sign_in:10.0.0.1", 2, 300)[0] for _ in range(3)]

    assert results == [True, True, False]


def test_window_reset_allows_again(clock):
    for _ in range(2):
        check_rate_limit("sign_in:10.0.0.1", 2, 300)

    clock.time.return_value += 300
    is_allowed, count, _ = check_rate_limit("sign_in:10.0.0.1", 2, 300)

    assert is_allowed
    assert count == 1


def test_expired_entries_are_dropped(clock):
    for i in range(1000):
        check_rate_limit(f"sign_in:10.0.{i // 256}.{i % 256}", 10, 300)
    assert len(rate_limiter.memory_cache) == 1000

    clock.time.return_value += 3600
    check_rate_limit("sign_in:10.9.9.9", 10, 300)

    assert list(rate_limiter.memory_cache) == ["sign_in:10.9.9.9"]


def test_cleanup_runs_at_most_once_per_interval(clock):
    check_rate_limit("sign_in:10.0.0.1", 10, 5)

    clock.time.return_value += 30
    check_rate_limit("sign_in:10.0.0.2", 10, 5)

    assert set(rate_limiter.memory_cache) == {"sign_in:10.0.0.1", "sign_in:10.0.0.2"}

    clock.time.return_value += rate_limiter.MEMORY_CACHE_CLEANUP_INTERVAL
    check_rate_limit("sign_in:10.0.0.3", 10, 5)

    assert list(rate_limiter.memory_cache) == ["sign_in:10.0.0.3"]
