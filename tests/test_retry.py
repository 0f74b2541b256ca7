"""Tests for bounded retry with exponential backoff."""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.agent.retry import RetryPolicy, call_with_retry
from humanizer.exceptions import ProviderError, RequestTimeoutError, ValidationError


class Flaky:
    """Fails with the given errors in order, then returns value."""

    def __init__(self, errors, value="ok"):
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


def test_succeeds_after_transient_failures():
    sleeps = []
    fn = Flaky([ProviderError("HTTP 503"), RequestTimeoutError("timed out")])
    assert call_with_retry(fn, RetryPolicy(), sleep=sleeps.append) == "ok"
    assert fn.calls == 3
    assert sleeps == [1.0, 2.0]


def test_gives_up_after_three_attempts():
    sleeps = []
    fn = Flaky([ProviderError("a"), ProviderError("b"), ProviderError("c"), ProviderError("d")])
    with pytest.raises(ProviderError, match="c"):
        call_with_retry(fn, RetryPolicy(), sleep=sleeps.append)
    assert fn.calls == 3
    assert sleeps == [1.0, 2.0]


def test_validation_error_is_not_retried():
    sleeps = []
    fn = Flaky([ValidationError("no API key")])
    with pytest.raises(ValidationError):
        call_with_retry(fn, RetryPolicy(), sleep=sleeps.append)
    assert fn.calls == 1
    assert sleeps == []


def test_on_retry_callback():
    seen = []
    fn = Flaky([ProviderError("HTTP 500")])
    call_with_retry(fn, RetryPolicy(), sleep=lambda s: None, on_retry=lambda n, e, d: seen.append((n, str(e), d)))
    assert seen == [(1, "HTTP 500", 1.0)]


def test_single_attempt_policy():
    fn = Flaky([ProviderError("down")])
    with pytest.raises(ProviderError):
        call_with_retry(fn, RetryPolicy(attempts=1), sleep=lambda s: None)
    assert fn.calls == 1


def test_delay_schedule():
    policy = RetryPolicy(attempts=4, initial_delay=0.5, multiplier=3)
    assert [policy.delay_for(n) for n in (1, 2, 3)] == [0.5, 1.5, 4.5]
