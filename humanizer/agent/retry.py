"""Bounded retry with exponential backoff."""

import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

from ..exceptions import ProviderError, RequestTimeoutError
from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (ProviderError, RequestTimeoutError)


@dataclass(frozen=True)
class RetryPolicy:
    """attempts counts the first call; delays are initial_delay * multiplier**n."""
    attempts: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)."""
        return self.initial_delay * (self.multiplier ** (attempt - 1))


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy = RetryPolicy(),
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
) -> T:
    """Call fn, retrying transient errors up to policy.attempts total calls.

    Errors not listed in retry_on (e.g. ValidationError) propagate at once.
    The last transient error propagates when the budget is exhausted.
    """
    attempts = max(1, policy.attempts)
    attempt = 1
    while True:
        try:
            return fn()
        except retry_on as e:
            if attempt >= attempts:
                logger.error(f"Giving up after {attempt} attempts: {e}")
                raise
            delay = policy.delay_for(attempt)
            logger.warning(f"Attempt {attempt}/{attempts} failed ({e}), retrying in {delay:.1f}s")
            if on_retry is not None:
                on_retry(attempt, e, delay)
            sleep(delay)
            attempt += 1
