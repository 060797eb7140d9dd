"""Retry policy for the outbound provider call."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Callable, TypeVar

from .errors import GatewayError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-count retry with exponential backoff.

    `max_attempts` counts the first call, so the default of 1 never retries.
    Only errors flagged `retryable` (timeouts, connection failures and
    429/5xx responses) are retried; everything else propagates at once.
    """

    max_attempts: int = 1
    backoff_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the failed `attempt` (1-based)."""
        return self.backoff_seconds * (self.backoff_multiplier ** (attempt - 1))

    def call(self, func: Callable[[], T]) -> T:
        attempt = 1
        while True:
            try:
                return func()
            except GatewayError as exc:
                if not exc.retryable or attempt >= self.max_attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "Provider call failed (%s, attempt %d/%d); retrying in %.1fs",
                    exc.kind,
                    attempt,
                    self.max_attempts,
                    delay,
                )
                self.sleep(delay)
                attempt += 1


NO_RETRY = RetryPolicy()
