"""Retry/backoff executor: tenacity-based exponential backoff for every fetch.

A :class:`RetryPolicy` is an explicit, immutable description of how a failing
operation is retried:

- **Randomized exponential backoff**: ``initial_delay * multiplier**(n-1)``,
  capped at ``max_delay`` and spread by ``±jitter`` of itself
- **Classification**: transient errors are retried, permanent ones surface
  on the first attempt with no delay
- **Budget**: stops after ``max_attempts`` or ``max_elapsed`` seconds and
  re-raises the last error unchanged

Example:
    >>> policy = RetryPolicy.from_settings()
    >>> document = policy.call(fetch_document, client, session, task)
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
)
from tenacity.wait import wait_base

from eswil.config import settings
from eswil.errors import is_transient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class wait_randomized_exponential(wait_base):
    """Exponential wait spread uniformly over ``[d*(1-jitter), d*(1+jitter)]``."""

    def __init__(
        self,
        initial: float,
        multiplier: float,
        maximum: float,
        jitter: float,
    ) -> None:
        self.initial = initial
        self.multiplier = multiplier
        self.maximum = maximum
        self.jitter = jitter

    def __call__(self, retry_state: RetryCallState) -> float:
        exponent = max(retry_state.attempt_number - 1, 0)
        try:
            interval = self.initial * self.multiplier**exponent
        except OverflowError:
            interval = self.maximum
        interval = min(interval, self.maximum)
        spread = interval * self.jitter
        return max(0.0, random.uniform(interval - spread, interval + spread))


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 20
    initial_delay: float = 0.5
    multiplier: float = 1.5
    max_delay: float = 60.0
    max_elapsed: float = 900.0
    jitter: float = 0.5
    classifier: Callable[[BaseException], bool] = is_transient
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        """Build the policy configured through ``settings``."""
        return cls(
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay,
            multiplier=settings.retry_multiplier,
            max_delay=settings.retry_max_delay,
            max_elapsed=settings.retry_max_elapsed,
            jitter=settings.retry_jitter,
        )

    def retrying(self) -> Retrying:
        """Return a fresh tenacity ``Retrying``; its state lives for one task."""
        return Retrying(
            stop=stop_after_attempt(self.max_attempts) | stop_after_delay(self.max_elapsed),
            wait=wait_randomized_exponential(
                self.initial_delay, self.multiplier, self.max_delay, self.jitter
            ),
            retry=retry_if_exception(self.classifier),
            sleep=self.sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            # Re-raise the original exception on the final failure
            reraise=True,
        )

    def call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Invoke ``fn(*args, **kwargs)`` under this policy."""
        return self.retrying()(fn, *args, **kwargs)
