"""
Retry policy and per-example attempt tracking.

EffectivePolicy is resolved once per loop start and frozen for the loop;
AttemptState is the mutable record of one example's retry loop.
"""

from dataclasses import dataclass, field
from typing import Optional

from rebound.retry.matchers import ExceptionMatcher


@dataclass(frozen=True)
class EffectivePolicy:
    """
    Settings in force for one example's retry loop.

    Attributes:
        retry_count: Retries allowed beyond the first execution (>= 0)
        retry_wait: Fixed wait, or backoff base, in seconds (>= 0)
        exponential_backoff: Double the wait with every attempt
        exceptions_to_hard_fail: Matching failures stop the loop at once
        exceptions_to_retry: When non-empty, only matching failures are retried
        clear_lets_on_failure: Reset shared fixtures between attempts
        flaky_detection: Hold a first-retry success for confirmation
    """

    retry_count: int
    retry_wait: float = 0.0
    exponential_backoff: bool = False
    exceptions_to_hard_fail: tuple[ExceptionMatcher, ...] = ()
    exceptions_to_retry: tuple[ExceptionMatcher, ...] = ()
    clear_lets_on_failure: bool = True
    flaky_detection: bool = False

    def __post_init__(self) -> None:
        """Validate policy invariants."""
        if self.retry_count < 0:
            raise ValueError("retry_count must be >= 0")

        if self.retry_wait < 0:
            raise ValueError("retry_wait must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.retry_count + 1

    def sleep_interval(self, attempts: int) -> float:
        """Seconds to wait before the next execution, given executions so far."""
        if self.exponential_backoff:
            return 2 ** (attempts - 1) * self.retry_wait
        return self.retry_wait


@dataclass
class AttemptState:
    """
    Attempt history of one example's retry loop.

    Attributes:
        attempts: Executions performed so far
        exception_history: Every recorded failure, oldest first
        last_failure: Failure left by the most recent execution (None on success)
    """

    attempts: int = 0
    exception_history: list[BaseException] = field(default_factory=list)
    last_failure: Optional[BaseException] = None

    @property
    def passed(self) -> bool:
        return self.last_failure is None

    def record(self, failure: Optional[BaseException]) -> None:
        """Count one execution and keep its failure, if any."""
        self.attempts += 1
        self.last_failure = failure
        if failure is not None:
            self.exception_history.append(failure)
