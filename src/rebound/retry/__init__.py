"""
Retry engine for individual test examples.

Decides whether to re-execute a failed example, how many times, how long
to wait between attempts, which failures are exempt from retrying, and
when a pass only counts after a confirmation run (flaky detection).

Main Components:
    - RetryOrchestrator: Runs one example's retry loop
    - EffectivePolicy: Per-loop settings resolved from metadata and config
    - AttemptState: Attempt count and failure history of one loop
    - ExactType / SubtypeOf / Predicate: Exception list matchers

Usage:
    >>> from rebound.retry import RetryOrchestrator
    >>> orchestrator = RetryOrchestrator(settings, reporter)
    >>> state = orchestrator.run_with_retry(example, retry=2)
"""

from rebound.retry.exceptions import InvalidMatcherError, ReboundError
from rebound.retry.matchers import (
    ExactType,
    ExceptionMatcher,
    Predicate,
    SubtypeOf,
    failure_matches,
)
from rebound.retry.messages import ordinalize
from rebound.retry.orchestrator import RetryOrchestrator
from rebound.retry.state import AttemptState, EffectivePolicy

__all__ = [
    "RetryOrchestrator",
    "EffectivePolicy",
    "AttemptState",
    "ExceptionMatcher",
    "ExactType",
    "SubtypeOf",
    "Predicate",
    "failure_matches",
    "ordinalize",
    "ReboundError",
    "InvalidMatcherError",
]
