"""
Failure matchers for the hard-fail and retry exception lists.

A matcher list may mix three kinds of entries:

1. **ExactType**: the failure's class must be exactly this class
2. **SubtypeOf**: the failure must be an instance of this class (or a subclass)
3. **Predicate**: an arbitrary ``failure -> bool`` test

Bare exception classes are read as ``SubtypeOf`` and bare callables as
``Predicate``, so hosts can write ``[TimeoutError, lambda e: "flaky" in str(e)]``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from rebound.retry.exceptions import InvalidMatcherError


class ExceptionMatcher(ABC):
    """Base class for list entries; subclasses implement ``matches``."""

    @abstractmethod
    def matches(self, failure: BaseException) -> bool:
        """True if the failure is accepted by this entry."""
        pass


@dataclass(frozen=True)
class ExactType(ExceptionMatcher):
    exc_type: type

    def matches(self, failure: BaseException) -> bool:
        return type(failure) is self.exc_type


@dataclass(frozen=True)
class SubtypeOf(ExceptionMatcher):
    exc_type: type

    def matches(self, failure: BaseException) -> bool:
        return isinstance(failure, self.exc_type)


@dataclass(frozen=True)
class Predicate(ExceptionMatcher):
    test: Callable[[BaseException], bool]

    def matches(self, failure: BaseException) -> bool:
        return bool(self.test(failure))


def as_matcher(entry: Any) -> ExceptionMatcher:
    """
    Coerce a list entry into an ExceptionMatcher.

    Raises:
        InvalidMatcherError: entry is neither a class, a matcher nor a callable
    """
    if isinstance(entry, ExceptionMatcher):
        return entry
    if isinstance(entry, type):
        return SubtypeOf(entry)
    if callable(entry):
        return Predicate(entry)
    raise InvalidMatcherError(entry)


def as_matchers(entries: Iterable[Any] | None) -> list[ExceptionMatcher]:
    if not entries:
        return []
    return [as_matcher(entry) for entry in entries]


def failure_matches(failure: BaseException, matchers: Iterable[Any]) -> bool:
    """True if any matcher in the list accepts the failure."""
    return any(as_matcher(matcher).matches(failure) for matcher in matchers)
