"""
Example interface driven by the retry orchestrator.

An *example* is one logical test case. Host integrations adapt their own
test objects to the ``Example`` protocol; ``CallableExample`` is the
in-process adapter for plain callables (used by the ``retry`` decorator).
"""

from typing import Any, Callable, Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)


class Example(Protocol):
    """
    Protocol for a test case handle.

    The orchestrator reads and forces the outcome through the failure slot,
    stores retry bookkeeping in ``metadata`` and ``attempts``, and never
    inspects the body itself.
    """

    metadata: dict[str, Any]
    location: str
    attempts: int

    def execute(self) -> None:
        """Run the body once, leaving its failure (or None) in the failure slot."""
        ...

    @property
    def last_failure(self) -> Optional[BaseException]:
        ...

    def clear_last_failure(self) -> None:
        ...

    def set_last_failure(self, failure: Optional[BaseException]) -> None:
        ...

    def reset_shared_fixtures(self) -> None:
        """Drop memoized per-example state so the next attempt rebuilds it."""
        ...

    def invoke_with_self(self, callback: Callable[[Any], Any]) -> Any:
        ...


class RetryListener(Protocol):
    """Anything notified before each retry; listeners without ``retry`` are skipped."""

    def retry(self, example: Example) -> None:
        ...


class CallableExample:
    """
    Example backed by a plain callable.

    The body receives the example, so it can read memoized fixtures through
    ``example.fixture(name)``. Fixtures are built lazily from ``fixtures``
    factories and kept until ``reset_shared_fixtures`` is called.

    Only ``Exception`` subclasses are captured as failures; interrupts and
    other ``BaseException`` subclasses propagate to the caller.

    Attributes:
        body: Callable run on every attempt
        location: Human-readable location used in reporter messages
        metadata: Per-example options (``retry``, ``retry_wait``, ...)
        attempts: Executions performed by the last retry loop
    """

    def __init__(
        self,
        body: Callable[["CallableExample"], Any],
        location: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        fixtures: Optional[dict[str, Callable[[], Any]]] = None,
    ):
        self.body = body
        self.location = location or describe_callable(body)
        self.metadata: dict[str, Any] = dict(metadata or {})
        self.attempts = 0
        self._fixture_factories = dict(fixtures or {})
        self._fixture_values: dict[str, Any] = {}
        self._failure: Optional[BaseException] = None

    def execute(self) -> None:
        try:
            self.body(self)
        except Exception as e:
            self._failure = e
            logger.debug(
                "Example body failed",
                location=self.location,
                error_type=type(e).__name__,
            )
        else:
            self._failure = None

    @property
    def last_failure(self) -> Optional[BaseException]:
        return self._failure

    def clear_last_failure(self) -> None:
        self._failure = None

    def set_last_failure(self, failure: Optional[BaseException]) -> None:
        self._failure = failure

    def fixture(self, name: str) -> Any:
        """Memoized fixture value; built on first access after each reset."""
        if name not in self._fixture_values:
            self._fixture_values[name] = self._fixture_factories[name]()
        return self._fixture_values[name]

    def reset_shared_fixtures(self) -> None:
        self._fixture_values.clear()

    def invoke_with_self(self, callback: Callable[[Any], Any]) -> Any:
        return callback(self)

    def __repr__(self) -> str:
        return f"CallableExample({self.location!r})"


def describe_callable(func: Callable[..., Any]) -> str:
    """``module::qualname`` for a callable, falling back to its repr."""
    qualname = getattr(func, "__qualname__", None)
    if qualname is None:
        return repr(func)
    module = getattr(func, "__module__", None)
    return f"{module}::{qualname}" if module else qualname
