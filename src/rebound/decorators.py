"""
Decorator glue for running plain functions under the retry orchestrator.

Usage:
    from rebound import retry

    @retry(retry=3, exceptions_to_retry=[TimeoutError])
    def test_upload(tmp_path):
        ...

``functools.wraps`` keeps the wrapped signature, so pytest still injects
fixtures into decorated test functions.
"""

import functools
from typing import Any, Callable, Optional, TypeVar

from rebound.config import ReboundSettings
from rebound.example import CallableExample, describe_callable
from rebound.reporter import Reporter
from rebound.retry.orchestrator import RetryOrchestrator

F = TypeVar("F", bound=Callable[..., Any])


def retry(
    settings: Optional[ReboundSettings] = None,
    reporter: Optional[Reporter] = None,
    **overrides: Any,
) -> Callable[[F], F]:
    """
    Retry the decorated function according to ``overrides`` and settings.

    Args:
        settings: Settings to read (process default when None)
        reporter: Reporter for retry messages (stdout when None)
        **overrides: Per-example metadata (``retry``, ``retry_wait``, ...)

    Raises:
        Whatever failure the last attempt left behind.
    """

    def decorator(func: F) -> F:
        location = describe_callable(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            results: list[Any] = []

            def body(example: CallableExample) -> None:
                results.append(func(*args, **kwargs))

            example = CallableExample(body, location=location, metadata=dict(overrides))
            RetryOrchestrator(settings, reporter).run_with_retry(example)

            if example.last_failure is not None:
                raise example.last_failure
            return results[-1]

        return wrapper  # type: ignore[return-value]

    return decorator
