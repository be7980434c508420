"""Shared test fixtures and configuration for all tests.

This conftest.py provides settings, reporters and scripted examples used
across unit and integration tests.
"""

import io
from typing import Any, Optional
from unittest.mock import patch

import pytest

from rebound.config import ReboundSettings
from rebound.example import CallableExample
from rebound.reporter import StreamReporter
from rebound.retry.orchestrator import RetryOrchestrator


@pytest.fixture(autouse=True)
def clear_retry_count_override(monkeypatch):
    """Keep the environment override out of tests unless a test sets it."""
    monkeypatch.delenv("REBOUND_RETRY_COUNT", raising=False)


@pytest.fixture
def test_settings() -> ReboundSettings:
    """Settings with library defaults, ignoring any local .env file.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.VERBOSE_RETRY = True
    """
    return ReboundSettings(_env_file=None)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> StreamReporter:
    return StreamReporter(output)


@pytest.fixture
def orchestrator(test_settings: ReboundSettings, reporter: StreamReporter) -> RetryOrchestrator:
    return RetryOrchestrator(test_settings, reporter)


@pytest.fixture
def no_sleep():
    """Patch out the wait between attempts; yields the mock for assertions."""
    with patch("rebound.retry.orchestrator.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def scripted_example():
    """Factory fixture for examples that follow a script of outcomes.

    Each entry is None (pass) or an exception instance to raise. The last
    entry repeats once the script runs out.

    Usage:
        def test_something(scripted_example):
            example = scripted_example([RetryError(), None], retry=2)
            ...
            assert example.calls == 2
    """

    def _create(
        outcomes: list[Optional[BaseException]],
        location: str = "./tests/example_spec.py:1",
        fixtures: Optional[dict[str, Any]] = None,
        **metadata: Any,
    ) -> CallableExample:
        script = list(outcomes)

        def body(example: CallableExample) -> None:
            example.calls += 1
            outcome = script.pop(0) if len(script) > 1 else script[0]
            if outcome is not None:
                raise outcome

        example = CallableExample(body, location=location, metadata=metadata, fixtures=fixtures)
        example.calls = 0
        return example

    return _create
