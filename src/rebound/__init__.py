"""
rebound: retry orchestration for flaky test examples.

Re-runs a failing example within a retry budget, with fixed or exponential
waits, hard-fail and retry-only exception lists, and optional flaky
detection that asks a first-retry pass to be confirmed.

Architecture: pydantic-settings configuration + structlog diagnostics +
a single orchestrator driving any object that satisfies the Example protocol
"""

__version__ = "0.1.0"

from rebound.decorators import retry
from rebound.example import CallableExample, Example
from rebound.reporter import LogReporter, StreamReporter
from rebound.retry import RetryOrchestrator

__all__ = [
    "retry",
    "CallableExample",
    "Example",
    "LogReporter",
    "StreamReporter",
    "RetryOrchestrator",
]
