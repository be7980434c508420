"""
Reporters receive the human-readable retry messages.

The orchestrator only produces message strings; where they end up (a
console stream, the log pipeline, a host framework's reporter) is decided
by the Reporter it is given.
"""

import sys
from typing import Optional, Protocol, TextIO

import structlog

logger = structlog.get_logger(__name__)


class Reporter(Protocol):
    def message(self, text: str) -> None:
        """Emit one block of diagnostic text."""
        ...


class StreamReporter:
    """Writes each message to a text stream, ending it with a newline if it lacks one."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def message(self, text: str) -> None:
        self.stream.write(text if text.endswith("\n") else text + "\n")
        self.stream.flush()


class LogReporter:
    """Routes messages through structlog at info level."""

    def __init__(self, event: str = "Retry message"):
        self.event = event

    def message(self, text: str) -> None:
        logger.info(self.event, text=text)
