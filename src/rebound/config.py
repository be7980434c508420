"""
Configuration settings for rebound.

Scalar options are loaded from environment variables (prefix ``REBOUND_``)
with sensible defaults; callbacks and exception matcher lists are assigned
in code by the host. Use a .env file for local overrides.
"""

from typing import Any, Callable, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReboundSettings(BaseSettings):
    """Process-wide retry defaults, read by the orchestrator at every loop start."""

    model_config = SettingsConfigDict(
        env_prefix="REBOUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # === Reporting ===
    VERBOSE_RETRY: bool = False
    DISPLAY_TRY_FAILURE_MESSAGES: bool = False

    # === Retry budget & wait ===
    DEFAULT_RETRY_COUNT: int = Field(default=0, ge=0)
    DEFAULT_SLEEP_INTERVAL: float = Field(default=0.0, ge=0.0)  # seconds
    EXPONENTIAL_BACKOFF: bool = False
    RETRY_COUNT_CONDITION: Optional[Callable[[Any], Optional[int]]] = None

    # === Fixtures ===
    CLEAR_LETS_ON_FAILURE: bool = True

    # === Exception classification ===
    EXCEPTIONS_TO_HARD_FAIL: list[Any] = []
    EXCEPTIONS_TO_RETRY: list[Any] = []

    # === Callbacks ===
    RETRY_CALLBACK: Optional[Callable[[Any], Any]] = None
    FLAKY_TEST_CALLBACK: Optional[Callable[[Any], Any]] = None
    FLAKY_SPEC_DETECTION: Optional[Callable[[Any], Any]] = None  # generic flaky classifier

    # === Flaky detection ===
    FLAKY_SPEC_DETECTION_ENABLED: bool = False

    @field_validator("EXCEPTIONS_TO_HARD_FAIL", "EXCEPTIONS_TO_RETRY")
    @classmethod
    def _coerce_matchers(cls, value: list[Any]) -> list[Any]:
        # Deferred: rebound.retry imports this module
        from rebound.retry.matchers import as_matchers

        return as_matchers(value)


class RetryCountOverride(BaseSettings):
    """
    Environment-level retry count that beats every other source.

    Instantiate at loop start so the value is read live from the
    environment, e.g. ``REBOUND_RETRY_COUNT=3`` to force retries in CI.
    """

    model_config = SettingsConfigDict(
        env_prefix="REBOUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    RETRY_COUNT: Optional[int] = None


# Global settings instance
settings = ReboundSettings()
