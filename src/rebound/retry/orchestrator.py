"""
Retry orchestrator for single test examples.

This module implements the RetryOrchestrator, which wraps one example's
execution in a retry loop. Per loop it:

    1. Resolves the EffectivePolicy (env override > metadata > settings)
    2. Executes the example and reads its failure slot
    3. Classifies the failure against the hard-fail / retry matcher lists
    4. Holds a first-retry success for confirmation when flaky detection is on
    5. Resets fixtures, fires callbacks and sleeps between attempts

The orchestrator never raises on behalf of the example: the final outcome
is whatever failure (or None) is left in the example when the loop ends.

Usage:
    orchestrator = RetryOrchestrator(settings, reporter)
    state = orchestrator.run_with_retry(example, retry=3)
"""

import time
from datetime import timedelta
from typing import Any, Iterable, Optional

import structlog

from rebound.config import ReboundSettings, RetryCountOverride
from rebound.example import Example, RetryListener
from rebound.reporter import Reporter, StreamReporter
from rebound.retry.matchers import as_matchers, failure_matches
from rebound.retry.messages import retry_message, try_failure_message
from rebound.retry.state import AttemptState, EffectivePolicy

logger = structlog.get_logger(__name__)


class RetryOrchestrator:
    """
    Drives repeated execution of one example until a terminal outcome.

    Settings are held by reference and re-read at every loop start, so the
    host may change defaults and callbacks between examples.

    Attributes:
        settings: Global defaults and callbacks
        reporter: Receives the human-readable retry messages
        listeners: Notified before each retry (objects with a ``retry`` method)
    """

    def __init__(
        self,
        settings: Optional[ReboundSettings] = None,
        reporter: Optional[Reporter] = None,
        listeners: Iterable[RetryListener] = (),
    ):
        if settings is None:
            from rebound.config import settings as default_settings

            settings = default_settings
        self.settings = settings
        self.reporter = reporter if reporter is not None else StreamReporter()
        self.listeners = list(listeners)

    def resolve_policy(self, example: Example) -> EffectivePolicy:
        """
        Resolve the policy for one loop, field by field.

        The first value that is not None wins: metadata over settings, and for
        the retry count the environment override over everything else.
        """
        settings = self.settings
        metadata = example.metadata

        def pick(key: str, default: Any) -> Any:
            value = metadata.get(key)
            return default if value is None else value

        hard_fail = metadata.get("exceptions_to_hard_fail")
        retry_on = metadata.get("exceptions_to_retry")

        return EffectivePolicy(
            retry_count=self._resolve_retry_count(example),
            retry_wait=self._resolve_wait(pick("retry_wait", settings.DEFAULT_SLEEP_INTERVAL)),
            exponential_backoff=bool(pick("exponential_backoff", settings.EXPONENTIAL_BACKOFF)),
            exceptions_to_hard_fail=tuple(
                as_matchers(hard_fail) if hard_fail is not None else settings.EXCEPTIONS_TO_HARD_FAIL
            ),
            exceptions_to_retry=tuple(
                as_matchers(retry_on) if retry_on is not None else settings.EXCEPTIONS_TO_RETRY
            ),
            clear_lets_on_failure=bool(pick("clear_lets_on_failure", settings.CLEAR_LETS_ON_FAILURE)),
            flaky_detection=settings.FLAKY_SPEC_DETECTION_ENABLED,
        )

    def _resolve_retry_count(self, example: Example) -> int:
        count = RetryCountOverride().RETRY_COUNT
        if count is None:
            count = example.metadata.get("retry")
        if count is None and self.settings.RETRY_COUNT_CONDITION is not None:
            count = self.settings.RETRY_COUNT_CONDITION(example)
        if count is None:
            count = self.settings.DEFAULT_RETRY_COUNT
        return max(int(count), 0)

    @staticmethod
    def _resolve_wait(wait: Any) -> float:
        # Durations are accepted as seconds; a non-positive wait means no sleep
        if isinstance(wait, timedelta):
            wait = wait.total_seconds()
        return max(float(wait), 0.0)

    def run_with_retry(self, example: Example, **overrides: Any) -> AttemptState:
        """
        Run an example until it passes, exhausts its budget, or hits a
        non-retryable failure.

        Args:
            example: Example handle to execute
            **overrides: Metadata merged into the example before the loop

        Returns:
            AttemptState of the finished loop; attempts and history are also
            mirrored on ``example.attempts`` and ``example.metadata``
        """
        example.metadata.update(overrides)
        settings = self.settings
        policy = self.resolve_policy(example)
        state = AttemptState()
        location = example.location
        log = logger.bind(location=location)

        example.attempts = 0
        example.metadata["retry_exceptions"] = state.exception_history

        log.debug(
            "Starting retry loop",
            retry_count=policy.retry_count,
            retry_wait=policy.retry_wait,
            exponential_backoff=policy.exponential_backoff,
            flaky_detection=policy.flaky_detection,
        )

        while True:
            if state.attempts > 0:
                self._notify_listeners(example)
                if settings.VERBOSE_RETRY:
                    self.reporter.message(retry_message(state.attempts, location))

            example.clear_last_failure()
            example.metadata["retry_attempts"] = state.attempts

            example.execute()
            failure = example.last_failure

            # A pass that needed retries
            held = False
            if failure is None and state.attempts > 0:
                if self._needs_confirmation(policy, state):
                    held = True
                    failure = state.exception_history[-1]
                    example.set_last_failure(failure)
                    log.info(
                        "Holding first-retry success for confirmation",
                        attempt=state.attempts + 1,
                    )
                    if settings.DISPLAY_TRY_FAILURE_MESSAGES:
                        self._report_try_failure(failure, state.attempts + 1, policy, location)
                else:
                    log.info("Flaky example passed after retry", attempts=state.attempts + 1)
                    if settings.FLAKY_TEST_CALLBACK is not None:
                        example.invoke_with_self(settings.FLAKY_TEST_CALLBACK)

            state.record(failure)
            example.attempts = state.attempts

            if failure is None:
                break

            if self._should_stop(policy, state, failure, log):
                break

            if settings.VERBOSE_RETRY and settings.DISPLAY_TRY_FAILURE_MESSAGES and not held:
                self._report_try_failure(failure, state.attempts, policy, location)

            if policy.clear_lets_on_failure:
                example.reset_shared_fixtures()

            if settings.RETRY_CALLBACK is not None:
                example.invoke_with_self(settings.RETRY_CALLBACK)

            if held and settings.FLAKY_SPEC_DETECTION is not None:
                example.invoke_with_self(settings.FLAKY_SPEC_DETECTION)

            interval = policy.sleep_interval(state.attempts)
            log.info(
                f"Retrying example (attempt {state.attempts + 1}/{policy.max_attempts})",
                error_type=type(failure).__name__,
                sleep_seconds=interval,
            )
            if interval > 0:
                time.sleep(interval)

        return state

    def _needs_confirmation(self, policy: EffectivePolicy, state: AttemptState) -> bool:
        """A first-retry success is held only if a confirmation pass still fits."""
        return (
            policy.flaky_detection
            and state.attempts == 1
            and state.attempts + 1 < policy.max_attempts
        )

    def _should_stop(
        self,
        policy: EffectivePolicy,
        state: AttemptState,
        failure: BaseException,
        log: structlog.stdlib.BoundLogger,
    ) -> bool:
        """Termination checks in order: budget, hard-fail list, retry list."""
        # With flaky detection the first failure always earns one more pass
        detection_pass = policy.flaky_detection and state.attempts == 1
        if not detection_pass and state.attempts >= policy.max_attempts:
            log.debug("Retry budget exhausted", attempts=state.attempts)
            return True

        if policy.exceptions_to_hard_fail and failure_matches(failure, policy.exceptions_to_hard_fail):
            log.warning(
                "Hard-fail exception, not retrying",
                attempts=state.attempts,
                error_type=type(failure).__name__,
            )
            return True

        if policy.exceptions_to_retry and not failure_matches(failure, policy.exceptions_to_retry):
            log.warning(
                "Exception not in retry list, not retrying",
                attempts=state.attempts,
                error_type=type(failure).__name__,
            )
            return True

        return False

    def _notify_listeners(self, example: Example) -> None:
        for listener in self.listeners:
            notify = getattr(listener, "retry", None)
            if notify is not None:
                notify(example)

    def _report_try_failure(
        self,
        failure: BaseException,
        attempts: int,
        policy: EffectivePolicy,
        location: str,
    ) -> None:
        message = try_failure_message(failure, attempts, policy.retry_count, location)
        if message is not None:
            self.reporter.message(message)
