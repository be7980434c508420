"""Reporter message formatting for retries and per-try failures."""

from typing import Optional

RETRY_PREFIX = "Rebound"


def ordinalize(number: int) -> str:
    """
    Turn a number into an ordinal string: 1st, 2nd, 3rd, 4th...

    11, 12 and 13 (and 111, 112, 113, ...) always take "th".
    """
    number = int(number)
    if number % 100 in (11, 12, 13):
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def retry_message(attempts: int, location: str) -> str:
    """
    Message announcing the upcoming try.

    ``attempts`` is the number of executions already performed; the first
    retry gets a leading blank line to separate it from the failure block.
    """
    message = f"{RETRY_PREFIX}: {ordinalize(attempts + 1)} try {location}"
    if attempts == 1:
        message = "\n" + message
    return message


def failure_strings(failure: BaseException) -> list[str]:
    """One display string per underlying failure (exception groups expand)."""
    if isinstance(failure, BaseExceptionGroup):
        return [str(exc) for exc in failure.exceptions]
    return [str(failure)]


def try_failure_message(
    failure: BaseException,
    attempts: int,
    retry_count: int,
    location: str,
) -> Optional[str]:
    """
    Failure block for a try that is about to be retried.

    Returns None for the final attempt: its failure is reported by the host
    test framework.
    """
    if attempts == retry_count + 1:
        return None

    lines = "\n".join(failure_strings(failure))
    return f"\n{ordinalize(attempts)} Try error in {location}:\n{lines}\n"
