"""
Exceptions raised by rebound itself.

The retry loop never raises these while running an example: failures of the
example stay in the example's failure slot. They signal configuration
mistakes caught while building policies.
"""


class ReboundError(Exception):
    """Base exception for all rebound errors."""


class InvalidMatcherError(ReboundError, TypeError):
    """
    Raised when an exception list entry cannot be used as a matcher.

    Attributes:
        entry: The offending list entry
    """

    def __init__(self, entry: object) -> None:
        self.entry = entry
        super().__init__(
            f"Cannot match failures against {entry!r}: expected an exception "
            f"class, an ExceptionMatcher or a predicate callable"
        )
