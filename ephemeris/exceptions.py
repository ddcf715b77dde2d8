"""
Exceptions raised by ephemeris.

Every error the package raises derives from EphemerisError so callers can
separate invalid input (InvalidRangeError, InvalidRecurrenceError) from
internal defects (UnresolvedOverlapError) and from configuration problems.
"""

from typing import Any, Optional


class EphemerisError(Exception):
    """Base exception for all ephemeris errors.

    Args:
        message: Human-readable error description
        details: Optional dictionary containing additional error context

    Example:
        >>> raise EphemerisError("View failed", {"schedule": "work"})
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidRangeError(EphemerisError):
    """A range has its start after its end.

    Raised for occurrences, query windows and recurrence limits. The offending
    bounds are kept on the exception and copied into ``details``.
    """

    def __init__(
        self,
        message: str,
        start: Optional[Any] = None,
        end: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.start = start
        self.end = end

        error_details = details or {}
        if start is not None:
            error_details["start"] = str(start)
        if end is not None:
            error_details["end"] = str(end)

        super().__init__(message, error_details)


class InvalidRecurrenceError(EphemerisError):
    """A recurrence definition cannot be expanded as written."""


class NegativeRecurrenceError(InvalidRecurrenceError):
    """A recurrence steps by a negative amount.

    Expansion assumes that every step moves strictly forward in time, so
    negative intervals and counts are rejected when the rule is built.
    """


class UnresolvedOverlapError(EphemerisError):
    """Two occurrences overlap in a way the resolver has no case for.

    This signals a defect in the reducer rather than bad input. Both
    occurrences are attached so the geometry can be reproduced.
    """

    def __init__(self, message: str, lower: Any, higher: Any) -> None:
        self.lower = lower
        self.higher = higher
        super().__init__(
            message,
            {
                "lower": f"{getattr(lower, 'name', '')!r} [{lower.start}, {lower.end})",
                "higher": f"{getattr(higher, 'name', '')!r} [{higher.start}, {higher.end})",
            },
        )


class ConfigError(EphemerisError):
    """Configuration could not be loaded."""
