"""Recurrence strategies used to step a base occurrence through time.

A strategy answers one question: where does the base instant land after
``steps`` periods? Steps are always measured from the base instant rather than
accumulated, so calendar clipping (Jan 31 -> Feb 28) never drifts later
occurrences away from the intended day of month.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvalidRecurrenceError, NegativeRecurrenceError


class RecurrenceStrategy(BaseModel, ABC):
    """Base class for recurrence patterns."""

    model_config = ConfigDict(frozen=True)

    @property
    def is_repeating(self) -> bool:
        """Whether the strategy produces more than the base occurrence."""
        return True

    @abstractmethod
    def shift(self, instant: datetime, steps: int) -> datetime:
        """Return ``instant`` moved by ``steps`` periods (negative moves back)."""

    def first_step_at_or_after(self, instant: datetime, target: datetime) -> int:
        """Smallest step whose shifted instant is at or after ``target``.

        Starts from a rough estimate and corrects it with ``shift``, which is
        monotonic in ``steps``.
        """
        step = self._estimate_steps(target - instant)
        while self.shift(instant, step) < target:
            step += 1
        while self.shift(instant, step - 1) >= target:
            step -= 1
        return step

    def _estimate_steps(self, span: timedelta) -> int:
        return 0


class NoRecurrence(RecurrenceStrategy):
    """The base occurrence only."""

    @property
    def is_repeating(self) -> bool:
        return False

    def shift(self, instant: datetime, steps: int) -> datetime:
        if steps:
            raise InvalidRecurrenceError(
                "Non-repeating rule cannot be stepped", {"steps": steps}
            )
        return instant

    def first_step_at_or_after(self, instant: datetime, target: datetime) -> int:
        return 0


class IntervalRecurrence(RecurrenceStrategy):
    """Repeat every fixed duration, ignoring calendar boundaries."""

    every: timedelta = Field(..., description="Fixed step between occurrences")

    @field_validator("every")
    @classmethod
    def validate_every(cls, v: timedelta) -> timedelta:
        """Reject negative and zero intervals.

        Raises:
            NegativeRecurrenceError: If the interval is negative
            InvalidRecurrenceError: If the interval is zero
        """
        if v < timedelta(0):
            raise NegativeRecurrenceError(
                "Recurrence interval must not be negative", {"every": str(v)}
            )
        if v == timedelta(0):
            raise InvalidRecurrenceError(
                "Zero interval does not repeat; use NoRecurrence", {"every": str(v)}
            )
        return v

    def shift(self, instant: datetime, steps: int) -> datetime:
        return instant + self.every * steps

    def first_step_at_or_after(self, instant: datetime, target: datetime) -> int:
        # Exact ceiling division on microseconds.
        return -((instant - target) // self.every)


class _CalendarRecurrence(RecurrenceStrategy):
    """Shared validation for the count-based calendar patterns."""

    count: int = Field(default=1, description="Number of calendar units per step")

    @field_validator("count")
    @classmethod
    def validate_count(cls, v: int) -> int:
        if v < 0:
            raise NegativeRecurrenceError("Recurrence count must not be negative", {"count": v})
        if v == 0:
            raise InvalidRecurrenceError("Recurrence count must be at least 1", {"count": v})
        return v

    def shift(self, instant: datetime, steps: int) -> datetime:
        return instant + self._delta(self.count * steps)

    def _estimate_steps(self, span: timedelta) -> int:
        return int(span / (self._unit_length() * self.count))

    @abstractmethod
    def _delta(self, units: int) -> relativedelta:
        """Calendar offset for ``units`` units of this pattern."""

    @abstractmethod
    def _unit_length(self) -> timedelta:
        """Average length of one unit, used to estimate step counts."""


class DailyRecurrence(_CalendarRecurrence):
    """Every ``count`` days at the same time of day."""

    def _delta(self, units: int) -> relativedelta:
        return relativedelta(days=units)

    def _unit_length(self) -> timedelta:
        return timedelta(days=1)


class WeeklyRecurrence(_CalendarRecurrence):
    """Every ``count`` weeks on the same weekday and time."""

    def _delta(self, units: int) -> relativedelta:
        return relativedelta(weeks=units)

    def _unit_length(self) -> timedelta:
        return timedelta(weeks=1)


class MonthlyRecurrence(_CalendarRecurrence):
    """Every ``count`` months on the same day of the month.

    Days past the end of a shorter month are clipped to its last day, so an
    occurrence on the 31st lands on Apr 30 and returns to May 31.
    """

    def _delta(self, units: int) -> relativedelta:
        return relativedelta(months=units)

    def _unit_length(self) -> timedelta:
        return timedelta(days=365.2425 / 12)


class AnnualRecurrence(_CalendarRecurrence):
    """Every ``count`` years on the same month, day and time.

    Feb 29 falls back to Feb 28 in non-leap years.
    """

    def _delta(self, units: int) -> relativedelta:
        return relativedelta(years=units)

    def _unit_length(self) -> timedelta:
        return timedelta(days=365.2425)


def interval_strategy(every: timedelta) -> RecurrenceStrategy:
    """Map a plain repeat duration onto a strategy (zero means no repeat)."""
    if every == timedelta(0):
        return NoRecurrence()
    return IntervalRecurrence(every=every)
