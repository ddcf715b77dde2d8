"""Data models for schedules, recurrence rules and concrete occurrences."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import InvalidRangeError, InvalidRecurrenceError, NegativeRecurrenceError
from .recurrence import RecurrenceStrategy, interval_strategy

if TYPE_CHECKING:
    from .config_loader import Config


class Occurrence(BaseModel):
    """A single, non-recurring entry on the timeline.

    ``start == end`` is a legal zero-length marker. Occurrences are frozen;
    anything that needs a different range derives a new value.
    """

    start: datetime = Field(..., description="Start of the active range")
    end: datetime = Field(..., description="End of the active range (exclusive)")
    name: str = Field(default="", description="What is happening")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_range(self) -> Occurrence:
        """Ensure the occurrence does not end before it starts.

        Raises:
            InvalidRangeError: If ``start`` is after ``end``
        """
        if self.start > self.end:
            raise InvalidRangeError(
                f"Occurrence {self.name!r} ends before it starts",
                start=self.start,
                end=self.end,
            )
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_marker(self) -> bool:
        """True for instantaneous occurrences."""
        return self.start == self.end

    def shifted(self, offset: timedelta) -> Occurrence:
        """Return a copy moved by ``offset``."""
        return self.model_copy(update={"start": self.start + offset, "end": self.end + offset})

    def intersects(self, window_start: datetime, window_end: datetime) -> bool:
        """Check whether this occurrence is active somewhere in ``[window_start, window_end)``.

        Markers count as active at their single instant. An empty window
        ``[t, t)`` is treated as the instant ``t``.
        """
        if window_start == window_end:
            if self.is_marker:
                return self.start == window_start
            return self.start <= window_start < self.end
        if self.is_marker:
            return window_start <= self.start < window_end
        return self.start < window_end and self.end > window_start


class RecurrenceRule(BaseModel):
    """Template that repeats a base occurrence.

    Recurrence comes from either ``repeat_every`` (a fixed duration) or
    ``pattern`` (a calendar-aware strategy); the two are mutually exclusive.
    With neither set the rule yields only its base occurrence.

    ``forward_limit`` and ``backward_limit`` bound occurrence starts
    inclusively. Starts listed in ``skip`` or ``canceled`` are dropped.
    """

    base: Occurrence = Field(..., description="The occurrence being repeated")
    repeat_every: timedelta = Field(
        default=timedelta(0), description="Fixed step between occurrences; zero disables"
    )
    pattern: Optional[RecurrenceStrategy] = Field(
        default=None, description="Calendar-aware recurrence, used instead of repeat_every"
    )
    forward_limit: Optional[datetime] = Field(
        default=None, description="Latest start that may be produced"
    )
    backward_limit: Optional[datetime] = Field(
        default=None, description="Earliest start that may be produced"
    )
    skip: frozenset[datetime] = Field(
        default_factory=frozenset, description="Starts that are not repeated"
    )
    canceled: frozenset[datetime] = Field(
        default_factory=frozenset, description="Starts that were canceled"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("repeat_every")
    @classmethod
    def validate_repeat_every(cls, v: timedelta) -> timedelta:
        """Reject negative repeat durations.

        Raises:
            NegativeRecurrenceError: If ``repeat_every`` is negative
        """
        if v < timedelta(0):
            raise NegativeRecurrenceError(
                "repeat_every must not be negative", {"repeat_every": str(v)}
            )
        return v

    @model_validator(mode="after")
    def validate_rule(self) -> RecurrenceRule:
        """Check that recurrence sources and limits are consistent.

        Raises:
            InvalidRecurrenceError: If both ``repeat_every`` and ``pattern`` are set
            InvalidRangeError: If ``forward_limit`` precedes ``backward_limit``
        """
        if self.pattern is not None and self.repeat_every != timedelta(0):
            raise InvalidRecurrenceError(
                "repeat_every and pattern are alternative recurrences; set only one",
                {"repeat_every": str(self.repeat_every), "pattern": type(self.pattern).__name__},
            )
        if (
            self.forward_limit is not None
            and self.backward_limit is not None
            and self.forward_limit < self.backward_limit
        ):
            raise InvalidRangeError(
                f"Recurrence limits of {self.base.name!r} are inverted",
                start=self.backward_limit,
                end=self.forward_limit,
            )
        return self

    @classmethod
    def once(cls, start: datetime, end: datetime, name: str = "") -> RecurrenceRule:
        """Build a non-repeating rule for a single occurrence."""
        return cls(base=Occurrence(start=start, end=end, name=name))

    @property
    def name(self) -> str:
        return self.base.name

    @property
    def strategy(self) -> RecurrenceStrategy:
        """The recurrence strategy in effect for this rule."""
        if self.pattern is not None:
            return self.pattern
        return interval_strategy(self.repeat_every)

    def within_limits(self, instant: datetime) -> bool:
        """Check ``instant`` against the inclusive backward/forward limits."""
        if self.backward_limit is not None and instant < self.backward_limit:
            return False
        if self.forward_limit is not None and instant > self.forward_limit:
            return False
        return True


class Schedule(BaseModel):
    """A named, priority-ordered collection of recurrence rules.

    Entry order is the only priority signal: when occurrences overlap, the one
    from the later entry wins. Rules entered with later plans in mind go last.
    """

    name: str = Field(default="", description="Human-readable schedule name")
    entries: tuple[RecurrenceRule, ...] = Field(
        default_factory=tuple, description="Rules in ascending priority"
    )

    model_config = ConfigDict(frozen=True)

    def with_entry(self, rule: RecurrenceRule) -> Schedule:
        """Return a new schedule with ``rule`` appended at the highest priority."""
        return self.model_copy(update={"entries": (*self.entries, rule)})

    def view(
        self,
        view_start: datetime,
        view_end: datetime,
        settings: Optional[Config] = None,
    ) -> list[Occurrence]:
        """Resolve this schedule into a non-overlapping timeline for the window."""
        from .calendar_view import view

        return view(self, view_start, view_end, settings=settings)
