"""ephemeris - conflict-free timelines from recurring calendar entries.

A Schedule is an ordered list of RecurrenceRules. Viewing it over a window
expands every rule into concrete Occurrences and condenses them so that only
one occurrence is active at any instant, with later rules taking priority.
"""

__version__ = "0.1.0"

from .calendar_view import CalendarView, view
from .config_loader import Config, load_config
from .exceptions import (
    ConfigError,
    EphemerisError,
    InvalidRangeError,
    InvalidRecurrenceError,
    NegativeRecurrenceError,
    UnresolvedOverlapError,
)
from .expander import RecurrenceExpander, expand
from .logging_config import configure_logging, get_logging_status
from .models import Occurrence, RecurrenceRule, Schedule
from .recurrence import (
    AnnualRecurrence,
    DailyRecurrence,
    IntervalRecurrence,
    MonthlyRecurrence,
    NoRecurrence,
    RecurrenceStrategy,
    WeeklyRecurrence,
)
from .reducer import Relationship, classify, overlaps, reduce_all, resolve_pair

__all__ = [
    "AnnualRecurrence",
    "CalendarView",
    "Config",
    "ConfigError",
    "DailyRecurrence",
    "EphemerisError",
    "IntervalRecurrence",
    "InvalidRangeError",
    "InvalidRecurrenceError",
    "MonthlyRecurrence",
    "NegativeRecurrenceError",
    "NoRecurrence",
    "Occurrence",
    "RecurrenceExpander",
    "RecurrenceRule",
    "RecurrenceStrategy",
    "Relationship",
    "Schedule",
    "UnresolvedOverlapError",
    "WeeklyRecurrence",
    "classify",
    "configure_logging",
    "expand",
    "get_logging_status",
    "load_config",
    "overlaps",
    "reduce_all",
    "resolve_pair",
    "view",
]
