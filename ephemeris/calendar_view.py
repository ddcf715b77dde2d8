"""View orchestration: expand a schedule and condense it into one timeline."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from .expander import RecurrenceExpander, validate_window
from .models import Occurrence, Schedule
from .reducer import reduce_all

logger = logging.getLogger(__name__)


class CalendarView:
    """Builds conflict-free timelines for schedules.

    Only one occurrence is shown at any instant. Where entries compete, the
    one defined later in the schedule wins and earlier ones are trimmed
    around it, the way a person's calendar is edited with earlier plans in
    mind.
    """

    def __init__(self, settings: Optional[Any] = None):
        """Initialize the view builder.

        Args:
            settings: Optional settings object (e.g. Config) for the expander
        """
        self.expander = RecurrenceExpander(settings)

    def expand_schedule(
        self, schedule: Schedule, view_start: datetime, view_end: datetime
    ) -> list[Occurrence]:
        """Expand every entry of ``schedule`` in priority order without reducing.

        Raises:
            InvalidRangeError: If the window is inverted
        """
        validate_window(view_start, view_end)
        expanded: list[Occurrence] = []
        for rule in schedule.entries:
            expanded.extend(self.expander.expand(rule, view_start, view_end))
        return expanded

    def view(
        self, schedule: Schedule, view_start: datetime, view_end: datetime
    ) -> list[Occurrence]:
        """Return the non-overlapping occurrences of ``schedule`` within the window.

        Args:
            schedule: Priority-ordered schedule to resolve
            view_start: Window start (inclusive)
            view_end: Window end (exclusive)

        Returns:
            Occurrences with pairwise disjoint active ranges

        Raises:
            InvalidRangeError: If the window is inverted
            UnresolvedOverlapError: If the reducer meets an unhandled overlap
        """
        expanded = self.expand_schedule(schedule, view_start, view_end)
        timeline = reduce_all(expanded)
        logger.debug(
            "Schedule %r: %d rule(s), %d occurrence(s) expanded, %d in timeline",
            schedule.name,
            len(schedule.entries),
            len(expanded),
            len(timeline),
        )
        return timeline


def view(
    schedule: Schedule,
    view_start: datetime,
    view_end: datetime,
    settings: Optional[Any] = None,
) -> list[Occurrence]:
    """Resolve ``schedule`` into a conflict-free timeline for ``[view_start, view_end)``."""
    return CalendarView(settings).view(schedule, view_start, view_end)
