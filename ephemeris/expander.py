"""Recurrence expansion: turn a RecurrenceRule into concrete occurrences for a window."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .exceptions import InvalidRangeError
from .models import Occurrence, RecurrenceRule

logger = logging.getLogger(__name__)

DEFAULT_MAX_OCCURRENCES_PER_RULE = 10000


@dataclass
class ExpanderConfig:
    """Settings consumed by the expander."""

    max_occurrences_per_rule: int = DEFAULT_MAX_OCCURRENCES_PER_RULE

    @classmethod
    def from_settings(cls, settings: Any) -> ExpanderConfig:
        """Extract expander configuration from a settings object.

        Args:
            settings: Any object exposing expander attributes, or None

        Returns:
            ExpanderConfig with values from settings or defaults
        """
        return cls(
            max_occurrences_per_rule=getattr(
                settings, "max_occurrences_per_rule", DEFAULT_MAX_OCCURRENCES_PER_RULE
            ),
        )


def validate_window(view_start: datetime, view_end: datetime) -> None:
    """Raise InvalidRangeError when the query window is inverted."""
    if view_start > view_end:
        raise InvalidRangeError("View window ends before it starts", start=view_start, end=view_end)


class RecurrenceExpander:
    """Expands recurrence rules into the occurrences that meet a query window."""

    def __init__(self, settings: Optional[Any] = None):
        config = ExpanderConfig.from_settings(settings)
        self.max_occurrences = config.max_occurrences_per_rule

    def expand(
        self, rule: RecurrenceRule, view_start: datetime, view_end: datetime
    ) -> list[Occurrence]:
        """Expand ``rule`` into occurrences intersecting ``[view_start, view_end)``.

        Stepping starts at the first step whose occurrence can still reach the
        window (or the backward limit, if later) and moves forward until starts
        pass ``view_end`` or the forward limit. Each candidate keeps the base
        duration and name, and is kept only if it intersects the window, starts
        within the rule's limits and is not skipped or canceled. When the cap
        is reached the earliest occurrences are kept.

        Args:
            rule: Rule to expand
            view_start: Window start (inclusive)
            view_end: Window end (exclusive)

        Returns:
            Occurrences in ascending start order

        Raises:
            InvalidRangeError: If ``view_start`` is after ``view_end``
        """
        validate_window(view_start, view_end)

        strategy = rule.strategy
        if not strategy.is_repeating:
            occurrences = [rule.base] if self._accepts(rule, rule.base, view_start, view_end) else []
            logger.debug("Rule %r does not repeat; %d occurrence(s) in view", rule.name, len(occurrences))
            return occurrences

        base_start = rule.base.start
        duration = rule.base.duration

        # An occurrence can only reach the window if it ends at or after view_start.
        step = strategy.first_step_at_or_after(base_start, view_start - duration)
        if rule.backward_limit is not None:
            step = max(step, strategy.first_step_at_or_after(base_start, rule.backward_limit))

        occurrences: list[Occurrence] = []
        while True:
            start = strategy.shift(base_start, step)
            if start > view_end:
                break
            if rule.forward_limit is not None and start > rule.forward_limit:
                break

            candidate = rule.base.model_copy(update={"start": start, "end": start + duration})
            if self._accepts(rule, candidate, view_start, view_end):
                if len(occurrences) >= self.max_occurrences:
                    logger.warning(
                        "Rule %r hit max_occurrences_per_rule=%d; expansion truncated",
                        rule.name,
                        self.max_occurrences,
                    )
                    break
                occurrences.append(candidate)
            step += 1

        logger.debug(
            "Expanded rule %r into %d occurrence(s) for window %s - %s",
            rule.name,
            len(occurrences),
            view_start,
            view_end,
        )
        return occurrences

    def _accepts(
        self,
        rule: RecurrenceRule,
        occurrence: Occurrence,
        view_start: datetime,
        view_end: datetime,
    ) -> bool:
        if not occurrence.intersects(view_start, view_end):
            return False
        if not rule.within_limits(occurrence.start):
            return False
        if occurrence.start in rule.skip:
            logger.debug("Skipping occurrence of %r at %s", rule.name, occurrence.start)
            return False
        if occurrence.start in rule.canceled:
            logger.debug("Dropping canceled occurrence of %r at %s", rule.name, occurrence.start)
            return False
        return True


def expand(rule: RecurrenceRule, view_start: datetime, view_end: datetime) -> list[Occurrence]:
    """Expand ``rule`` for a window using default settings."""
    return RecurrenceExpander().expand(rule, view_start, view_end)
