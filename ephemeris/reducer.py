"""Interval reduction: condense priority-ordered occurrences into a non-overlapping timeline.

Input order is priority order. When two occurrences overlap, the later one
(higher priority) is kept whole and the earlier one is truncated, split or
dropped around it. ``reduce_all`` repeats that pairwise resolution until no
two fragments overlap.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Callable, Optional

from .exceptions import UnresolvedOverlapError
from .models import Occurrence

logger = logging.getLogger(__name__)

Resolution = tuple[list[Occurrence], list[Occurrence]]


class Relationship(Enum):
    """Geometric relationship of a lower-priority range ``a`` to a higher-priority ``b``."""

    DISJOINT = "disjoint"
    TOUCHING = "touching"
    EQUAL = "equal"
    SAME_START_LONGER = "same_start_longer"  # a runs past b.end
    SAME_START_SHORTER = "same_start_shorter"  # a ends before b.end
    CONTAINS = "contains"  # b strictly inside a
    WITHIN = "within"  # a starts inside b and ends at or before b.end
    PARTIAL_LEFT = "partial_left"  # a starts first, b reaches a.end or beyond
    PARTIAL_RIGHT = "partial_right"  # b starts first, a runs past b.end


def overlaps(a: Occurrence, b: Occurrence) -> bool:
    """Check whether two occurrences are active at a common instant.

    Ranges that only touch (``a.end == b.start``) do not overlap. Identical
    ranges always overlap, including two markers at the same instant.
    """
    if a.start == b.start and a.end == b.end:
        return True
    return a.start < b.end and b.start < a.end


def classify(a: Occurrence, b: Occurrence) -> Relationship:
    """Classify how ``a`` (lower priority) sits relative to ``b`` (higher priority).

    Raises:
        UnresolvedOverlapError: If the bounds fit no relationship
    """
    if a.start == b.start and a.end == b.end:
        return Relationship.EQUAL
    if not overlaps(a, b):
        if a.end == b.start or b.end == a.start:
            return Relationship.TOUCHING
        return Relationship.DISJOINT

    if a.start == b.start:
        return Relationship.SAME_START_LONGER if a.end > b.end else Relationship.SAME_START_SHORTER
    if a.start < b.start:
        return Relationship.CONTAINS if b.end < a.end else Relationship.PARTIAL_LEFT
    if b.start < a.start:
        return Relationship.WITHIN if a.end <= b.end else Relationship.PARTIAL_RIGHT

    raise UnresolvedOverlapError("Overlap matches no known relationship", a, b)


def _keep_both(a: Occurrence, b: Occurrence) -> Resolution:
    return [a], [b]


def _drop_lower(a: Occurrence, b: Occurrence) -> Resolution:
    return [], [b]


def _start_lower_at_higher_end(a: Occurrence, b: Occurrence) -> Resolution:
    return [a.model_copy(update={"start": b.end})], [b]


def _end_lower_at_higher_start(a: Occurrence, b: Occurrence) -> Resolution:
    return [a.model_copy(update={"end": b.start})], [b]


def _split_lower_around_higher(a: Occurrence, b: Occurrence) -> Resolution:
    #        |--b--|
    # |-----------a-----------|
    # |--a--|--b--|-----a-----|
    head = a.model_copy(update={"end": b.start})
    tail = a.model_copy(update={"start": b.end})
    return [head, tail], [b]


_RESOLUTIONS: dict[Relationship, Callable[[Occurrence, Occurrence], Resolution]] = {
    Relationship.DISJOINT: _keep_both,
    Relationship.TOUCHING: _keep_both,
    Relationship.EQUAL: _drop_lower,
    Relationship.SAME_START_LONGER: _start_lower_at_higher_end,
    Relationship.SAME_START_SHORTER: _drop_lower,
    Relationship.CONTAINS: _split_lower_around_higher,
    Relationship.WITHIN: _drop_lower,
    Relationship.PARTIAL_LEFT: _end_lower_at_higher_start,
    Relationship.PARTIAL_RIGHT: _start_lower_at_higher_end,
}


def resolve_pair(a: Occurrence, b: Occurrence) -> Resolution:
    """Resolve two occurrences so that they no longer overlap.

    ``b`` has priority over ``a``: it is always returned unchanged, while
    ``a`` may be kept, truncated, split in two or dropped.

    Args:
        a: Lower-priority occurrence
        b: Higher-priority occurrence

    Returns:
        Tuple of (fragments of a, fragments of b)

    Raises:
        UnresolvedOverlapError: If the relationship has no resolution
    """
    relationship = classify(a, b)
    resolution = _RESOLUTIONS.get(relationship)
    if resolution is None:
        raise UnresolvedOverlapError(f"No resolution for relationship {relationship.value}", a, b)
    return resolution(a, b)


def _first_overlap(fragments: Sequence[Occurrence]) -> Optional[tuple[int, int]]:
    """Locate the first overlapping pair ``(i, j)`` with ``i < j``."""
    for j in range(1, len(fragments)):
        for i in range(j):
            if overlaps(fragments[i], fragments[j]):
                return i, j
    return None


def reduce_all(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    """Reduce priority-ordered occurrences to a non-overlapping sequence.

    Each point in time covered by the input stays covered, attributed to the
    latest input covering it. Fragments of an input take that input's place in
    the list, so list order keeps encoding priority. After every resolution
    the scan restarts, because a split fragment may overlap entries that were
    already checked.

    Args:
        occurrences: Occurrences in ascending priority

    Returns:
        Fragments with pairwise disjoint active ranges

    Raises:
        UnresolvedOverlapError: If a pair cannot be resolved
    """
    fragments = list(occurrences)
    if len(fragments) < 2:
        return fragments

    input_count = len(fragments)
    resolutions = 0
    while (pair := _first_overlap(fragments)) is not None:
        i, j = pair
        lower, higher = resolve_pair(fragments[i], fragments[j])
        # Replace j first so that index i is still valid.
        fragments[j : j + 1] = higher
        fragments[i : i + 1] = lower
        resolutions += 1

    logger.debug(
        "Reduced %d occurrence(s) to %d fragment(s) in %d resolution(s)",
        input_count,
        len(fragments),
        resolutions,
    )
    return fragments
