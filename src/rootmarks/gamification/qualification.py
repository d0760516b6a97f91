"""Badge qualification rules.

Pure functions over a reader's statistics and the badge catalog. Nothing here
touches the database; see trigger_engine.py for the wiring.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar


class RequirementType(str, enum.Enum):
    BOOKS_READ = "books_read"
    PAGES_READ = "pages_read"


@dataclass(frozen=True)
class ReadingStats:
    """Snapshot of the statistics badges can be unlocked by."""

    total_books_read: int
    total_pages_read: int


class QualifiableBadge(Protocol):
    id: int
    requirement_type: str
    requirement_value: int


B = TypeVar("B", bound=QualifiableBadge)

# Every RequirementType member must have an entry here.
_STATISTIC: dict[RequirementType, Callable[[ReadingStats], int]] = {
    RequirementType.BOOKS_READ: lambda stats: stats.total_books_read,
    RequirementType.PAGES_READ: lambda stats: stats.total_pages_read,
}


def parse_requirement(value: str) -> RequirementType | None:
    """Map a stored requirement string to its kind, or None if unknown."""
    try:
        return RequirementType(value)
    except ValueError:
        return None


def qualifies(badge: QualifiableBadge, stats: ReadingStats) -> bool:
    """Return True if the statistics meet the badge requirement.

    Unknown requirement kinds never qualify.
    """
    kind = parse_requirement(badge.requirement_type)
    if kind is None:
        return False
    return _STATISTIC[kind](stats) >= badge.requirement_value


def qualifying_badges(
    catalog: Iterable[B],
    earned_ids: set[int],
    stats: ReadingStats,
) -> list[B]:
    """All unearned badges the statistics qualify for, in catalog order."""
    return [
        badge
        for badge in catalog
        if badge.id not in earned_ids and qualifies(badge, stats)
    ]


def first_qualifying_badge(
    catalog: Sequence[B],
    earned_ids: set[int],
    stats: ReadingStats,
) -> B | None:
    """The first unearned badge in catalog order the statistics qualify for."""
    for badge in catalog:
        if badge.id in earned_ids:
            continue
        if qualifies(badge, stats):
            return badge
    return None
