"""Shared match-status definitions and helpers.

This module is the single source of truth for match statuses used by the
match service, route validation and the stats queries.
"""

from __future__ import annotations

from datetime import datetime

UPCOMING = "Upcoming"
LIVE = "Live"
HALF_TIME = "Half Time"
FULL_TIME = "Full Time"
DELAYED = "Delayed"

# Individual statuses a match can be in. Any authorized transition between
# them is accepted; there is no enforced ordering.
ALL_MATCH_STATUSES: tuple[str, ...] = (
    UPCOMING,
    LIVE,
    HALF_TIME,
    FULL_TIME,
    DELAYED,
)

MATCH_STATUS_GROUPS: dict[str, tuple[str, ...]] = {
    # Matches that count towards records and appearance totals.
    "completed": (FULL_TIME,),
    # Matches in which goals may currently be recorded.
    "scoring": (LIVE,),
}


def get_status_group(group_name: str) -> tuple[str, ...]:
    """Return a named status group, raising KeyError for unknown names."""
    return MATCH_STATUS_GROUPS[group_name]


def is_valid_status(status: str | None) -> bool:
    """Statuses are matched exactly, including case and spacing."""
    return status in ALL_MATCH_STATUSES


def is_overdue(current_status: str, kickoff: datetime, now: datetime) -> bool:
    """An Upcoming match whose kickoff has passed should be shown as Delayed."""
    return current_status == UPCOMING and kickoff < now

