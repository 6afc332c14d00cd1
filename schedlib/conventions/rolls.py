"""
Roll alignment: snapping candidate dates onto a roll convention.

Alignment is calendar-day arithmetic only; no holiday calendar is consulted.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Union

from schedlib.conventions.types import Frequency, RollConvention
from schedlib.errors import PeriodicScheduleException

logger = logging.getLogger(__name__)

# date.weekday() numbers
_WEDNESDAY = 2
_FRIDAY = 4


def get_month_end(year: int, month: int) -> date:
    """Get the last calendar day of a given month."""
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)

    return next_month - timedelta(days=1)


def is_end_of_month(dt: Union[date, datetime]) -> bool:
    """Check if date is end of month."""
    if isinstance(dt, datetime):
        dt = dt.date()
    return dt == get_month_end(dt.year, dt.month)


def _nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> date:
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + 7 * (nth - 1))


def _next_weekday_after(dt: date, weekday: int) -> date:
    offset = (weekday - dt.weekday()) % 7
    return dt + timedelta(days=offset or 7)


def align(candidate: date, roll: Union[str, RollConvention]) -> date:
    """Move ``candidate`` onto the day required by ``roll`` within its month.

    Day-of-week rolls move forward to the next-or-same weekday instead.
    """
    roll = RollConvention.parse(roll)
    if roll is RollConvention.NONE:
        return candidate

    if roll is RollConvention.EOM:
        return get_month_end(candidate.year, candidate.month)

    if roll is RollConvention.IMM:
        return _nth_weekday_of_month(candidate.year, candidate.month, _WEDNESDAY, 3)

    if roll is RollConvention.IMMAUD:
        second_friday = _nth_weekday_of_month(candidate.year, candidate.month, _FRIDAY, 2)
        return second_friday - timedelta(days=1)

    if roll is RollConvention.IMMNZD:
        return _next_weekday_after(date(candidate.year, candidate.month, 9), _WEDNESDAY)

    if roll is RollConvention.SFE:
        return _nth_weekday_of_month(candidate.year, candidate.month, _FRIDAY, 2)

    day_of_month = roll.day_of_month
    if day_of_month is not None:
        month_end = get_month_end(candidate.year, candidate.month)
        return candidate.replace(day=min(day_of_month, month_end.day))

    weekday = roll.day_of_week
    if weekday is not None:
        return candidate + timedelta(days=(weekday - candidate.weekday()) % 7)

    raise PeriodicScheduleException(f"Unknown roll convention: {roll}")


def matches(dt: date, roll: RollConvention) -> bool:
    """True if ``dt`` is already a valid roll date for ``roll``."""
    return align(dt, roll) == dt


def infer_roll_convention(anchor: date, frequency: Frequency) -> RollConvention:
    """Derive a roll convention from the anchor date of a schedule."""
    if frequency.is_month_based:
        if anchor.day == 31:
            return RollConvention.EOM
        return RollConvention.of_day_of_month(anchor.day)
    if frequency.is_week_based:
        return RollConvention.of_day_of_week(anchor.weekday())
    return RollConvention.NONE


def resolve_end_of_month(anchor: date) -> RollConvention:
    """Treat an explicit EOM roll as advisory for the given anchor.

    An anchor that is not a month end rolls on its own day of month instead.
    """
    if is_end_of_month(anchor):
        return RollConvention.EOM
    fallback = RollConvention.of_day_of_month(anchor.day)
    logger.debug("EOM roll not applicable to %s; rolling on %s", anchor, fallback.value)
    return fallback
