"""
QuantLib-backed holiday calendars.

The schedule engine only needs the ``is_business_day`` query, captured by the
:class:`HolidayCalendar` protocol. :class:`Calendar` answers it (and a few
business-day shifts) using QuantLib's calendar implementations.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Dict, Iterable, Protocol, Union, runtime_checkable

import QuantLib as ql

from schedlib.conventions.types import CalendarType
from schedlib.errors import PeriodicScheduleException

logger = logging.getLogger(__name__)


def _to_ql_date(dt: Union[date, datetime]) -> ql.Date:
    """Convert Python date/datetime to QuantLib Date."""
    if isinstance(dt, datetime):
        dt = dt.date()
    return ql.Date(dt.day, dt.month, dt.year)


def _to_py_date(ql_date: ql.Date) -> date:
    """Convert QuantLib Date to Python date."""
    return date(ql_date.year(), ql_date.month(), ql_date.dayOfMonth())


@runtime_checkable
class HolidayCalendar(Protocol):
    """Anything that can say whether a date is a business day."""

    def is_business_day(self, dt: date) -> bool:
        ...


class Calendar:
    """Calendar backed by a QuantLib calendar.

    QuantLib calendars are only read after construction, so one instance can
    serve concurrent schedule generations.
    """

    def __init__(self, name: str, ql_calendar: ql.Calendar):
        self.name = name
        self._ql_calendar = ql_calendar

    def __repr__(self) -> str:
        return f"Calendar({self.name!r})"

    def is_business_day(self, dt: Union[date, datetime]) -> bool:
        """Check if date is a business day (not weekend or holiday)."""
        return self._ql_calendar.isBusinessDay(_to_ql_date(dt))

    def is_holiday(self, dt: Union[date, datetime]) -> bool:
        """Check if date is a holiday (weekends included)."""
        return self._ql_calendar.isHoliday(_to_ql_date(dt))

    def add_business_days(self, start_date: Union[date, datetime], days: int) -> date:
        """Shift a date by a number of business days (negative moves back)."""
        ql_result = self._ql_calendar.advance(_to_ql_date(start_date), days, ql.Days)
        return _to_py_date(ql_result)

    def next_business_day(self, dt: Union[date, datetime]) -> date:
        """First business day strictly after the given date."""
        return self.add_business_days(dt, 1)

    def previous_business_day(self, dt: Union[date, datetime]) -> date:
        """Last business day strictly before the given date."""
        return self.add_business_days(dt, -1)


def bespoke_calendar(name: str, holidays: Iterable[Union[date, datetime]] = ()) -> Calendar:
    """Build a calendar with Saturday/Sunday weekends and the given holidays."""
    ql_calendar = ql.BespokeCalendar(name)
    ql_calendar.addWeekend(ql.Saturday)
    ql_calendar.addWeekend(ql.Sunday)
    for holiday in holidays:
        ql_calendar.addHoliday(_to_ql_date(holiday))
    return Calendar(name, ql_calendar)


_FACTORIES: Dict[str, Callable[[], ql.Calendar]] = {
    "EUTA": ql.TARGET,
    "GBLO": lambda: ql.UnitedKingdom(ql.UnitedKingdom.Settlement),
    "CHZU": ql.Switzerland,
    "FRPA": lambda: ql.France(ql.France.Settlement),
    "USGS": lambda: ql.UnitedStates(ql.UnitedStates.GovernmentBond),
    "USNY": lambda: ql.UnitedStates(ql.UnitedStates.Settlement),
    "WEEKEND": ql.WeekendsOnly,
    "NO_HOLIDAYS": ql.NullCalendar,
}

_ALIASES = {
    "TARGET": "EUTA",
    "EUR": "EUTA",
    "UK": "GBLO",
}

# Calendar registry, filled on first lookup
CALENDARS: Dict[str, Calendar] = {}


def get_calendar(name: Union[str, CalendarType]) -> Calendar:
    """
    Get a calendar by name.

    Args:
        name: Calendar code ("EUTA", "GBLO", "CHZU", "FRPA", "USGS", "USNY",
            "WEEKEND", "NO_HOLIDAYS"), an alias ("TARGET", "EUR", "UK") or a
            CalendarType member
    """
    if isinstance(name, CalendarType):
        name = name.value
    key = _ALIASES.get(name.upper(), name.upper())
    if key not in _FACTORIES:
        raise PeriodicScheduleException(
            f"Unknown calendar: {name}. Available: {sorted(_FACTORIES) + sorted(_ALIASES)}"
        )
    if key not in CALENDARS:
        logger.debug("Creating QuantLib calendar %s", key)
        CALENDARS[key] = Calendar(key, _FACTORIES[key]())
    return CALENDARS[key]
