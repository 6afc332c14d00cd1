"""
Date adjustment functions for schedule generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Union

from schedlib.business_calendar.date_utils import (
    get_default_business_day_convention,
    get_default_calendar,
)
from schedlib.conventions.calendars import HolidayCalendar, get_calendar
from schedlib.conventions.rolls import get_month_end, is_end_of_month  # noqa: F401
from schedlib.conventions.types import BusinessDayConvention, CalendarType
from schedlib.errors import PeriodicScheduleException


def _following(dt: date, calendar: HolidayCalendar) -> date:
    while not calendar.is_business_day(dt):
        dt += timedelta(days=1)
    return dt


def _preceding(dt: date, calendar: HolidayCalendar) -> date:
    while not calendar.is_business_day(dt):
        dt -= timedelta(days=1)
    return dt


def adjust_date(
    dt: Union[date, datetime], adjustment: BusinessDayConvention, calendar: HolidayCalendar
) -> date:
    """Apply business day adjustment to a date.

    Every convention returns a business day unchanged, so adjusting an
    already adjusted date is a no-op.
    """
    if isinstance(dt, datetime):
        dt = dt.date()

    if adjustment == BusinessDayConvention.NO_ADJUST:
        return dt

    elif adjustment == BusinessDayConvention.FOLLOWING:
        return _following(dt, calendar)

    elif adjustment == BusinessDayConvention.PRECEDING:
        return _preceding(dt, calendar)

    elif adjustment == BusinessDayConvention.MODIFIED_FOLLOWING:
        adjusted = _following(dt, calendar)
        # If month changed, use preceding instead
        if adjusted.month != dt.month:
            adjusted = _preceding(dt, calendar)
        return adjusted

    elif adjustment == BusinessDayConvention.MODIFIED_PRECEDING:
        adjusted = _preceding(dt, calendar)
        # If month changed, use following instead
        if adjusted.month != dt.month:
            adjusted = _following(dt, calendar)
        return adjusted

    elif adjustment == BusinessDayConvention.MODIFIED_FOLLOWING_BI_MONTHLY:
        adjusted = _following(dt, calendar)
        # Months are split into halves at the 15th
        crosses_mid_month = dt.day <= 15 < adjusted.day
        if adjusted.month != dt.month or crosses_mid_month:
            adjusted = _preceding(dt, calendar)
        return adjusted

    elif adjustment == BusinessDayConvention.NEAREST:
        following = _following(dt, calendar)
        preceding = _preceding(dt, calendar)
        # Ties go to following
        if (following - dt) <= (dt - preceding):
            return following
        return preceding

    else:
        raise PeriodicScheduleException(f"Unknown business day convention: {adjustment!r}")


@dataclass(frozen=True)
class BusinessDayAdjustment:
    """A business day convention paired with the calendar it is applied against.

    The calendar may be given by name, in which case it is looked up with
    :func:`schedlib.conventions.calendars.get_calendar`. Unset fields take the
    engine defaults from :mod:`schedlib.business_calendar.date_utils`.
    """

    convention: BusinessDayConvention = field(default=None)
    calendar: HolidayCalendar = field(default=None)

    def __post_init__(self):
        if self.convention is None:
            object.__setattr__(self, "convention", get_default_business_day_convention())
        elif isinstance(self.convention, str):
            key = self.convention.upper().strip().replace(" ", "_")
            try:
                object.__setattr__(self, "convention", BusinessDayConvention[key])
            except KeyError:
                raise PeriodicScheduleException(
                    f"Unknown business day convention: {self.convention}"
                ) from None
        elif not isinstance(self.convention, BusinessDayConvention):
            raise PeriodicScheduleException(
                f"Unknown business day convention: {self.convention!r}"
            )
        if self.calendar is None:
            object.__setattr__(self, "calendar", get_default_calendar())
        elif isinstance(self.calendar, (str, CalendarType)):
            object.__setattr__(self, "calendar", get_calendar(self.calendar))

    def adjust(self, dt: Union[date, datetime]) -> date:
        return adjust_date(dt, self.convention, self.calendar)

