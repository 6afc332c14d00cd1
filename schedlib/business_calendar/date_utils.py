"""
Date utilities and engine-wide defaults.
Provides date coercion and the module-level defaults applied when a specification leaves a field unset.
"""

from datetime import date, datetime
from typing import Union

from pandas import Timestamp

from schedlib.conventions.calendars import Calendar, get_calendar
from schedlib.conventions.types import BusinessDayConvention, StubConvention

DATE_FMT = "%Y-%m-%d"
COMPACT_FMT = "%Y%m%d"

# Default engine settings
_DEFAULT_CALENDAR_NAME = "WEEKEND"
_DEFAULT_CALENDAR = None  # Will be initialized on first use
_DEFAULT_BUSINESS_DAY_CONVENTION = BusinessDayConvention.MODIFIED_FOLLOWING
_DEFAULT_STUB_CONVENTION = StubConvention.SHORT_INITIAL


def get_default_calendar() -> Calendar:
    """Get default calendar, initializing if needed."""
    global _DEFAULT_CALENDAR
    if _DEFAULT_CALENDAR is None:
        _DEFAULT_CALENDAR = get_calendar(_DEFAULT_CALENDAR_NAME)
    return _DEFAULT_CALENDAR


def set_default_calendar(calendar_name: str) -> None:
    """Set the default calendar for business day adjustments."""
    global _DEFAULT_CALENDAR
    _DEFAULT_CALENDAR = get_calendar(calendar_name)


def get_default_business_day_convention() -> BusinessDayConvention:
    return _DEFAULT_BUSINESS_DAY_CONVENTION


def set_default_business_day_convention(convention: BusinessDayConvention) -> None:
    global _DEFAULT_BUSINESS_DAY_CONVENTION
    _DEFAULT_BUSINESS_DAY_CONVENTION = convention


def get_default_stub_convention() -> StubConvention:
    return _DEFAULT_STUB_CONVENTION


def set_default_stub_convention(convention: Union[str, StubConvention]) -> None:
    """Set the stub convention used when a specification leaves it unset."""
    global _DEFAULT_STUB_CONVENTION
    _DEFAULT_STUB_CONVENTION = StubConvention.parse(convention)


def reset_defaults() -> None:
    """Restore the shipped defaults."""
    global _DEFAULT_CALENDAR, _DEFAULT_BUSINESS_DAY_CONVENTION, _DEFAULT_STUB_CONVENTION
    _DEFAULT_CALENDAR = None
    _DEFAULT_BUSINESS_DAY_CONVENTION = BusinessDayConvention.MODIFIED_FOLLOWING
    _DEFAULT_STUB_CONVENTION = StubConvention.SHORT_INITIAL


def to_date(date_like: Union[str, date, datetime, Timestamp]) -> date:
    """
    Convert a string, Timestamp or datetime to a date.
    Accepts 'YYYY-MM-DD' and 'YYYYMMDD' string formats.
    """
    if isinstance(date_like, Timestamp):
        return date_like.date()
    if isinstance(date_like, datetime):
        return date_like.date()
    if isinstance(date_like, date):
        return date_like
    if isinstance(date_like, str):
        for fmt in (DATE_FMT, COMPACT_FMT):
            try:
                return datetime.strptime(date_like, fmt).date()
            except ValueError:
                continue
        raise ValueError(f"Unsupported date string format: {date_like!r}")
    raise TypeError(f"Unsupported type for date: {type(date_like)}")
