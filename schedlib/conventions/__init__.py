# Re-export convention types and calendars
from .calendars import Calendar, HolidayCalendar, bespoke_calendar, get_calendar
from .types import (
    BusinessDayConvention,
    CalendarType,
    Frequency,
    RollConvention,
    SchedulePeriodType,
    StubConvention,
)
