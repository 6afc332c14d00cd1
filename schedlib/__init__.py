"""Periodic Schedule Generation Engine.

This package turns a small declarative specification (start/end date,
frequency, roll convention, stub convention, business day adjustment) into
the exact sequence of accrual periods used by periodic instruments.

Key modules:
- conventions: Frequencies, roll/stub/business day conventions and calendars
- schedule: Specification, generation, stub resolution and assembly
- business_calendar: Engine-wide defaults and date coercion
"""

from schedlib.conventions import (
    BusinessDayConvention,
    Calendar,
    CalendarType,
    Frequency,
    HolidayCalendar,
    RollConvention,
    SchedulePeriodType,
    StubConvention,
    bespoke_calendar,
    get_calendar,
)
from schedlib.errors import PeriodicScheduleException
from schedlib.schedule import (
    BusinessDayAdjustment,
    Schedule,
    ScheduleBuilder,
    SchedulePeriod,
    ScheduleSpecification,
    adjust_date,
    create_schedule,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "BusinessDayAdjustment",
    "BusinessDayConvention",
    "Calendar",
    "CalendarType",
    "Frequency",
    "HolidayCalendar",
    "PeriodicScheduleException",
    "RollConvention",
    "Schedule",
    "ScheduleBuilder",
    "SchedulePeriod",
    "SchedulePeriodType",
    "ScheduleSpecification",
    "StubConvention",
    "adjust_date",
    "bespoke_calendar",
    "create_schedule",
    "get_calendar",
]
