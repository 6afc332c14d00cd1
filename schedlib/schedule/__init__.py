# Re-export schedule components
from .adjustments import (
    BusinessDayAdjustment,
    adjust_date,
    get_month_end,
    is_end_of_month,
)
from .core import Schedule, SchedulePeriod
from .definition import ResolvedSpecification, ScheduleSpecification, resolve_specification
from .generator import GeneratedBoundaries, RollWalk, UnadjustedPeriodGenerator
from .stubs import ResolvedBoundaries, StubResolver
from .builder import ScheduleBuilder, create_schedule
