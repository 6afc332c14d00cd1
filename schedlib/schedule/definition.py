"""Schedule specification and its resolution.

A :class:`ScheduleSpecification` is what callers build. Before generation it
is turned into a :class:`ResolvedSpecification`, in which every optional field
(stub convention, roll convention, boundary adjustments) has been decided, so
the generator and stub resolver never apply defaults of their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from schedlib.business_calendar.date_utils import get_default_stub_convention, to_date
from schedlib.conventions.rolls import infer_roll_convention, resolve_end_of_month
from schedlib.conventions.types import Frequency, RollConvention, StubConvention
from schedlib.errors import PeriodicScheduleException
from schedlib.schedule.adjustments import BusinessDayAdjustment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleSpecification:
    """Declarative description of a periodic schedule.

    Attributes:
        start_date: Unadjusted start of the schedule
        end_date: Unadjusted end of the schedule
        frequency: Step between regular boundaries
        business_day_adjustment: Adjustment for every boundary; engine defaults if unset
        stub_convention: How leftovers are handled (default from date_utils)
        roll_convention: Roll convention; inferred from the anchor date if unset
        first_regular_start_date: Optional explicit end of the initial stub
        last_regular_end_date: Optional explicit start of the final stub
        start_date_business_day_adjustment: Overrides the adjustment of the first boundary
        end_date_business_day_adjustment: Overrides the adjustment of the last boundary
    """

    start_date: date
    end_date: date
    frequency: Frequency
    business_day_adjustment: Optional[BusinessDayAdjustment] = None
    stub_convention: Optional[StubConvention] = None
    roll_convention: Optional[RollConvention] = None
    first_regular_start_date: Optional[date] = None
    last_regular_end_date: Optional[date] = None
    start_date_business_day_adjustment: Optional[BusinessDayAdjustment] = None
    end_date_business_day_adjustment: Optional[BusinessDayAdjustment] = None

    def __post_init__(self):
        object.__setattr__(self, "start_date", to_date(self.start_date))
        object.__setattr__(self, "end_date", to_date(self.end_date))
        object.__setattr__(self, "frequency", Frequency.parse(self.frequency))
        if not isinstance(self.business_day_adjustment, BusinessDayAdjustment):
            # None or a bare convention takes the default calendar
            object.__setattr__(
                self,
                "business_day_adjustment",
                BusinessDayAdjustment(self.business_day_adjustment),
            )
        if self.stub_convention is not None:
            object.__setattr__(self, "stub_convention", StubConvention.parse(self.stub_convention))
        if self.roll_convention is not None:
            object.__setattr__(self, "roll_convention", RollConvention.parse(self.roll_convention))
        for name in ("first_regular_start_date", "last_regular_end_date"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, to_date(value))
        self._validate()

    def _validate(self) -> None:
        if self.start_date >= self.end_date:
            raise PeriodicScheduleException(
                f"Schedule start date {self.start_date} must be before end date {self.end_date}"
            )
        first_regular = self.first_regular_start_date or self.start_date
        last_regular = self.last_regular_end_date or self.end_date
        if not self.start_date <= first_regular < self.end_date:
            raise PeriodicScheduleException(
                f"First regular start date {first_regular} must be within "
                f"[{self.start_date}, {self.end_date})"
            )
        if not self.start_date < last_regular <= self.end_date:
            raise PeriodicScheduleException(
                f"Last regular end date {last_regular} must be within "
                f"({self.start_date}, {self.end_date}]"
            )
        if first_regular >= last_regular:
            raise PeriodicScheduleException(
                f"First regular start date {first_regular} must be before "
                f"last regular end date {last_regular}"
            )

    def resolve(self) -> ResolvedSpecification:
        """Decide every optional field, see :func:`resolve_specification`."""
        return resolve_specification(self)

    def create_schedule(self):
        """Generate the schedule, see :func:`schedlib.schedule.builder.create_schedule`."""
        from schedlib.schedule.builder import create_schedule

        return create_schedule(self)


@dataclass(frozen=True)
class ResolvedSpecification:
    """A specification with all defaults and inferences applied.

    ``regular_start_date``/``regular_end_date`` bound the part of the range
    generated by rolling; anything outside them is an explicit stub.
    """

    start_date: date
    end_date: date
    regular_start_date: date
    regular_end_date: date
    frequency: Frequency
    stub_convention: StubConvention
    roll_convention: RollConvention
    business_day_adjustment: BusinessDayAdjustment
    start_date_business_day_adjustment: BusinessDayAdjustment
    end_date_business_day_adjustment: BusinessDayAdjustment

    @property
    def has_explicit_initial_stub(self) -> bool:
        return self.regular_start_date > self.start_date

    @property
    def has_explicit_final_stub(self) -> bool:
        return self.regular_end_date < self.end_date


def _core_stub_convention(
    stub: StubConvention, fixed_initial: bool, fixed_final: bool
) -> StubConvention:
    """Stub convention left to apply once explicit stub dates fix one or both sides."""
    if fixed_initial and fixed_final:
        return StubConvention.NONE
    if fixed_initial:
        if stub.is_final:
            return stub
        if stub is StubConvention.BOTH:
            return StubConvention.SHORT_FINAL
        return StubConvention.NONE
    if fixed_final:
        if stub.is_initial:
            return stub
        if stub is StubConvention.BOTH:
            return StubConvention.SHORT_INITIAL
        return StubConvention.NONE
    return stub


def _resolve_roll(
    roll: Optional[RollConvention],
    stub: StubConvention,
    frequency: Frequency,
    start: date,
    end: date,
) -> RollConvention:
    if stub is StubConvention.BOTH:
        # both walks share one roll; rolls that put them out of step are caught when
        # the walks are reconciled
        return roll if roll is not None else infer_roll_convention(start, frequency)

    anchor = end if stub.is_initial else start
    if roll is None:
        return infer_roll_convention(anchor, frequency)
    if roll is RollConvention.EOM and frequency.is_month_based:
        return resolve_end_of_month(anchor)
    return roll


def resolve_specification(spec: ScheduleSpecification) -> ResolvedSpecification:
    """Apply defaults and roll inference to a specification."""
    regular_start = spec.first_regular_start_date or spec.start_date
    regular_end = spec.last_regular_end_date or spec.end_date
    stub = spec.stub_convention or get_default_stub_convention()
    core_stub = _core_stub_convention(
        stub, regular_start > spec.start_date, regular_end < spec.end_date
    )
    roll = _resolve_roll(
        spec.roll_convention, core_stub, spec.frequency, regular_start, regular_end
    )
    logger.debug(
        "Resolved schedule %s to %s: stub=%s roll=%s frequency=%s",
        spec.start_date,
        spec.end_date,
        core_stub.value,
        roll.value,
        spec.frequency,
    )
    return ResolvedSpecification(
        start_date=spec.start_date,
        end_date=spec.end_date,
        regular_start_date=regular_start,
        regular_end_date=regular_end,
        frequency=spec.frequency,
        stub_convention=core_stub,
        roll_convention=roll,
        business_day_adjustment=spec.business_day_adjustment,
        start_date_business_day_adjustment=(
            spec.start_date_business_day_adjustment or spec.business_day_adjustment
        ),
        end_date_business_day_adjustment=(
            spec.end_date_business_day_adjustment or spec.business_day_adjustment
        ),
    )
