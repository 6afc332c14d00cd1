"""
Schedule assembly and validation.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Tuple

from schedlib.conventions.types import SchedulePeriodType
from schedlib.errors import PeriodicScheduleException
from schedlib.schedule.core import Schedule, SchedulePeriod
from schedlib.schedule.definition import ResolvedSpecification, ScheduleSpecification
from schedlib.schedule.generator import UnadjustedPeriodGenerator
from schedlib.schedule.stubs import ResolvedBoundaries, StubResolver

logger = logging.getLogger(__name__)


class ScheduleBuilder:
    """Drives generation, stub resolution and business day adjustment."""

    def __init__(self, specification: ScheduleSpecification):
        self.specification = specification

    def build(self) -> Schedule:
        """
        Create the schedule described by the specification.

        Returns:
            The complete, validated schedule

        Raises:
            PeriodicScheduleException: If no valid schedule exists for the
                specification; no partial schedule is ever returned
        """
        spec = self.specification.resolve()
        generated = UnadjustedPeriodGenerator(spec).generate()
        resolved = StubResolver(spec).resolve(generated)
        dates, types = self._add_explicit_stubs(spec, resolved)
        adjusted = self._adjust_boundaries(spec, dates)
        self._validate_adjusted(dates, adjusted)

        periods = [
            SchedulePeriod(
                unadjusted_start_date=dates[i],
                unadjusted_end_date=dates[i + 1],
                start_date=adjusted[i],
                end_date=adjusted[i + 1],
                type=types[i],
            )
            for i in range(len(types))
        ]
        schedule = Schedule(tuple(periods), spec.frequency, spec.roll_convention)
        self._validate_range(spec, schedule)
        logger.debug("Built schedule with %d periods: %s", len(schedule), adjusted)
        return schedule

    @staticmethod
    def _add_explicit_stubs(
        spec: ResolvedSpecification, resolved: ResolvedBoundaries
    ) -> Tuple[List[date], List[SchedulePeriodType]]:
        dates = list(resolved.dates)
        types = list(resolved.types)
        if (spec.has_explicit_initial_stub or spec.has_explicit_final_stub) and types == [
            SchedulePeriodType.TERM
        ]:
            types = [SchedulePeriodType.REGULAR]
        if spec.has_explicit_initial_stub:
            dates.insert(0, spec.start_date)
            types.insert(0, SchedulePeriodType.INITIAL)
        if spec.has_explicit_final_stub:
            dates.append(spec.end_date)
            types.append(SchedulePeriodType.FINAL)
        return dates, types

    @staticmethod
    def _adjust_boundaries(spec: ResolvedSpecification, dates: List[date]) -> List[date]:
        """Adjust each boundary once; neighbouring periods share the result."""
        adjusted: Dict[date, date] = {}
        last = len(dates) - 1
        result = []
        for i, dt in enumerate(dates):
            if i == 0:
                result.append(spec.start_date_business_day_adjustment.adjust(dt))
            elif i == last:
                result.append(spec.end_date_business_day_adjustment.adjust(dt))
            else:
                if dt not in adjusted:
                    adjusted[dt] = spec.business_day_adjustment.adjust(dt)
                result.append(adjusted[dt])
        return result

    @staticmethod
    def _validate_adjusted(dates: List[date], adjusted: List[date]) -> None:
        for i in range(len(dates) - 1):
            if adjusted[i] >= adjusted[i + 1]:
                raise PeriodicScheduleException(
                    f"Business day adjustment produces a degenerate period: unadjusted "
                    f"{dates[i]} to {dates[i + 1]} adjusts to {adjusted[i]} to {adjusted[i + 1]}"
                )

    @staticmethod
    def _validate_range(spec: ResolvedSpecification, schedule: Schedule) -> None:
        if (schedule.unadjusted_start_date, schedule.unadjusted_end_date) != (
            spec.start_date,
            spec.end_date,
        ):
            raise PeriodicScheduleException(
                f"Schedule covers {schedule.unadjusted_start_date} to "
                f"{schedule.unadjusted_end_date}, expected {spec.start_date} to {spec.end_date}"
            )


def create_schedule(specification: ScheduleSpecification) -> Schedule:
    """Generate the schedule for a specification."""
    return ScheduleBuilder(specification).build()
