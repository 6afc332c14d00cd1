"""
Core data structures for schedule generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator, List, Optional, Tuple

import pandas as pd

from schedlib.conventions.rolls import align
from schedlib.conventions.types import Frequency, RollConvention, SchedulePeriodType
from schedlib.errors import PeriodicScheduleException


@dataclass(frozen=True)
class SchedulePeriod:
    """Represents a single period in a schedule.

    Attributes:
        unadjusted_start_date: Period start before business day adjustment
        unadjusted_end_date: Period end before business day adjustment
        start_date: Business day adjusted start
        end_date: Business day adjusted end
        type: Position of the period within its schedule
    """

    unadjusted_start_date: date
    unadjusted_end_date: date
    start_date: date
    end_date: date
    type: SchedulePeriodType = SchedulePeriodType.REGULAR

    def __post_init__(self):
        if self.unadjusted_start_date >= self.unadjusted_end_date:
            raise PeriodicScheduleException(
                f"Unadjusted start date {self.unadjusted_start_date} must be before "
                f"unadjusted end date {self.unadjusted_end_date}"
            )
        if self.start_date > self.end_date:
            raise PeriodicScheduleException(
                f"Adjusted start date {self.start_date} must not be after "
                f"adjusted end date {self.end_date}"
            )

    @property
    def length_in_days(self) -> int:
        """Number of calendar days between the unadjusted dates."""
        return (self.unadjusted_end_date - self.unadjusted_start_date).days

    @property
    def adjusted_length_in_days(self) -> int:
        """Number of calendar days between the adjusted dates."""
        return (self.end_date - self.start_date).days

    def contains(self, dt: date) -> bool:
        """True if the adjusted period covers ``dt`` (start inclusive, end exclusive)."""
        return self.start_date <= dt < self.end_date

    def is_regular(self, frequency: Frequency, roll_convention: RollConvention) -> bool:
        """True if the unadjusted dates are exactly one rolled step apart."""
        step = align(self.unadjusted_start_date + frequency.step(), roll_convention)
        return step == self.unadjusted_end_date


@dataclass(frozen=True)
class Schedule:
    """An immutable, ordered sequence of contiguous periods.

    Attributes:
        periods: Periods in date order; unadjusted dates tile the schedule range
        frequency: Step between regular period boundaries
        roll_convention: Roll convention the regular boundaries were aligned with
    """

    periods: Tuple[SchedulePeriod, ...]
    frequency: Frequency
    roll_convention: RollConvention

    def __post_init__(self):
        object.__setattr__(self, "periods", tuple(self.periods))
        if not self.periods:
            raise PeriodicScheduleException("Schedule must contain at least one period")
        for previous, current in zip(self.periods, self.periods[1:]):
            if previous.unadjusted_end_date != current.unadjusted_start_date:
                raise PeriodicScheduleException(
                    f"Periods must be contiguous: {previous.unadjusted_end_date} "
                    f"is followed by {current.unadjusted_start_date}"
                )

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self) -> Iterator[SchedulePeriod]:
        return iter(self.periods)

    def __getitem__(self, idx: int) -> SchedulePeriod:
        return self.periods[idx]

    @property
    def first_period(self) -> SchedulePeriod:
        return self.periods[0]

    @property
    def last_period(self) -> SchedulePeriod:
        return self.periods[-1]

    @property
    def start_date(self) -> date:
        return self.first_period.start_date

    @property
    def end_date(self) -> date:
        return self.last_period.end_date

    @property
    def unadjusted_start_date(self) -> date:
        return self.first_period.unadjusted_start_date

    @property
    def unadjusted_end_date(self) -> date:
        return self.last_period.unadjusted_end_date

    @property
    def unadjusted_dates(self) -> List[date]:
        """All unadjusted boundaries, start and end included."""
        return [self.unadjusted_start_date] + [p.unadjusted_end_date for p in self.periods]

    @property
    def adjusted_dates(self) -> List[date]:
        """All adjusted boundaries, start and end included."""
        return [self.start_date] + [p.end_date for p in self.periods]

    @property
    def is_single_period(self) -> bool:
        return len(self.periods) == 1

    @property
    def is_term(self) -> bool:
        return self.is_single_period and self.first_period.type == SchedulePeriodType.TERM

    @property
    def initial_stub(self) -> Optional[SchedulePeriod]:
        if self.first_period.type == SchedulePeriodType.INITIAL:
            return self.first_period
        return None

    @property
    def final_stub(self) -> Optional[SchedulePeriod]:
        if self.last_period.type == SchedulePeriodType.FINAL:
            return self.last_period
        return None

    def merge_to_term(self) -> Schedule:
        """Collapse the schedule into a single TERM period over the same dates."""
        if self.is_term:
            return self
        term = SchedulePeriod(
            unadjusted_start_date=self.unadjusted_start_date,
            unadjusted_end_date=self.unadjusted_end_date,
            start_date=self.start_date,
            end_date=self.end_date,
            type=SchedulePeriodType.TERM,
        )
        return Schedule((term,), self.frequency, self.roll_convention)

    def to_frame(self) -> pd.DataFrame:
        """One row per period, suitable for table display."""
        return pd.DataFrame(
            {
                "type": [p.type.value for p in self.periods],
                "unadjusted_start": [p.unadjusted_start_date for p in self.periods],
                "unadjusted_end": [p.unadjusted_end_date for p in self.periods],
                "start": [p.start_date for p in self.periods],
                "end": [p.end_date for p in self.periods],
            }
        )
