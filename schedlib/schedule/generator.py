"""
Unadjusted boundary generation.

Boundaries are generated by stepping away from an anchor date by whole
multiples of the frequency (``anchor + k * frequency``, never chained) and
aligning each stepped date with the roll convention.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from schedlib.conventions.rolls import align, matches
from schedlib.conventions.types import Frequency, RollConvention, StubConvention
from schedlib.errors import PeriodicScheduleException
from schedlib.schedule.definition import ResolvedSpecification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollWalk:
    """Rolled dates found by walking from ``anchor`` towards ``boundary``.

    Attributes:
        anchor: Date the walk starts from
        boundary: Opposite end of the range; the walk stops before crossing it
        dates: Rolled dates strictly between anchor and boundary, ascending
        meets_boundary: True if a rolled date landed exactly on the boundary
    """

    anchor: date
    boundary: date
    dates: Tuple[date, ...]
    meets_boundary: bool

    @property
    def forward(self) -> bool:
        return self.anchor < self.boundary

    @property
    def boundaries(self) -> List[date]:
        """Anchor, rolled dates and far boundary in ascending order."""
        if self.forward:
            return [self.anchor, *self.dates, self.boundary]
        return [self.boundary, *self.dates, self.anchor]


@dataclass(frozen=True)
class GeneratedBoundaries:
    """Output of the generator: the walks over ``[start, end]``.

    ``is_term`` marks a range shorter than one frequency step, in which case
    no walk is made.
    """

    start: date
    end: date
    walks: Tuple[RollWalk, ...]
    is_term: bool = False


def spans_less_than_one_period(
    start: date,
    end: date,
    frequency: Frequency,
    roll: RollConvention = RollConvention.NONE,
    backward: bool = False,
) -> bool:
    """True if no rolled step fits in the range.

    The step is taken forwards from ``start``; with ``backward`` a range is
    also too short when the rolled step back from ``end`` falls before ``start``.
    """
    if align(start + frequency.step(), roll) > end:
        return True
    return backward and align(end - frequency.step(), roll) < start


def check_roll_frequency(roll: RollConvention, frequency: Frequency) -> None:
    """Reject roll conventions that cannot be combined with the frequency."""
    if roll is RollConvention.NONE:
        return
    if roll.is_imm_family:
        if not frequency.is_month_based or frequency.months % 3 != 0:
            raise PeriodicScheduleException(
                f"Roll convention {roll.value} requires a frequency that is a multiple "
                f"of 3 months, got {frequency}"
            )
    elif roll.day_of_month is not None:
        if not frequency.is_month_based:
            raise PeriodicScheduleException(
                f"Roll convention {roll.value} requires a month-based frequency, got {frequency}"
            )
    elif roll.day_of_week is not None:
        if not frequency.is_week_based:
            raise PeriodicScheduleException(
                f"Roll convention {roll.value} requires a week-based frequency, got {frequency}"
            )


class UnadjustedPeriodGenerator:
    """Generates the raw unadjusted boundaries for a resolved specification."""

    def __init__(self, spec: ResolvedSpecification):
        self.spec = spec
        self.frequency = spec.frequency
        self.roll = spec.roll_convention

    def generate(self) -> GeneratedBoundaries:
        """
        Walk the regular part of the range.

        The walk is anchored at the start for NONE and *_FINAL stubs and at the
        end for *_INITIAL stubs. BOTH walks from each end independently and
        leaves the reconciliation to the stub resolver.

        Raises:
            PeriodicScheduleException: If the roll convention does not fit the
                frequency, or the anchor is not a valid roll date
        """
        start, end = self.spec.regular_start_date, self.spec.regular_end_date
        stub = self.spec.stub_convention
        check_roll_frequency(self.roll, self.frequency)

        backward = stub is StubConvention.BOTH or stub.is_initial
        if spans_less_than_one_period(start, end, self.frequency, self.roll, backward):
            logger.debug(
                "Range %s to %s is shorter than one %s step rolled on %s",
                start,
                end,
                self.frequency,
                self.roll.value,
            )
            return GeneratedBoundaries(start, end, (), is_term=True)

        if stub is StubConvention.BOTH:
            walks = (self.walk_forward(start, end), self.walk_backward(end, start))
        elif stub.is_initial:
            self._check_anchor(end, "backwards")
            walks = (self.walk_backward(end, start),)
        else:
            self._check_anchor(start, "forwards")
            walks = (self.walk_forward(start, end),)

        for walk in walks:
            logger.debug(
                "Walked from %s to %s: %d rolled dates, meets boundary: %s",
                walk.anchor,
                walk.boundary,
                len(walk.dates),
                walk.meets_boundary,
            )
        return GeneratedBoundaries(start, end, walks)

    def _check_anchor(self, anchor: date, direction: str) -> None:
        if not matches(anchor, self.roll):
            raise PeriodicScheduleException(
                f"Date {anchor} does not match roll convention {self.roll.value} "
                f"when starting to roll {direction}"
            )

    def walk_forward(self, anchor: date, boundary: date) -> RollWalk:
        dates: List[date] = []
        count = 1
        while True:
            candidate = align(anchor + self.frequency.step(count), self.roll)
            if candidate >= boundary:
                return RollWalk(anchor, boundary, tuple(dates), candidate == boundary)
            previous = dates[-1] if dates else anchor
            if candidate <= previous:
                raise PeriodicScheduleException(
                    f"Roll convention {self.roll.value} does not advance past {previous}"
                )
            dates.append(candidate)
            count += 1

    def walk_backward(self, anchor: date, boundary: date) -> RollWalk:
        dates: List[date] = []
        count = 1
        while True:
            candidate = align(anchor - self.frequency.step(count), self.roll)
            if candidate <= boundary:
                dates.reverse()
                return RollWalk(anchor, boundary, tuple(dates), candidate == boundary)
            previous = dates[-1] if dates else anchor
            if candidate >= previous:
                raise PeriodicScheduleException(
                    f"Roll convention {self.roll.value} does not move back past {previous}"
                )
            dates.append(candidate)
            count += 1
