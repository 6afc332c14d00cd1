"""
Stub resolution.

Turns generated walks into the final unadjusted boundaries, deciding what
happens to any leftover interval between the last rolled date and the range
boundary. The caller's stub convention is applied exactly; a short leftover
is never silently turned into a long stub or the reverse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from schedlib.conventions.rolls import align, matches
from schedlib.conventions.types import SchedulePeriodType, StubConvention
from schedlib.errors import PeriodicScheduleException
from schedlib.schedule.definition import ResolvedSpecification
from schedlib.schedule.generator import GeneratedBoundaries, RollWalk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedBoundaries:
    """Unadjusted boundaries and the type of each period between them."""

    dates: Tuple[date, ...]
    types: Tuple[SchedulePeriodType, ...]

    def __post_init__(self):
        if len(self.types) != len(self.dates) - 1:
            raise ValueError("One period type is required per pair of boundaries")


class StubResolver:
    """Applies a stub convention to generated boundaries."""

    def __init__(self, spec: ResolvedSpecification):
        self.spec = spec

    def resolve(self, generated: GeneratedBoundaries) -> ResolvedBoundaries:
        start, end = generated.start, generated.end
        if generated.is_term:
            return ResolvedBoundaries((start, end), (SchedulePeriodType.TERM,))

        stub = self.spec.stub_convention
        if stub is StubConvention.BOTH:
            forward, backward = generated.walks
            return self._resolve_both(start, end, forward, backward)

        walk = generated.walks[0]
        inner = list(walk.dates)
        if walk.meets_boundary:
            return self._build(start, inner, end, SchedulePeriodType.REGULAR)

        if stub is StubConvention.NONE:
            raise PeriodicScheduleException(
                f"Stub not allowed: stub convention NONE requires the range {start} to "
                f"{end} to divide evenly into {self.spec.frequency} periods"
            )

        if stub.is_final:
            if stub.is_long and inner:
                # leftover merges into the last regular period
                inner.pop()
            resolved = self._build(start, inner, end, SchedulePeriodType.FINAL, at_start=False)
        else:
            if stub.is_long and inner:
                inner.pop(0)
            resolved = self._build(start, inner, end, SchedulePeriodType.INITIAL, at_start=True)

        logger.debug("Applied %s stub: %s", stub.value, resolved.dates)
        return resolved

    @staticmethod
    def _build(
        start: date,
        inner: List[date],
        end: date,
        stub_type: SchedulePeriodType,
        at_start: bool = False,
    ) -> ResolvedBoundaries:
        dates = (start, *inner, end)
        types = [SchedulePeriodType.REGULAR] * (len(dates) - 1)
        if stub_type != SchedulePeriodType.REGULAR:
            types[0 if at_start else -1] = stub_type
        return ResolvedBoundaries(dates, tuple(types))

    def _resolve_both(
        self, start: date, end: date, forward: RollWalk, backward: RollWalk
    ) -> ResolvedBoundaries:
        """Merge the forward and backward walks into one run of regular periods.

        Both walks must land on the same roll grid; each end keeps a short stub
        when it is not itself on that grid.
        """
        frequency, roll = self.spec.frequency, self.spec.roll_convention
        merged = sorted(set(forward.dates) | set(backward.dates))
        if not merged and forward.meets_boundary and backward.meets_boundary:
            return ResolvedBoundaries((start, end), (SchedulePeriodType.REGULAR,))
        if not merged:
            raise PeriodicScheduleException(
                f"Stub convention BOTH found no roll dates between {start} and {end}"
            )
        for earlier, later in zip(merged, merged[1:]):
            if align(earlier + frequency.step(), roll) != later:
                raise PeriodicScheduleException(
                    f"Stub convention BOTH: rolling forwards from {start} and backwards "
                    f"from {end} do not meet ({earlier} and {later} are not one "
                    f"{frequency} period apart under roll convention {roll.value})"
                )

        dates = (start, *merged, end)
        types = [SchedulePeriodType.REGULAR] * (len(dates) - 1)
        if not (matches(start, roll) and align(start + frequency.step(), roll) == merged[0]):
            types[0] = SchedulePeriodType.INITIAL
        if not (matches(end, roll) and align(merged[-1] + frequency.step(), roll) == end):
            types[-1] = SchedulePeriodType.FINAL
        logger.debug("Walks met at %s; boundaries %s", merged, dates)
        return ResolvedBoundaries(dates, tuple(types))
