from datetime import date

import pytest

from schedlib.conventions.types import Frequency, RollConvention, StubConvention
from schedlib.errors import PeriodicScheduleException
from schedlib.schedule.adjustments import BusinessDayAdjustment
from schedlib.schedule.definition import ScheduleSpecification
from schedlib.schedule.generator import (
    UnadjustedPeriodGenerator,
    check_roll_frequency,
    spans_less_than_one_period,
)


def _generate(start, end, frequency="P3M", stub=None, roll=None):
    spec = ScheduleSpecification(
        start_date=start,
        end_date=end,
        frequency=frequency,
        business_day_adjustment=BusinessDayAdjustment("NO_ADJUST", "WEEKEND"),
        stub_convention=stub,
        roll_convention=roll,
    )
    return UnadjustedPeriodGenerator(spec.resolve()).generate()


def test_forward_walk_meets_end() -> None:
    generated = _generate("2024-01-15", "2025-01-15", stub="NONE")
    (walk,) = generated.walks
    assert walk.forward
    assert walk.dates == (date(2024, 4, 15), date(2024, 7, 15), date(2024, 10, 15))
    assert walk.meets_boundary
    assert walk.boundaries[0] == date(2024, 1, 15)
    assert walk.boundaries[-1] == date(2025, 1, 15)


def test_backward_walk_from_month_end() -> None:
    generated = _generate("2024-01-31", "2024-12-31", stub="SHORT_INITIAL", roll="EOM")
    (walk,) = generated.walks
    assert not walk.forward
    assert walk.anchor == date(2024, 12, 31)
    assert walk.dates == (date(2024, 3, 31), date(2024, 6, 30), date(2024, 9, 30))
    assert not walk.meets_boundary
    assert walk.boundaries == [
        date(2024, 1, 31),
        date(2024, 3, 31),
        date(2024, 6, 30),
        date(2024, 9, 30),
        date(2024, 12, 31),
    ]


def test_steps_are_taken_from_the_anchor() -> None:
    # 31 Jan + 1M, 2M, ... rather than chaining through 29 Feb
    generated = _generate("2024-01-31", "2024-05-31", frequency="P1M", stub="NONE", roll="NONE")
    assert generated.walks[0].dates == (
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    )


def test_short_range_is_term() -> None:
    generated = _generate("2024-01-10", "2024-01-30", frequency="P1M")
    assert generated.is_term
    assert generated.walks == ()


def test_both_walks_from_each_end() -> None:
    generated = _generate("2024-01-05", "2024-10-10", stub="BOTH", roll="DAY_20")
    forward, backward = generated.walks
    assert forward.dates == (date(2024, 4, 20), date(2024, 7, 20))
    assert backward.dates == (date(2024, 1, 20), date(2024, 4, 20), date(2024, 7, 20))
    assert not forward.meets_boundary
    assert not backward.meets_boundary


def test_anchor_must_match_roll() -> None:
    with pytest.raises(PeriodicScheduleException, match="when starting to roll forwards"):
        _generate("2024-01-15", "2024-12-01", stub="SHORT_FINAL", roll="DAY_20")
    with pytest.raises(PeriodicScheduleException, match="when starting to roll backwards"):
        _generate("2024-01-15", "2024-12-01", stub="SHORT_INITIAL", roll="IMM")


@pytest.mark.parametrize(
    ("roll", "frequency", "message"),
    [
        (RollConvention.IMM, Frequency.P1M, "multiple of 3 months"),
        (RollConvention.SFE, Frequency.P1W, "multiple of 3 months"),
        (RollConvention.EOM, Frequency.P2W, "month-based"),
        (RollConvention.DAY_15, Frequency.P1D, "month-based"),
        (RollConvention.DAY_WED, Frequency.P1M, "week-based"),
    ],
)
def test_incompatible_roll_and_frequency(roll, frequency, message) -> None:
    with pytest.raises(PeriodicScheduleException, match=message):
        check_roll_frequency(roll, frequency)


@pytest.mark.parametrize(
    ("roll", "frequency"),
    [
        (RollConvention.NONE, Frequency.P1D),
        (RollConvention.IMM, Frequency.P3M),
        (RollConvention.IMMNZD, Frequency.P12M),
        (RollConvention.EOM, Frequency.P1M),
        (RollConvention.DAY_FRI, Frequency.P2W),
    ],
)
def test_compatible_roll_and_frequency(roll, frequency) -> None:
    check_roll_frequency(roll, frequency)


def test_spans_less_than_one_period() -> None:
    assert spans_less_than_one_period(date(2024, 1, 31), date(2024, 2, 28), Frequency.P1M)
    assert not spans_less_than_one_period(date(2024, 1, 31), date(2024, 2, 29), Frequency.P1M)
    assert not spans_less_than_one_period(date(2024, 3, 1), date(2024, 3, 8), Frequency.P1W)


def test_unresolvable_specification_raises_before_walking() -> None:
    with pytest.raises(PeriodicScheduleException, match="week-based"):
        _generate("2024-01-03", "2024-06-05", frequency="P1M", stub="NONE", roll="DAY_WED")


def test_single_rolled_step_is_not_term() -> None:
    # 20 Jun rolls back to the IMM date 19 Jun, so the range is one full step
    generated = _generate("2024-03-20", "2024-06-19", stub="NONE", roll="IMM")
    assert not generated.is_term
    (walk,) = generated.walks
    assert walk.dates == ()
    assert walk.meets_boundary


@pytest.mark.parametrize("stub", list(StubConvention))
def test_range_shorter_than_rolled_step_is_term(stub) -> None:
    # the next IMM date after 18 Dec 2024 is 19 Mar 2025
    generated = _generate("2024-12-18", "2025-03-18", stub=stub, roll="IMM")
    assert generated.is_term


def test_initial_stub_checks_the_step_back_from_the_end() -> None:
    assert _generate("2024-01-25", "2024-04-20", stub="SHORT_INITIAL").is_term
    assert not _generate("2024-01-20", "2024-04-20", stub="SHORT_INITIAL").is_term


@pytest.mark.parametrize(
    ("start", "end", "frequency", "roll", "backward", "expected"),
    [
        (date(2024, 3, 20), date(2024, 6, 19), Frequency.P3M, RollConvention.IMM, False, False),
        (date(2024, 12, 18), date(2025, 3, 18), Frequency.P3M, RollConvention.IMM, False, True),
        (date(2024, 12, 18), date(2025, 3, 19), Frequency.P3M, RollConvention.IMM, False, False),
        (date(2024, 1, 25), date(2024, 4, 20), Frequency.P3M, RollConvention.DAY_20, False, False),
        (date(2024, 1, 25), date(2024, 4, 20), Frequency.P3M, RollConvention.DAY_20, True, True),
        (date(2024, 1, 31), date(2024, 2, 29), Frequency.P1M, RollConvention.EOM, True, False),
    ],
)
def test_spans_less_than_one_rolled_period(start, end, frequency, roll, backward, expected) -> None:
    assert spans_less_than_one_period(start, end, frequency, roll, backward) is expected
