from datetime import date, datetime

import pytest

from schedlib.business_calendar import set_default_calendar
from schedlib.conventions.calendars import bespoke_calendar, get_calendar
from schedlib.conventions.types import BusinessDayConvention as BDC
from schedlib.schedule.adjustments import (
    BusinessDayAdjustment,
    adjust_date,
    get_month_end,
    is_end_of_month,
)

SAT_AUG_31 = date(2024, 8, 31)
SAT_JUN_1 = date(2024, 6, 1)
SAT_JUN_15 = date(2024, 6, 15)
SUN_SEP_1 = date(2024, 9, 1)


@pytest.mark.parametrize(
    ("dt", "convention", "expected"),
    [
        (SAT_AUG_31, BDC.NO_ADJUST, SAT_AUG_31),
        (SAT_AUG_31, BDC.FOLLOWING, date(2024, 9, 2)),
        (SAT_AUG_31, BDC.PRECEDING, date(2024, 8, 30)),
        # last weekday of the month stays in the month
        (SAT_AUG_31, BDC.MODIFIED_FOLLOWING, date(2024, 8, 30)),
        (SUN_SEP_1, BDC.MODIFIED_FOLLOWING, date(2024, 9, 2)),
        (SAT_JUN_1, BDC.PRECEDING, date(2024, 5, 31)),
        (SAT_JUN_1, BDC.MODIFIED_PRECEDING, date(2024, 6, 3)),
        (SAT_AUG_31, BDC.MODIFIED_PRECEDING, date(2024, 8, 30)),
        (SAT_JUN_15, BDC.MODIFIED_FOLLOWING, date(2024, 6, 17)),
        (SAT_JUN_15, BDC.MODIFIED_FOLLOWING_BI_MONTHLY, date(2024, 6, 14)),
        (date(2024, 6, 16), BDC.MODIFIED_FOLLOWING_BI_MONTHLY, date(2024, 6, 17)),
        (SAT_AUG_31, BDC.MODIFIED_FOLLOWING_BI_MONTHLY, date(2024, 8, 30)),
        (SAT_AUG_31, BDC.NEAREST, date(2024, 8, 30)),
        (SUN_SEP_1, BDC.NEAREST, date(2024, 9, 2)),
    ],
)
def test_adjust_date(weekend, dt, convention, expected) -> None:
    assert adjust_date(dt, convention, weekend) == expected


def test_nearest_tie_goes_following() -> None:
    calendar = bespoke_calendar("TEST_NEAREST_TIE", [date(2024, 3, 13)])
    assert adjust_date(date(2024, 3, 13), BDC.NEAREST, calendar) == date(2024, 3, 14)


@pytest.mark.parametrize("convention", list(BDC))
@pytest.mark.parametrize(
    "dt", [SAT_AUG_31, SAT_JUN_1, SAT_JUN_15, SUN_SEP_1, date(2024, 12, 25), date(2024, 7, 3)]
)
def test_adjust_date_is_idempotent(convention, dt) -> None:
    calendar = get_calendar("GBLO")
    once = adjust_date(dt, convention, calendar)
    assert adjust_date(once, convention, calendar) == once


def test_business_day_is_unchanged(weekend) -> None:
    for convention in BDC:
        assert adjust_date(date(2024, 7, 3), convention, weekend) == date(2024, 7, 3)


def test_adjust_date_accepts_datetime(weekend) -> None:
    assert adjust_date(datetime(2024, 8, 31, 12), BDC.FOLLOWING, weekend) == date(2024, 9, 2)


def test_adjust_date_with_plain_predicate() -> None:
    class MondayOnly:
        def is_business_day(self, dt):
            return dt.weekday() == 0

    assert adjust_date(date(2024, 3, 6), BDC.FOLLOWING, MondayOnly()) == date(2024, 3, 11)
    assert adjust_date(date(2024, 3, 6), BDC.PRECEDING, MondayOnly()) == date(2024, 3, 4)


def test_business_day_adjustment_by_name() -> None:
    adjustment = BusinessDayAdjustment("following", "WEEKEND")
    assert adjustment.convention is BDC.FOLLOWING
    assert adjustment.calendar is get_calendar("WEEKEND")
    assert adjustment.adjust(SAT_AUG_31) == date(2024, 9, 2)


def test_business_day_adjustment_default_calendar() -> None:
    assert BusinessDayAdjustment(BDC.FOLLOWING).calendar is get_calendar("WEEKEND")
    set_default_calendar("GBLO")
    adjustment = BusinessDayAdjustment(BDC.FOLLOWING)
    assert adjustment.calendar is get_calendar("GBLO")
    assert adjustment.adjust(date(2024, 12, 25)) == date(2024, 12, 27)


@pytest.mark.parametrize(
    ("year", "month", "expected"),
    [
        (2024, 2, date(2024, 2, 29)),
        (2023, 2, date(2023, 2, 28)),
        (2024, 12, date(2024, 12, 31)),
        (2024, 4, date(2024, 4, 30)),
    ],
)
def test_get_month_end(year, month, expected) -> None:
    assert get_month_end(year, month) == expected
    assert is_end_of_month(expected)
    assert not is_end_of_month(date(year, month, 15))


def test_business_day_adjustment_default_convention() -> None:
    from schedlib.business_calendar import set_default_business_day_convention

    assert BusinessDayAdjustment().convention is BDC.MODIFIED_FOLLOWING
    set_default_business_day_convention(BDC.PRECEDING)
    assert BusinessDayAdjustment(calendar="WEEKEND").adjust(SUN_SEP_1) == date(2024, 8, 30)


def test_business_day_adjustment_unknown_convention() -> None:
    from schedlib.errors import PeriodicScheduleException

    with pytest.raises(PeriodicScheduleException, match="Unknown business day convention"):
        BusinessDayAdjustment("SOMETIMES", "WEEKEND")


def test_adjust_date_rejects_unknown_convention(weekend) -> None:
    from schedlib.errors import PeriodicScheduleException

    with pytest.raises(PeriodicScheduleException, match="Unknown business day convention"):
        adjust_date(SAT_AUG_31, "FOLLOWING", weekend)
    with pytest.raises(PeriodicScheduleException, match="Unknown business day convention"):
        BusinessDayAdjustment(3, "WEEKEND")


def test_month_end_helpers_are_shared_with_rolls() -> None:
    from schedlib.conventions import rolls

    assert get_month_end is rolls.get_month_end
    assert is_end_of_month is rolls.is_end_of_month
    assert is_end_of_month(datetime(2024, 2, 29, 17))
