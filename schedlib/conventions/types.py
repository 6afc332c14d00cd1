"""
Basic types and enums used across the scheduling system.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from dateutil.relativedelta import relativedelta

from schedlib.errors import PeriodicScheduleException

_TENOR_PATTERN = re.compile(r"^P?(\d+)([DWMY])$")


@dataclass(frozen=True)
class Frequency:
    """Periodic step between schedule boundaries.

    Exactly one of ``months`` or ``days`` is positive. Week-based frequencies
    are day-based frequencies whose day count is a multiple of seven.
    """

    months: int = 0
    days: int = 0

    def __post_init__(self):
        if self.months < 0 or self.days < 0:
            raise PeriodicScheduleException(
                f"Frequency must be positive, got months={self.months}, days={self.days}"
            )
        if self.months and self.days:
            raise PeriodicScheduleException(
                "Frequency must be expressed in months or in days, not both"
            )
        if not self.months and not self.days:
            raise PeriodicScheduleException("Frequency must be strictly positive")

    @classmethod
    def of_months(cls, months: int) -> Frequency:
        return cls(months=months)

    @classmethod
    def of_weeks(cls, weeks: int) -> Frequency:
        return cls(days=weeks * 7)

    @classmethod
    def of_days(cls, days: int) -> Frequency:
        return cls(days=days)

    @classmethod
    def parse(cls, tenor: str | Frequency) -> Frequency:
        """Parse a tenor string such as '3M', '1Y', '2W', '7D' or 'P6M'."""
        if isinstance(tenor, Frequency):
            return tenor
        match = _TENOR_PATTERN.match(str(tenor).upper().strip())
        if match is None:
            raise PeriodicScheduleException(f"Unsupported frequency: {tenor!r}")
        amount, unit = int(match.group(1)), match.group(2)
        if unit == "Y":
            return cls(months=amount * 12)
        if unit == "M":
            return cls(months=amount)
        if unit == "W":
            return cls(days=amount * 7)
        return cls(days=amount)

    @property
    def is_month_based(self) -> bool:
        return self.months > 0

    @property
    def is_week_based(self) -> bool:
        return self.days > 0 and self.days % 7 == 0

    def step(self, count: int = 1) -> relativedelta:
        """Offset covering ``count`` periods of this frequency."""
        return relativedelta(months=self.months * count, days=self.days * count)

    def __str__(self) -> str:
        if self.months:
            return f"P{self.months}M"
        if self.is_week_based:
            return f"P{self.days // 7}W"
        return f"P{self.days}D"


Frequency.P1D = Frequency(days=1)
Frequency.P1W = Frequency(days=7)
Frequency.P2W = Frequency(days=14)
Frequency.P4W = Frequency(days=28)
Frequency.P13W = Frequency(days=91)
Frequency.P1M = Frequency(months=1)
Frequency.P2M = Frequency(months=2)
Frequency.P3M = Frequency(months=3)
Frequency.P4M = Frequency(months=4)
Frequency.P6M = Frequency(months=6)
Frequency.P12M = Frequency(months=12)

Frequency.DAILY = Frequency.P1D
Frequency.WEEKLY = Frequency.P1W
Frequency.MONTHLY = Frequency.P1M
Frequency.BIMONTHLY = Frequency.P2M
Frequency.QUARTERLY = Frequency.P3M
Frequency.TRIANNUAL = Frequency.P4M
Frequency.SEMIANNUAL = Frequency.P6M
Frequency.ANNUAL = Frequency.P12M


class BusinessDayConvention(Enum):
    """Business day adjustment rules."""

    NO_ADJUST = "NO_ADJUST"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    MODIFIED_FOLLOWING_BI_MONTHLY = "MODIFIED_FOLLOWING_BI_MONTHLY"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"
    NEAREST = "NEAREST"


class StubConvention(Enum):
    """Stub period types for schedule generation."""

    NONE = "NONE"
    SHORT_INITIAL = "SHORT_INITIAL"
    LONG_INITIAL = "LONG_INITIAL"
    SHORT_FINAL = "SHORT_FINAL"
    LONG_FINAL = "LONG_FINAL"
    BOTH = "BOTH"

    @classmethod
    def parse(cls, name: str | StubConvention) -> StubConvention:
        """Look up a stub convention by name.

        Long stubs at both ends cannot be anchored independently, so names
        asking for them are rejected rather than mapped onto ``BOTH``.
        """
        if isinstance(name, StubConvention):
            return name
        key = str(name).upper().strip().replace(" ", "_")
        if key in ("LONG_BOTH", "BOTH_LONG", "LONG_INITIAL_LONG_FINAL"):
            raise PeriodicScheduleException(
                f"Stub convention {name!r} is not supported: long stubs cannot be "
                "created at both ends of a schedule"
            )
        if key in ("SHORT_BOTH", "BOTH_SHORT", "SHORT_INITIAL_SHORT_FINAL"):
            return cls.BOTH
        try:
            return cls[key]
        except KeyError as exc:
            raise PeriodicScheduleException(f"Unknown stub convention: {name!r}") from exc

    @property
    def is_initial(self) -> bool:
        return self in (StubConvention.SHORT_INITIAL, StubConvention.LONG_INITIAL)

    @property
    def is_final(self) -> bool:
        return self in (StubConvention.SHORT_FINAL, StubConvention.LONG_FINAL)

    @property
    def is_long(self) -> bool:
        return self in (StubConvention.LONG_INITIAL, StubConvention.LONG_FINAL)


class RollConvention(Enum):
    """Roll conventions anchoring period boundaries to a day pattern.

    Alignment itself lives in :mod:`schedlib.conventions.rolls`.
    """

    NONE = "NONE"
    EOM = "EOM"
    IMM = "IMM"  # third Wednesday
    IMMAUD = "IMMAUD"  # Thursday before the second Friday
    IMMNZD = "IMMNZD"  # first Wednesday after the 9th
    SFE = "SFE"  # second Friday
    DAY_1 = "DAY_1"
    DAY_2 = "DAY_2"
    DAY_3 = "DAY_3"
    DAY_4 = "DAY_4"
    DAY_5 = "DAY_5"
    DAY_6 = "DAY_6"
    DAY_7 = "DAY_7"
    DAY_8 = "DAY_8"
    DAY_9 = "DAY_9"
    DAY_10 = "DAY_10"
    DAY_11 = "DAY_11"
    DAY_12 = "DAY_12"
    DAY_13 = "DAY_13"
    DAY_14 = "DAY_14"
    DAY_15 = "DAY_15"
    DAY_16 = "DAY_16"
    DAY_17 = "DAY_17"
    DAY_18 = "DAY_18"
    DAY_19 = "DAY_19"
    DAY_20 = "DAY_20"
    DAY_21 = "DAY_21"
    DAY_22 = "DAY_22"
    DAY_23 = "DAY_23"
    DAY_24 = "DAY_24"
    DAY_25 = "DAY_25"
    DAY_26 = "DAY_26"
    DAY_27 = "DAY_27"
    DAY_28 = "DAY_28"
    DAY_29 = "DAY_29"
    DAY_30 = "DAY_30"
    DAY_MON = "DAY_MON"
    DAY_TUE = "DAY_TUE"
    DAY_WED = "DAY_WED"
    DAY_THU = "DAY_THU"
    DAY_FRI = "DAY_FRI"
    DAY_SAT = "DAY_SAT"
    DAY_SUN = "DAY_SUN"

    @classmethod
    def of_day_of_month(cls, day: int) -> RollConvention:
        if not 1 <= day <= 31:
            raise PeriodicScheduleException(f"Invalid roll day of month: {day}")
        if day == 31:
            return cls.EOM
        return cls[f"DAY_{day}"]

    @classmethod
    def of_day_of_week(cls, weekday: int) -> RollConvention:
        """Roll convention for a weekday number (Monday is 0, as date.weekday())."""
        return _DAY_OF_WEEK_ROLLS[weekday]

    @classmethod
    def parse(cls, name: str | int | RollConvention) -> RollConvention:
        if isinstance(name, RollConvention):
            return name
        if isinstance(name, int):
            return cls.of_day_of_month(name)
        key = str(name).upper().strip()
        if key.isdigit():
            return cls.of_day_of_month(int(key))
        try:
            return cls[key]
        except KeyError as exc:
            raise PeriodicScheduleException(f"Unknown roll convention: {name!r}") from exc

    @property
    def day_of_month(self) -> int | None:
        if self is RollConvention.EOM:
            return 31
        if self.value.startswith("DAY_") and self.value[4:].isdigit():
            return int(self.value[4:])
        return None

    @property
    def day_of_week(self) -> int | None:
        return _WEEKDAY_BY_ROLL.get(self)

    @property
    def is_imm_family(self) -> bool:
        return self in (
            RollConvention.IMM,
            RollConvention.IMMAUD,
            RollConvention.IMMNZD,
            RollConvention.SFE,
        )


_DAY_OF_WEEK_ROLLS = (
    RollConvention.DAY_MON,
    RollConvention.DAY_TUE,
    RollConvention.DAY_WED,
    RollConvention.DAY_THU,
    RollConvention.DAY_FRI,
    RollConvention.DAY_SAT,
    RollConvention.DAY_SUN,
)
_WEEKDAY_BY_ROLL = {roll: weekday for weekday, roll in enumerate(_DAY_OF_WEEK_ROLLS)}


class SchedulePeriodType(Enum):
    """Classification of a period within a schedule."""

    INITIAL = "INITIAL"
    REGULAR = "REGULAR"
    FINAL = "FINAL"
    TERM = "TERM"


class CalendarType(Enum):
    """Predefined calendars."""

    EUTA = "EUTA"
    GBLO = "GBLO"
    CHZU = "CHZU"
    FRPA = "FRPA"
    USGS = "USGS"
    USNY = "USNY"
    WEEKEND = "WEEKEND"
    NO_HOLIDAYS = "NO_HOLIDAYS"
