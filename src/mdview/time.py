"""Nanosecond timestamps and durations with integer-only calendar arithmetic.

Interval is a signed nanosecond duration. Timestamp is signed nanoseconds
since the POSIX epoch. Calendar decomposition works purely on integer day
counts over the proleptic Gregorian calendar between 1701-01-01 and
2200-12-31; anything outside that range is treated as invalid.

The day-count decomposition removes the single 400-year leap day inside the
range (2000-02-29) so that every century has exactly 36524 days and every
4-year cycle 1461 days, and answers that one date directly.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

NANOS_PER_MICROSECOND = 1_000
NANOS_PER_MILLISECOND = 1_000_000
NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_DAY = 86_400 * NANOS_PER_SECOND

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

#: Cumulative day count before each month in a non-leap year.
_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_REFERENCE_LEAP_DAY = 11_016  # 2000-02-29 as days since 1970-01-01
_EPOCH_FROM_1701 = 98_250  # days from 1701-01-01 to 1970-01-01
_DAYS_PER_CENTURY = 36_524
_DAYS_PER_CYCLE = 1_461
_CENTURIES = 5  # 1701 .. 2200


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def is_valid_date(year: int, month: int, day: int) -> bool:
    """True for a real calendar date with 1700 < year < 2201."""
    if not (1700 < year < 2201 and 1 <= month <= 12 and day >= 1):
        return False
    if month == 2 and day == 29:
        return is_leap_year(year)
    return day <= _DAYS_IN_MONTH[month - 1]


def _days_from_civil(year: int, month: int, day: int) -> int:
    years = year - 1701
    # 2000 is the only 400-year leap year in range
    leap_days = years // 4 - years // 100 + (1 if years > 299 else 0)
    day_of_year = _DAYS_BEFORE_MONTH[month - 1] + day - 1
    if month > 2 and is_leap_year(year):
        day_of_year += 1
    return years * 365 + leap_days + day_of_year - _EPOCH_FROM_1701


def _civil_from_days(days: int) -> tuple[int, int, int] | None:
    if days == _REFERENCE_LEAP_DAY:
        return 2000, 2, 29

    n = days + _EPOCH_FROM_1701 - (1 if days > _REFERENCE_LEAP_DAY else 0)
    if not 0 <= n < _CENTURIES * _DAYS_PER_CENTURY:
        return None

    centuries, day_of_century = divmod(n, _DAYS_PER_CENTURY)
    cycles, day_of_cycle = divmod(day_of_century, _DAYS_PER_CYCLE)
    first_year = 1701 + centuries * 100 + cycles * 4
    if day_of_cycle == _DAYS_PER_CYCLE - 1:
        return first_year + 3, 12, 31

    years, day_of_year = divmod(day_of_cycle, 365)
    year = first_year + years
    # 2000 counts as a common year here, its leap day was removed above
    leap = year % 4 == 0 and year % 100 != 0
    if day_of_year == 59:
        return (year, 2, 29) if leap else (year, 3, 1)
    if leap and day_of_year > 59:
        day_of_year -= 1

    month = bisect_right(_DAYS_BEFORE_MONTH, day_of_year)
    return year, month, day_of_year - _DAYS_BEFORE_MONTH[month - 1] + 1


@dataclass(frozen=True, order=True, slots=True)
class Interval:
    """Signed duration in nanoseconds.

    ``interval // tick`` gives an integer tick count and ``interval % tick``
    the exact remainder, which is how timestamps are mapped onto ticks.
    """

    nanos: int = 0

    @property
    def total_nanoseconds(self) -> int:
        return self.nanos

    @property
    def total_microseconds(self) -> int:
        return _trunc_div(self.nanos, NANOS_PER_MICROSECOND)

    @property
    def total_milliseconds(self) -> int:
        return _trunc_div(self.nanos, NANOS_PER_MILLISECOND)

    @property
    def total_seconds(self) -> int:
        return _trunc_div(self.nanos, NANOS_PER_SECOND)

    def __bool__(self) -> bool:
        return self.nanos != 0

    def __pos__(self) -> Interval:
        return self

    def __neg__(self) -> Interval:
        return Interval(-self.nanos)

    def __abs__(self) -> Interval:
        return Interval(abs(self.nanos))

    def __add__(self, other: object) -> Interval:
        if isinstance(other, Interval):
            return Interval(self.nanos + other.nanos)
        return NotImplemented

    def __sub__(self, other: object) -> Interval:
        if isinstance(other, Interval):
            return Interval(self.nanos - other.nanos)
        return NotImplemented

    def __mul__(self, other: object) -> Interval:
        if isinstance(other, int):
            return Interval(self.nanos * other)
        return NotImplemented

    __rmul__ = __mul__

    def __floordiv__(self, other: object) -> Interval | int:
        if isinstance(other, Interval):
            return self.nanos // other.nanos
        if isinstance(other, int):
            return Interval(self.nanos // other)
        return NotImplemented

    def __mod__(self, other: object) -> Interval:
        if isinstance(other, Interval):
            return Interval(self.nanos % other.nanos)
        return NotImplemented

    def __divmod__(self, other: object) -> tuple[int, Interval]:
        if isinstance(other, Interval):
            quotient, remainder = divmod(self.nanos, other.nanos)
            return quotient, Interval(remainder)
        return NotImplemented

    def __str__(self) -> str:
        if self.nanos == 0:
            return "0ns"
        sign = "-" if self.nanos < 0 else ""
        total_seconds, sub_second = divmod(abs(self.nanos), NANOS_PER_SECOND)
        day_count, second_of_day = divmod(total_seconds, 86_400)
        components = (
            (day_count, "d"),
            (second_of_day // 3600, "h"),
            (second_of_day % 3600 // 60, "m"),
            (second_of_day % 60, "s"),
            (sub_second // NANOS_PER_MILLISECOND, "ms"),
            (sub_second // NANOS_PER_MICROSECOND % 1000, "us"),
            (sub_second % 1000, "ns"),
        )
        return sign + "".join(f"{value}{unit}" for value, unit in components if value)


def nanoseconds(value: int) -> Interval:
    return Interval(value)


def microseconds(value: int) -> Interval:
    return Interval(value * NANOS_PER_MICROSECOND)


def milliseconds(value: int) -> Interval:
    return Interval(value * NANOS_PER_MILLISECOND)


def seconds(value: int) -> Interval:
    return Interval(value * NANOS_PER_SECOND)


def minutes(value: int) -> Interval:
    return Interval(value * 60 * NANOS_PER_SECOND)


def hours(value: int) -> Interval:
    return Interval(value * 3600 * NANOS_PER_SECOND)


def days(value: int) -> Interval:
    return Interval(value * NANOS_PER_DAY)


def weeks(value: int) -> Interval:
    return Interval(value * 7 * NANOS_PER_DAY)


@dataclass(frozen=True, order=True, slots=True)
class Timestamp:
    """Signed nanoseconds since 1970-01-01 00:00:00 (POSIX time).

    Usage:
        open_ = Timestamp.from_date(2024, 1, 2) + hours(9) + minutes(30)
        str(open_)  # '2024-01-02 09:30:00.000000000'
    """

    nanos: int = 0

    @classmethod
    def from_date(cls, year: int, month: int, day: int) -> Timestamp:
        """Midnight of the given date, or DISTANT_PAST when the date is invalid."""
        if not is_valid_date(year, month, day):
            return DISTANT_PAST
        return cls(_days_from_civil(year, month, day) * NANOS_PER_DAY)

    def __add__(self, other: object) -> Timestamp:
        if isinstance(other, Interval):
            return Timestamp(self.nanos + other.nanos)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: object) -> Timestamp | Interval:
        if isinstance(other, Interval):
            return Timestamp(self.nanos - other.nanos)
        if isinstance(other, Timestamp):
            return Interval(self.nanos - other.nanos)
        return NotImplemented

    def clock_time(self) -> Interval:
        """Time elapsed since midnight of this timestamp's day."""
        return Interval(self.nanos % NANOS_PER_DAY)

    def date(self) -> Timestamp:
        """Midnight of this timestamp's day."""
        return Timestamp(self.nanos - self.nanos % NANOS_PER_DAY)

    def calendar_date(self) -> tuple[int, int, int] | None:
        """Return (year, month, day), or None outside 1701-01-01 .. 2200-12-31."""
        return _civil_from_days(self.nanos // NANOS_PER_DAY)

    @property
    def is_valid(self) -> bool:
        return self.calendar_date() is not None

    def clock_str(self) -> str:
        """Format the time of day as HH:MM:SS.NNNNNNNNN."""
        total_seconds, sub_second = divmod(self.nanos % NANOS_PER_DAY, NANOS_PER_SECOND)
        hh, remainder = divmod(total_seconds, 3600)
        mm, ss = divmod(remainder, 60)
        return f"{hh:02d}:{mm:02d}:{ss:02d}.{sub_second:09d}"

    def __str__(self) -> str:
        parts = self.calendar_date()
        if parts is None:
            return "invalid"
        year, month, day = parts
        return f"{year:04d}-{month:02d}-{day:02d} {self.clock_str()}"


DISTANT_PAST = Timestamp(_INT64_MIN)
DISTANT_FUTURE = Timestamp(_INT64_MAX)
POSIX_EPOCH = Timestamp(0)
