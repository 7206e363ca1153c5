"""Tests for Interval and Timestamp calendar arithmetic."""

import pytest

from mdview.time import (
    DISTANT_FUTURE,
    DISTANT_PAST,
    NANOS_PER_DAY,
    POSIX_EPOCH,
    Interval,
    Timestamp,
    days,
    hours,
    is_leap_year,
    is_valid_date,
    microseconds,
    milliseconds,
    minutes,
    nanoseconds,
    seconds,
    weeks,
)


class TestInterval:
    """Tests for Interval factories, accessors and arithmetic."""

    def test_factories(self) -> None:
        assert nanoseconds(5).nanos == 5
        assert microseconds(2).nanos == 2_000
        assert milliseconds(3).nanos == 3_000_000
        assert seconds(1).nanos == 1_000_000_000
        assert minutes(1) == seconds(60)
        assert hours(1) == minutes(60)
        assert days(1).nanos == NANOS_PER_DAY
        assert weeks(1) == days(7)

    def test_total_accessors_truncate(self) -> None:
        interval = milliseconds(1_500)
        assert interval.total_seconds == 1
        assert interval.total_milliseconds == 1_500
        assert interval.total_microseconds == 1_500_000
        assert (-interval).total_seconds == -1

    def test_arithmetic(self) -> None:
        assert hours(1) + minutes(30) == minutes(90)
        assert hours(1) - minutes(90) == -minutes(30)
        assert minutes(2) * 3 == minutes(6)
        assert 3 * minutes(2) == minutes(6)
        assert abs(-seconds(4)) == seconds(4)

    def test_division_by_interval_gives_tick_count(self) -> None:
        assert hours(6) + minutes(30) == minutes(390)
        assert (hours(6) + minutes(30)) // minutes(1) == 390
        assert minutes(7) % minutes(2) == minutes(1)
        assert divmod(seconds(61), minutes(1)) == (1, seconds(1))

    def test_division_by_int_gives_interval(self) -> None:
        assert minutes(3) // 3 == minutes(1)

    def test_ordering(self) -> None:
        assert seconds(1) < minutes(1)
        assert max(seconds(1), milliseconds(999)) == seconds(1)
        assert not Interval()
        assert seconds(1)

    @pytest.mark.parametrize(
        ("interval", "text"),
        [
            (Interval(), "0ns"),
            (minutes(1), "1m"),
            (days(1) + hours(2) + minutes(3) + seconds(4), "1d2h3m4s"),
            (milliseconds(5) + microseconds(6) + nanoseconds(7), "5ms6us7ns"),
            (-seconds(90), "-1m30s"),
        ],
    )
    def test_str(self, interval: Interval, text: str) -> None:
        assert str(interval) == text


class TestCalendar:
    """Tests for leap years and date validity."""

    @pytest.mark.parametrize(("year", "leap"), [(1704, True), (1800, False), (1900, False), (2000, True), (2023, False), (2024, True), (2100, False)])
    def test_leap_rule(self, year: int, leap: bool) -> None:
        assert is_leap_year(year) is leap

    def test_valid_dates(self) -> None:
        assert is_valid_date(2024, 2, 29)
        assert not is_valid_date(2023, 2, 29)
        assert not is_valid_date(2024, 4, 31)
        assert not is_valid_date(2024, 13, 1)
        assert not is_valid_date(1700, 6, 1)
        assert not is_valid_date(2201, 1, 1)


class TestTimestamp:
    """Tests for Timestamp construction, decomposition and formatting."""

    def test_epoch(self) -> None:
        assert Timestamp.from_date(1970, 1, 1) == POSIX_EPOCH
        assert POSIX_EPOCH.calendar_date() == (1970, 1, 1)

    def test_known_day_numbers(self) -> None:
        assert Timestamp.from_date(2000, 2, 29).nanos == 11_016 * NANOS_PER_DAY
        assert Timestamp.from_date(2000, 3, 1).nanos == 11_017 * NANOS_PER_DAY
        assert Timestamp.from_date(1969, 12, 31).nanos == -NANOS_PER_DAY

    @pytest.mark.parametrize(
        "date",
        [
            (1701, 1, 1),
            (1704, 2, 29),
            (1800, 2, 28),
            (1800, 3, 1),
            (1969, 12, 31),
            (1999, 12, 31),
            (2000, 2, 28),
            (2000, 2, 29),
            (2000, 3, 1),
            (2000, 12, 31),
            (2024, 1, 2),
            (2024, 2, 29),
            (2024, 12, 31),
            (2100, 3, 1),
            (2200, 12, 31),
        ],
    )
    def test_calendar_date_inverts_from_date(self, date: tuple[int, int, int]) -> None:
        assert Timestamp.from_date(*date).calendar_date() == date

    def test_consecutive_days_round_trip(self) -> None:
        """Every day from 1999-01-01 through 2001-12-31 decomposes back to itself."""
        start = Timestamp.from_date(1999, 1, 1)
        previous = None
        for offset in range(3 * 365 + 1):
            parts = (start + days(offset)).calendar_date()
            assert parts is not None
            assert Timestamp.from_date(*parts) == start + days(offset)
            if previous is not None:
                assert parts > previous
            previous = parts
        assert previous == (2001, 12, 31)

    def test_invalid_date_gives_distant_past(self) -> None:
        assert Timestamp.from_date(2023, 2, 29) == DISTANT_PAST
        assert Timestamp.from_date(1650, 1, 1) == DISTANT_PAST
        assert not DISTANT_PAST.is_valid

    def test_out_of_range_renders_invalid(self) -> None:
        assert str(DISTANT_PAST) == "invalid"
        assert str(DISTANT_FUTURE) == "invalid"
        assert DISTANT_FUTURE.calendar_date() is None

    def test_interval_arithmetic(self) -> None:
        day = Timestamp.from_date(2024, 1, 2)
        open_ = day + hours(9) + minutes(30)
        assert open_ - day == minutes(570)
        assert open_ - minutes(570) == day
        assert hours(1) + day == day + hours(1)

    def test_clock_time_and_date(self) -> None:
        moment = Timestamp.from_date(2024, 1, 2) + hours(9) + minutes(30) + milliseconds(250)
        assert moment.clock_time() == hours(9) + minutes(30) + milliseconds(250)
        assert moment.date() == Timestamp.from_date(2024, 1, 2)

    def test_before_epoch_decomposes_by_floor_days(self) -> None:
        moment = Timestamp.from_date(1969, 12, 31) + hours(23)
        assert moment.calendar_date() == (1969, 12, 31)
        assert moment.clock_time() == hours(23)

    def test_str(self) -> None:
        moment = Timestamp.from_date(2024, 1, 2) + hours(9) + minutes(30) + nanoseconds(5)
        assert str(moment) == "2024-01-02 09:30:00.000000005"
        assert moment.clock_str() == "09:30:00.000000005"

    def test_ordering(self) -> None:
        assert DISTANT_PAST < POSIX_EPOCH < DISTANT_FUTURE
