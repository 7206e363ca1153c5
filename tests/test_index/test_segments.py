"""Tests for the segment index compressor."""

import math

import pytest

from mdview.exceptions import SegmentError, SeriesError
from mdview.index.segments import SegmentIndex
from mdview.models import Segment
from mdview.time import DISTANT_PAST, Interval, Timestamp, hours, minutes, seconds

DAY_ONE = Timestamp.from_date(2024, 1, 2)
DAY_TWO = Timestamp.from_date(2024, 1, 3)


def session(day: Timestamp, open_: tuple[int, int] = (9, 30), close: tuple[int, int] = (16, 0)) -> Segment:
    return Segment(day + hours(open_[0]) + minutes(open_[1]), day + hours(close[0]) + minutes(close[1]))


@pytest.fixture
def two_day_index() -> SegmentIndex:
    """Two regular sessions with a one-minute tick."""
    return SegmentIndex.build(minutes(1), [session(DAY_ONE), session(DAY_TWO)])


class TestBuild:
    """Tests for SegmentIndex.build validation and table layout."""

    def test_single_session_table(self) -> None:
        index = SegmentIndex.build(minutes(1), [session(DAY_ONE)])
        assert index.table == (0, 390)
        assert index.total_ticks == 390

    def test_gaps_take_no_index_space(self, two_day_index: SegmentIndex) -> None:
        assert two_day_index.table == (0, 390, 780)

    def test_table_is_cumulative_tick_count(self) -> None:
        segments = [
            session(DAY_ONE, (9, 30), (12, 0)),
            session(DAY_ONE, (13, 0), (16, 0)),
            session(DAY_TWO, (9, 30), (9, 35)),
        ]
        index = SegmentIndex.build(minutes(1), segments)
        assert index.table == (0, 150, 330, 335)
        assert all(a < b for a, b in zip(index.table, index.table[1:]))
        assert index.table[-1] - index.table[0] == sum((s.close - s.open) // minutes(1) for s in segments)

    def test_adjacent_segments_allowed(self) -> None:
        index = SegmentIndex.build(
            minutes(1),
            [session(DAY_ONE, (9, 0), (10, 0)), session(DAY_ONE, (10, 0), (11, 0))],
        )
        assert index.table == (0, 60, 120)

    def test_non_positive_tick(self) -> None:
        with pytest.raises(SegmentError, match="Time tick"):
            SegmentIndex.build(Interval(), [session(DAY_ONE)])

    def test_no_segments(self) -> None:
        with pytest.raises(SegmentError, match="At least one time segment"):
            SegmentIndex.build(minutes(1), [])

    def test_close_not_after_open(self) -> None:
        with pytest.raises(SegmentError, match="earlier than close"):
            SegmentIndex.build(minutes(1), [session(DAY_ONE, (10, 0), (10, 0))])

    def test_overlapping_segments(self) -> None:
        with pytest.raises(SegmentError, match="later than previous close"):
            SegmentIndex.build(
                minutes(1),
                [session(DAY_ONE, (9, 0), (11, 0)), session(DAY_ONE, (10, 0), (12, 0))],
            )

    def test_duration_not_multiple_of_tick(self) -> None:
        with pytest.raises(SegmentError, match="multiples of time tick"):
            SegmentIndex.build(minutes(7), [session(DAY_ONE)])


class TestLocate:
    """Tests for mapping timestamps onto the index."""

    def test_open_and_close_inclusive(self, two_day_index: SegmentIndex) -> None:
        first = session(DAY_ONE)
        assert two_day_index.locate(first.open) == (0, 0)
        assert two_day_index.locate(first.close) == (0, 390)

    def test_second_session(self, two_day_index: SegmentIndex) -> None:
        moment = session(DAY_TWO).open + minutes(5)
        assert two_day_index.locate(moment) == (1, 5)
        assert two_day_index.time_to_index(moment) == 395

    def test_start_hint_skips_earlier_segments(self, two_day_index: SegmentIndex) -> None:
        assert two_day_index.locate(session(DAY_TWO).open, start=1) == (1, 0)

    def test_time_in_gap(self, two_day_index: SegmentIndex) -> None:
        with pytest.raises(SeriesError, match="not in any trading range"):
            two_day_index.locate(DAY_TWO + hours(8))

    def test_time_before_first_segment(self, two_day_index: SegmentIndex) -> None:
        with pytest.raises(SeriesError, match="not in any trading range"):
            two_day_index.locate(DAY_ONE)

    def test_time_after_last_segment(self, two_day_index: SegmentIndex) -> None:
        with pytest.raises(SeriesError, match="later than last trading range"):
            two_day_index.locate(DAY_TWO + hours(17))

    def test_time_off_tick(self, two_day_index: SegmentIndex) -> None:
        with pytest.raises(SeriesError, match="proper time tick"):
            two_day_index.locate(session(DAY_ONE).open + seconds(30))


class TestIndexToTime:
    """Tests for the inverse mapping handed to renderers."""

    def test_round_trip_on_every_tick(self, two_day_index: SegmentIndex) -> None:
        for segment in two_day_index.segments:
            moment = segment.open
            while moment <= segment.close:
                # The close of the first session shares its index with the next open
                index = two_day_index.time_to_index(moment)
                if index not in two_day_index.table[1:-1]:
                    assert two_day_index.index_to_time(index) == moment
                moment = moment + minutes(1)

    def test_shared_boundary_maps_to_next_open(self, two_day_index: SegmentIndex) -> None:
        assert two_day_index.index_to_time(390) == session(DAY_TWO).open

    def test_fractional_index(self, two_day_index: SegmentIndex) -> None:
        assert two_day_index.index_to_time(0.5) == session(DAY_ONE).open + seconds(30)

    def test_extrapolates_beyond_ends(self, two_day_index: SegmentIndex) -> None:
        assert two_day_index.index_to_time(-1) == session(DAY_ONE).open - minutes(1)
        assert two_day_index.index_to_time(790) == session(DAY_TWO).open + minutes(400)

    def test_non_finite_index(self, two_day_index: SegmentIndex) -> None:
        assert two_day_index.index_to_time(math.nan) == DISTANT_PAST
        assert two_day_index.index_to_time(math.inf) == DISTANT_PAST

    def test_empty_table(self) -> None:
        index = SegmentIndex(time_tick=minutes(1), segments=(), table=())
        assert index.index_to_time(0) == DISTANT_PAST
        assert index.total_ticks == 0

    def test_time_calculator(self, two_day_index: SegmentIndex) -> None:
        calculate = two_day_index.time_calculator()
        assert calculate(1) == session(DAY_ONE).open + minutes(1)
