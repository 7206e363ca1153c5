"""Compression of sparse trading segments into a dense zero-based index axis.

Each trading segment contributes ``duration // tick`` index units. The
cumulative table has one entry per segment boundary: ``table[i]`` is the
first dense index of segment ``i`` and ``table[i + 1] - table[i]`` its tick
count. Gaps between segments (non-trading time) take no index space.
"""

import math
from bisect import bisect_right
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from mdview.exceptions import SegmentError, SeriesError
from mdview.logging import get_logger
from mdview.models import Segment
from mdview.time import DISTANT_PAST, Interval, Timestamp

logger = get_logger(__name__)


@dataclass(frozen=True)
class SegmentIndex:
    """Immutable mapping between calendar time and the dense plotting index.

    Build instances with ``SegmentIndex.build`` so that the segments are
    validated and the table is derived from them.
    """

    time_tick: Interval
    segments: tuple[Segment, ...]
    table: tuple[int, ...]

    @classmethod
    def build(cls, time_tick: Interval, segments: Iterable[Segment]) -> "SegmentIndex":
        """Validate segments against the tick and compute the cumulative table.

        Raises:
            SegmentError: For the first failed check, in this order: tick not
                positive, no segments, close not after open, open before the
                previous close, duration not a multiple of the tick.
        """
        segments = tuple(segments)
        if time_tick <= Interval():
            raise SegmentError(f"Time tick is supposed to be positive. TimeTick={time_tick}")
        if not segments:
            raise SegmentError("At least one time segment is expected.")

        table = [0]
        for position, segment in enumerate(segments):
            if segment.close <= segment.open:
                raise SegmentError(
                    "Invalid input data, segment open time is supposed to be earlier than close time. "
                    f"Segment={position} Open={segment.open} Close={segment.close}"
                )
            if position and segment.open < segments[position - 1].close:
                raise SegmentError(
                    "Invalid input data, segment open time is supposed to be later than previous close time. "
                    f"Segment={position} Open={segment.open} PrevClose={segments[position - 1].close}"
                )
            duration = segment.close - segment.open
            if duration % time_tick:
                raise SegmentError(
                    "Invalid input data, segment time range is not multiples of time tick. "
                    f"TimeTick={time_tick} Open={segment.open} Close={segment.close}"
                )
            table.append(table[-1] + duration // time_tick)

        logger.debug(
            "segments_indexed",
            segments=len(segments),
            total_ticks=table[-1],
            time_tick=str(time_tick),
        )
        return cls(time_tick=time_tick, segments=segments, table=tuple(table))

    @property
    def total_ticks(self) -> int:
        return self.table[-1] if self.table else 0

    def locate(self, time: Timestamp, start: int = 0, series: str = "") -> tuple[int, int]:
        """Find the segment holding ``time`` and its tick offset inside it.

        The search begins at segment ``start`` so that callers walking
        time-ordered samples never rescan earlier segments. A segment's close
        is inclusive.

        Raises:
            SeriesError: When ``time`` is after the last segment, falls in a
                gap between segments, or is not aligned to the tick.
        """
        position = start
        while self.segments[position].close < time:
            position += 1
            if position >= len(self.segments):
                raise SeriesError(
                    "Invalid input data, data time is later than last trading range. "
                    f"Series={series} Time={time}"
                )

        segment = self.segments[position]
        if time < segment.open:
            raise SeriesError(
                f"Invalid input data, data time is not in any trading range. Series={series} Time={time}"
            )

        offset, remainder = divmod(time - segment.open, self.time_tick)
        if remainder:
            raise SeriesError(
                "Invalid input data, data time is not at proper time tick. "
                f"TimeTick={self.time_tick} Series={series} Time={time}"
            )
        return position, offset

    def time_to_index(self, time: Timestamp) -> int:
        position, offset = self.locate(time)
        return self.table[position] + offset

    def index_to_time(self, index: float) -> Timestamp:
        """Map a (possibly fractional) dense index back to calendar time.

        Indices beyond either end extrapolate from the first or last segment.
        Returns DISTANT_PAST for an empty table or a non-finite index.
        """
        if len(self.table) < 2 or not math.isfinite(index):
            return DISTANT_PAST

        position = bisect_right(self.table, index) - 1
        position = min(len(self.table) - 2, max(0, position))
        offset = index - self.table[position]
        segment_open = self.segments[position].open
        if isinstance(offset, int):
            return segment_open + self.time_tick * offset
        return segment_open + Interval(int(offset * self.time_tick.nanos))

    def time_calculator(self) -> Callable[[float], Timestamp]:
        """Return the index-to-time function handed to the renderer."""
        return self.index_to_time
