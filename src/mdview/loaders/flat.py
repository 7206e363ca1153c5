"""Decoder for the flat little-endian binary plot format.

Layout:
    Header (32 bytes):
        magic:u32 = 0xDEADBEEF, version:u8[4], num_segments:u32,
        num_series:u32, time_tick:i64 (ns), display_range:i64 (ns)
    Segment x num_segments (16 bytes each):
        open:i64, close:i64 (ns since epoch)
    Series x num_series:
        axis_centre:i64 (raw Fixpoint), num_points:u32, name_len:u16, group_len:u16
        name:u8[name_len], [pad:u8, group:u8[group_len]] when group_len > 0, terminator:u8
        padding to the next 8-byte boundary of the buffer
        point x num_points: time:i64 (ns), value:i64 (raw Fixpoint)

Points are always plotted as curves. An axis centre equal to the int64
minimum means the series has no baseline.
"""

import struct

from mdview.exceptions import FormatError, SeriesError
from mdview.fixpoint import Fixpoint
from mdview.index.segments import SegmentIndex
from mdview.index.shapes import transform_samples
from mdview.loaders.base import DecodedPlot, PlotDecoder
from mdview.loaders.cursor import ByteCursor
from mdview.logging import get_logger
from mdview.models import Sample, Segment, Series, Shape
from mdview.time import Timestamp, nanoseconds

logger = get_logger(__name__)

MAGIC = 0xDEADBEEF

HEADER = struct.Struct("<I4sIIqq")
SEGMENT = struct.Struct("<qq")
SERIES_HEADER = struct.Struct("<qIHH")
POINT = struct.Struct("<qq")
POINT_ALIGNMENT = 8


class FlatBufferDecoder(PlotDecoder):
    """Parse a flat binary buffer into segments and curve series.

    The buffer is only read, never modified, and must stay readable for the
    duration of ``decode``. Names are decoded into independent strings.
    """

    format_name = "flat"

    def decode(self, source: bytes) -> DecodedPlot:
        if len(source) <= HEADER.size:
            raise FormatError(
                f"Market data viewer requires more than {HEADER.size} bytes of input data. Length={len(source)}"
            )

        cursor = ByteCursor(source)
        magic, version, num_segments, num_series, tick_ns, range_ns = cursor.read(HEADER, "header")
        if magic != MAGIC:
            raise FormatError(f"Market data viewer accepts only little-endian data. Magic=0x{magic:08X}")
        if num_segments == 0:
            raise FormatError("At least one time segment is expected.")
        if num_series == 0:
            raise FormatError("At least one timed series is expected.")
        if tick_ns < 1:
            raise FormatError(f"Time tick is supposed to be positive. TimeTick={tick_ns}")
        if range_ns < 1 or range_ns % tick_ns:
            raise FormatError(
                f"Display range is supposed to be positive multiple of time tick. "
                f"DisplayRange={range_ns} TimeTick={tick_ns}"
            )

        records = cursor.iter_records(SEGMENT, num_segments, f"segment array of {num_segments} segments")
        index = SegmentIndex.build(
            nanoseconds(tick_ns),
            (Segment(Timestamp(open_ns), Timestamp(close_ns)) for open_ns, close_ns in records),
        )

        series: list[Series] = []
        for position in range(num_series):
            loaded = self._read_series(cursor, position, index)
            if loaded is not None:
                series.append(loaded)

        if cursor.remaining:
            raise FormatError(
                f"Input is more than expected, {cursor.remaining} bytes of unknown data are detected at the end."
            )
        if not series:
            raise SeriesError("Input data holds no usable series, every series is empty.")

        return DecodedPlot(
            index=index,
            display_range=range_ns // tick_ns,
            series=tuple(series),
            version=version,
        )

    @staticmethod
    def _read_series(cursor: ByteCursor, position: int, index: SegmentIndex) -> Series | None:
        """Read one series record; returns None for a series without points."""
        if cursor.remaining <= SERIES_HEADER.size:
            raise FormatError(f"Input data is less than expected, series {position} header is incomplete.")
        centre_raw, num_points, name_len, group_len = cursor.read(SERIES_HEADER, f"series {position} header")

        body = name_len + (group_len + 1 if group_len else 0) + 1
        points_offset = cursor.offset + body
        points_offset += -points_offset % POINT_ALIGNMENT
        cursor.require(
            points_offset - cursor.offset + num_points * POINT.size,
            f"series {position} with {num_points} points",
        )

        name = cursor.read_bytes(name_len).decode("utf-8", errors="replace")
        group = ""
        if group_len:
            cursor.skip(1)
            group = cursor.read_bytes(group_len).decode("utf-8", errors="replace")
        cursor.skip(1)
        cursor.align(POINT_ALIGNMENT)
        records = cursor.iter_records(POINT, num_points, f"series {position} points")

        if not records:
            logger.debug("series_dropped_empty", series=name, group=group)
            return None

        centre = None if centre_raw == Fixpoint.MIN_RAW else Fixpoint.from_raw(centre_raw)
        samples = [Sample(Timestamp(time_ns), Fixpoint.from_raw(raw)) for time_ns, raw in records]
        points = transform_samples(name, samples, index, Shape.CURVE, centre)
        logger.debug("series_loaded", series=name, group=group, samples=len(samples), points=len(points))
        return Series(
            name=name,
            group=group,
            axis_centre=centre,
            shape=Shape.CURVE,
            points=tuple(points),
        )
