"""Decoder for the HDF5 hierarchical plot store.

Schema:
    /Plot                                group, attribute DisplayRange:i32 (milliseconds)
    /Plot/TradingSegments                i32 triples (date*10+session, open_ms, close_ms)
    /Plot/<group>                        one group per series group
    /Plot/<group>/<series>               attributes Centre:i32, Shape:i32 (1 curve, 2 spike, 3 step)
    /Plot/<group>/<series>/<YYYYMMDD>    i32 pairs (offset_ms, raw Fixpoint value)

A series named like its parent group is ungrouped. Day datasets may also be
named ``YYYYMMDDs`` with a trailing session digit, and must be stored in
increasing order.

Centre attribute encoding:
    INT32_MAX       no baseline
    INT32_MAX - 1   midpoint of the series' min and max sample values
    anything else   raw Fixpoint baseline
"""

from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike

import h5py
import numpy as np

from mdview.exceptions import SegmentError, SeriesError, StructuralError
from mdview.fixpoint import Fixpoint
from mdview.index.segments import SegmentIndex
from mdview.index.shapes import transform_samples
from mdview.loaders.base import DecodedPlot, PlotDecoder
from mdview.logging import get_logger
from mdview.models import Sample, Segment, Series, Shape
from mdview.time import DISTANT_PAST, Interval, Timestamp, milliseconds

logger = get_logger(__name__)

PLOT_GROUP = "Plot"
SEGMENTS_DATASET = "TradingSegments"

INT32_MAX = 2**31 - 1
MISSING_ATTRIBUTE = -INT32_MAX
CENTRE_UNSET = INT32_MAX
CENTRE_AUTO = INT32_MAX - 1

#: Accepted trading day codes (YYYYMMDD * 10 + session).
FIRST_DAY_CODE = 197001010
LAST_DAY_CODE = 220001010


@contextmanager
def open_store(source: "str | PathLike[str] | h5py.Group") -> Iterator[h5py.Group]:
    """Yield the root group of ``source``, closing files opened here on exit.

    An already open group is yielded as is and left open for its owner.
    """
    if isinstance(source, h5py.Group):
        yield source
        return
    try:
        handle = h5py.File(source, "r")
    except OSError as exc:
        raise StructuralError(f"Invalid input data, failed to open HDF5 file. FileName={source} Error={exc}") from exc
    with handle:
        yield handle


def _require_group(parent: h5py.Group, name: str, message: str) -> h5py.Group:
    node = parent.get(name)
    if not isinstance(node, h5py.Group):
        raise StructuralError(message)
    return node


def _read_attribute(node: h5py.Group, name: str, message: str) -> int:
    """Read a scalar integer attribute, raising StructuralError when absent or malformed."""
    value = node.attrs.get(name)
    if value is None:
        raise StructuralError(message)
    array = np.asarray(value)
    if array.size != 1 or not np.issubdtype(array.dtype, np.integer):
        raise StructuralError(f"{message} Attribute={name} DType={array.dtype}")
    result = int(array.reshape(-1)[0])
    if result == MISSING_ATTRIBUTE:
        raise StructuralError(message)
    return result


def _read_integers(dataset: h5py.Dataset, message: str) -> list[int]:
    try:
        array = np.asarray(dataset[()])
    except OSError as exc:
        raise StructuralError(f"{message} Error={exc}") from exc
    if not np.issubdtype(array.dtype, np.integer):
        raise StructuralError(f"{message} DType={array.dtype}")
    return array.reshape(-1).tolist()


def _date_from_code(code: int) -> Timestamp:
    """Midnight of a YYYYMMDDs day code, or DISTANT_PAST when invalid."""
    date = code // 10
    return Timestamp.from_date(date // 10000, date // 100 % 100, date % 100)


def _day_code(name: str) -> int | None:
    """Parse a day dataset name (8-digit date or 9-digit date plus session)."""
    if not (name.isascii() and name.isdigit() and len(name) in (8, 9)):
        return None
    code = int(name) * (10 if len(name) == 8 else 1)
    if not FIRST_DAY_CODE <= code <= LAST_DAY_CODE:
        return None
    return code


def _read_segments(plot: h5py.Group) -> list[Segment]:
    dataset = plot.get(SEGMENTS_DATASET)
    if not isinstance(dataset, h5py.Dataset):
        raise StructuralError("Invalid input data, failed to load trading segments.")

    values = _read_integers(dataset, "Invalid input data, trading segments are not integers.")
    if len(values) % 3:
        raise StructuralError(f"Invalid input data, unexpected number of trading ranges. Values={len(values)}")

    segments = []
    for position in range(0, len(values), 3):
        code, open_ms, close_ms = values[position:position + 3]
        date = _date_from_code(code)
        if date == DISTANT_PAST:
            raise SegmentError(f"Invalid input data, unexpected trading day {code}")
        segments.append(Segment(date + milliseconds(open_ms), date + milliseconds(close_ms)))
    return segments


def _resolve_centre(code: int, samples: list[Sample]) -> Fixpoint | None:
    if code == CENTRE_UNSET:
        return None
    if code == CENTRE_AUTO:
        values = [sample.value for sample in samples]
        return (min(values) + max(values)) / 2
    return Fixpoint.from_raw(code)


class HierarchicalStoreDecoder(PlotDecoder):
    """Parse an HDF5 plot store into segments and shaped series.

    Args:
        time_tick: Sampling granularity of segment bounds and day offsets.
    """

    format_name = "hdf5"

    def __init__(self, time_tick: Interval = milliseconds(1)) -> None:
        self._time_tick = time_tick

    @property
    def time_tick(self) -> Interval:
        return self._time_tick

    def decode(self, source: "str | PathLike[str] | h5py.Group") -> DecodedPlot:
        with open_store(source) as root:
            return self._decode_root(root)

    def _decode_root(self, root: h5py.Group) -> DecodedPlot:
        plot = _require_group(root, PLOT_GROUP, "Invalid input data, failed to open base group 'Plot'.")
        index = SegmentIndex.build(self._time_tick, _read_segments(plot))

        group_names = [name for name in plot.keys() if name != SEGMENTS_DATASET]
        if not group_names:
            raise StructuralError("Invalid input data, failed to find series groups.")

        series: list[Series] = []
        for group_name in group_names:
            group = _require_group(
                plot, group_name, f"Invalid input data, failed to open series group. Group={group_name}"
            )
            for series_name in group.keys():
                loaded = self._read_series(group, group_name, series_name, index)
                if loaded is not None:
                    series.append(loaded)

        if not series:
            raise SeriesError("Input data holds no usable series.")

        display_ms = _read_attribute(plot, "DisplayRange", "Invalid input data, failed to load display range.")
        display_range, remainder = divmod(milliseconds(display_ms), self._time_tick)
        if display_ms < 1 or remainder:
            raise StructuralError(
                "Invalid input data, display range is supposed to be positive multiple of time tick. "
                f"DisplayRange={display_ms} TimeTick={self._time_tick}"
            )

        return DecodedPlot(index=index, display_range=display_range, series=tuple(series))

    def _read_series(
        self,
        group: h5py.Group,
        group_name: str,
        series_name: str,
        index: SegmentIndex,
    ) -> Series | None:
        node = _require_group(
            group,
            series_name,
            f"Invalid input data, failed to open series. Group={group_name} Series={series_name}",
        )
        centre_code = _read_attribute(
            node, "Centre", f"Invalid input data, failed to load series centre. Series={series_name}"
        )
        shape_code = _read_attribute(
            node, "Shape", f"Invalid input data, failed to load series shape. Series={series_name}"
        )
        shape = Shape.from_code(shape_code, series_name)

        if series_name == group_name:
            name, label = group_name, ""
        else:
            name, label = series_name, group_name

        samples: list[Sample] = []
        previous_code = -1
        for day_name in node.keys():
            code = _day_code(day_name)
            if code is None:
                raise SeriesError(
                    f"Invalid input data, unexpected trading day. Series={series_name} TradingDay={day_name}"
                )
            if code <= previous_code:
                raise SeriesError(
                    "Invalid input data, trading day is not greater than previous. "
                    f"Series={series_name} TradingDay={day_name} PrevTradingDay={previous_code // 10}"
                )
            previous_code = code

            dataset = node.get(day_name)
            if not isinstance(dataset, h5py.Dataset):
                raise StructuralError(
                    f"Invalid input data, failed to open dataset. Series={series_name} TradingDay={day_name}"
                )
            samples.extend(self._read_day(series_name, code, dataset))

        if not samples:
            raise SeriesError(f"Invalid input data, series has no data. Series={series_name}")

        centre = _resolve_centre(centre_code, samples)
        points = transform_samples(name, samples, index, shape, centre)
        if not points:
            logger.debug("series_dropped_empty", series=name, group=label, shape=shape.name)
            return None

        logger.debug(
            "series_loaded",
            series=name,
            group=label,
            shape=shape.name,
            samples=len(samples),
            points=len(points),
        )
        return Series(name=name, group=label, axis_centre=centre, shape=shape, points=tuple(points))

    @staticmethod
    def _read_day(series_name: str, code: int, dataset: h5py.Dataset) -> list[Sample]:
        day = _date_from_code(code)
        if day == DISTANT_PAST:
            raise SeriesError(f"Invalid input data, unexpected trading day. Series={series_name} Date={code // 10}")

        values = _read_integers(
            dataset, f"Invalid input data, day values are not integers. Series={series_name} Date={code // 10}"
        )
        if len(values) % 2:
            raise StructuralError(
                f"Invalid input data, unexpected number of integer values. Series={series_name} Date={code // 10}"
            )
        return [
            Sample(day + milliseconds(offset_ms), Fixpoint.from_raw(raw))
            for offset_ms, raw in zip(values[0::2], values[1::2])
        ]
