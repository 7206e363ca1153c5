"""Point shape transforms: raw (time, value) samples to (index, value) points.

Every sample is validated against the segment index first (strictly
increasing, inside a segment, aligned to the tick), then expanded according
to the series shape:

- CURVE: one point per sample.
- SPIKE: a three-point mark (centre, value, centre) around the sample,
  skipped when the value equals the centre.
- STEP: a flat run at the previous value ending one tick before the sample,
  then the new value.

Spike marks and step runs stay inside the sample's segment: at the segment
open they shift one tick right, at the close one tick left.
"""

from collections.abc import Iterator, Sequence

from mdview.exceptions import SeriesError
from mdview.fixpoint import Fixpoint
from mdview.index.segments import SegmentIndex
from mdview.models import Point, Sample, Shape


def _located(
    series: str, samples: Sequence[Sample], index: SegmentIndex
) -> Iterator[tuple[int, int, Fixpoint]]:
    """Yield (segment, tick offset, value) for each sample, validating as it goes."""
    position = 0
    previous = None
    for sample in samples:
        if previous is not None and sample.time <= previous.time:
            raise SeriesError(
                "Invalid input data, data time is supposed to be later than previous data time. "
                f"Series={series} Time={sample.time} PrevTime={previous.time}"
            )
        previous = sample
        position, offset = index.locate(sample.time, start=position, series=series)
        yield position, offset, sample.value


def _curve(located: Iterator[tuple[int, int, Fixpoint]], table: Sequence[int]) -> list[Point]:
    return [Point(table[position] + offset, value) for position, offset, value in located]


def _spike(
    located: Iterator[tuple[int, int, Fixpoint]],
    table: Sequence[int],
    centre: Fixpoint,
) -> list[Point]:
    points: list[Point] = []
    for position, offset, value in located:
        if value == centre:
            continue
        start, end = table[position], table[position + 1]
        if end - start < 2:
            # Segment too short to hold a mark without crossing its bounds
            continue
        first = min(max(start, start + offset - 1), end - 2)
        points.append(Point(first, centre))
        points.append(Point(first + 1, value))
        points.append(Point(first + 2, centre))
    return points


def _step(
    located: Iterator[tuple[int, int, Fixpoint]],
    table: Sequence[int],
    first_value: Fixpoint,
) -> list[Point]:
    points: list[Point] = []
    previous = first_value
    for position, offset, value in located:
        start = table[position] + offset - (1 if offset else 0)
        points.append(Point(start, previous))
        points.append(Point(start + 1, value))
        previous = value
    return points


def transform_samples(
    series: str,
    samples: Sequence[Sample],
    index: SegmentIndex,
    shape: Shape,
    centre: Fixpoint | None = None,
) -> list[Point]:
    """Validate a series' samples and expand them into renderer points.

    Args:
        series: Series name, used in error messages.
        samples: Time-ordered raw samples.
        index: Segment index the samples must fall inside.
        shape: Declared visual shape.
        centre: Baseline value, required for SPIKE.

    Returns:
        Points on the dense index axis. Empty when ``samples`` is empty.

    Raises:
        SeriesError: On the first invalid sample, or a SPIKE without centre.
    """
    if shape is Shape.SPIKE and centre is None:
        raise SeriesError(f"Invalid input data, spike series requires a centre value. Series={series}")
    if not samples:
        return []

    located = _located(series, samples, index)
    if shape is Shape.CURVE:
        return _curve(located, index.table)
    if shape is Shape.SPIKE:
        return _spike(located, index.table, centre)
    return _step(located, index.table, samples[0].value)
