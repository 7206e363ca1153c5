"""Shared data models for plot ingestion.

Raw samples carry a Timestamp and a Fixpoint value. After the shape
transform every series holds Points addressed by dense integer index.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple

from mdview.exceptions import SeriesError
from mdview.fixpoint import Fixpoint
from mdview.time import Timestamp


class Shape(IntEnum):
    """Visual transform applied to a series' raw samples."""

    CURVE = 1
    SPIKE = 2
    STEP = 3

    @classmethod
    def from_code(cls, code: int, series: str = "") -> "Shape":
        try:
            return cls(code)
        except ValueError:
            raise SeriesError(
                f"Invalid input data, unexpected data shape. Series={series} Shape={code}"
            ) from None


@dataclass(frozen=True)
class Segment:
    """One contiguous trading window, open inclusive and close inclusive."""

    open: Timestamp
    close: Timestamp


class Sample(NamedTuple):
    """A raw time-stamped value before the shape transform."""

    time: Timestamp
    value: Fixpoint


class Point(NamedTuple):
    """A renderer-ready vertex on the dense index axis."""

    index: int
    value: Fixpoint


@dataclass(frozen=True)
class Series:
    """A fully transformed series ready for the renderer.

    ``axis_centre`` is None when the series has no baseline.
    """

    name: str
    group: str
    axis_centre: Fixpoint | None
    shape: Shape
    points: tuple[Point, ...]
