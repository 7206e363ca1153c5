"""In-memory renderer that records everything published to it.

Used by headless consumers (exports, checks) and by the test suite in place
of a GUI renderer.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from mdview.chart.interface import ChartRenderer, SeriesSink
from mdview.fixpoint import Fixpoint
from mdview.time import Interval, Timestamp


@dataclass
class RecordedSeries(SeriesSink):
    """Points received for one series."""

    name: str
    group: str
    axis_centre: Fixpoint | None
    points: list[tuple[int, float]] = field(default_factory=list)
    committed: bool = False

    def append(self, index: int, value: float) -> None:
        if self.committed:
            raise RuntimeError(f"Series {self.name} is already committed")
        self.points.append((index, value))

    def commit(self) -> None:
        self.committed = True


@dataclass
class ChartSnapshot:
    """Everything a chart received before ``show``."""

    table: tuple[int, ...] = ()
    index_to_time: Callable[[float], Timestamp] | None = None
    time_tick: Interval = Interval()
    horizontal_range: int = 0
    series: list[RecordedSeries] = field(default_factory=list)
    shown: bool = False

    def find(self, name: str, group: str = "") -> RecordedSeries | None:
        for recorded in self.series:
            if recorded.name == name and recorded.group == group:
                return recorded
        return None


class RecordingRenderer(ChartRenderer):
    """ChartRenderer keeping published data in a ChartSnapshot."""

    def __init__(self) -> None:
        self.snapshot = ChartSnapshot()

    def add_segments(self, index_to_time: Callable[[float], Timestamp], table: Sequence[int]) -> None:
        self.snapshot.index_to_time = index_to_time
        self.snapshot.table = tuple(table)

    def set_time_tick(self, tick: Interval) -> None:
        self.snapshot.time_tick = tick

    def set_horizontal_range(self, length: int) -> None:
        self.snapshot.horizontal_range = length

    def create_series(self, axis_centre: Fixpoint | None, name: str, group: str) -> RecordedSeries:
        recorded = RecordedSeries(name=name, group=group, axis_centre=axis_centre)
        self.snapshot.series.append(recorded)
        return recorded

    def show(self) -> None:
        self.snapshot.shown = True
