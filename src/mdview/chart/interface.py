"""Abstract chart renderer interface.

The loader hands validated data to any implementation of these interfaces.
Rendering itself (widgets, axes, painting) lives outside this package.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from mdview.fixpoint import Fixpoint
from mdview.time import Interval, Timestamp


class SeriesSink(ABC):
    """Receives the points of one series in index order."""

    @abstractmethod
    def append(self, index: int, value: float) -> None:
        """Add one point on the dense index axis."""
        ...

    @abstractmethod
    def commit(self) -> None:
        """Signal that all points of the series were appended."""
        ...


class ChartRenderer(ABC):
    """Abstract base class for chart renderers.

    ``publish`` calls the methods in this order: ``add_segments``,
    ``set_time_tick``, ``set_horizontal_range``, one ``create_series`` per
    series, then ``show``.
    """

    @abstractmethod
    def add_segments(self, index_to_time: Callable[[float], Timestamp], table: Sequence[int]) -> None:
        """Register the index table and the function mapping indices back to time."""
        ...

    @abstractmethod
    def set_time_tick(self, tick: Interval) -> None:
        ...

    @abstractmethod
    def set_horizontal_range(self, length: int) -> None:
        """Set the visible window length in index units."""
        ...

    @abstractmethod
    def create_series(self, axis_centre: Fixpoint | None, name: str, group: str) -> SeriesSink:
        """Create a series, optionally with a baseline value for its axis."""
        ...

    @abstractmethod
    def show(self) -> None:
        ...
