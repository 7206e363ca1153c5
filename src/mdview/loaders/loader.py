"""Validated plot data exposed to the renderer.

DataLoader runs one decoder over one source synchronously. A load either
succeeds completely or leaves the loader invalid with a human-readable
reason; an invalid loader never exposes series. After construction the
loader is immutable and safe to read from several threads.
"""

from collections.abc import Callable

from mdview.exceptions import LoaderError
from mdview.fixpoint import Fixpoint
from mdview.loaders.base import DecodedPlot, PlotDecoder
from mdview.logging import get_logger
from mdview.models import Point, Segment, Series
from mdview.time import DISTANT_PAST, Interval, Timestamp

logger = get_logger(__name__)

SeriesCallback = Callable[[str, str, Fixpoint | None, tuple[Point, ...]], None]


class DataLoader:
    """Result of a single load pass.

    Usage:
        loader = DataLoader.load(FlatBufferDecoder(), buffer)
        if loader.is_valid:
            loader.retrieve_series(on_series)
    """

    def __init__(self, plot: DecodedPlot | None, reason: str | None = None) -> None:
        self._plot = plot
        self._reason = reason

    @classmethod
    def load(cls, decoder: PlotDecoder, source: object, origin: str = "") -> "DataLoader":
        """Decode ``source`` and wrap the outcome.

        Validation failures are reported through ``reason`` and logged;
        they never propagate to the caller.
        """
        try:
            plot = decoder.decode(source)
        except LoaderError as exc:
            return cls.failed(str(exc), error=type(exc).__name__, format=decoder.format_name, origin=origin)

        logger.info(
            "plot_loaded",
            format=decoder.format_name,
            origin=origin,
            segments=len(plot.index.segments),
            series=len(plot.series),
            total_ticks=plot.index.total_ticks,
            display_range=plot.display_range,
        )
        return cls(plot)

    @classmethod
    def failed(cls, reason: str, **context: object) -> "DataLoader":
        """Build an invalid loader, logging the reason."""
        logger.warning("plot_load_failed", reason=reason, **context)
        return cls(None, reason)

    @property
    def is_valid(self) -> bool:
        return self._plot is not None and self._plot.display_range > 0 and bool(self._plot.series)

    @property
    def reason(self) -> str | None:
        """Why the load failed, or None for a valid loader."""
        return self._reason

    @property
    def plot(self) -> DecodedPlot | None:
        return self._plot if self.is_valid else None

    @property
    def time_tick(self) -> Interval:
        return self._plot.time_tick if self.is_valid else Interval()

    @property
    def display_range(self) -> int:
        return self._plot.display_range if self.is_valid else 0

    @property
    def index_table(self) -> tuple[int, ...]:
        return self._plot.index.table if self.is_valid else ()

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._plot.index.segments if self.is_valid else ()

    @property
    def series(self) -> tuple[Series, ...]:
        return self._plot.series if self.is_valid else ()

    def index_to_time(self, index: float) -> Timestamp:
        if not self.is_valid:
            return DISTANT_PAST
        return self._plot.index.index_to_time(index)

    def time_calculator(self) -> Callable[[float], Timestamp]:
        return self.index_to_time

    def retrieve_series(self, callback: SeriesCallback) -> None:
        """Call ``callback(name, group, axis_centre, points)`` for each series."""
        for series in self.series:
            callback(series.name, series.group, series.axis_centre, series.points)
