"""Abstract plot decoder interface.

Defines the contract for all input formats. Each format is an independent
adapter producing the same DecodedPlot; the loader and the renderer depend
only on this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from mdview.index.segments import SegmentIndex
from mdview.models import Series
from mdview.time import Interval


@dataclass(frozen=True)
class DecodedPlot:
    """Everything a successful decode produces."""

    index: SegmentIndex
    display_range: int  # visible window length in index units
    series: tuple[Series, ...]
    version: bytes | None = None

    @property
    def time_tick(self) -> Interval:
        return self.index.time_tick


class PlotDecoder(ABC):
    """Abstract base class for input format decoders."""

    #: Short format name used in log events.
    format_name: str = ""

    @abstractmethod
    def decode(self, source: object) -> DecodedPlot:
        """Parse and validate ``source`` in a single synchronous pass.

        Raises:
            LoaderError: Any subclass, for the first validation failure.
        """
        ...
