"""Dense index axis: segment compression and per-series shape transforms."""

from mdview.index.segments import SegmentIndex
from mdview.index.shapes import transform_samples

__all__ = [
    "SegmentIndex",
    "transform_samples",
]
