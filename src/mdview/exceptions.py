"""Custom exceptions for the market data loaders.

Every validation failure during a load pass raises one of these. The
loader boundary (DataLoader) catches LoaderError, reports the reason and
leaves the loader in an invalid "no data" state.
"""


class LoaderError(Exception):
    """Base exception for all load-pass validation failures."""


class FormatError(LoaderError):
    """Raised when a flat buffer is malformed (magic, truncation, trailing bytes)."""


class StructuralError(LoaderError):
    """Raised when hierarchical store groups, datasets or attributes are missing or malformed."""


class SegmentError(LoaderError):
    """Raised when trading segments are empty, overlapping or not tick aligned."""


class SeriesError(LoaderError):
    """Raised when series samples are out of order, out of bounds or misaligned."""
