"""Input format decoders and the validated loader surface.

Provides the PlotDecoder interface, the flat-buffer and HDF5 adapters,
the bounds-checked byte cursor, DataLoader, and the extension-keyed
factory used to open plot files.
"""

from mdview.loaders.base import DecodedPlot, PlotDecoder
from mdview.loaders.cursor import ByteCursor
from mdview.loaders.factory import decoder_for, load_buffer, load_store, open_plot
from mdview.loaders.flat import FlatBufferDecoder
from mdview.loaders.hdf5 import HierarchicalStoreDecoder
from mdview.loaders.loader import DataLoader
from mdview.loaders.source import mapped_file

__all__ = [
    "ByteCursor",
    "DataLoader",
    "DecodedPlot",
    "FlatBufferDecoder",
    "HierarchicalStoreDecoder",
    "PlotDecoder",
    "decoder_for",
    "load_buffer",
    "load_store",
    "open_plot",
    "mapped_file",
]
