"""Decoder selection and file loading.

Picks the decoder for an input by its file extension and runs the whole
load inside the scope that owns the input resource, so files are always
released before the loader is returned.
"""

from os import PathLike
from pathlib import Path

import h5py

from mdview.config import LoaderSettings
from mdview.loaders.base import PlotDecoder
from mdview.loaders.flat import FlatBufferDecoder
from mdview.loaders.hdf5 import HierarchicalStoreDecoder
from mdview.loaders.loader import DataLoader
from mdview.loaders.source import mapped_file
from mdview.time import milliseconds


def decoder_for(path: "str | PathLike[str]", settings: LoaderSettings | None = None) -> PlotDecoder:
    """Return the decoder registered for the file's extension.

    Unknown extensions fall back to ``settings.default_format``.
    """
    if settings is None:
        settings = LoaderSettings()

    suffix = Path(path).suffix.lower()
    if suffix in settings.hdf5_extensions:
        fmt = "hdf5"
    elif suffix in settings.flat_extensions:
        fmt = "flat"
    else:
        fmt = settings.default_format

    if fmt == "hdf5":
        return HierarchicalStoreDecoder(time_tick=milliseconds(settings.hdf5_time_tick_ms))
    return FlatBufferDecoder()


def open_plot(path: "str | PathLike[str]", settings: LoaderSettings | None = None) -> DataLoader:
    """Load a plot file of either format into a DataLoader.

    Files that cannot be opened or read produce an invalid loader whose
    reason carries the OS error.
    """
    decoder = decoder_for(path, settings)
    origin = str(path)
    try:
        if isinstance(decoder, HierarchicalStoreDecoder):
            return DataLoader.load(decoder, path, origin=origin)
        with mapped_file(path) as buffer:
            return DataLoader.load(decoder, buffer, origin=origin)
    except OSError as exc:
        return DataLoader.failed(
            f"Failed to open input data file {origin}. Error={exc}",
            error=type(exc).__name__,
            format=decoder.format_name,
            origin=origin,
        )


def load_buffer(buffer: bytes) -> DataLoader:
    """Load an in-memory flat buffer."""
    return DataLoader.load(FlatBufferDecoder(), buffer, origin="buffer")


def load_store(group: h5py.Group, settings: LoaderSettings | None = None) -> DataLoader:
    """Load from an already open HDF5 file or group; the caller keeps ownership."""
    if settings is None:
        settings = LoaderSettings()
    decoder = HierarchicalStoreDecoder(time_tick=milliseconds(settings.hdf5_time_tick_ms))
    return DataLoader.load(decoder, group, origin=group.name)
