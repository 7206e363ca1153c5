"""Shared test fixtures for the market data viewer."""

from collections.abc import Callable
from pathlib import Path

import h5py
import numpy as np
import pytest

from mdview.config import AppSettings, LoaderSettings
from mdview.fixpoint import Fixpoint
from mdview.loaders.flat import HEADER, MAGIC, POINT, SEGMENT, SERIES_HEADER
from mdview.loaders.hdf5 import CENTRE_UNSET
from mdview.time import minutes

MINUTE_NS = minutes(1).nanos

# 2024-01-02 regular session, milliseconds since midnight
OPEN_MS = (9 * 60 + 30) * 60_000
CLOSE_MS = 16 * 60 * 60_000


@pytest.fixture
def app_settings() -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        log_format="console",
        loader=LoaderSettings(),
    )


@pytest.fixture
def flat_buffer() -> Callable[..., bytes]:
    """Return a builder for flat binary plot buffers.

    Each series is a dict with ``name``, optional ``group``, optional
    ``centre`` (raw int, int64 minimum when absent) and ``points`` as
    (time_ns, raw_value) pairs.
    """

    def build(
        segments: list[tuple[int, int]],
        series: list[dict],
        tick_ns: int = MINUTE_NS,
        range_ns: int = 390 * MINUTE_NS,
        magic: int = MAGIC,
        version: bytes = b"\x01\x00\x00\x00",
        num_series: int | None = None,
        trailing: bytes = b"",
    ) -> bytes:
        out = bytearray(
            HEADER.pack(
                magic,
                version,
                len(segments),
                len(series) if num_series is None else num_series,
                tick_ns,
                range_ns,
            )
        )
        for open_ns, close_ns in segments:
            out += SEGMENT.pack(open_ns, close_ns)
        for entry in series:
            name = entry["name"].encode()
            group = entry.get("group", "").encode()
            points = entry.get("points", [])
            out += SERIES_HEADER.pack(entry.get("centre", Fixpoint.MIN_RAW), len(points), len(name), len(group))
            out += name
            if group:
                out += b"\x00" + group
            out += b"\x00"
            out += b"\x00" * (-len(out) % 8)
            for time_ns, raw in points:
                out += POINT.pack(time_ns, raw)
        return bytes(out + trailing)

    return build


@pytest.fixture
def hdf5_store(tmp_path: Path) -> Callable[..., Path]:
    """Return a builder writing HDF5 plot stores into tmp_path.

    ``groups`` maps group name -> series name -> dict with ``centre``,
    ``shape`` and ``days`` (day name -> (offset_ms, raw) pairs). Days and
    groups keep their insertion order. The display range is in milliseconds.
    A centre, shape or display range of None omits the attribute; an empty
    ``segments`` list omits the dataset.
    """
    counter = iter(range(1_000))

    def build(
        groups: dict[str, dict[str, dict]],
        segments: list[tuple[int, int, int]] | None = None,
        display_range: int | None = CLOSE_MS - OPEN_MS,
    ) -> Path:
        path = tmp_path / f"plot_{next(counter)}.h5"
        if segments is None:
            segments = [(202401020, OPEN_MS, CLOSE_MS)]

        with h5py.File(path, "w", track_order=True) as handle:
            plot = handle.create_group("Plot", track_order=True)
            if display_range is not None:
                plot.attrs["DisplayRange"] = np.int32(display_range)
            if segments:
                plot.create_dataset("TradingSegments", data=np.asarray(segments, dtype=np.int32).reshape(-1))

            for group_name, members in groups.items():
                group = plot.create_group(group_name, track_order=True)
                for series_name, entry in members.items():
                    node = group.create_group(series_name, track_order=True)
                    centre = entry.get("centre", CENTRE_UNSET)
                    if centre is not None:
                        node.attrs["Centre"] = np.int32(centre)
                    shape = entry.get("shape", 1)
                    if shape is not None:
                        node.attrs["Shape"] = np.int32(shape)
                    for day_name, values in entry.get("days", {}).items():
                        node.create_dataset(day_name, data=np.asarray(values, dtype=np.int32).reshape(-1))
        return path

    return build
