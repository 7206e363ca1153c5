"""Scoped read-only access to input files."""

import mmap
from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike


@contextmanager
def mapped_file(path: "str | PathLike[str]") -> Iterator[bytes]:
    """Memory-map ``path`` read-only for the duration of the block.

    The mapping and the file descriptor are released exactly once on every
    exit path. Empty files yield an empty bytes object since they cannot be
    mapped.

    Raises:
        OSError: When the file cannot be opened or mapped.
    """
    with open(path, "rb") as handle:
        handle.seek(0, 2)
        if handle.tell() == 0:
            yield b""
            return
        with mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ) as mapping:
            yield mapping
