"""File-system collaborator used by the graph codec.

The core only ever needs whole-file reads and writes. Failures surface
as ``OSError`` and are never translated by callers in this package.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger("buildgraph.fs")

PathLike = Union[str, Path]


class FileSystem(Protocol):
    """Byte-level read/write access to files."""

    def read_bytes(self, path: PathLike) -> bytes:
        ...

    def write_bytes(self, path: PathLike, data: bytes) -> None:
        ...


class LocalFileSystem:
    """FileSystem backed by the local disk.

    Parent directories are created on write.
    """

    def read_bytes(self, path: PathLike) -> bytes:
        data = Path(path).read_bytes()
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def write_bytes(self, path: PathLike, data: bytes) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), target)
