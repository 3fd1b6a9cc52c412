"""Sequential block reader over one file taking part in a swap.

This module provides:
- BlockReader: Offset-tracked reader producing fixed-size blocks

The reader opens its file for reading and writing: the sink that writes the
other file's content into this file uses the same descriptor (see
``fileno()``). Reads go through ``seek`` + ``readinto`` on the orchestrator
thread only, while sinks use positioned writes, which leave the file position
untouched.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import BinaryIO

from fileswap.core.types import ByteBlock, OpenError, SwapIOError, TruncateError

logger = logging.getLogger(__name__)


class BlockReader:
    """Reads a file block by block from offset 0 up to its size at open time.

    Usage:
        with BlockReader.open(path, 4096) as reader:
            while not reader.at_end:
                block = reader.read_block()
                consume(block.data[:block.length])
    """

    def __init__(self, path: Path, file: BinaryIO, size: int, block_size: int) -> None:
        """Initialize the reader. Use ``BlockReader.open`` instead.

        Args:
            path: Absolute path of the file.
            file: Unbuffered binary file object opened for read/write.
            size: Length of the file when it was opened.
            block_size: Number of bytes per read.
        """
        self.path = path
        self._file: BinaryIO | None = file
        self._size = size
        self._offset = 0
        self._eof = False
        self._buf = bytearray(block_size)
        self._view = memoryview(self._buf)

    @classmethod
    def open(cls, path: str | Path, block_size: int) -> BlockReader:
        """Open a file for block reading.

        Args:
            path: File to open. Must exist and be a regular file.
            block_size: Number of bytes per read (>= 1).

        Returns:
            An open BlockReader positioned at offset 0.

        Raises:
            OpenError: If the arguments are invalid or the file cannot be
                opened for reading and writing.
        """
        if not str(path):
            raise OpenError("Invalid file name: empty path")
        if block_size < 1:
            raise OpenError(f"Invalid block size: {block_size}")

        abs_path = Path(path).absolute()
        try:
            file = open(abs_path, "r+b", buffering=0)
        except OSError as e:
            raise OpenError(f"Cannot open {abs_path}: {e.strerror or e}") from e

        try:
            st = os.fstat(file.fileno())
        except OSError as e:
            file.close()
            raise OpenError(f"Cannot stat {abs_path}: {e.strerror or e}") from e

        if not stat.S_ISREG(st.st_mode):
            file.close()
            raise OpenError(f"Not a regular file: {abs_path}")

        logger.debug(f"Opened {abs_path} ({st.st_size} bytes, block size {block_size})")
        return cls(abs_path, file, st.st_size, block_size)

    @property
    def size(self) -> int:
        """Size of the file captured at open time (or after truncate)."""
        return self._size

    @property
    def offset(self) -> int:
        """Offset of the next read."""
        return self._offset

    @property
    def block_size(self) -> int:
        """Number of bytes requested per read."""
        return len(self._buf)

    @property
    def at_end(self) -> bool:
        """Check if the reader reached end-of-stream."""
        return self._eof

    @property
    def closed(self) -> bool:
        """Check if the file handle was released."""
        return self._file is None

    def fileno(self) -> int:
        """Return the descriptor of the underlying file."""
        return self._require_open().fileno()

    def read_block(self) -> ByteBlock:
        """Read the next block at the current offset.

        Never reads past ``size``. The returned block may be shorter than
        ``block_size``; use ``block.length``.

        Returns:
            ByteBlock viewing the reusable buffer.

        Raises:
            SwapIOError: If the read fails.
        """
        file = self._require_open()
        wanted = min(len(self._buf), max(self._size - self._offset, 0))
        start = self._offset

        n = 0
        if wanted > 0:
            try:
                file.seek(start)
                n = file.readinto(self._view[:wanted]) or 0
            except OSError as e:
                raise SwapIOError(f"Read failed on {self.path} at offset {start}: {e}") from e

        self._offset += n
        if n == 0 or self._offset >= self._size:
            self._eof = True

        return ByteBlock(data=self._view[:n], length=n, offset=start)

    def rewind(self, offset: int = 0) -> None:
        """Move the read cursor, for verification passes.

        Negative offsets are ignored. End-of-stream is recomputed against the
        current size.

        Args:
            offset: New read offset.
        """
        if offset < 0:
            return
        self._offset = offset
        self._eof = offset >= self._size

    def truncate(self, new_size: int) -> None:
        """Truncate (or extend) the underlying file and update ``size``.

        Args:
            new_size: Final length in bytes.

        Raises:
            TruncateError: If the file cannot be resized.
        """
        try:
            os.ftruncate(self.fileno(), new_size)
        except (OSError, ValueError) as e:
            raise TruncateError(f"Cannot truncate {self.path} to {new_size} bytes: {e}") from e
        self._size = new_size

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def _require_open(self) -> BinaryIO:
        if self._file is None:
            raise ValueError(f"Reader for {self.path} is closed")
        return self._file

    def __enter__(self) -> BlockReader:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"BlockReader({self.path.name!r}, offset={self._offset}, size={self._size})"
