"""Sinks writing a byte stream into a file with positioned writes.

This module provides:
- BufferedSink: Accumulates received bytes into fixed-size write blocks
- UnbufferedSink: Reference variant issuing one write per byte

Each sink owns its destination offset, which starts at 0 and only moves
forward, so one sink's writes are in order and contiguous. The destination
descriptor is shared with the reader of the same file; positioned writes do
not move the file position used by that reader.
"""

from __future__ import annotations

import logging
import os
import queue

from fileswap.core.types import SwapIOError
from fileswap.swap.signal import ErrorSignal
from fileswap.swap.stream import ByteStream
from fileswap.swap.worker import POLL_INTERVAL, CancelledException, PipelineWorker

logger = logging.getLogger(__name__)


class BufferedSink(PipelineWorker):
    """Writes a stream of bytes into a file in blocks of ``block_size``.

    Full blocks are written as soon as they fill. When the stream closes,
    a remaining partial block is written once, without padding. The error
    signal is checked before every received segment; when it is set the
    sink stops without consuming that segment.

    Usage:
        sink = BufferedSink(reader.fileno(), stream, signal, block_size=4096)
        sink.start()
        ...
        sink.join()
    """

    def __init__(
        self,
        fd: int,
        stream: ByteStream,
        signal: ErrorSignal,
        block_size: int,
        name: str = "",
    ) -> None:
        """Initialize the sink.

        Args:
            fd: Descriptor of the destination file, open for writing.
            stream: Inbound stream of bytes.
            signal: Error signal shared by the swap.
            block_size: Bytes per positioned write (>= 1).
            name: Name used in logs, usually the destination file name.
        """
        if block_size < 1:
            raise ValueError(f"Invalid block size: {block_size}")
        super().__init__(name or f"fd{fd}", signal)
        self._fd = fd
        self._stream = stream
        self._block_size = block_size
        self._buf = bytearray(block_size)
        self._filled = 0
        self._offset = 0
        self.bytes_received = 0
        self.writes = 0

    @property
    def worker_type(self) -> str:
        """Return worker type name."""
        return "sink"

    @property
    def block_size(self) -> int:
        """Bytes per positioned write."""
        return self._block_size

    @property
    def offset(self) -> int:
        """Destination offset of the next write (= bytes written so far)."""
        return self._offset

    @property
    def pending(self) -> int:
        """Bytes received but not yet written."""
        return self._filled

    def _do_work(self) -> None:
        """Consume the stream until it closes or the swap is faulted."""
        while True:
            if self.cancel_check():
                raise CancelledException()
            try:
                segment = self._stream.receive(timeout=POLL_INTERVAL)
            except queue.Empty:
                continue

            if segment is None:
                break
            if self.cancel_check():
                raise CancelledException()
            self.bytes_received += len(segment)
            self._consume(segment)

        self._flush_tail()
        logger.debug(
            f"sink {self.name}: wrote {self._offset} bytes in {self.writes} writes"
        )

    def _consume(self, segment: bytes) -> None:
        view = memoryview(segment)
        pos = 0
        while pos < len(view):
            take = min(self._block_size - self._filled, len(view) - pos)
            self._buf[self._filled : self._filled + take] = view[pos : pos + take]
            self._filled += take
            pos += take
            if self._filled == self._block_size:
                self._write_at(self._buf, self._offset)
                self._offset += self._block_size
                self._filled = 0

    def _flush_tail(self) -> None:
        if 0 < self._filled < self._block_size:
            self._write_at(memoryview(self._buf)[: self._filled], self._offset)
            self._offset += self._filled
            self._filled = 0

    def _write_at(self, data: bytes | bytearray | memoryview, offset: int) -> None:
        """Write all of ``data`` at ``offset`` in the destination file.

        Raises:
            SwapIOError: If the write fails.
        """
        view = memoryview(data)
        written = 0
        try:
            while written < len(view):
                written += os.pwrite(self._fd, view[written:], offset + written)
        except OSError as e:
            raise SwapIOError(
                f"Write failed on {self.name} at offset {offset + written}: {e}"
            ) from e
        self.writes += 1


class UnbufferedSink(BufferedSink):
    """Sink issuing one positioned write per received byte.

    Much slower than BufferedSink; kept as a reference implementation for
    verification runs (write block size 1).
    """

    def __init__(
        self,
        fd: int,
        stream: ByteStream,
        signal: ErrorSignal,
        block_size: int = 1,
        name: str = "",
    ) -> None:
        if block_size != 1:
            raise ValueError("UnbufferedSink always writes single bytes")
        super().__init__(fd, stream, signal, 1, name)

    def _consume(self, segment: bytes) -> None:
        for i in range(len(segment)):
            if self.cancel_check():
                raise CancelledException()
            self._write_at(segment[i : i + 1], self._offset)
            self._offset += 1


def create_sink(
    fd: int,
    stream: ByteStream,
    signal: ErrorSignal,
    block_size: int,
    name: str = "",
) -> BufferedSink:
    """Create the sink matching a write block size.

    Args:
        fd: Descriptor of the destination file.
        stream: Inbound stream of bytes.
        signal: Error signal shared by the swap.
        block_size: Bytes per write; 1 selects UnbufferedSink.

    Returns:
        A sink that has not been started yet.
    """
    if block_size == 1:
        return UnbufferedSink(fd, stream, signal, name=name)
    return BufferedSink(fd, stream, signal, block_size, name=name)
