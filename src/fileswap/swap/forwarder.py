"""Forwarding stage between the orchestrator and a sink.

This module provides:
- Forwarder: Long-lived thread moving each round's block onto a ByteStream

The orchestrator hands one block per round to each forwarder and then waits
on ``wait_round()`` for both, which is the per-round barrier. Every submitted
block is acknowledged, whether it was forwarded in full or abandoned because
the error signal was set, so the barrier never hangs.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass

from fileswap.core.types import ByteBlock
from fileswap.swap.signal import ErrorSignal
from fileswap.swap.stream import ByteStream
from fileswap.swap.worker import CancelledException, PipelineWorker

logger = logging.getLogger(__name__)


@dataclass
class _Submission:
    data: memoryview
    last: bool


class Forwarder(PipelineWorker):
    """Forwards blocks onto a sink's stream in segments of ``segment_size``.

    Each segment is copied out of the block before it is sent, because the
    block views a buffer the reader reuses on its next read. The error
    signal is checked before every segment.

    Usage:
        forwarder = Forwarder(stream, signal, segment_size=4096, name="a->b")
        forwarder.start()
        forwarder.submit(block, last=reader.at_end)
        forwarder.wait_round()
        ...
        forwarder.stop()
        forwarder.join()
    """

    def __init__(
        self,
        stream: ByteStream,
        signal: ErrorSignal,
        segment_size: int,
        name: str = "",
    ) -> None:
        """Initialize the forwarder.

        Args:
            stream: Outbound stream feeding a sink.
            signal: Error signal shared by the swap.
            segment_size: Maximum bytes per stream segment (>= 1).
            name: Name used in logs, e.g. "a->b".
        """
        if segment_size < 1:
            raise ValueError(f"Invalid segment size: {segment_size}")
        super().__init__(name or "forwarder", signal)
        self._stream = stream
        self._segment_size = segment_size
        self._blocks: queue.Queue[_Submission | None] = queue.Queue(maxsize=1)
        self.bytes_forwarded = 0
        self.blocks_forwarded = 0
        self.abandoned = False

    @property
    def worker_type(self) -> str:
        """Return worker type name."""
        return "forwarder"

    @property
    def stream(self) -> ByteStream:
        """Outbound stream."""
        return self._stream

    def submit(self, block: ByteBlock, last: bool = False) -> None:
        """Hand over this round's block.

        The block's buffer must stay untouched until ``wait_round()``
        returns.

        Args:
            block: Block read in this round (may be empty).
            last: Close the stream after forwarding this block.
        """
        self._blocks.put(_Submission(block.data[: block.length], last))

    def wait_round(self) -> None:
        """Block until every submitted block was forwarded or abandoned.

        Untimed: every block is acknowledged with ``task_done`` even when
        forwarding fails, and stream sends give up once the signal is set.
        """
        self._blocks.join()

    def stop(self) -> None:
        """Ask the thread to exit once pending blocks are acknowledged."""
        self._blocks.put(None)

    def _do_work(self) -> None:
        """Serve submissions until stopped."""
        while True:
            item = self._blocks.get()
            try:
                if item is None:
                    break
                self._forward(item)
            except Exception as e:
                self.abandoned = True
                self._report(e)
            finally:
                self._blocks.task_done()

        if self.abandoned:
            raise CancelledException()

    def _forward(self, item: _Submission) -> None:
        data = item.data
        for pos in range(0, len(data), self._segment_size):
            segment = bytes(data[pos : pos + self._segment_size])
            if not self._stream.send(segment, self.cancel_check):
                self.abandoned = True
                logger.debug(
                    f"forwarder {self.name}: abandoned block at {pos}/{len(data)} bytes"
                )
                return
            self.bytes_forwarded += len(segment)

        self.blocks_forwarded += 1
        if item.last:
            if not self._stream.close(self.cancel_check):
                self.abandoned = True
                return
            logger.debug(f"forwarder {self.name}: stream closed after {self.bytes_forwarded} bytes")
