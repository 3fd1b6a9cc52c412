"""Bounded byte stream connecting a forwarder to a sink.

This module provides:
- ByteStream: Bounded FIFO of byte segments with an end-of-input marker

Senders block while the stream is full (backpressure against the sink).
Blocking calls wake up every POLL_INTERVAL to run a cancellation check, so a
sender never stays blocked on a sink that stopped because of a fault.
"""

from __future__ import annotations

import queue
from collections.abc import Callable

from fileswap.swap.worker import POLL_INTERVAL

# Maximum number of segments buffered between a forwarder and its sink
STREAM_DEPTH = 4

_END = None  # end-of-input marker


def _never() -> bool:
    return False


class ByteStream:
    """Bounded stream of byte segments, closed once by its sender.

    Usage:
        stream = ByteStream()
        stream.send(b"abc", cancel_check=signal.is_set)   # sender thread
        stream.close(cancel_check=signal.is_set)

        segment = stream.receive(timeout=0.1)             # receiver thread
        # bytes -> data, None -> closed, queue.Empty -> nothing yet
    """

    def __init__(self, depth: int = STREAM_DEPTH) -> None:
        """Initialize the stream.

        Args:
            depth: Maximum number of segments waiting for the receiver.
        """
        self._queue: queue.Queue[bytes | None] = queue.Queue(maxsize=depth)
        self._closed = False
        self.bytes_sent = 0
        self.segments_sent = 0

    @property
    def closed(self) -> bool:
        """Check if the sender closed the stream."""
        return self._closed

    def send(self, segment: bytes, cancel_check: Callable[[], bool] = _never) -> bool:
        """Send one segment, blocking while the stream is full.

        Args:
            segment: Bytes to send. Must not be a view over a reused buffer.
            cancel_check: Returns True when sending should be abandoned.

        Returns:
            True if the segment was queued, False if cancelled first.

        Raises:
            RuntimeError: If the stream is already closed.
        """
        if self._closed:
            raise RuntimeError("Stream is closed")
        if not self._put(segment, cancel_check):
            return False
        self.bytes_sent += len(segment)
        self.segments_sent += 1
        return True

    def close(self, cancel_check: Callable[[], bool] = _never) -> bool:
        """Signal the receiver that no more input is coming.

        Returns:
            True if the end-of-input marker was queued, False if cancelled first.
        """
        if self._closed:
            return True
        if not self._put(_END, cancel_check):
            return False
        self._closed = True
        return True

    def receive(self, timeout: float | None = None) -> bytes | None:
        """Take the next segment.

        Args:
            timeout: Maximum seconds to wait, None to wait indefinitely.

        Returns:
            The next segment, or None once the stream is closed.

        Raises:
            queue.Empty: If nothing arrived within the timeout.
        """
        return self._queue.get(timeout=timeout)

    def _put(self, item: bytes | None, cancel_check: Callable[[], bool]) -> bool:
        while True:
            if cancel_check():
                return False
            try:
                self._queue.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                continue

    def __len__(self) -> int:
        return self._queue.qsize()
