"""Swap orchestrator: exchanges the contents of two files in bounded memory.

This module provides:
- SwapState: Enum for the orchestrator lifecycle
- SidePipeline: Forwarder + sink carrying one file's content into the other
- FileSwapper: Drives both pipelines in lock-step rounds
- swap_files: Convenience entry point

Architecture:
    reader A -> Forwarder(a->b) -> ByteStream -> Sink writing file B
    reader B -> Forwarder(b->a) -> ByteStream -> Sink writing file A

    Each round the orchestrator reads one block from every reader that is
    not exhausted, hands the blocks to the forwarders and waits until both
    acknowledged them. A sink only writes bytes that were read from the
    other file, at offsets its own file's reader already passed, so no byte
    is overwritten before it was read.

    After both readers are exhausted (or a fault was signalled) the
    pipelines drain, then each file is truncated to the other file's
    original size.
"""

from __future__ import annotations

import contextlib
import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from fileswap.core.config import DEFAULT_READ_BLOCK_SIZE, DEFAULT_WRITE_BLOCK_SIZE
from fileswap.core.types import (
    SwapError,
    SwapIOError,
    SwapResult,
    TruncateError,
    VerificationError,
)
from fileswap.swap.forwarder import Forwarder
from fileswap.swap.reader import BlockReader
from fileswap.swap.signal import ErrorSignal
from fileswap.swap.sink import BufferedSink, create_sink
from fileswap.swap.stream import STREAM_DEPTH, ByteStream
from fileswap.swap.verify import compute_reader_hash

logger = logging.getLogger(__name__)


class SwapState(Enum):
    """State of a swap."""

    PENDING = auto()
    RUNNING = auto()
    DRAINING = auto()
    RECONCILING = auto()
    DONE = auto()
    FAILED = auto()


@dataclass
class SidePipeline:
    """Stages carrying the content of ``source`` into ``destination``."""

    name: str
    source: BlockReader
    destination: BlockReader
    stream: ByteStream
    forwarder: Forwarder
    sink: BufferedSink

    def start(self) -> None:
        """Start the sink, then the forwarder."""
        self.sink.start()
        self.forwarder.start()

    def stop(self) -> None:
        """Stop the forwarder and wait for both threads."""
        self.forwarder.stop()
        self.forwarder.join()
        self.sink.join()


class FileSwapper:
    """Exchanges the contents of two files.

    Usage:
        swapper = FileSwapper(path_a, path_b, read_block_size=64, write_block_size=32)
        result = swapper.run()  # raises SwapError on failure
    """

    def __init__(
        self,
        path_a: str | Path,
        path_b: str | Path,
        read_block_size: int = DEFAULT_READ_BLOCK_SIZE,
        write_block_size: int = DEFAULT_WRITE_BLOCK_SIZE,
        *,
        verify: bool = False,
        strict_truncate: bool = False,
        stream_depth: int = STREAM_DEPTH,
    ) -> None:
        """Initialize the swapper.

        Args:
            path_a: First file.
            path_b: Second file.
            read_block_size: Bytes read from each file per round (>= 1).
            write_block_size: Bytes per positioned write (>= 1); 1 selects
                the unbuffered reference sink.
            verify: Hash both files before the swap and check the result.
            strict_truncate: Fail the swap when final truncation fails
                instead of only logging it.
            stream_depth: Segments buffered between forwarder and sink.
        """
        if write_block_size < 1:
            raise ValueError(f"Invalid write block size: {write_block_size}")
        self.path_a = Path(path_a)
        self.path_b = Path(path_b)
        self._read_block_size = read_block_size
        self._write_block_size = write_block_size
        self._verify = verify
        self._strict_truncate = strict_truncate
        self._stream_depth = stream_depth

        self.signal = ErrorSignal()
        self.rounds = 0
        self.to_a: SidePipeline | None = None  # writes into file A
        self.to_b: SidePipeline | None = None  # writes into file B
        self._swap_state = SwapState.PENDING

    @property
    def state(self) -> SwapState:
        """Get current swap state."""
        return self._swap_state

    def _set_state(self, state: SwapState) -> None:
        logger.debug(f"Swap state: {self._swap_state.name} -> {state.name}")
        self._swap_state = state

    def run(self) -> SwapResult:
        """Perform the swap.

        Returns:
            SwapResult describing the completed swap.

        Raises:
            OpenError: If either file cannot be opened.
            SwapIOError: If a read or write failed during the swap.
            TruncateError: If strict truncation is enabled and failed.
            VerificationError: If verification is enabled and failed.
        """
        if self._swap_state != SwapState.PENDING:
            raise RuntimeError("A FileSwapper can only run once")

        start_time = time.monotonic()
        logger.info(f"Swapping {self.path_a} <-> {self.path_b}")

        with contextlib.ExitStack() as stack:
            reader_a = stack.enter_context(BlockReader.open(self.path_a, self._read_block_size))
            reader_b = stack.enter_context(BlockReader.open(self.path_b, self._read_block_size))
            size_a, size_b = reader_a.size, reader_b.size

            digest_a = digest_b = None
            if self._verify:
                digest_a = compute_reader_hash(reader_a)
                digest_b = compute_reader_hash(reader_b)

            self.to_b = self._build_pipeline("a->b", reader_a, reader_b)
            self.to_a = self._build_pipeline("b->a", reader_b, reader_a)

            self._set_state(SwapState.RUNNING)
            try:
                self.to_a.start()
                self.to_b.start()
                self._run_rounds(reader_a, reader_b)
            except BaseException as e:
                self.signal.try_set(
                    e if isinstance(e, SwapError) else SwapIOError(f"Swap aborted: {e!r}")
                )
                if not isinstance(e, Exception):
                    raise
            finally:
                self._set_state(SwapState.DRAINING)
                self.to_a.stop()
                self.to_b.stop()

            self._set_state(SwapState.RECONCILING)
            self._reconcile(reader_a, size_b)
            self._reconcile(reader_b, size_a)

            error = self.signal.peek()
            if error is None and self._verify:
                error = self._check_digest(reader_a, digest_b) or self._check_digest(
                    reader_b, digest_a
                )

        elapsed = time.monotonic() - start_time
        if error is not None:
            self._set_state(SwapState.FAILED)
            logger.error(f"Swap failed after {self.rounds} rounds: {error}")
            raise error

        self._set_state(SwapState.DONE)
        logger.info(
            f"Swapped {self.path_a.name} ({size_a} bytes) and "
            f"{self.path_b.name} ({size_b} bytes) in {self.rounds} rounds, {elapsed:.3f}s"
        )
        return SwapResult(
            path_a=self.path_a,
            path_b=self.path_b,
            size_a=size_a,
            size_b=size_b,
            rounds=self.rounds,
            elapsed_time=elapsed,
            digest_a=digest_a,
            digest_b=digest_b,
        )

    def _build_pipeline(self, name: str, source: BlockReader, destination: BlockReader) -> SidePipeline:
        stream = ByteStream(self._stream_depth)
        sink = create_sink(
            destination.fileno(),
            stream,
            self.signal,
            self._write_block_size,
            name=destination.path.name,
        )
        forwarder = Forwarder(stream, self.signal, self._write_block_size, name=name)
        return SidePipeline(
            name=name,
            source=source,
            destination=destination,
            stream=stream,
            forwarder=forwarder,
            sink=sink,
        )

    def _run_rounds(self, reader_a: BlockReader, reader_b: BlockReader) -> None:
        """Read and forward blocks until both readers are exhausted or a fault occurs."""
        assert self.to_a is not None and self.to_b is not None
        sides = ((reader_a, self.to_b.forwarder), (reader_b, self.to_a.forwarder))

        while not (reader_a.at_end and reader_b.at_end):
            pending = []
            try:
                for reader, forwarder in sides:
                    if not reader.at_end:
                        block = reader.read_block()
                        pending.append((forwarder, block, reader.at_end))
            except SwapIOError as e:
                logger.error(f"Read failed in round {self.rounds}: {e}")
                self.signal.try_set(e)
                return

            for forwarder, block, last in pending:
                forwarder.submit(block, last=last)
            for forwarder, _, _ in pending:
                forwarder.wait_round()
            self.rounds += 1

            if self.signal.is_set():
                logger.debug(f"Fault observed after round {self.rounds}, draining")
                return

    def _reconcile(self, reader: BlockReader, new_size: int) -> None:
        try:
            reader.truncate(new_size)
        except TruncateError as e:
            if self._strict_truncate:
                self.signal.try_set(e)
            else:
                logger.warning(f"Ignoring truncate failure: {e}")

    def _check_digest(self, reader: BlockReader, expected: str | None) -> SwapError | None:
        try:
            actual = compute_reader_hash(reader)
        except SwapIOError as e:
            return e
        if actual != expected:
            return VerificationError(reader.path, expected or "", actual)
        return None


def swap_files(
    path_a: str | Path,
    path_b: str | Path,
    read_block_size: int = DEFAULT_READ_BLOCK_SIZE,
    write_block_size: int = DEFAULT_WRITE_BLOCK_SIZE,
    *,
    verify: bool = False,
    strict_truncate: bool = False,
) -> SwapResult:
    """Exchange the contents of two files.

    Args:
        path_a: First file.
        path_b: Second file.
        read_block_size: Bytes read from each file per round.
        write_block_size: Bytes per positioned write.
        verify: Hash both files before the swap and check the result.
        strict_truncate: Fail when final truncation fails.

    Returns:
        SwapResult describing the completed swap.

    Raises:
        SwapError: If the swap failed.
    """
    swapper = FileSwapper(
        path_a,
        path_b,
        read_block_size,
        write_block_size,
        verify=verify,
        strict_truncate=strict_truncate,
    )
    return swapper.run()
