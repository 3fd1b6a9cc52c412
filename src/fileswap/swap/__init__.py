"""Streaming swap pipeline.

This package exchanges the contents of two files in bounded memory:
- BlockReader: Offset-tracked block reader over one file
- ErrorSignal: First-error-wins fault cell shared by all threads
- ByteStream: Bounded stream between a forwarder and a sink
- Forwarder: Moves each round's block onto a sink's stream
- BufferedSink / UnbufferedSink: Positioned writes into the destination
- FileSwapper / swap_files: The orchestrator

Usage:
    from fileswap.swap import swap_files

    result = swap_files("1.log", "2.log", read_block_size=4096, write_block_size=4096)
"""

from fileswap.swap.forwarder import Forwarder
from fileswap.swap.orchestrator import FileSwapper, SidePipeline, SwapState, swap_files
from fileswap.swap.reader import BlockReader
from fileswap.swap.signal import ErrorSignal
from fileswap.swap.sink import BufferedSink, UnbufferedSink, create_sink
from fileswap.swap.stream import STREAM_DEPTH, ByteStream
from fileswap.swap.verify import compute_reader_hash
from fileswap.swap.worker import (
    POLL_INTERVAL,
    CancelledException,
    PipelineWorker,
    WorkerState,
)

__all__ = [
    # Reader
    "BlockReader",
    # Coordination
    "ErrorSignal",
    "ByteStream",
    "STREAM_DEPTH",
    "POLL_INTERVAL",
    # Workers
    "CancelledException",
    "PipelineWorker",
    "WorkerState",
    "Forwarder",
    "BufferedSink",
    "UnbufferedSink",
    "create_sink",
    # Orchestrator
    "FileSwapper",
    "SidePipeline",
    "SwapState",
    "swap_files",
    "compute_reader_hash",
]
