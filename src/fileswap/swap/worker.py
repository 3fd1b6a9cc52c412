"""Base class for the long-lived threads of a swap pipeline.

This module provides:
- WorkerState: Enum for worker lifecycle states
- CancelledException: Raised by a worker that stops because of a fault elsewhere
- PipelineWorker: Abstract base class for pipeline threads
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from enum import Enum, auto

from fileswap.core.types import SwapError, SwapIOError
from fileswap.swap.signal import ErrorSignal

logger = logging.getLogger(__name__)

# Seconds between error signal checks while a worker is blocked on a queue
POLL_INTERVAL = 0.05


class WorkerState(Enum):
    """State of a worker."""

    IDLE = auto()
    RUNNING = auto()
    COMPLETED = auto()
    CANCELLED = auto()
    FAILED = auto()


class CancelledException(Exception):
    """Raised when a worker stops because the error signal is set."""


class PipelineWorker(ABC):
    """Thread wrapper shared by forwarders and sinks.

    Any exception escaping ``_do_work`` is deposited into the error signal
    (wrapped into ``SwapIOError`` unless it already is a ``SwapError``), so
    the orchestrator always learns about it and no peer waits forever.

    Subclasses must implement:
    - _do_work(): The thread body; raise CancelledException to stop on a fault
    - worker_type: Property returning the worker type name
    """

    def __init__(self, name: str, signal: ErrorSignal) -> None:
        """Initialize the worker.

        Args:
            name: Human-readable name used for the thread and in logs.
            signal: Error signal shared by every thread of the swap.
        """
        self.name = name
        self._signal = signal
        self._worker_state = WorkerState.IDLE
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self.elapsed_time = 0.0

    @property
    @abstractmethod
    def worker_type(self) -> str:
        """Return the worker type name (e.g., 'sink', 'forwarder')."""
        ...

    @property
    def state(self) -> WorkerState:
        """Get current worker state."""
        return self._worker_state

    @property
    def is_running(self) -> bool:
        """Check if worker is currently running."""
        return self._worker_state == WorkerState.RUNNING

    def cancel_check(self) -> bool:
        """Check if the swap was faulted."""
        return self._signal.is_set()

    def start(self) -> None:
        """Start the worker thread."""
        with self._lock:
            if self._thread is not None:
                logger.warning(f"{self.worker_type} {self.name}: already started")
                return
            self._worker_state = WorkerState.RUNNING
            self._thread = threading.Thread(
                target=self._execute,
                name=f"{self.worker_type}-{self.name}",
                daemon=True,
            )
            self._thread.start()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread to finish.

        Args:
            timeout: Maximum seconds to wait, None to wait indefinitely.

        Returns:
            True if the thread finished (or never started).
        """
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _execute(self) -> None:
        start_time = time.monotonic()
        try:
            self._do_work()
            self._worker_state = WorkerState.COMPLETED

        except CancelledException:
            self._worker_state = WorkerState.CANCELLED
            logger.debug(f"{self.worker_type} {self.name}: stopped on fault")

        except Exception as e:
            self._worker_state = WorkerState.FAILED
            self._report(e)

        finally:
            self.elapsed_time = time.monotonic() - start_time

    def _report(self, error: Exception) -> None:
        """Log an error and deposit it into the error signal."""
        logger.error(f"{self.worker_type} {self.name} failed: {error}")
        if not isinstance(error, SwapError):
            wrapped = SwapIOError(f"{self.worker_type} {self.name}: {error}")
            wrapped.__cause__ = error
            error = wrapped
        self._signal.try_set(error)

    @abstractmethod
    def _do_work(self) -> None:
        """Run the worker body.

        Implementations must check ``cancel_check()`` regularly and raise
        CancelledException when it returns True.

        Raises:
            CancelledException: If the swap was faulted elsewhere.
            Exception: Any other error, deposited into the error signal.
        """
        ...
