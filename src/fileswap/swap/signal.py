"""Shared fault register for the threads of one swap."""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class ErrorSignal:
    """First-error-wins cell visible to every thread.

    ``peek()`` never removes the error, so any number of threads can observe
    the same fault. Errors deposited after the first one are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._set = threading.Event()
        self._error: BaseException | None = None

    def try_set(self, error: BaseException) -> bool:
        """Deposit an error if none is held yet.

        Args:
            error: The error to record.

        Returns:
            True if this error was recorded, False if another one was already held.
        """
        with self._lock:
            if self._error is not None:
                logger.debug(f"Dropping secondary error: {error!r}")
                return False
            self._error = error
            self._set.set()
        return True

    def peek(self) -> BaseException | None:
        """Return the recorded error without clearing it."""
        return self._error

    def is_set(self) -> bool:
        """Check if an error was recorded."""
        return self._set.is_set()

    def __repr__(self) -> str:
        return f"ErrorSignal(error={self._error!r})"
