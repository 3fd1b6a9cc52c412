"""Shared types and exceptions for swap operations.

This module provides:
- SwapError and its subclasses: the exception hierarchy of the package
- ByteBlock: a view over one block read from a file
- SwapResult: outcome of a successful swap
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class SwapError(Exception):
    """Base exception for swap errors."""


class OpenError(SwapError):
    """A file could not be opened for swapping."""


class SwapIOError(SwapError):
    """A read or write failed in the middle of a swap."""


class TruncateError(SwapError):
    """A file could not be truncated to its final length."""


class VerificationError(SwapError):
    """Swapped content does not match the original content.

    Attributes:
        path: File whose content is wrong.
        expected: Digest the file should have.
        actual: Digest the file has.
    """

    def __init__(self, path: Path, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Content mismatch in {path}: expected {expected[:12]}, got {actual[:12]}"
        )


class ConfigError(SwapError):
    """Configuration is missing or invalid."""


class DiscoveryError(SwapError):
    """Candidate files could not be located."""


class NoFilesError(DiscoveryError):
    """No file in the directory matches the naming rule."""


class NotEnoughFilesError(DiscoveryError):
    """Only one file in the directory matches the naming rule."""


@dataclass
class ByteBlock:
    """One block read from a file.

    ``data`` is a view over the reader's reusable buffer and is only valid
    until the next read on the same reader. Copy what must be kept.
    """

    data: memoryview
    length: int
    offset: int

    def __len__(self) -> int:
        return self.length

    def __bool__(self) -> bool:
        return self.length > 0


@dataclass
class SwapResult:
    """Result of a successful swap."""

    path_a: Path
    path_b: Path
    size_a: int  # original size of path_a, now the size of path_b
    size_b: int
    rounds: int
    elapsed_time: float = 0.0
    digest_a: str | None = None  # original content digest of path_a
    digest_b: str | None = None

    @property
    def bytes_swapped(self) -> int:
        """Total number of bytes moved in both directions."""
        return self.size_a + self.size_b
