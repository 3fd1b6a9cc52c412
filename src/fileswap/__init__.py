"""fileswap - exchange the contents of two files without loading them into memory."""

from fileswap.core.config import SwapConfig
from fileswap.core.types import (
    OpenError,
    SwapError,
    SwapIOError,
    SwapResult,
    TruncateError,
    VerificationError,
)
from fileswap.discovery import find_min_max_files
from fileswap.swap import FileSwapper, swap_files

__all__ = [
    "FileSwapper",
    "OpenError",
    "SwapConfig",
    "SwapError",
    "SwapIOError",
    "SwapResult",
    "TruncateError",
    "VerificationError",
    "find_min_max_files",
    "swap_files",
]
