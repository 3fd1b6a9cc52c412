"""Core types and configuration shared by every fileswap component."""

from fileswap.core.config import SwapConfig
from fileswap.core.types import (
    ByteBlock,
    ConfigError,
    DiscoveryError,
    NoFilesError,
    NotEnoughFilesError,
    OpenError,
    SwapError,
    SwapIOError,
    SwapResult,
    TruncateError,
    VerificationError,
)

__all__ = [
    "ByteBlock",
    "ConfigError",
    "DiscoveryError",
    "NoFilesError",
    "NotEnoughFilesError",
    "OpenError",
    "SwapConfig",
    "SwapError",
    "SwapIOError",
    "SwapResult",
    "TruncateError",
    "VerificationError",
]
