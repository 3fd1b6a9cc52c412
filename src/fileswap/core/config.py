"""Configuration classes for fileswap.

This module defines the configuration shared by the CLI and the swap entry
points.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fileswap.core.types import ConfigError

DEFAULT_READ_BLOCK_SIZE = 4 * 1024
DEFAULT_WRITE_BLOCK_SIZE = 4 * 1024


@dataclass
class SwapConfig:
    """Configuration for a swap run.

    Attributes:
        path_to_files: Directory holding the candidate ``.log`` files.
        read_block_size: Bytes read from each file per round.
        write_block_size: Bytes accumulated by a sink before each write.
        allow_negative_names: Accept ``-N.log`` names during discovery.
    """

    path_to_files: Path
    read_block_size: int = DEFAULT_READ_BLOCK_SIZE
    write_block_size: int = DEFAULT_WRITE_BLOCK_SIZE
    allow_negative_names: bool = False

    def __post_init__(self) -> None:
        """Normalize the directory and validate block sizes."""
        if not str(self.path_to_files):
            raise ConfigError("path_to_files must not be empty")
        self.path_to_files = Path(self.path_to_files).expanduser()
        for name in ("read_block_size", "write_block_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SwapConfig:
        """Build a config from a parsed config mapping.

        Args:
            data: Mapping with at least ``path_to_files``.

        Returns:
            SwapConfig instance.

        Raises:
            ConfigError: If a required key is missing or a value is invalid.
        """
        if "path_to_files" not in data:
            raise ConfigError("Missing required key: path_to_files")
        return cls(
            path_to_files=Path(str(data["path_to_files"])),
            read_block_size=data.get("read_block_size", DEFAULT_READ_BLOCK_SIZE),
            write_block_size=data.get("write_block_size", DEFAULT_WRITE_BLOCK_SIZE),
            allow_negative_names=bool(data.get("allow_negative_names", False)),
        )

    @property
    def is_unbuffered(self) -> bool:
        """Check if sinks write one byte at a time."""
        return self.write_block_size == 1
