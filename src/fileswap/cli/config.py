"""Configuration utilities for the fileswap CLI.

The configuration file is YAML, read from ``configs/config.yml`` relative to
the working directory unless another path is given, for example:

    path_to_files: ./logs/
    read_block_size: 4096
    write_block_size: 4096
    allow_negative_names: false

Only ``path_to_files`` is required.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from fileswap.core.config import SwapConfig
from fileswap.core.types import ConfigError


def get_config_dir() -> Path:
    """Get the configuration directory for fileswap.

    Returns:
        Path to ./configs, relative to the working directory.
    """
    return Path("configs")


def get_config_file() -> Path:
    """Get the path to the default config file."""
    return get_config_dir() / "config.yml"


def load_config(path: Path | None = None) -> SwapConfig:
    """Load configuration from a YAML file.

    Args:
        path: Config file to read. Defaults to ``get_config_file()``.

    Returns:
        Parsed SwapConfig.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or holds
            invalid values.
    """
    config_file = path or get_config_file()
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    return SwapConfig.from_dict(data)


def save_config(config: SwapConfig, path: Path | None = None) -> None:
    """Save configuration to a YAML file."""
    config_file = path or get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "path_to_files": str(config.path_to_files),
        "read_block_size": config.read_block_size,
        "write_block_size": config.write_block_size,
        "allow_negative_names": config.allow_negative_names,
    }
    config_file.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
