"""Command-line interface for fileswap.

This module provides the main CLI entry point and assembles all commands.

Commands:
- swap: Swap the files with the smallest and largest key in a directory
- find: Print the files that swap would exchange
"""

from __future__ import annotations

import click

from fileswap.cli.config import (
    get_config_dir,
    get_config_file,
    load_config,
    save_config,
)
from fileswap.cli.swap import find, swap


@click.group()
@click.version_option(package_name="fileswap")
def cli() -> None:
    """fileswap - Exchange the contents of two files in bounded memory."""


cli.add_command(swap)
cli.add_command(find)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "save_config",
]
