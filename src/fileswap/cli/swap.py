"""Swap and find commands for the fileswap CLI.

Commands:
- swap: Swap the files with the smallest and largest key in a directory
- find: Print the files that ``swap`` would exchange
"""

from __future__ import annotations

import dataclasses
import logging
import sys
import time
from pathlib import Path
from typing import Any

import click

from fileswap.cli.config import get_config_file, load_config
from fileswap.cli.logs import setup_logging
from fileswap.core.config import SwapConfig
from fileswap.core.types import SwapError

logger = logging.getLogger(__name__)


def resolve_config(
    config_path: Path | None,
    directory: Path | None,
    allow_negative: bool,
    read_block_size: int | None = None,
    write_block_size: int | None = None,
) -> SwapConfig:
    """Combine the config file with command-line overrides.

    The config file is optional when a directory is given on the command
    line and no config path was requested explicitly. Overrides go through
    SwapConfig validation, so ``~`` in ``--dir`` is expanded too.

    Raises:
        ConfigError: If the config cannot be loaded or the result is invalid.
    """
    if config_path is None and directory is not None and not get_config_file().exists():
        config = SwapConfig(path_to_files=directory)
    else:
        config = load_config(config_path)

    overrides: dict[str, Any] = {}
    if directory is not None:
        overrides["path_to_files"] = directory
    if allow_negative:
        overrides["allow_negative_names"] = True
    if read_block_size is not None:
        overrides["read_block_size"] = read_block_size
    if write_block_size is not None:
        overrides["write_block_size"] = write_block_size
    return dataclasses.replace(config, **overrides)


def _log_level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


config_option = click.option(
    "--config-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the YAML config file (default: configs/config.yml).",
)
dir_option = click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the .log files (overrides path_to_files).",
)
neg_option = click.option("--neg", is_flag=True, help="Allow negative file names.")


@click.command()
@config_option
@dir_option
@neg_option
@click.option("--rbs", type=click.IntRange(min=1), default=None, help="Bytes read at a time.")
@click.option("--wbs", type=click.IntRange(min=1), default=None, help="Bytes written at a time.")
@click.option("--verify", is_flag=True, help="Hash both files and check the swapped content.")
@click.option("--strict-truncate", is_flag=True, help="Fail if final truncation fails.")
@click.option("--verbose", "-v", is_flag=True, help="Show progress information.")
@click.option("--debug", is_flag=True, help="Show debug logs.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write logs to this file.",
)
def swap(
    config_path: Path | None,
    directory: Path | None,
    neg: bool,
    rbs: int | None,
    wbs: int | None,
    verify: bool,
    strict_truncate: bool,
    verbose: bool,
    debug: bool,
    log_file: Path | None,
) -> None:
    """Swap the contents of the files with the minimum and maximum key.

    Use --rbs 1 --wbs 1 for the slow byte-by-byte reference mode.
    """
    from fileswap.discovery import find_min_max_files
    from fileswap.swap import swap_files

    setup_logging(_log_level(verbose, debug), log_file)
    start = time.monotonic()

    try:
        config = resolve_config(config_path, directory, neg, rbs, wbs)
        min_name, max_name = find_min_max_files(
            config.path_to_files, config.allow_negative_names
        )
        click.echo(f"File with min value: [{min_name}], File with max value: [{max_name}].")
        if config.is_unbuffered:
            logger.info("Write block size 1: writing byte by byte, expect a slow swap")

        result = swap_files(
            config.path_to_files / min_name,
            config.path_to_files / max_name,
            read_block_size=config.read_block_size,
            write_block_size=config.write_block_size,
            verify=verify,
            strict_truncate=strict_truncate,
        )
    except SwapError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("The files were successfully swapped.")
    if verify:
        click.echo("Content verified.")
    logger.info(f"{result.bytes_swapped} bytes moved in {result.rounds} rounds")
    click.echo(f"Exec time: {time.monotonic() - start:.3f}s")


@click.command()
@config_option
@dir_option
@neg_option
def find(config_path: Path | None, directory: Path | None, neg: bool) -> None:
    """Print the files with the minimum and maximum key."""
    from fileswap.discovery import find_min_max_files

    try:
        config = resolve_config(config_path, directory, neg)
        min_name, max_name = find_min_max_files(
            config.path_to_files, config.allow_negative_names
        )
    except SwapError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(min_name)
    click.echo(max_name)
