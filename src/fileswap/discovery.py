"""Locate the two files to swap inside a directory.

Candidate files are named after an integer key, e.g. ``5999.log`` or, when
negative keys are allowed, ``-6000.log``. The files with the smallest and
the largest key are swapped.

Keys are compared as integers, so names of any length compare correctly and
``-24.log`` sorts before ``100.log``. Files with equal keys (``5.log`` and
``05.log``) are ordered by name.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from fileswap.core.types import DiscoveryError, NoFilesError, NotEnoughFilesError

logger = logging.getLogger(__name__)

POSITIVE_NAME = re.compile(r"^[0-9]+\.log$")
SIGNED_NAME = re.compile(r"^-?[0-9]+\.log$")


@dataclass(frozen=True)
class Candidate:
    """A file whose name encodes an integer key."""

    name: str
    key: int

    @property
    def sort_key(self) -> tuple[int, str]:
        """Ordering used to pick the minimum and maximum."""
        return (self.key, self.name)


def parse_candidate(name: str, allow_negative: bool = False) -> Candidate | None:
    """Parse a file name into a candidate.

    Args:
        name: Bare file name.
        allow_negative: Accept a leading minus sign.

    Returns:
        Candidate, or None if the name does not follow the naming rule.
    """
    pattern = SIGNED_NAME if allow_negative else POSITIVE_NAME
    if not pattern.match(name):
        return None
    return Candidate(name=name, key=int(name[: -len(".log")]))


def scan_candidates(directory: Path, allow_negative: bool = False) -> list[Candidate]:
    """List the candidate files of a directory.

    Directories are skipped even if their name matches.

    Raises:
        DiscoveryError: If the directory cannot be listed.
    """
    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        raise DiscoveryError(f"Cannot list {directory}: {e.strerror or e}") from e

    candidates = []
    for entry in entries:
        if entry.is_dir():
            continue
        candidate = parse_candidate(entry.name, allow_negative)
        if candidate is not None:
            candidates.append(candidate)

    logger.debug(f"Found {len(candidates)} candidate files in {directory}")
    return candidates


def find_min_max_files(directory: str | Path, allow_negative: bool = False) -> tuple[str, str]:
    """Find the files with the smallest and largest key.

    Args:
        directory: Directory to scan.
        allow_negative: Accept ``-N.log`` names.

    Returns:
        Tuple of (min_name, max_name), bare file names.

    Raises:
        NoFilesError: If no file matches the naming rule.
        NotEnoughFilesError: If only one file matches.
        DiscoveryError: If the directory cannot be listed.
    """
    candidates = scan_candidates(Path(directory), allow_negative)
    if not candidates:
        pattern = SIGNED_NAME if allow_negative else POSITIVE_NAME
        raise NoFilesError(
            f"There are no files matching {pattern.pattern} in {directory}"
        )
    if len(candidates) < 2:
        raise NotEnoughFilesError(
            f"There are not enough files (at least 2) matching the naming rule in {directory}"
        )

    lowest = min(candidates, key=lambda c: c.sort_key)
    highest = max(candidates, key=lambda c: c.sort_key)
    return lowest.name, highest.name
