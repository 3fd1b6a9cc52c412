"""Shared fixtures for fileswap tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


def build_log_data(size: int, fill: bytes, tail: bytes) -> bytes:
    """Build log-like content: ``fill`` lines of 80 bytes ending in CRLF.

    The last bytes are replaced by ``tail`` so truncation errors at the end
    of a file show up in comparisons.
    """
    line = fill * 78 + b"\r\n"
    data = (line * (size // len(line) + 1))[:size]
    if tail and size >= len(tail):
        data = data[: size - len(tail)] + tail
    return data


@pytest.fixture(autouse=True)
def reset_fileswap_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger("fileswap")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def log_data() -> Callable[[int, bytes, bytes], bytes]:
    """Factory building log-like content of an exact size."""
    return build_log_data


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    """Factory writing a file under tmp_path and returning its path."""

    def _make(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _make
