"""Content digests used to verify a swap."""

from __future__ import annotations

import hashlib

from fileswap.swap.reader import BlockReader


def compute_reader_hash(reader: BlockReader) -> str:
    """Compute the SHA-256 hash of a reader's file up to its current size.

    Reads from offset 0 and rewinds to offset 0 afterwards, so the reader can
    be used for a swap (or another pass) right away.

    Args:
        reader: An open reader.

    Returns:
        Hexadecimal SHA-256 hash string.

    Raises:
        SwapIOError: If a read fails.
    """
    hasher = hashlib.sha256()
    reader.rewind(0)
    while not reader.at_end:
        block = reader.read_block()
        hasher.update(block.data)
    reader.rewind(0)
    return hasher.hexdigest()
