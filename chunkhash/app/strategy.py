"""Digest algorithm selection for hashing modes."""

from __future__ import annotations

from enum import StrEnum

from chunkhash.utils.hashing import CRC32, MD5


class Algorithm(StrEnum):
    """Concrete digest algorithms a worker can compute."""

    CRC32 = CRC32
    MD5 = MD5


class HashingMode(StrEnum):
    """Hashing policy requested by the caller.

    ``crc32`` and ``md5`` are accepted as aliases of ``fast`` and ``strong``.
    """

    FAST = "fast"
    STRONG = "strong"
    MIXED = "mixed"

    @classmethod
    def _missing_(cls, value: object) -> HashingMode | None:
        if isinstance(value, str):
            return _MODE_ALIASES.get(value.lower())
        return None


_MODE_ALIASES = {
    "fast": HashingMode.FAST,
    "strong": HashingMode.STRONG,
    "mixed": HashingMode.MIXED,
    CRC32: HashingMode.FAST,
    MD5: HashingMode.STRONG,
}


def select_algorithm(
    mode: HashingMode | str,
    chunk_count: int,
    border_count: int = 100,
) -> Algorithm:
    """Pick the algorithm used for every wave of one invocation.

    Mixed mode uses the strong digest while ``chunk_count <= border_count``
    and the fast checksum above it.
    """
    resolved = HashingMode(mode)
    if resolved is HashingMode.FAST:
        return Algorithm.CRC32
    if resolved is HashingMode.STRONG:
        return Algorithm.MD5
    return Algorithm.MD5 if chunk_count <= border_count else Algorithm.CRC32


def single_chunk_algorithm(mode: HashingMode | str) -> Algorithm:
    """Algorithm for a file that fits in one chunk (computed without the pool)."""
    return Algorithm.CRC32 if HashingMode(mode) is HashingMode.FAST else Algorithm.MD5
