"""Chunk range computation and wave partitioning."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True, slots=True)
class Chunk:
    """A contiguous byte range of a file."""

    index: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        """Exclusive end offset of the range."""
        return self.offset + self.length

    def to_dict(self) -> dict[str, int]:
        return {"index": self.index, "offset": self.offset, "length": self.length}


def chunk_size_to_bytes(chunk_size_mb: int) -> int:
    """Convert a chunk size expressed in MB to bytes."""
    return chunk_size_mb * BYTES_PER_MB


def compute_chunks(file_size: int, chunk_size: int) -> list[Chunk]:
    """Partition ``[0, file_size)`` into ordered chunks of ``chunk_size`` bytes.

    Every chunk has length ``chunk_size`` except possibly the last. An empty
    file produces a single zero-length chunk so callers always get at least
    one digest.

    Args:
        file_size: Total size in bytes (>= 0)
        chunk_size: Chunk size in bytes (> 0)

    Returns:
        Chunks in index order

    Raises:
        ValueError: If ``file_size`` is negative or ``chunk_size`` is not positive

    Example:
        >>> [c.length for c in compute_chunks(25, 10)]
        [10, 10, 5]
    """
    if file_size < 0:
        raise ValueError(f"file_size must be >= 0, got {file_size}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be > 0, got {chunk_size}")

    if file_size == 0:
        return [Chunk(index=0, offset=0, length=0)]

    return [
        Chunk(index=index, offset=offset, length=min(chunk_size, file_size - offset))
        for index, offset in enumerate(range(0, file_size, chunk_size))
    ]


def split_into_waves(items: Sequence[T], wave_size: int) -> list[list[T]]:
    """Split ``items`` into consecutive batches of at most ``wave_size``."""
    if wave_size <= 0:
        raise ValueError(f"wave_size must be > 0, got {wave_size}")
    return [list(items[i : i + wave_size]) for i in range(0, len(items), wave_size)]
