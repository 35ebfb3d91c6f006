"""Chunk source port interface."""

from __future__ import annotations

from typing import Protocol

from chunkhash.utils.chunking import Chunk


class ChunkSourcePort(Protocol):
    """Port interface for reading chunk buffers from a file source.

    Abstracts where the bytes live (memory or filesystem) so the hashing
    pipeline never branches on execution context.

    Side effects: May read from disk (offline).
    """

    @property
    def size(self) -> int:
        """Total size of the source in bytes."""
        ...

    def read_chunk(self, chunk: Chunk) -> bytes:
        """Materialize the bytes covered by ``chunk``.

        Args:
            chunk: Byte range to read

        Returns:
            Exactly ``chunk.length`` bytes

        Raises:
            ChunkReadError: If the range cannot be read in full
        """
        ...
