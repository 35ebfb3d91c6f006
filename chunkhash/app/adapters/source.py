"""Chunk source adapters for in-memory buffers and files on disk."""

from __future__ import annotations

from pathlib import Path

from chunkhash.app.ports import ChunkSourcePort
from chunkhash.errors import ChunkReadError
from chunkhash.utils.chunking import Chunk


class InMemorySourceAdapter(ChunkSourcePort):
    """Adapter that slices chunks out of a bytes-like buffer."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._view = memoryview(data).cast("B")

    @property
    def size(self) -> int:
        return self._view.nbytes

    def read_chunk(self, chunk: Chunk) -> bytes:
        if chunk.offset < 0 or chunk.end > self._view.nbytes:
            raise ChunkReadError(
                f"Chunk {chunk.index} [{chunk.offset}, {chunk.end}) is outside "
                f"the {self._view.nbytes}-byte buffer",
                chunk_index=chunk.index,
            )
        return self._view[chunk.offset : chunk.end].tobytes()


class FileSystemSourceAdapter(ChunkSourcePort):
    """Adapter that reads chunk ranges from a file path.

    The file is opened per read so no handle outlives a wave.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        try:
            self._size = self._path.stat().st_size
        except OSError as exc:
            raise ChunkReadError(f"Cannot stat {self._path}: {exc}") from exc

    @property
    def path(self) -> Path:
        return self._path

    @property
    def size(self) -> int:
        return self._size

    def read_chunk(self, chunk: Chunk) -> bytes:
        try:
            with self._path.open("rb") as handle:
                handle.seek(chunk.offset)
                buffer = handle.read(chunk.length)
        except OSError as exc:
            raise ChunkReadError(
                f"Failed to read chunk {chunk.index} of {self._path}: {exc}",
                chunk_index=chunk.index,
            ) from exc

        if len(buffer) != chunk.length:
            raise ChunkReadError(
                f"Short read for chunk {chunk.index} of {self._path}: "
                f"expected {chunk.length} bytes, got {len(buffer)}",
                chunk_index=chunk.index,
            )
        return buffer
