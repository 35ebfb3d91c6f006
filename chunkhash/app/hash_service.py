"""Chunked file hashing orchestration built on application ports."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from chunkhash.app.ports import ChunkSourcePort, DigestPoolProviderPort
from chunkhash.app.strategy import Algorithm, select_algorithm, single_chunk_algorithm
from chunkhash.utils.chunking import Chunk, compute_chunks, split_into_waves
from chunkhash.utils.hashing import compute_digest, compute_root_hash
from chunkhash.utils.metadata import FileMetadata

if TYPE_CHECKING:
    from chunkhash.config import HashOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HashResult:
    """Digest of one chunk."""

    index: int
    digest: str


class FileHashResult(BaseModel):
    """Chunk ranges, ordered chunk digests and root hash of one file."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    chunks: list[Chunk] = Field(default_factory=list)
    chunk_hashes: list[str] = Field(default_factory=list)
    root_hash: str
    algorithm: Algorithm
    metadata: FileMetadata | None = None
    wave_count: int = 0
    duration_seconds: float | None = None

    @property
    def results(self) -> Iterator[HashResult]:
        """Yield ``HashResult`` records in chunk order."""
        for chunk, digest in zip(self.chunks, self.chunk_hashes):
            yield HashResult(index=chunk.index, digest=digest)

    def to_dict(self, *, include_chunks: bool = True) -> dict[str, object]:
        payload: dict[str, object] = {
            "root_hash": self.root_hash,
            "algorithm": self.algorithm.value,
            "chunk_count": len(self.chunks),
            "wave_count": self.wave_count,
            "duration_seconds": self.duration_seconds,
            "metadata": self.metadata.model_dump() if self.metadata else None,
        }
        if include_chunks:
            payload["chunks"] = [
                {**chunk.to_dict(), "digest": digest}
                for chunk, digest in zip(self.chunks, self.chunk_hashes)
            ]
        return payload


class ChunkHashService:
    """Hash a source chunk by chunk, one bounded wave at a time.

    Peak buffer memory is one wave: at most ``wave size * chunk size`` bytes.
    A wave is read only after the previous wave's digests are collected and
    its buffers dropped.
    """

    def __init__(self, *, pool_provider: DigestPoolProviderPort) -> None:
        self._pool_provider = pool_provider

    def hash_source(
        self,
        source: ChunkSourcePort,
        options: HashOptions,
        *,
        metadata: FileMetadata | None = None,
    ) -> FileHashResult:
        """Compute chunk digests and the root hash of ``source``.

        Args:
            source: Where chunk bytes are read from
            options: Normalized hashing options
            metadata: File metadata passed through to the result

        Returns:
            FileHashResult with ordered chunks, digests and root hash

        Raises:
            ChunkReadError: If reading a chunk fails
            WorkerError: If a digest computation fails
        """
        start_time = time.monotonic()
        chunks = compute_chunks(source.size, options.resolved_chunk_size)

        if len(chunks) == 1:
            algorithm = single_chunk_algorithm(options.mode)
            chunk_hashes = [compute_digest(source.read_chunk(chunks[0]), algorithm)]
            wave_count = 0
        else:
            algorithm = select_algorithm(options.mode, len(chunks), options.border_count)
            chunk_hashes, wave_count = self._hash_in_waves(source, chunks, algorithm, options)

        root_hash = compute_root_hash(chunk_hashes)
        duration = time.monotonic() - start_time

        logger.info(
            "Hashed %d bytes in %d chunks (%s, %d waves) in %.3fs",
            source.size,
            len(chunks),
            algorithm.value,
            wave_count,
            duration,
        )

        return FileHashResult(
            chunks=chunks,
            chunk_hashes=chunk_hashes,
            root_hash=root_hash,
            algorithm=algorithm,
            metadata=metadata,
            wave_count=wave_count,
            duration_seconds=duration,
        )

    def _hash_in_waves(
        self,
        source: ChunkSourcePort,
        chunks: list[Chunk],
        algorithm: Algorithm,
        options: HashOptions,
    ) -> tuple[list[str], int]:
        pool = self._pool_provider.acquire()
        try:
            wave_size = options.max_worker_count
            if wave_size > pool.capacity:
                logger.warning(
                    "max_worker_count=%d exceeds pool capacity %d; using waves of %d",
                    wave_size,
                    pool.capacity,
                    pool.capacity,
                )
                wave_size = pool.capacity

            waves = split_into_waves(chunks, wave_size)
            chunk_hashes: list[str] = []
            buffers: list[bytes] = []

            for wave_number, wave in enumerate(waves, start=1):
                buffers.clear()
                buffers = [source.read_chunk(chunk) for chunk in wave]
                logger.debug(
                    "Dispatching wave %d/%d (chunks %d-%d)",
                    wave_number,
                    len(waves),
                    wave[0].index,
                    wave[-1].index,
                )
                chunk_hashes.extend(pool.dispatch(buffers, algorithm))

            buffers.clear()
            return chunk_hashes, len(waves)
        finally:
            self._pool_provider.release(close_immediately=options.close_immediately)
