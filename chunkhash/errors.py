"""Exception hierarchy for chunk hashing."""

from __future__ import annotations


class ChunkHashError(Exception):
    """Base class for all chunkhash failures."""


class ConfigurationError(ChunkHashError):
    """Raised when a hash request lacks the source reference its context needs."""


class UnsupportedEnvironmentError(ChunkHashError):
    """Raised when a hash request names an execution context we cannot serve."""


class ChunkReadError(ChunkHashError, OSError):
    """Raised when a chunk's bytes cannot be read from its source.

    The underlying ``OSError`` (if any) is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, chunk_index: int | None = None) -> None:
        super().__init__(message)
        self.chunk_index = chunk_index


class WorkerError(ChunkHashError):
    """Raised when a digest computation fails inside a pool worker.

    ``position`` is the buffer's position within the failed wave.
    """

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class PoolTerminatedError(ChunkHashError, RuntimeError):
    """Raised when work is dispatched to a pool that has already been terminated."""
