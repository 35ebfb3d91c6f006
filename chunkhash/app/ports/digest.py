"""Digest pool port interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from chunkhash.app.strategy import Algorithm


class DigestPoolPort(Protocol):
    """Port interface for computing digests of a wave of buffers in parallel."""

    @property
    def capacity(self) -> int:
        """Maximum number of buffers accepted by a single dispatch."""
        ...

    def dispatch(self, buffers: Sequence[bytes], algorithm: Algorithm) -> list[str]:
        """Digest ``buffers`` concurrently.

        Args:
            buffers: At most ``capacity`` buffers
            algorithm: Digest to compute for every buffer

        Returns:
            Digests in the same order as ``buffers``

        Raises:
            WorkerError: If any digest computation fails
            PoolTerminatedError: If the pool has been terminated
        """
        ...

    def terminate(self) -> None:
        """Release worker resources once in-flight work drains."""
        ...


class DigestPoolProviderPort(Protocol):
    """Port interface for an owned, lazily created digest pool."""

    def acquire(self) -> DigestPoolPort:
        """Return the live pool, creating one if none is active."""
        ...

    def release(self, *, close_immediately: bool) -> None:
        """Finish an invocation; terminate the pool when ``close_immediately``."""
        ...
