"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from chunkhash.app import ChunkHashService, FileHashResult
from chunkhash.app.adapters import FileSystemSourceAdapter, InMemorySourceAdapter, WorkerPoolManager
from chunkhash.app.ports import ChunkSourcePort
from chunkhash.config import (
    ExecutionContext,
    HashRequest,
    Settings,
    get_settings,
    normalize_request,
)
from chunkhash.errors import ConfigurationError, UnsupportedEnvironmentError
from chunkhash.utils.metadata import FileMetadata, get_buffer_metadata, get_path_metadata

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI and library callers."""

    settings: Settings
    pool_manager: WorkerPoolManager
    hash_service: ChunkHashService

    def open_source(self, request: HashRequest) -> tuple[ChunkSourcePort, FileMetadata]:
        """Select the source adapter and metadata for ``request``'s context."""
        if request.context is ExecutionContext.MEMORY:
            return (
                InMemorySourceAdapter(request.data),
                get_buffer_metadata(request.data, name=request.name),
            )
        if request.context is ExecutionContext.PATH:
            assert request.file_path is not None
            metadata = get_path_metadata(request.file_path)
            return FileSystemSourceAdapter(request.file_path), metadata
        raise UnsupportedEnvironmentError(f"Unsupported execution context: {request.context!r}")

    def hash_request(self, request: HashRequest) -> FileHashResult:
        """Hash the source described by a normalized request."""
        source, metadata = self.open_source(request)
        return self.hash_service.hash_source(source, request.options, metadata=metadata)

    def shutdown(self) -> None:
        """Release the worker pool, if any."""
        self.pool_manager.shutdown()


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Instantiate adapters and services for hashing."""

    active_settings = settings or get_settings()

    pool_manager = WorkerPoolManager(
        active_settings.max_worker_count,
        backend=active_settings.worker_backend,
    )
    hash_service = ChunkHashService(pool_provider=pool_manager)
    logger.debug(
        "Bootstrapped chunkhash with %d %s workers",
        active_settings.max_worker_count,
        active_settings.worker_backend,
    )

    return ApplicationContainer(
        settings=active_settings,
        pool_manager=pool_manager,
        hash_service=hash_service,
    )


def get_file_hash_chunks(
    *,
    data: bytes | bytearray | memoryview | None = None,
    file_path: Path | str | None = None,
    name: str | None = None,
    container: ApplicationContainer | None = None,
    **options: Any,
) -> FileHashResult:
    """Hash a buffer or a file and return its chunks, digests and root hash.

    Exactly one of ``data`` (memory context) or ``file_path`` (path context)
    selects the execution context. Remaining keyword arguments override
    ``HashOptions`` fields (``chunk_size``, ``max_worker_count``, ``mode``,
    ``border_count``, ``close_immediately``, ``chunk_size_bytes``).

    Pass a long-lived ``container`` together with ``close_immediately=False``
    to reuse one worker pool across calls; release it with
    ``destroy_worker_pool(container)``.

    Raises:
        ConfigurationError: If neither or both of ``data`` and ``file_path`` are given
    """
    if data is not None and file_path is not None:
        raise ConfigurationError("Pass either data or file_path, not both")

    active = container or bootstrap_application()
    context = ExecutionContext.MEMORY if data is not None else ExecutionContext.PATH
    request = normalize_request(
        context,
        data=data,
        file_path=file_path,
        name=name,
        settings=active.settings,
        **options,
    )

    try:
        return active.hash_request(request)
    finally:
        if container is None:
            active.shutdown()


def destroy_worker_pool(container: ApplicationContainer) -> None:
    """Tear down ``container``'s worker pool outside the per-call lifecycle."""
    container.shutdown()
