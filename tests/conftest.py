"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
import time
from collections.abc import Generator
from pathlib import Path

import pytest

from chunkhash.app.adapters import WorkerPoolManager
from chunkhash.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Force garbage collection to release any file handles
        gc.collect()
        # Small delay to allow OS to release file locks
        time.sleep(0.1)
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def patterned_bytes() -> bytes:
    """Deterministic, non-repeating-looking content of 10_000 bytes."""
    return bytes((i * 31 + 7) % 251 for i in range(10_000))


@pytest.fixture
def sample_file(temp_dir: Path, patterned_bytes: bytes) -> Path:
    """Write ``patterned_bytes`` to a file."""
    file_path = temp_dir / "sample.bin"
    file_path.write_bytes(patterned_bytes)
    return file_path


@pytest.fixture
def thread_pool_manager() -> Generator[WorkerPoolManager, None, None]:
    """Thread-backed pool manager, torn down after the test."""
    manager = WorkerPoolManager(4, backend="thread")
    try:
        yield manager
    finally:
        manager.shutdown()


@pytest.fixture
def override_settings() -> Generator[Settings, None, None]:
    """Provide isolated chunkhash settings scoped to tests."""

    import chunkhash.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(
        max_worker_count=4,
        worker_backend="thread",
        close_immediately=True,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
