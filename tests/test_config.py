from pathlib import Path

import pytest
from pydantic import ValidationError

from chunkhash.app.strategy import HashingMode
from chunkhash.config import (
    ExecutionContext,
    HashOptions,
    Settings,
    normalize_request,
)
from chunkhash.errors import ConfigurationError, UnsupportedEnvironmentError


def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.chunk_size == 10
    assert settings.max_worker_count == 8
    assert settings.mode is HashingMode.MIXED
    assert settings.border_count == 100
    assert settings.close_immediately is True
    assert settings.worker_backend == "process"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHUNKHASH_CHUNK_SIZE", "4")
    monkeypatch.setenv("CHUNKHASH_MODE", "fast")
    monkeypatch.setenv("CHUNKHASH_CLOSE_IMMEDIATELY", "false")

    settings = Settings()

    assert settings.chunk_size == 4
    assert settings.mode is HashingMode.FAST
    assert settings.close_immediately is False


def test_hash_options_resolve_chunk_size() -> None:
    assert HashOptions(chunk_size=2).resolved_chunk_size == 2 * 1024 * 1024
    assert HashOptions(chunk_size=2, chunk_size_bytes=512).resolved_chunk_size == 512


@pytest.mark.parametrize(
    "field",
    ["chunk_size", "chunk_size_bytes", "max_worker_count", "border_count"],
)
def test_hash_options_reject_non_positive_values(field: str) -> None:
    with pytest.raises(ValidationError):
        HashOptions(**{field: 0})


def test_options_from_settings_ignore_none_overrides() -> None:
    settings = Settings(chunk_size=3, border_count=7)

    options = HashOptions.from_settings(settings, chunk_size=None, border_count=5)

    assert options.chunk_size == 3
    assert options.border_count == 5


def test_normalize_memory_request() -> None:
    request = normalize_request(
        "memory",
        data=b"payload",
        settings=Settings(),
        mode="strong",
    )

    assert request.context is ExecutionContext.MEMORY
    assert request.data == b"payload"
    assert request.file_path is None
    assert request.options.mode is HashingMode.STRONG


def test_normalize_path_request(tmp_path: Path) -> None:
    request = normalize_request(
        ExecutionContext.PATH,
        file_path=str(tmp_path / "f.bin"),
        settings=Settings(),
    )

    assert request.file_path == tmp_path / "f.bin"
    assert request.data is None
    assert request.options.close_immediately is True


def test_missing_data_in_memory_context() -> None:
    with pytest.raises(ConfigurationError, match="data"):
        normalize_request("memory", settings=Settings())


@pytest.mark.parametrize("file_path", [None, ""])
def test_missing_path_in_path_context(file_path: str | None) -> None:
    with pytest.raises(ConfigurationError, match="file_path"):
        normalize_request("path", file_path=file_path, settings=Settings())


def test_unknown_context() -> None:
    with pytest.raises(UnsupportedEnvironmentError):
        normalize_request("browser", data=b"x", settings=Settings())
