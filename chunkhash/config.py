"""Configuration management with Pydantic and request normalization."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from chunkhash.app.strategy import HashingMode
from chunkhash.errors import ConfigurationError, UnsupportedEnvironmentError
from chunkhash.utils.chunking import chunk_size_to_bytes

DEFAULT_CHUNK_SIZE_MB = 10
DEFAULT_MAX_WORKERS = 8
DEFAULT_BORDER_COUNT = 100

WorkerBackend = Literal["process", "thread"]


class ExecutionContext(StrEnum):
    """Where the bytes being hashed live."""

    MEMORY = "memory"
    PATH = "path"


class Settings(BaseSettings):
    """chunkhash configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHUNKHASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: PositiveInt = Field(
        default=DEFAULT_CHUNK_SIZE_MB,
        description="Chunk size in MB",
    )

    max_worker_count: PositiveInt = Field(
        default=DEFAULT_MAX_WORKERS,
        description="Worker pool capacity; also the number of chunks hashed per wave",
    )

    mode: HashingMode = Field(
        default=HashingMode.MIXED,
        description="Hashing mode: fast (crc32), strong (md5) or mixed",
    )

    border_count: PositiveInt = Field(
        default=DEFAULT_BORDER_COUNT,
        description="Chunk count at or below which mixed mode uses the strong digest",
    )

    close_immediately: bool = Field(
        default=True,
        description="Terminate the worker pool after each hashing invocation",
    )

    worker_backend: WorkerBackend = Field(
        default="process",
        description="Pool workers: separate processes or threads",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the CLI",
    )


class HashOptions(BaseModel):
    """Normalized options consumed by the hashing pipeline."""

    model_config = ConfigDict(frozen=True)

    chunk_size: PositiveInt = DEFAULT_CHUNK_SIZE_MB
    chunk_size_bytes: PositiveInt | None = Field(
        default=None,
        description="Exact chunk size in bytes; overrides chunk_size when set",
    )
    max_worker_count: PositiveInt = DEFAULT_MAX_WORKERS
    mode: HashingMode = HashingMode.MIXED
    border_count: PositiveInt = DEFAULT_BORDER_COUNT
    close_immediately: bool = True

    @property
    def resolved_chunk_size(self) -> int:
        """Chunk size in bytes."""
        if self.chunk_size_bytes is not None:
            return self.chunk_size_bytes
        return chunk_size_to_bytes(self.chunk_size)

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> HashOptions:
        """Build options from ``settings``; ``None`` overrides keep the settings value."""
        values: dict[str, Any] = {
            "chunk_size": settings.chunk_size,
            "max_worker_count": settings.max_worker_count,
            "mode": settings.mode,
            "border_count": settings.border_count,
            "close_immediately": settings.close_immediately,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


class HashRequest(BaseModel):
    """A normalized hash request: source reference plus options."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    context: ExecutionContext
    options: HashOptions
    data: Any = None
    file_path: Path | None = None
    name: str | None = None


def normalize_request(
    context: ExecutionContext | str,
    *,
    data: bytes | bytearray | memoryview | None = None,
    file_path: Path | str | None = None,
    name: str | None = None,
    settings: Settings | None = None,
    **overrides: Any,
) -> HashRequest:
    """Validate the source reference for ``context`` and fill option defaults.

    Args:
        context: Execution context tag (``"memory"`` or ``"path"``)
        data: In-memory content (memory context)
        file_path: File to read (path context)
        name: Optional display name for in-memory content
        settings: Settings providing defaults (global settings when omitted)
        **overrides: Option values; ``None`` means "use the default"

    Returns:
        Normalized hash request

    Raises:
        UnsupportedEnvironmentError: If ``context`` is not a known context
        ConfigurationError: If the source reference for ``context`` is missing
    """
    try:
        resolved_context = ExecutionContext(context)
    except ValueError:
        raise UnsupportedEnvironmentError(
            f"Unsupported execution context: {context!r} "
            f"(expected one of {[c.value for c in ExecutionContext]})"
        ) from None

    if resolved_context is ExecutionContext.MEMORY and data is None:
        raise ConfigurationError("The data argument is required in memory context")
    if resolved_context is ExecutionContext.PATH and (file_path is None or str(file_path) == ""):
        raise ConfigurationError("The file_path argument is required in path context")

    options = HashOptions.from_settings(settings or get_settings(), **overrides)

    return HashRequest(
        context=resolved_context,
        options=options,
        data=data if resolved_context is ExecutionContext.MEMORY else None,
        file_path=Path(file_path) if resolved_context is ExecutionContext.PATH else None,
        name=name,
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
