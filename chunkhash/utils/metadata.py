"""File metadata extraction for hashed sources."""

from __future__ import annotations

import mimetypes
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field


class FileMetadata(BaseModel):
    """Metadata describing the file a root hash was computed for."""

    name: str = Field(..., description="Base name of the file")
    size: int = Field(..., ge=0, description="File size in bytes")
    last_modified: str | None = Field(None, description="Modification time (ISO 8601)")
    type: str | None = Field(None, description="Extension for paths, MIME type for buffers")


def detect_mime_type(name: str) -> str | None:
    """Guess a MIME type from a file name."""
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type


def get_path_metadata(file_path: Path) -> FileMetadata:
    """Collect metadata for a file on disk.

    Args:
        file_path: Path to file

    Returns:
        File metadata

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If path is not a regular file
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    resolved_path = path.resolve()
    if not resolved_path.is_file():
        raise ValueError(f"Not a file: {resolved_path}")

    stat = resolved_path.stat()

    return FileMetadata(
        name=resolved_path.name,
        size=stat.st_size,
        last_modified=datetime.fromtimestamp(stat.st_mtime).isoformat(),
        type=resolved_path.suffix.lower(),
    )


def get_buffer_metadata(
    data: bytes | bytearray | memoryview,
    *,
    name: str | None = None,
    content_type: str | None = None,
    last_modified: datetime | None = None,
) -> FileMetadata:
    """Describe an in-memory buffer the way ``get_path_metadata`` describes a file."""
    if content_type is None and name:
        content_type = detect_mime_type(name)

    return FileMetadata(
        name=name or "<memory>",
        size=memoryview(data).nbytes,
        last_modified=last_modified.isoformat() if last_modified else None,
        type=content_type,
    )
