"""Minimal CLI JSON output wrapper.

Every JSON document printed by the CLI carries ``schema_id``,
``schema_version``, ``producer`` and ``produced_at`` so downstream tooling
can tell report shapes and chunkhash versions apart.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any


def json_response(
    schema_id: str,
    schema_version: int,
    *,
    producer: str,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Args:
        schema_id: Identifier for the output type (e.g., "file_hash").
        schema_version: Integer version for backward compatibility.
        producer: Tool and version that produced the document (e.g., "chunkhash-0.1.0").
        **data: Payload data to include in the response.

    Returns:
        JSON string with schema metadata and payload.
    """
    wrapped = {
        "schema_id": schema_id,
        "schema_version": schema_version,
        "producer": producer,
        "produced_at": datetime.now(UTC).isoformat(),
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)
