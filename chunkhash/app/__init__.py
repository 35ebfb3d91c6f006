"""Application layer for chunkhash.

This layer orchestrates chunking and hashing without direct filesystem I/O
or process management. All side effects are delegated to adapters via port
interfaces.
"""

__all__ = [
    "ChunkHashService",
    "FileHashResult",
    "HashResult",
]

from chunkhash.app.hash_service import ChunkHashService, FileHashResult, HashResult
