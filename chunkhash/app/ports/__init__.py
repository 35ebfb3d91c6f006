"""Port interfaces for the chunkhash application layer.

These protocol interfaces define contracts for adapters.
The hashing pipeline depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ChunkSourcePort",
    "DigestPoolPort",
    "DigestPoolProviderPort",
]

from chunkhash.app.ports.digest import DigestPoolPort, DigestPoolProviderPort
from chunkhash.app.ports.source import ChunkSourcePort
