"""Hashing utilities for chunk digests and root hash aggregation."""

import hashlib
import zlib
from collections.abc import Sequence

CRC32 = "crc32"
MD5 = "md5"


def compute_crc32(content: bytes) -> str:
    """Compute CRC32 checksum of content.

    Args:
        content: Bytes to checksum

    Returns:
        8-character zero-padded hexadecimal string
    """
    return f"{zlib.crc32(content) & 0xFFFFFFFF:08x}"


def compute_md5(content: bytes) -> str:
    """Compute MD5 digest of content.

    Args:
        content: Bytes to hash

    Returns:
        Hexadecimal hash string
    """
    return hashlib.md5(content).hexdigest()


_DIGESTS = {
    CRC32: compute_crc32,
    MD5: compute_md5,
}


def compute_digest(content: bytes, algorithm: str) -> str:
    """Compute the digest of ``content`` under ``algorithm``.

    This is the unit of work executed by pool workers, so it must stay a
    module-level function that pickles by reference.

    Args:
        content: Bytes to hash
        algorithm: ``"crc32"`` or ``"md5"``

    Returns:
        Hexadecimal digest string

    Raises:
        ValueError: If the algorithm is not supported
    """
    try:
        digest_fn = _DIGESTS[algorithm]
    except KeyError:
        raise ValueError(f"Unsupported digest algorithm: {algorithm!r}") from None
    return digest_fn(content)


def compute_root_hash(chunk_hashes: Sequence[str]) -> str:
    """Fold ordered chunk digests into a single Merkle root.

    Leaves are ``md5(digest)``. Each level hashes adjacent pairs as
    ``md5(left + right)``; an odd trailing node is carried up unchanged.
    A single digest yields ``md5(digest)`` and an empty sequence yields
    ``md5(b"")``.

    Args:
        chunk_hashes: Chunk digests in chunk-index order

    Returns:
        Hexadecimal root hash
    """
    if not chunk_hashes:
        return compute_md5(b"")

    level = [compute_md5(digest.encode("utf-8")) for digest in chunk_hashes]

    while len(level) > 1:
        parents: list[str] = []
        for i in range(0, len(level) - 1, 2):
            parents.append(compute_md5((level[i] + level[i + 1]).encode("utf-8")))
        if len(level) % 2:
            parents.append(level[-1])
        level = parents

    return level[0]
