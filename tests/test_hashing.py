"""Tests for digest primitives and root hash aggregation."""

from __future__ import annotations

import hashlib
import zlib

import pytest

from chunkhash.utils.hashing import (
    compute_crc32,
    compute_digest,
    compute_md5,
    compute_root_hash,
)


def _md5(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def test_crc32_is_zero_padded_hex() -> None:
    assert compute_crc32(b"") == "00000000"
    assert compute_crc32(b"hello") == f"{zlib.crc32(b'hello'):08x}"
    assert len(compute_crc32(b"any content")) == 8


def test_md5_matches_hashlib() -> None:
    assert compute_md5(b"abc") == hashlib.md5(b"abc").hexdigest()


def test_compute_digest_dispatches_by_name() -> None:
    assert compute_digest(b"abc", "md5") == compute_md5(b"abc")
    assert compute_digest(b"abc", "crc32") == compute_crc32(b"abc")


def test_compute_digest_rejects_unknown_algorithm() -> None:
    with pytest.raises(ValueError, match="Unsupported digest algorithm"):
        compute_digest(b"abc", "sha1")


def test_root_hash_of_single_digest() -> None:
    assert compute_root_hash(["abc"]) == _md5("abc")


def test_root_hash_of_empty_sequence_is_defined() -> None:
    assert compute_root_hash([]) == hashlib.md5(b"").hexdigest()


def test_root_hash_pairs_leaves() -> None:
    left, right = _md5("a"), _md5("b")
    assert compute_root_hash(["a", "b"]) == _md5(left + right)


def test_root_hash_promotes_odd_node() -> None:
    a, b, c = _md5("a"), _md5("b"), _md5("c")
    assert compute_root_hash(["a", "b", "c"]) == _md5(_md5(a + b) + c)


def test_root_hash_is_deterministic() -> None:
    digests = [f"{i:08x}" for i in range(17)]
    assert compute_root_hash(digests) == compute_root_hash(list(digests))


def test_root_hash_is_order_sensitive() -> None:
    digests = [f"{i:08x}" for i in range(6)]
    permuted = [digests[1], digests[0], *digests[2:]]
    assert compute_root_hash(digests) != compute_root_hash(permuted)
    assert compute_root_hash(digests) != compute_root_hash(list(reversed(digests)))
