"""Utility modules for chunking, hashing and metadata."""

from chunkhash.utils.chunking import Chunk, chunk_size_to_bytes, compute_chunks, split_into_waves
from chunkhash.utils.hashing import compute_crc32, compute_digest, compute_md5, compute_root_hash
from chunkhash.utils.metadata import FileMetadata, get_buffer_metadata, get_path_metadata

__all__ = [
    "Chunk",
    "chunk_size_to_bytes",
    "compute_chunks",
    "split_into_waves",
    "compute_crc32",
    "compute_digest",
    "compute_md5",
    "compute_root_hash",
    "FileMetadata",
    "get_buffer_metadata",
    "get_path_metadata",
]
