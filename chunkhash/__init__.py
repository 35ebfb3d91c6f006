"""chunkhash - Chunked, parallel content hashing for large files.

Splits a file into fixed-size chunks, digests them across a bounded worker
pool one wave at a time, and folds the ordered digests into a root hash.
"""

__version__ = "0.1.0"
__author__ = "chunkhash Contributors"

from chunkhash.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
