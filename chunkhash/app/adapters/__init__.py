"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .source import FileSystemSourceAdapter, InMemorySourceAdapter
from .worker_pool import PoolState, WorkerPool, WorkerPoolManager, WorkerSlot, WorkerState

__all__ = [
    "FileSystemSourceAdapter",
    "InMemorySourceAdapter",
    "PoolState",
    "WorkerPool",
    "WorkerPoolManager",
    "WorkerSlot",
    "WorkerState",
]
