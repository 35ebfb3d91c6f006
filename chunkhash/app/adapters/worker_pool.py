"""Fixed-capacity worker pool computing chunk digests in parallel."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import (
    BrokenExecutor,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from chunkhash.app.ports import DigestPoolPort, DigestPoolProviderPort
from chunkhash.app.strategy import Algorithm
from chunkhash.errors import PoolTerminatedError, WorkerError
from chunkhash.utils.hashing import compute_digest

logger = logging.getLogger(__name__)

DigestFn = Callable[[bytes, str], str]
Backend = Literal["process", "thread"]


class PoolState(StrEnum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    TERMINATED = "terminated"


class WorkerState(StrEnum):
    IDLE = "idle"
    BUSY = "busy"


@dataclass(slots=True)
class WorkerSlot:
    """Bookkeeping for one worker position in the pool."""

    index: int
    state: WorkerState = WorkerState.IDLE
    completed: int = 0


class WorkerPool(DigestPoolPort):
    """Pool of ``capacity`` workers that digests one wave of buffers at a time.

    Lifecycle: ``uninitialized -> active -> terminated``. The executor is
    created on ``start()`` or on the first ``dispatch()``. A terminated pool
    never comes back; dispatching to it raises ``PoolTerminatedError``.

    Dispatches are serialized, so waves from concurrent callers sharing a
    pool never interleave. ``terminate()`` during a dispatch takes effect
    once that dispatch has collected every digest. A crashed worker breaks
    the executor, so the pool terminates itself and the wave fails.
    """

    def __init__(
        self,
        capacity: int,
        *,
        backend: Backend = "process",
        digest_fn: DigestFn = compute_digest,
    ) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        if backend not in ("process", "thread"):
            raise ValueError(f"Unsupported worker backend: {backend!r}")

        self._capacity = capacity
        self._backend = backend
        self._digest_fn = digest_fn
        self._slots = [WorkerSlot(index=i) for i in range(capacity)]
        self._state = PoolState.UNINITIALIZED
        self._executor: Executor | None = None
        self._dispatch_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._in_flight = False
        self._terminate_requested = False
        self.dispatch_count = 0

    def __repr__(self) -> str:
        return (
            f"WorkerPool(capacity={self._capacity}, backend={self._backend!r}, "
            f"state={self._state.value!r})"
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def closing(self) -> bool:
        """True once termination has been requested or has happened."""
        return self._terminate_requested or self._state is PoolState.TERMINATED

    @property
    def slots(self) -> tuple[WorkerSlot, ...]:
        return tuple(self._slots)

    def start(self) -> None:
        """Create the worker executor (``uninitialized -> active``)."""
        with self._state_lock:
            self._ensure_started()

    def _ensure_started(self) -> None:
        if self._state is PoolState.TERMINATED or self._terminate_requested:
            raise PoolTerminatedError("Worker pool has been terminated")
        if self._state is PoolState.ACTIVE:
            return

        if self._backend == "thread":
            self._executor = ThreadPoolExecutor(
                max_workers=self._capacity,
                thread_name_prefix="chunkhash-worker",
            )
        else:
            self._executor = ProcessPoolExecutor(max_workers=self._capacity)
        self._state = PoolState.ACTIVE
        logger.debug("Started %s worker pool with %d workers", self._backend, self._capacity)

    def dispatch(self, buffers: Sequence[bytes], algorithm: Algorithm | str) -> list[str]:
        """Digest ``buffers`` concurrently and return digests in input order."""
        if len(buffers) > self._capacity:
            raise ValueError(
                f"Wave of {len(buffers)} buffers exceeds pool capacity {self._capacity}"
            )

        with self._dispatch_lock:
            with self._state_lock:
                self._ensure_started()
                self._in_flight = True

            try:
                digests = self._run_wave(buffers, str(algorithm))
                self.dispatch_count += 1
                return digests
            finally:
                with self._state_lock:
                    self._in_flight = False
                    deferred = self._terminate_requested
                if deferred:
                    logger.debug("Applying deferred pool termination")
                    self._shutdown()

    def _run_wave(self, buffers: Sequence[bytes], algorithm: str) -> list[str]:
        assert self._executor is not None
        futures: list[Future[str]] = []

        try:
            for slot, buffer in zip(self._slots, buffers):
                slot.state = WorkerState.BUSY
                futures.append(self._executor.submit(self._digest_fn, buffer, algorithm))
        except Exception as exc:
            wait(futures)
            for slot in self._slots:
                slot.state = WorkerState.IDLE
            if isinstance(exc, BrokenExecutor):
                self._discard_broken_executor()
            raise WorkerError(f"Failed to submit wave to worker pool: {exc}") from exc

        # No mid-wave cancellation: every worker finishes before we report.
        wait(futures)
        for slot, future in zip(self._slots, futures):
            slot.state = WorkerState.IDLE
            if future.exception() is None:
                slot.completed += 1

        if any(isinstance(future.exception(), BrokenExecutor) for future in futures):
            self._discard_broken_executor()

        digests: list[str] = []
        for position, future in enumerate(futures):
            exc = future.exception()
            if exc is not None:
                raise WorkerError(
                    f"Digest computation failed for buffer {position} of the wave: {exc}",
                    position=position,
                ) from exc
            digests.append(future.result())
        return digests

    def _discard_broken_executor(self) -> None:
        # A broken executor accepts no further work.
        logger.warning("Worker pool executor is broken; terminating %r", self)
        self._shutdown()

    def terminate(self) -> None:
        """Release worker resources, deferring until an in-flight dispatch drains."""
        with self._state_lock:
            if self._state is PoolState.TERMINATED:
                return
            if self._in_flight:
                self._terminate_requested = True
                logger.debug("Pool termination deferred until the current wave completes")
                return
        self._shutdown()

    def _shutdown(self) -> None:
        with self._state_lock:
            if self._state is PoolState.TERMINATED:
                return
            executor = self._executor
            self._executor = None
            self._state = PoolState.TERMINATED
            self._terminate_requested = False

        if executor is not None:
            executor.shutdown(wait=True)
        logger.debug("Terminated %s worker pool", self._backend)


class WorkerPoolManager(DigestPoolProviderPort):
    """Caller-owned handle that creates, shares and tears down a ``WorkerPool``.

    ``acquire()`` lazily creates the pool and hands the same instance to
    every invocation until it is terminated. ``release(close_immediately=True)``
    terminates the pool once no other invocation holds it; the next
    ``acquire()`` then builds a fresh one.
    """

    def __init__(
        self,
        capacity: int = 8,
        *,
        backend: Backend = "process",
        digest_fn: DigestFn = compute_digest,
    ) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        self._capacity = capacity
        self._backend = backend
        self._digest_fn = digest_fn
        self._lock = threading.Lock()
        self._pool: WorkerPool | None = None
        self._leases = 0
        self._close_pending = False
        self.pools_created = 0

    def __enter__(self) -> WorkerPoolManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def pool(self) -> WorkerPool | None:
        """The current pool, if one has been created and not torn down."""
        return self._pool

    def acquire(self) -> WorkerPool:
        with self._lock:
            if self._pool is None or self._pool.closing:
                self._pool = WorkerPool(
                    self._capacity,
                    backend=self._backend,
                    digest_fn=self._digest_fn,
                )
                self._close_pending = False
                self.pools_created += 1
                logger.debug("Created worker pool #%d", self.pools_created)
            self._leases += 1
            return self._pool

    def release(self, *, close_immediately: bool) -> None:
        with self._lock:
            self._leases = max(0, self._leases - 1)
            if close_immediately:
                self._close_pending = True
            if not self._close_pending or self._leases:
                return
            pool = self._pool
            self._pool = None
            self._close_pending = False

        if pool is not None:
            pool.terminate()

    def shutdown(self) -> None:
        """Tear down the current pool regardless of outstanding invocations."""
        with self._lock:
            pool = self._pool
            self._pool = None
            self._close_pending = False

        if pool is not None:
            pool.terminate()
