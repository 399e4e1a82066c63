"""Thread pool backend."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .base import ParallelBackend


class ThreadBackend(ParallelBackend):
    """
    Shared-memory backend using a thread pool.

    Work items run against the caller's objects directly, so mapped
    functions must only read shared state. The order in which partial
    results complete is not fixed, but results are reduced in input order.

    The pool is started by the first map and kept until close().
    """

    def __init__(self, n_workers: int | None = None) -> None:
        """
        Initialize thread backend.

        Args:
            n_workers: Number of worker threads. Defaults to CPU count.
        """
        if n_workers is not None and n_workers < 1:
            raise ValueError(f"n_workers must be positive, got {n_workers}")
        self._n_workers = n_workers or os.cpu_count() or 1
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        """Return backend name."""
        return "threads"

    @property
    def n_workers(self) -> int:
        """Return number of parallel workers."""
        return self._n_workers

    @property
    def is_running(self) -> bool:
        """Return True while the worker pool is alive."""
        return self._executor is not None

    def _pool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._n_workers, thread_name_prefix="mmcore-worker"
                )
            return self._executor

    def parallel_map(
        self,
        func: Callable[..., Any],
        items: Sequence[Any],
    ) -> list[Any]:
        """
        Apply function to items using the thread pool.

        Args:
            func: Function to apply.
            items: Items to process.

        Returns:
            Results for each item.
        """
        if len(items) == 0:
            return []

        return list(self._pool().map(func, items))

    def close(self) -> None:
        """Shut down the worker pool, waiting for running work."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
