"""Abstract base class for parallel backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any


class ParallelBackend(ABC):
    """
    Abstract base class for parallelization backends.

    The force field engine uses a backend for the map + reduce over its
    energy terms, allowing transparent switching between serial and
    threaded evaluation.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return backend name."""
        ...

    @property
    @abstractmethod
    def n_workers(self) -> int:
        """Return number of parallel workers."""
        ...

    def parallel_map(
        self,
        func: Callable[..., Any],
        items: Sequence[Any],
    ) -> list[Any]:
        """
        Apply function to items in parallel.

        Default implementation is serial; backends can override.

        Args:
            func: Function to apply.
            items: Items to process.

        Returns:
            Results for each item, in input order.
        """
        return [func(item) for item in items]

    def close(self) -> None:
        """Release worker resources. The backend may be used again afterwards."""

    def __enter__(self) -> ParallelBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reduce_sum(self, values: Sequence[float]) -> float:
        """Sum partial results."""
        total = 0.0
        for value in values:
            total += value
        return total

    def map_reduce(self, func: Callable[..., float], items: Sequence[Any]) -> float:
        """Map ``func`` over chunks of ``items`` and sum the results."""
        return self.reduce_sum(self.parallel_map(func, self.partition(items)))

    def partition(self, items: Sequence[Any]) -> list[Sequence[Any]]:
        """
        Split items into one contiguous chunk per worker.

        Args:
            items: Items to split.

        Returns:
            Non-empty chunks whose concatenation is ``items``.
        """
        n_items = len(items)
        n_chunks = max(1, min(self.n_workers, n_items))
        items_per_chunk = n_items // n_chunks
        remainder = n_items % n_chunks

        chunks = []
        start = 0
        for rank in range(n_chunks):
            end = start + items_per_chunk + (1 if rank < remainder else 0)
            if end > start:
                chunks.append(items[start:end])
            start = end
        return chunks
