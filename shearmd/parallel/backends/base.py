"""Abstract base class for parallel backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class ParallelBackend(ABC):
    """
    Abstract base class for parallelization backends.

    The pair loop of a force evaluation is split into independent blocks of
    pairs; each block is reduced to a partial accumulator by a worker and the
    partials are merged by the caller. Backends only decide where the blocks
    run.
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
        items: list[Any],
    ) -> list[Any]:
        """
        Apply function to items, preserving order.

        Default implementation is serial; backends can override.

        Args:
            func: Function to apply.
            items: Items to process.

        Returns:
            Results for each item.
        """
        return [func(item) for item in items]

    def partition_pairs(
        self,
        n_pairs: int,
        max_block_size: int | None = None,
    ) -> list[tuple[int, int]]:
        """
        Split a pair list into contiguous blocks.

        At least one block per worker is produced; blocks are further split
        so that none exceeds ``max_block_size`` pairs.

        Args:
            n_pairs: Total number of pairs.
            max_block_size: Upper bound on pairs per block.

        Returns:
            List of (start_index, end_index) ranges covering [0, n_pairs).
        """
        if n_pairs == 0:
            return []

        n_blocks = min(self.n_workers, n_pairs)
        if max_block_size is not None and max_block_size > 0:
            n_blocks = max(n_blocks, -(-n_pairs // max_block_size))

        pairs_per_block = n_pairs // n_blocks
        remainder = n_pairs % n_blocks

        blocks = []
        start = 0
        for block in range(n_blocks):
            end = start + pairs_per_block + (1 if block < remainder else 0)
            blocks.append((start, end))
            start = end

        return blocks
