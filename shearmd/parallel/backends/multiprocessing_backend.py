"""Process-pool backend for pair blocks."""

from __future__ import annotations

import logging
import multiprocessing as mp
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor
from typing import Any

from .base import ParallelBackend

logger = logging.getLogger(__name__)


class MultiprocessingBackend(ParallelBackend):
    """
    Evaluate pair blocks in a pool of worker processes.

    The pool is started on first use and kept for the lifetime of the
    backend, since a force evaluation happens every step. Each block carries
    its own copy of the positions, so the cost of pickling grows with N and
    the backend only pays off for large systems.

    Example:
        with MultiprocessingBackend(n_workers=4) as backend:
            engine = ShellForceEngine(n_atoms, cutoffs, backend=backend)
            ...
    """

    def __init__(self, n_workers: int | None = None) -> None:
        """
        Initialize multiprocessing backend.

        Args:
            n_workers: Number of worker processes. Defaults to CPU count.
        """
        self._n_workers = n_workers or mp.cpu_count()
        self._executor: ProcessPoolExecutor | None = None

    @property
    def name(self) -> str:
        return "multiprocessing"

    @property
    def n_workers(self) -> int:
        return self._n_workers

    def _pool(self) -> ProcessPoolExecutor:
        if self._executor is None:
            logger.debug("Starting process pool with %d workers", self._n_workers)
            self._executor = ProcessPoolExecutor(max_workers=self._n_workers)
        return self._executor

    def parallel_map(
        self,
        func: Callable[..., Any],
        items: list[Any],
    ) -> list[Any]:
        """
        Apply function to items in the worker pool.

        A single item is evaluated in the calling process.

        Args:
            func: Module-level function (must be picklable).
            items: Items to process (must be picklable).

        Returns:
            Results for each item, in input order.
        """
        if len(items) <= 1:
            return [func(item) for item in items]
        return list(self._pool().map(func, items))

    def close(self) -> None:
        """Shut down the worker pool."""
        if self._executor is not None:
            self._executor.shutdown()
            self._executor = None

    def __enter__(self) -> MultiprocessingBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
