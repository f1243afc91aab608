"""In-process backend."""

from __future__ import annotations

from .base import ParallelBackend


class SerialBackend(ParallelBackend):
    """
    Evaluate every pair block in the calling process, in order.

    With one worker the pair list is a single block unless the engine caps
    the block size. Its reduction order is the reference that the other
    backends reproduce.
    """

    @property
    def name(self) -> str:
        return "serial"

    @property
    def n_workers(self) -> int:
        return 1

    def __repr__(self) -> str:
        return "SerialBackend()"
