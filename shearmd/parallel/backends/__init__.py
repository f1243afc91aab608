"""Backends that run pair blocks; the MPI backend is imported on demand."""

from .base import ParallelBackend
from .multiprocessing_backend import MultiprocessingBackend
from .serial import SerialBackend

__all__ = ["ParallelBackend", "SerialBackend", "MultiprocessingBackend"]
