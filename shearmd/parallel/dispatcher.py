"""Selection of the backend used for pair-block evaluation."""

from __future__ import annotations

import importlib.util
from collections.abc import Callable
from typing import Literal

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend

BackendType = Literal["serial", "multiprocessing", "mpi4py"]

# Backend used when a force engine is built without one
_default_backend: ParallelBackend | None = None


def _create_multiprocessing(**kwargs) -> ParallelBackend:
    from .backends.multiprocessing_backend import MultiprocessingBackend

    return MultiprocessingBackend(**kwargs)


def _create_mpi(**kwargs) -> ParallelBackend:
    from .backends.mpi4py_backend import MPI4PyBackend

    return MPI4PyBackend(**kwargs)


_FACTORIES: dict[str, Callable[..., ParallelBackend]] = {
    "serial": SerialBackend,
    "multiprocessing": _create_multiprocessing,
    "mpi4py": _create_mpi,
}


def available_backends() -> list[str]:
    """Return the names of backends whose dependencies are installed."""
    names = ["serial", "multiprocessing"]
    if importlib.util.find_spec("mpi4py") is not None:
        names.append("mpi4py")
    return names


def create_backend(name: BackendType, **kwargs) -> ParallelBackend:
    """
    Create a parallel backend by name.

    Args:
        name: One of "serial", "multiprocessing", "mpi4py".
        **kwargs: Backend-specific arguments (e.g. n_workers).

    Returns:
        New ParallelBackend instance.

    Raises:
        ValueError: If backend name is unknown.
    """
    try:
        factory = _FACTORIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend: {name}. Available: {', '.join(_FACTORIES)}"
        ) from None
    return factory(**kwargs)


def get_backend(
    backend: BackendType | ParallelBackend | None = None,
    **kwargs,
) -> ParallelBackend:
    """
    Resolve a backend name or instance.

    Args:
        backend: None for the default backend (serial unless changed with
            ``set_default_backend``), a backend name, or an instance, which
            is returned unchanged.
        **kwargs: Arguments for backend creation when a name is given.

    Returns:
        ParallelBackend instance.

    Examples:
        >>> backend = get_backend()
        >>> backend = get_backend("multiprocessing", n_workers=4)
    """
    global _default_backend

    if isinstance(backend, ParallelBackend):
        return backend
    if backend is not None:
        return create_backend(backend, **kwargs)

    if _default_backend is None:
        _default_backend = SerialBackend()
    return _default_backend


def set_default_backend(
    backend: BackendType | ParallelBackend,
    **kwargs,
) -> ParallelBackend:
    """
    Set the backend used by force engines built without one.

    Returns:
        The new default backend.
    """
    global _default_backend

    _default_backend = get_backend(backend, **kwargs)
    return _default_backend


def reset_default_backend() -> None:
    """Reset default backend to None (will use serial on next get)."""
    global _default_backend
    _default_backend = None
