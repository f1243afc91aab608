"""Base interface for integrators."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..errors import OverlapError

if TYPE_CHECKING:
    from ..forcefields import ShellForceEngine, ShellResult
    from ..system import ParticleState

logger = logging.getLogger(__name__)


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators advance a ParticleState in place, calling the shell force
    engine they were built with. A force evaluation that reports an overlap
    raises OverlapError; the state is then physically invalid and must not be
    integrated further.
    """

    def __init__(self, engine: ShellForceEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> ShellForceEngine:
        """Return the force engine."""
        return self._engine

    @abstractmethod
    def step(self, state: ParticleState) -> ShellResult:
        """
        Advance the system by one time step, in place.

        Args:
            state: Current state; positions, velocities and box strain are
                updated.

        Returns:
            Totals of the force evaluation(s) made during the step.

        Raises:
            OverlapError: If a force evaluation reported an overlap.
        """
        ...

    @property
    @abstractmethod
    def timestep(self) -> float:
        """Return the integration timestep."""
        ...

    def prepare(self, state: ParticleState) -> ShellResult:
        """
        Evaluate all shells for the starting configuration.

        Args:
            state: Initial state.

        Returns:
            ShellResult summed over shells.

        Raises:
            OverlapError: If the initial configuration has an overlap.
        """
        result = self._engine.compute_all(state)
        self._check_overlap(result, "Overlap in initial configuration")
        return result

    @staticmethod
    def _check_overlap(result: ShellResult, message: str) -> None:
        if result.overlap:
            logger.error(message)
            raise OverlapError(message)
