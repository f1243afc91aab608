"""Particle state representation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .box import LeesEdwardsBox


@dataclass
class ParticleState:
    """
    Positions, velocities and boundary state of an N-particle system.

    All particles have unit mass. Positions are held in box units (divided by
    the box length); velocities are in sigma/tau units. The box carries the
    accumulated shear strain, so every propagator that receives the state also
    receives the boundary.

    Attributes:
        positions: Positions in box units, shape (N, 3).
        velocities: Velocities in physical units, shape (N, 3).
        box: Lees-Edwards box (length and strain).
        time: Current simulation time.
        step: Current step number.
    """

    positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    box: LeesEdwardsBox
    time: float = 0.0
    step: int = 0

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.asarray(self.positions, dtype=np.float64)
        self.velocities = np.asarray(self.velocities, dtype=np.float64)

        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(
                f"positions must have shape (N, 3), got {self.positions.shape}"
            )
        if self.velocities.shape != self.positions.shape:
            raise ValueError(
                f"velocities shape {self.velocities.shape} incompatible with "
                f"{self.n_atoms} atoms"
            )

    @classmethod
    def from_physical(
        cls,
        positions: ArrayLike,
        box: LeesEdwardsBox,
        velocities: ArrayLike | None = None,
    ) -> ParticleState:
        """
        Create a state from positions in sigma units.

        Positions are divided by the box length and wrapped using the
        current strain of ``box``.

        Args:
            positions: Positions in sigma units, shape (N, 3).
            box: Simulation box.
            velocities: Velocities, shape (N, 3). Defaults to zeros.

        Returns:
            New ParticleState.
        """
        positions = np.asarray(positions, dtype=np.float64)
        if velocities is None:
            velocities = np.zeros_like(positions)
        return cls(
            positions=box.wrap_positions(box.to_box_units(positions)),
            velocities=np.asarray(velocities, dtype=np.float64),
            box=box,
        )

    @property
    def n_atoms(self) -> int:
        """Return number of atoms."""
        return len(self.positions)

    @property
    def physical_positions(self) -> NDArray[np.floating]:
        """Return positions in sigma units."""
        return self.box.to_physical(self.positions)

    @property
    def density(self) -> float:
        """Return number density."""
        return self.box.density(self.n_atoms)

    @property
    def kinetic_energy(self) -> float:
        """Compute total kinetic energy 0.5 * sum(v^2) (unit masses)."""
        return 0.5 * float(np.sum(self.velocities**2))

    @property
    def kinetic_temperature(self) -> float:
        """
        Compute kinetic temperature in reduced units.

        Uses T = 2 * KE / (3N - 3), the velocities being peculiar velocities
        with total momentum removed. Returns 0 if N <= 1.
        """
        if self.n_atoms <= 1:
            return 0.0
        return 2.0 * self.kinetic_energy / (3 * (self.n_atoms - 1))

    def copy(self) -> ParticleState:
        """Create a deep copy of this state, including the box."""
        return ParticleState(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            box=self.box.copy(),
            time=self.time,
            step=self.step,
        )
