"""Base classes for configuration I/O."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass
class Configuration:
    """
    A particle configuration in physical (sigma) units.

    Attributes:
        n_atoms: Number of particles.
        box_length: Cubic box side length.
        positions: Positions, shape (N, 3).
        velocities: Velocities, shape (N, 3), or None if not stored.
    """

    n_atoms: int
    box_length: float
    positions: NDArray[np.floating]
    velocities: NDArray[np.floating] | None = None

    def __post_init__(self) -> None:
        """Validate array shapes."""
        self.positions = np.asarray(self.positions, dtype=np.float64)
        if self.positions.shape != (self.n_atoms, 3):
            raise ValueError(
                f"positions shape {self.positions.shape} incompatible with "
                f"{self.n_atoms} atoms"
            )
        if self.velocities is not None:
            self.velocities = np.asarray(self.velocities, dtype=np.float64)
            if self.velocities.shape != (self.n_atoms, 3):
                raise ValueError(
                    f"velocities shape {self.velocities.shape} incompatible with "
                    f"{self.n_atoms} atoms"
                )


class ConfigurationReader(ABC):
    """
    Abstract base class for configuration sources.

    A reader yields the particle count, box length, positions and velocities
    in physical units. Conversion to box units is done by
    ``ParticleState.from_physical``.
    """

    def __init__(self, filename: str | Path) -> None:
        """
        Initialize reader.

        Args:
            filename: Input file path.
        """
        self.filename = Path(filename)

    @abstractmethod
    def read(self) -> Configuration:
        """Read the configuration."""
        ...


class ConfigurationWriter(ABC):
    """
    Abstract base class for configuration sinks.

    Example:
        CnfWriter("cnf.out").write(n, box, state.physical_positions, state.velocities)
    """

    def __init__(self, filename: str | Path) -> None:
        """
        Initialize writer.

        Args:
            filename: Output file path.
        """
        self.filename = Path(filename)

    @abstractmethod
    def write(
        self,
        n_atoms: int,
        box_length: float,
        positions: ArrayLike,
        velocities: ArrayLike | None = None,
    ) -> None:
        """
        Write a configuration.

        Args:
            n_atoms: Number of particles.
            box_length: Box side length.
            positions: Positions in physical units, shape (N, 3).
            velocities: Optional velocities, shape (N, 3).
        """
        ...
