"""Cubic periodic box with Lees-Edwards shear."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass
class LeesEdwardsBox:
    """
    Cubic simulation box with sliding-brick (Lees-Edwards) boundaries.

    Positions handled by the box are in box units, i.e. divided by the box
    length so that every component lies in [-0.5, 0.5) after wrapping.
    Periodic images above and below the box in y are displaced in x by
    ``strain`` (in box units, so ``strain * length`` physically).

    Attributes:
        length: Box side length in sigma units. Fixed for a run.
        strain: Accumulated shear strain dr_x/dr_y. Advanced by the SLLOD
            A propagator and never stored wrapped.
    """

    length: float
    strain: float = 0.0

    def __post_init__(self) -> None:
        """Validate box length."""
        self.length = float(self.length)
        self.strain = float(self.strain)
        if self.length <= 0.0:
            raise ValueError(f"Box length must be positive, got {self.length}")

    @classmethod
    def cubic(cls, length: float, strain: float = 0.0) -> LeesEdwardsBox:
        """Create a cubic box with given side length and initial strain."""
        return cls(length=length, strain=strain)

    @property
    def volume(self) -> float:
        """Return box volume."""
        return self.length**3

    def density(self, n_atoms: int) -> float:
        """Return number density N/V."""
        return n_atoms / self.volume

    def advance_strain(self, increment: float) -> None:
        """Add ``increment`` to the accumulated strain."""
        self.strain += increment

    def _shear_correct(self, vectors: NDArray[np.floating]) -> NDArray[np.floating]:
        # Images displaced in y are offset in x by the strain; ties go up so
        # that +0.5 maps to -0.5
        out = np.array(vectors, dtype=np.float64, copy=True)
        out[..., 0] -= np.floor(out[..., 1] + 0.5) * self.strain
        out -= np.floor(out + 0.5)
        return out

    def wrap_positions(self, positions: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap positions into the primary box.

        Args:
            positions: Positions in box units, shape (N, 3) or (3,).

        Returns:
            Wrapped positions with every component in [-0.5, 0.5).
        """
        return self._shear_correct(np.asarray(positions))

    def minimum_image(self, dr: ArrayLike) -> NDArray[np.floating]:
        """
        Compute minimum image separation vectors.

        Args:
            dr: Raw separations r_i - r_j in box units, shape (3,) or (M, 3).

        Returns:
            Separations under the sheared minimum image convention, box units.
        """
        return self._shear_correct(np.asarray(dr))

    def to_physical(self, vectors: ArrayLike) -> NDArray[np.floating]:
        """Convert box-unit vectors to sigma units."""
        return np.asarray(vectors, dtype=np.float64) * self.length

    def to_box_units(self, vectors: ArrayLike) -> NDArray[np.floating]:
        """Convert sigma-unit vectors to box units."""
        return np.asarray(vectors, dtype=np.float64) / self.length

    def copy(self) -> LeesEdwardsBox:
        """Return an independent copy (strain is mutable)."""
        return LeesEdwardsBox(length=self.length, strain=self.strain)
