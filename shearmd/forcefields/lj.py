"""Lennard-Jones pair potential."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .base import PairPotential, PairTerms
from .dispersion import potential_lrc, pressure_lrc


class LennardJones(PairPotential):
    """
    Lennard-Jones 12-6 potential in reduced units (sigma = epsilon = 1).

    V(r) = 4 * [(1/r)^12 - (1/r)^6]

    Separations with 1/r^2 above ``overlap_sr2`` (r below about 0.745) are
    flagged as overlaps by the force engine.
    """

    def __init__(self, overlap_sr2: float = 1.8) -> None:
        """
        Initialize Lennard-Jones potential.

        Args:
            overlap_sr2: Overlap threshold on 1/r^2.
        """
        self._overlap_sr2 = overlap_sr2

    @property
    def overlap_sr2(self) -> float:
        return self._overlap_sr2

    def energy(self, r_sq: NDArray[np.floating]) -> NDArray[np.floating]:
        sr2 = 1.0 / np.asarray(r_sq, dtype=np.float64)
        sr6 = sr2**3
        return 4.0 * (sr6**2 - sr6)

    def evaluate(self, r_sq: NDArray[np.floating]) -> PairTerms:
        sr2 = 1.0 / np.asarray(r_sq, dtype=np.float64)
        sr6 = sr2**3
        sr12 = sr6**2
        return PairTerms(
            cut=4.0 * (sr12 - sr6),
            virial=24.0 * (2.0 * sr12 - sr6),
            laplacian=24.0 * (22.0 * sr12 - 5.0 * sr6) * sr2,
        )

    def hessian_coefficients(
        self, r_sq: NDArray[np.floating]
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        sr2 = 1.0 / np.asarray(r_sq, dtype=np.float64)
        sr6 = sr2**3
        sr8 = sr6 * sr2
        sr10 = sr8 * sr2
        v1 = 24.0 * (1.0 - 2.0 * sr6) * sr8
        v2 = 96.0 * (7.0 * sr6 - 2.0) * sr10
        return v1, v2

    def potential_lrc(self, density: float, r_cut: float) -> float:
        """Long-range correction to the energy per atom."""
        return potential_lrc(density, r_cut)

    def pressure_lrc(self, density: float, r_cut: float) -> float:
        """Long-range correction to the pressure."""
        return pressure_lrc(density, r_cut)

    def __repr__(self) -> str:
        return f"LennardJones(overlap_sr2={self._overlap_sr2})"
