"""Base interface for pair potentials."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PairTerms:
    """
    Unswitched pair quantities for a batch of separations.

    Attributes:
        cut: Cut (but not shifted) pair potential u(r).
        virial: Pair virial -r * du/dr, so that the force on i from j is
            r_ij * virial / r^2.
        laplacian: Pair Laplacian u''(r) + 2 u'(r) / r.
    """

    cut: NDArray[np.floating]
    virial: NDArray[np.floating]
    laplacian: NDArray[np.floating]


class PairPotential(ABC):
    """
    Abstract base class for isotropic pair potentials.

    The shell force engine only needs the pair energy, virial and Laplacian
    as functions of the squared separation, so any short-ranged model can be
    dropped in. All quantities are in reduced units.
    """

    @property
    @abstractmethod
    def overlap_sr2(self) -> float:
        """Threshold on 1/r^2 above which a pair counts as an overlap."""
        ...

    @abstractmethod
    def energy(self, r_sq: NDArray[np.floating]) -> NDArray[np.floating]:
        """
        Compute the unshifted pair potential.

        Args:
            r_sq: Squared separations.

        Returns:
            Pair energies, same shape as ``r_sq``.
        """
        ...

    @abstractmethod
    def evaluate(self, r_sq: NDArray[np.floating]) -> PairTerms:
        """
        Compute cut potential, virial and Laplacian for each separation.

        Args:
            r_sq: Squared separations.

        Returns:
            PairTerms with arrays shaped like ``r_sq``.
        """
        ...

    @abstractmethod
    def hessian_coefficients(
        self, r_sq: NDArray[np.floating]
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """
        Coefficients of the pair Hessian block.

        The block is ``v1 * I + v2 * r r^T`` so that for a vector g,
        ``g . H . g = v1 * |g|^2 + v2 * (r . g)^2``.

        Args:
            r_sq: Squared separations.

        Returns:
            Tuple of (v1, v2) arrays.
        """
        ...

    def shift(self, r_cut: float) -> float:
        """Return the potential at ``r_cut``, used to shift it to zero there."""
        return float(self.energy(np.array([r_cut**2]))[0])
