"""Configurational temperature and its Hessian correction."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike

from .lj import LennardJones

if TYPE_CHECKING:
    from ..system import ParticleState
    from .base import PairPotential


def hessian(
    state: ParticleState,
    forces: ArrayLike,
    r_cut: float,
    potential: PairPotential | None = None,
) -> float:
    """
    Compute the Hessian term F.H.F of the 1/N configurational temperature correction.

    The forces must already be complete and consistent with ``state``;
    this is not checked. Per-shell forces of shape (K, N, 3) are summed over
    shells first.

    Args:
        state: Particle state (positions in box units).
        forces: Forces, shape (K, N, 3) or (N, 3).
        r_cut: Potential cutoff distance (sigma units).
        potential: Pair potential supplying the Hessian coefficients.
            Defaults to LennardJones().

    Returns:
        Sum over pairs within r_cut of v1 |f_ij|^2 + v2 (r_ij . f_ij)^2, where
        f_ij = f_i - f_j (sigma = epsilon = 1 units).
    """
    if potential is None:
        potential = LennardJones()

    forces = np.asarray(forces, dtype=np.float64)
    if forces.ndim == 3:
        forces = forces.sum(axis=0)

    box = state.box
    i_indices, j_indices = np.triu_indices(state.n_atoms, k=1)
    dr = box.minimum_image(state.positions[i_indices] - state.positions[j_indices])
    r_sq = np.sum(dr**2, axis=1)

    within = r_sq < (r_cut / box.length) ** 2
    if not np.any(within):
        return 0.0

    dr = box.to_physical(dr[within])
    r_sq = r_sq[within] * box.length**2
    fij = forces[i_indices[within]] - forces[j_indices[within]]

    ff = np.sum(fij * fij, axis=1)
    rf = np.sum(dr * fij, axis=1)
    v1, v2 = potential.hessian_coefficients(r_sq)

    return float(np.sum(v1 * ff + v2 * rf**2))


def configurational_temperature(
    fsq: float, laplacian: float, hes: float | None = None
) -> float:
    """
    Configurational temperature from squared forces and the Laplacian.

    Without ``hes`` this is T_c = sum(f^2) / laplacian. With the Hessian term
    the 1/N microcanonical correction is applied:
    T_c = sum(f^2) / (laplacian - 2 * hes / sum(f^2)).

    Args:
        fsq: Sum of squared total forces.
        laplacian: Total Laplacian of the potential.
        hes: Optional Hessian term from ``hessian()``.

    Returns:
        Configurational temperature, or 0.0 if the denominator vanishes.
    """
    denominator = laplacian
    if hes is not None and fsq > 0.0:
        denominator = laplacian - 2.0 * hes / fsq
    if denominator == 0.0:
        return 0.0
    return fsq / denominator
