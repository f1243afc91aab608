"""Per-step thermodynamic observables."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import TYPE_CHECKING, ClassVar

import numpy as np
from numpy.typing import ArrayLike

from ..forcefields.dispersion import potential_lrc, pressure_lrc
from ..forcefields.hessian import configurational_temperature

if TYPE_CHECKING:
    from ..forcefields import ShellResult
    from ..system import ParticleState


@dataclass(frozen=True)
class Observables:
    """
    Named scalars handed to the statistics collector each step.

    Attributes:
        en_s: Internal energy per atom, cut-and-shifted potential.
        p_s: Pressure, cut-and-shifted potential.
        en_f: Internal energy per atom, full potential with long-range correction.
        p_f: Pressure, full potential with long-range correction.
        tk: Kinetic temperature.
        tc: Configurational temperature.
        strain: Accumulated shear strain.
    """

    LABELS: ClassVar[tuple[str, ...]] = (
        "E/N (cut&shift)",
        "P (cut&shift)",
        "E/N (full)",
        "P (full)",
        "T (kin)",
        "T (con)",
        "Strain",
    )

    en_s: float
    p_s: float
    en_f: float
    p_f: float
    tk: float
    tc: float
    strain: float = 0.0

    def as_tuple(self) -> tuple[float, ...]:
        """Return values in LABELS order."""
        return astuple(self)

    def as_dict(self) -> dict[str, float]:
        """Return values keyed by label."""
        return dict(zip(self.LABELS, self.as_tuple()))


def compute_observables(
    state: ParticleState,
    result: ShellResult,
    forces: ArrayLike,
    r_cut: float,
    hes: float | None = None,
) -> Observables:
    """
    Combine a force evaluation and the velocities into observables.

    Args:
        state: Current state.
        result: Summed shell result for the configuration.
        forces: Total forces, shape (N, 3), or per-shell (K, N, 3).
        r_cut: Potential cutoff used for the long-range corrections.
        hes: Optional Hessian term for the 1/N configurational temperature
            correction.

    Returns:
        Observables for this step.
    """
    forces = np.asarray(forces, dtype=np.float64)
    if forces.ndim == 3:
        forces = forces.sum(axis=0)

    n_atoms = state.n_atoms
    density = state.density
    kin = state.kinetic_energy
    tk = state.kinetic_temperature

    en_s = (result.potential + kin) / n_atoms
    en_f = (result.cut_potential + kin) / n_atoms + potential_lrc(density, r_cut)
    p_s = density * tk + result.virial / state.box.volume
    p_f = p_s + pressure_lrc(density, r_cut)

    fsq = float(np.sum(forces**2))
    tc = configurational_temperature(fsq, result.laplacian, hes)

    return Observables(
        en_s=en_s,
        p_s=p_s,
        en_f=en_f,
        p_f=p_f,
        tk=tk,
        tc=tc,
        strain=state.box.strain,
    )
