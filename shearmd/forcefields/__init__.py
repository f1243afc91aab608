"""Pair potentials, shell force engine and analytic corrections."""

from .base import PairPotential, PairTerms
from .dispersion import potential_lrc, pressure_lrc
from .hessian import configurational_temperature, hessian
from .lj import LennardJones
from .shells import ShellCutoffs, ShellForceEngine, ShellResult
from .switching import smoothstep, switch_off, switch_on

__all__ = [
    "PairPotential",
    "PairTerms",
    "LennardJones",
    "ShellCutoffs",
    "ShellForceEngine",
    "ShellResult",
    "smoothstep",
    "switch_off",
    "switch_on",
    "potential_lrc",
    "pressure_lrc",
    "hessian",
    "configurational_temperature",
]
