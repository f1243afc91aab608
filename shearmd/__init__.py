"""
shearmd - Lennard-Jones molecular dynamics under Lees-Edwards shear.

Features:
- Switched multi-shell pair forces for multiple-timestep integration
- Isokinetic SLLOD integration with sliding-brick boundaries
- Cut-and-shift and long-range corrected observables
- Configurational temperature with the 1/N Hessian correction

Quick Start:
    >>> from shearmd import simulate
    >>> result = simulate.sllod_fluid(n_atoms=108, n_blocks=2, n_steps=200)
    >>> print(f"Mean T(con): {result.mean_config_temperature:.3f}")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .config import RunConfig
from .engines import MDEngine
from .errors import (
    ConfigurationError,
    OverlapError,
    PropagatorSingularError,
    ShearMDError,
)
from .forcefields import LennardJones, ShellCutoffs, ShellForceEngine
from .integrators import IsokineticSLLODIntegrator, MultipleTimestepIntegrator
from .logging_config import setup_logging

# Core components for advanced users
from .system import LeesEdwardsBox, ParticleState

__all__ = [
    "simulate",
    "plotting",
    "RunConfig",
    "setup_logging",
    "LeesEdwardsBox",
    "ParticleState",
    "LennardJones",
    "ShellCutoffs",
    "ShellForceEngine",
    "IsokineticSLLODIntegrator",
    "MultipleTimestepIntegrator",
    "MDEngine",
    "ShearMDError",
    "ConfigurationError",
    "OverlapError",
    "PropagatorSingularError",
]
