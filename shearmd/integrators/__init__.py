"""Integrator implementations."""

from .base import Integrator
from .respa import MultipleTimestepIntegrator
from .sllod import IsokineticSLLODIntegrator

__all__ = [
    "Integrator",
    "IsokineticSLLODIntegrator",
    "MultipleTimestepIntegrator",
]
