"""Simulation engine implementations."""

from .engine import MDEngine
from .observables import Observables, compute_observables
from .reporters import (
    ConfigurationReporter,
    ObservableReporter,
    Reporter,
    ReporterGroup,
    StateReporter,
)

__all__ = [
    "MDEngine",
    "Observables",
    "compute_observables",
    "Reporter",
    "ReporterGroup",
    "StateReporter",
    "ObservableReporter",
    "ConfigurationReporter",
]
