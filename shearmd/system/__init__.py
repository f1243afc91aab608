"""System state and box management."""

from .box import LeesEdwardsBox
from .state import ParticleState

__all__ = ["LeesEdwardsBox", "ParticleState"]
