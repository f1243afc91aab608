"""Multiple-timestep (RESPA) integrator over switched force shells."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from ..errors import ConfigurationError
from ..forcefields import ShellResult
from .base import Integrator

if TYPE_CHECKING:
    from ..forcefields import ShellForceEngine
    from ..system import ParticleState


class MultipleTimestepIntegrator(Integrator):
    """
    RESPA multiple-timestep integrator for constant-NVE dynamics.

    The force is split into the K shells of a ShellForceEngine. Shell 0
    (short range, rapidly varying) is integrated with the smallest timestep
    dt_0 = dt; shell k uses dt_k = n_mts[k] * dt_{k-1}. For three shells
    one step reads:

        kick shell 2 by dt_2/2
        repeat n_mts[2] times:
            kick shell 1 by dt_1/2
            repeat n_mts[1] times:
                kick shell 0 by dt_0/2
                drift by dt_0
                recompute shell 0
                kick shell 0 by dt_0/2
            recompute shell 1
            kick shell 1 by dt_1/2
        recompute shell 2
        kick shell 2 by dt_2/2

    The box is not sheared (strain is left unchanged).

    Attributes:
        dt: Innermost timestep.
        n_mts: Timestep multiplier per shell, n_mts[0] == 1.
        engine: Shell force engine.
    """

    def __init__(
        self,
        dt: float,
        n_mts: Sequence[int],
        engine: ShellForceEngine,
    ) -> None:
        """
        Initialize RESPA integrator.

        Args:
            dt: Innermost (shell 0) timestep.
            n_mts: Timestep multiplier for each shell.
            engine: Shell force engine with len(n_mts) shells.

        Raises:
            ConfigurationError: If n_mts does not match the shells.
        """
        super().__init__(engine)
        n_mts = tuple(int(n) for n in n_mts)
        if len(n_mts) != engine.n_shells:
            raise ConfigurationError(
                f"n_mts has {len(n_mts)} entries for {engine.n_shells} shells"
            )
        if n_mts[0] != 1:
            raise ConfigurationError(f"n_mts[0] must be 1, got {n_mts[0]}")
        if any(n < 1 for n in n_mts):
            raise ConfigurationError(f"n_mts entries must be >= 1, got {n_mts}")

        self._dt = dt
        self._n_mts = n_mts
        self._timesteps = tuple(
            float(dt * np.prod(n_mts[: k + 1])) for k in range(len(n_mts))
        )
        self._results: list[ShellResult] | None = None

    @property
    def timestep(self) -> float:
        """Return the outer timestep (one full step)."""
        return self._timesteps[-1]

    @property
    def dt_inner(self) -> float:
        """Return the innermost timestep."""
        return self._dt

    @property
    def n_mts(self) -> tuple[int, ...]:
        """Return the timestep multipliers."""
        return self._n_mts

    @property
    def shell_timesteps(self) -> tuple[float, ...]:
        """Return the timestep of each shell."""
        return self._timesteps

    def prepare(self, state: ParticleState) -> ShellResult:
        """Evaluate every shell and cache the per-shell results."""
        self._results = [
            self._engine.compute_shell(state, shell)
            for shell in range(self._engine.n_shells)
        ]
        result = ShellResult.total(self._results)
        self._check_overlap(result, "Overlap in initial configuration")
        return result

    def reset(self) -> None:
        """Forget cached shell results; the next step re-evaluates all shells."""
        self._results = None

    def _advance(self, state: ParticleState, shell: int) -> None:
        half_dt = 0.5 * self._timesteps[shell]
        forces = self._engine.forces

        state.velocities += half_dt * forces[shell]

        if shell == 0:
            box = state.box
            positions = state.positions + self._dt * state.velocities / box.length
            state.positions = box.wrap_positions(positions)
        else:
            for _ in range(self._n_mts[shell]):
                self._advance(state, shell - 1)

        result = self._engine.compute_shell(state, shell)
        self._results[shell] = result
        self._check_overlap(result, f"Overlap in configuration (shell {shell})")

        state.velocities += half_dt * forces[shell]

    def step(self, state: ParticleState) -> ShellResult:
        """
        Perform one outer RESPA step in place.

        Args:
            state: Current state.

        Returns:
            ShellResult summed over all shells at the end of the step.

        Raises:
            OverlapError: If any shell evaluation reported an overlap.
        """
        if self._results is None:
            self.prepare(state)

        self._advance(state, self._engine.n_shells - 1)

        state.time += self.timestep
        state.step += 1

        return ShellResult.total(self._results)
