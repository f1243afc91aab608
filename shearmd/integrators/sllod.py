"""Isokinetic SLLOD integrator for Lees-Edwards shear flow."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import PropagatorSingularError
from .base import Integrator

if TYPE_CHECKING:
    from ..forcefields import ShellForceEngine, ShellResult
    from ..system import ParticleState


class IsokineticSLLODIntegrator(Integrator):
    """
    Isokinetic SLLOD algorithm with Lees-Edwards boundaries.

    Implements the time-reversible splitting of Pan et al., J Chem Phys 122,
    094114 (2005). One step is

        A(dt/2) B1(dt/2) [forces] B2(dt) B1(dt/2) A(dt/2)

    where A drifts positions and advances the box strain, B1 applies the
    shear term to the velocities and B2 the forces, both B propagators
    keeping the kinetic energy exactly constant. Particle masses are 1 and
    velocities are peculiar (relative to the streaming profile).

    Attributes:
        dt: Time step.
        strain_rate: Velocity gradient dv_x/dr_y.
        engine: Shell force engine; forces are summed over its shells.
    """

    def __init__(
        self,
        dt: float,
        strain_rate: float,
        engine: ShellForceEngine,
        parallel_tolerance: float = 1e-10,
    ) -> None:
        """
        Initialize SLLOD integrator.

        Args:
            dt: Time step.
            strain_rate: Strain rate (dv_x/dr_y).
            engine: Shell force engine (usually with a single shell).
            parallel_tolerance: Relative tolerance on alpha - beta below
                which forces are treated as parallel to velocities in B2.
        """
        super().__init__(engine)
        self._dt = dt
        self._strain_rate = strain_rate
        self._parallel_tolerance = parallel_tolerance

    @property
    def timestep(self) -> float:
        return self._dt

    @property
    def strain_rate(self) -> float:
        """Return the strain rate."""
        return self._strain_rate

    def a_propagator(self, state: ParticleState, t: float) -> None:
        """
        Drift positions and advance the strain over time ``t``.

        Args:
            state: State to update in place.
            t: Time over which to propagate (typically dt/2).
        """
        box = state.box
        x = t * self._strain_rate  # Change in strain

        positions = state.positions
        positions[:, 0] += x * positions[:, 1]
        positions += t * state.velocities / box.length
        box.advance_strain(x)

        state.positions = box.wrap_positions(positions)

    def b1_propagator(self, state: ParticleState, t: float) -> None:
        """
        Apply the shear term to velocities at constant kinetic energy.

        Args:
            state: State to update in place.
            t: Time over which to propagate (typically dt/2).

        Raises:
            PropagatorSingularError: If all velocities are zero.
        """
        x = t * self._strain_rate
        if x == 0.0:
            return

        v = state.velocities
        vv = np.sum(v**2)
        if vv == 0.0:
            raise PropagatorSingularError("B1 propagator needs nonzero velocities")

        c1 = x * np.sum(v[:, 0] * v[:, 1]) / vv
        c2 = x**2 * np.sum(v[:, 1] ** 2) / vv

        v[:, 0] -= x * v[:, 1]
        v /= np.sqrt(1.0 - 2.0 * c1 + c2)

    def b2_propagator(
        self, state: ParticleState, forces: NDArray[np.floating], t: float
    ) -> None:
        """
        Apply forces to velocities at constant kinetic energy.

        Integrates dv/dt = f - alpha v exactly for constant f, with the
        multiplier alpha = f.v / v.v keeping v.v fixed.

        When f is (numerically) parallel to v the closed form has a 0/0; the
        h -> infinity limit v <- e v + (1 - e) f / beta is used instead. Zero
        forces leave v unchanged.

        Args:
            state: State to update in place.
            forces: Total forces, shape (N, 3).
            t: Time over which to propagate (typically dt).

        Raises:
            PropagatorSingularError: If all velocities are zero, or the update
                is not finite.
        """
        v = state.velocities
        vv = np.sum(v**2)
        if vv == 0.0:
            raise PropagatorSingularError("B2 propagator needs nonzero velocities")

        ff = np.sum(forces**2)
        if ff == 0.0:
            return

        alpha = np.sum(forces * v) / vv
        beta = np.sqrt(ff / vv)
        e = np.exp(-beta * t)

        if beta - alpha <= self._parallel_tolerance * beta:
            new_v = e * v + (1.0 - e) * forces / beta
        else:
            h = (alpha + beta) / (alpha - beta)
            dt_factor = (1.0 + h - e - h / e) / ((1.0 - h) * beta)
            prefactor = (1.0 - h) / (e - h / e)
            new_v = prefactor * (v + dt_factor * forces)

        if not np.all(np.isfinite(new_v)):
            raise PropagatorSingularError(
                f"B2 propagator produced non-finite velocities "
                f"(alpha={alpha}, beta={beta})"
            )

        state.velocities[:] = new_v

    def step(self, state: ParticleState) -> ShellResult:
        """
        Perform one isokinetic SLLOD step in place.

        Args:
            state: Current state.

        Returns:
            ShellResult of the mid-step force evaluation.

        Raises:
            OverlapError: If the mid-step configuration has an overlap.
        """
        half_dt = 0.5 * self._dt

        self.a_propagator(state, half_dt)
        self.b1_propagator(state, half_dt)

        result = self._engine.compute_all(state)
        self._check_overlap(result, "Overlap in configuration")

        self.b2_propagator(state, self._engine.total_forces, self._dt)
        self.b1_propagator(state, half_dt)
        self.a_propagator(state, half_dt)

        state.time += self._dt
        state.step += 1

        return result
