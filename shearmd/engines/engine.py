"""Block-averaged MD run loop."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import OverlapError
from ..forcefields.hessian import hessian
from .observables import Observables, compute_observables
from .reporters import Reporter, ReporterGroup

if TYPE_CHECKING:
    from ..forcefields import ShellResult
    from ..integrators import Integrator
    from ..system import ParticleState

logger = logging.getLogger(__name__)


class MDEngine:
    """
    Molecular dynamics simulation engine.

    Orchestrates the block/step loop:
    - State propagation (integrator, which owns the shell force engine)
    - Observables after every step
    - Statistics collection (reporters)

    Example usage:
        force_engine = ShellForceEngine(n_atoms, ShellCutoffs((2.5,)))
        engine = MDEngine(
            state=initial_state,
            integrator=IsokineticSLLODIntegrator(0.005, 0.01, force_engine),
        )
        engine.add_reporter(StateReporter(frequency=100))
        engine.run(n_blocks=10, n_steps=1000)

    Attributes:
        state: Current simulation state.
        integrator: Time integration algorithm.
    """

    def __init__(
        self,
        state: ParticleState,
        integrator: Integrator,
        r_cut: float | None = None,
        compute_hessian: bool = False,
        reporters: list[Reporter] | None = None,
    ) -> None:
        """
        Initialize MD engine and evaluate the starting configuration.

        Args:
            state: Initial simulation state (copied).
            integrator: Time integrator.
            r_cut: Cutoff for long-range corrections and the Hessian.
                Defaults to the outermost shell cutoff.
            compute_hessian: Apply the 1/N correction to the configurational
                temperature.
            reporters: Initial reporters.

        Raises:
            OverlapError: If the initial configuration has an overlap.
        """
        self._state = state.copy()
        self._integrator = integrator
        self._r_cut = (
            r_cut if r_cut is not None else integrator.engine.cutoffs.outer
        )
        self._compute_hessian = compute_hessian

        self._reporters = ReporterGroup(reporters)

        # Tracking
        self._running = False
        self._total_steps = 0
        self._wall_time = 0.0

        self._result = self._integrator.prepare(self._state)
        self._observables = self._compute_observables(self._result)

    @property
    def state(self) -> ParticleState:
        """Return current simulation state."""
        return self._state

    @property
    def integrator(self) -> Integrator:
        """Return integrator."""
        return self._integrator

    @property
    def r_cut(self) -> float:
        """Return the cutoff used for corrections."""
        return self._r_cut

    @property
    def result(self) -> ShellResult:
        """Return the last force evaluation totals."""
        return self._result

    @property
    def observables(self) -> Observables:
        """Return the last computed observables."""
        return self._observables

    @property
    def performance(self) -> dict[str, float]:
        """Return performance statistics."""
        if self._wall_time == 0:
            return {"steps_per_second": 0.0}

        return {
            "steps_per_second": self._total_steps / self._wall_time,
            "wall_time": self._wall_time,
            "total_steps": self._total_steps,
        }

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def _compute_observables(self, result: ShellResult) -> Observables:
        forces = self._integrator.engine.forces
        hes = None
        if self._compute_hessian:
            hes = hessian(
                self._state,
                forces,
                self._r_cut,
                self._integrator.engine.potential,
            )
        return compute_observables(self._state, result, forces, self._r_cut, hes)

    def step(self) -> Observables:
        """
        Perform a single simulation step.

        Returns:
            Observables after the step.

        Raises:
            OverlapError: If the integrator detected an overlap.
        """
        self._result = self._integrator.step(self._state)
        self._observables = self._compute_observables(self._result)
        self._total_steps += 1

        self._reporters.report(self._state, self._observables)
        return self._observables

    def run(
        self,
        n_blocks: int,
        n_steps: int,
        callback: Callable[[MDEngine], bool] | None = None,
    ) -> ParticleState:
        """
        Run n_blocks blocks of n_steps steps each.

        Args:
            n_blocks: Number of blocks.
            n_steps: Steps per block.
            callback: Optional callback called each step.
                Return True to stop simulation early.

        Returns:
            Final simulation state.

        Raises:
            OverlapError: If an overlap occurs; the run is aborted.
        """
        if n_blocks < 0 or n_steps < 0:
            raise ValueError(
                f"n_blocks and n_steps must be non-negative, got {n_blocks}, {n_steps}"
            )

        logger.info(
            "Run: %d blocks x %d steps, N=%d, dt=%g",
            n_blocks,
            n_steps,
            self._state.n_atoms,
            self._integrator.timestep,
        )

        self._running = True
        self._reporters.initialize(self._state)

        start_time = time.perf_counter()

        try:
            for block in range(1, n_blocks + 1):
                for _ in range(n_steps):
                    if not self._running:
                        break

                    self.step()

                    if callback is not None and callback(self):
                        self._running = False
                if not self._running:
                    break

                self._reporters.block_end(block, self._state)
                logger.info(
                    "Block %d/%d: E/N=%.5f P=%.5f T(kin)=%.5f T(con)=%.5f strain=%.5f",
                    block,
                    n_blocks,
                    self._observables.en_s,
                    self._observables.p_s,
                    self._observables.tk,
                    self._observables.tc,
                    self._observables.strain,
                )
        except OverlapError:
            logger.error("Run aborted at step %d", self._state.step)
            raise
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._reporters.finalize(self._state)
            self._running = False

        logger.info(
            "Run finished: %d steps in %.2f s", self._total_steps, self._wall_time
        )
        return self._state

    def stop(self) -> None:
        """Signal simulation to stop."""
        self._running = False
