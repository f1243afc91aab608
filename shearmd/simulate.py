"""
Simple high-level simulation API.

This module provides a user-friendly interface for running sheared
Lennard-Jones simulations with minimal configuration.

Example:
    >>> from shearmd import simulate
    >>> result = simulate.sllod_fluid(n_atoms=108, n_blocks=2, n_steps=200)
    >>> print(result.mean_temperature)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .config import RunConfig
from .engines import ConfigurationReporter, MDEngine, ObservableReporter
from .errors import ConfigurationError, OverlapError
from .forcefields import ShellCutoffs, ShellForceEngine
from .integrators import IsokineticSLLODIntegrator, MultipleTimestepIntegrator
from .io import CnfWriter
from .system import LeesEdwardsBox, ParticleState

if TYPE_CHECKING:
    from .engines import Reporter
    from .integrators import Integrator
    from .io import ConfigurationReader
    from .parallel import ParallelBackend

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Results from a simulation run."""

    # Observable time series, one entry per step
    times: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    pressure: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    energy_full: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    pressure_full: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    temperature: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    config_temperature: NDArray[np.floating] = field(
        default_factory=lambda: np.array([])
    )
    strain: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Summary statistics
    mean_temperature: float = 0.0
    mean_config_temperature: float = 0.0
    mean_energy: float = 0.0
    mean_pressure: float = 0.0
    energy_fluctuation: float = 0.0

    # Final configuration
    final_state: ParticleState | None = None

    # Metadata
    n_atoms: int = 0
    n_blocks: int = 0
    n_steps: int = 0
    timestep: float = 0.0
    box_size: float = 0.0


def _create_lattice_positions(
    n_atoms: int, box_length: float, rng: np.random.Generator
) -> NDArray[np.floating]:
    """Create positions on a cubic lattice with small random displacements."""
    n_side = int(np.ceil(n_atoms ** (1 / 3)))
    spacing = box_length / n_side

    grid = (np.arange(n_side) + 0.5) * spacing
    ix, iy, iz = np.meshgrid(grid, grid, grid, indexing="ij")
    positions = np.column_stack([ix.ravel(), iy.ravel(), iz.ravel()])[:n_atoms]

    positions = positions + rng.uniform(-0.1, 0.1, positions.shape)
    return positions - 0.5 * box_length


def _initial_velocities(
    n_atoms: int, temperature: float, rng: np.random.Generator
) -> NDArray[np.floating]:
    """Draw Gaussian velocities, remove net momentum and scale to temperature."""
    velocities = rng.normal(0.0, np.sqrt(temperature), (n_atoms, 3))
    velocities -= velocities.mean(axis=0)

    if n_atoms > 1:
        current = np.sum(velocities**2) / (3 * (n_atoms - 1))
        if current > 0:
            velocities *= np.sqrt(temperature / current)
    return velocities


def lattice_state(
    n_atoms: int = 256,
    density: float = 0.75,
    temperature: float = 1.0,
    seed: int = 42,
) -> ParticleState:
    """
    Build a starting state on a jittered cubic lattice.

    Args:
        n_atoms: Number of atoms.
        density: Reduced number density.
        temperature: Kinetic temperature of the initial velocities.
        seed: Random seed.

    Returns:
        ParticleState with zero strain.
    """
    if n_atoms < 2:
        raise ValueError(f"n_atoms must be >= 2, got {n_atoms}")
    if density <= 0.0:
        raise ValueError(f"density must be positive, got {density}")

    rng = np.random.default_rng(seed)
    box_length = (n_atoms / density) ** (1 / 3)
    box = LeesEdwardsBox.cubic(box_length)

    positions = _create_lattice_positions(n_atoms, box_length, rng)
    velocities = _initial_velocities(n_atoms, temperature, rng)
    return ParticleState.from_physical(positions, box, velocities)


def state_from_reader(reader: ConfigurationReader, seed: int = 42) -> ParticleState:
    """
    Build a starting state from a stored configuration.

    Velocities missing from the file are drawn at unit temperature.
    """
    config = reader.read()
    velocities = config.velocities
    if velocities is None:
        rng = np.random.default_rng(seed)
        velocities = _initial_velocities(config.n_atoms, 1.0, rng)
    box = LeesEdwardsBox.cubic(config.box_length)
    return ParticleState.from_physical(config.positions, box, velocities)


def _check_cutoff(box_length: float, r_cut: float) -> None:
    if r_cut > 0.5 * box_length:
        raise ConfigurationError(
            f"Cutoff {r_cut} exceeds half the box length {box_length:.4f}"
        )


def _check_final_configuration(
    state: ParticleState,
    integrator: Integrator,
    output_dir: str | Path | None,
) -> None:
    """
    Re-evaluate the forces of the final state and optionally save it.

    The state is written to ``cnf.out`` in ``output_dir`` in sigma units.

    Raises:
        OverlapError: If the final configuration has an overlap.
    """
    result = integrator.engine.compute_all(state)
    if result.overlap:
        logger.error("Overlap in final configuration")
        raise OverlapError("Overlap in final configuration")

    if output_dir is not None:
        path = Path(output_dir) / "cnf.out"
        CnfWriter(path).write(
            state.n_atoms,
            state.box.length,
            state.physical_positions,
            state.velocities,
        )
        logger.info("Wrote final configuration to %s", path)


def _run(
    state: ParticleState,
    integrator: Integrator,
    n_blocks: int,
    n_steps: int,
    r_cut: float,
    compute_hessian: bool,
    reporters: list[Reporter] | None,
    output_dir: str | Path | None = None,
) -> SimulationResult:
    collector = ObservableReporter(frequency=1)
    extra = list(reporters or [])
    if output_dir is not None:
        extra.append(ConfigurationReporter(output_dir, n_blocks=n_blocks))

    engine = MDEngine(
        state,
        integrator,
        r_cut=r_cut,
        compute_hessian=compute_hessian,
        reporters=[collector, *extra],
    )
    final = engine.run(n_blocks, n_steps)
    _check_final_configuration(final, integrator, output_dir)

    energy = collector.series("en_s")
    temp = collector.series("tk")
    result = SimulationResult(
        times=collector.times,
        energy=energy,
        pressure=collector.series("p_s"),
        energy_full=collector.series("en_f"),
        pressure_full=collector.series("p_f"),
        temperature=temp,
        config_temperature=collector.series("tc"),
        strain=collector.series("strain"),
        final_state=final,
        n_atoms=final.n_atoms,
        n_blocks=n_blocks,
        n_steps=n_steps,
        timestep=integrator.timestep,
        box_size=final.box.length,
    )

    if collector.n_records > 0:
        result.mean_temperature = float(np.mean(temp))
        result.mean_config_temperature = float(np.mean(result.config_temperature))
        result.mean_energy = float(np.mean(energy))
        result.mean_pressure = float(np.mean(result.pressure))
        mean_energy = np.abs(np.mean(energy))
        if mean_energy > 0:
            result.energy_fluctuation = float(np.std(energy) / mean_energy)

    logger.info(
        "Mean T(kin)=%.4f T(con)=%.4f E/N=%.4f P=%.4f",
        result.mean_temperature,
        result.mean_config_temperature,
        result.mean_energy,
        result.mean_pressure,
    )
    return result


def sllod_fluid(
    n_atoms: int = 256,
    density: float = 0.75,
    temperature: float = 1.0,
    n_blocks: int = 10,
    n_steps: int = 1000,
    dt: float = 0.005,
    strain_rate: float = 0.01,
    r_cut: float = 2.5,
    seed: int = 42,
    state: ParticleState | None = None,
    compute_hessian: bool = False,
    backend: ParallelBackend | str | None = None,
    reporters: list[Reporter] | None = None,
    output_dir: str | Path | None = None,
) -> SimulationResult:
    """
    Run a sheared Lennard-Jones fluid with the isokinetic SLLOD algorithm.

    Args:
        n_atoms: Number of atoms (ignored when ``state`` is given).
        density: Reduced density (ignored when ``state`` is given).
        temperature: Initial temperature, held fixed by the isokinetic
            propagators.
        n_blocks: Number of blocks.
        n_steps: Steps per block.
        dt: Timestep.
        strain_rate: Strain rate dv_x/dr_y.
        r_cut: Cut-and-shift potential cutoff.
        seed: Random seed for the lattice and velocities.
        state: Optional starting state.
        compute_hessian: Apply the 1/N correction to T(con).
        backend: Parallel backend for pair blocks.
        reporters: Additional reporters.
        output_dir: If given, a configuration is written there after each
            block and the final one to ``cnf.out``.

    Returns:
        SimulationResult with the observable series.

    Raises:
        OverlapError: If any configuration, including the final one, has
            an overlap.

    Example:
        >>> result = sllod_fluid(n_atoms=108, n_blocks=1, n_steps=100)
        >>> print(f"Mean T(con): {result.mean_config_temperature:.3f}")
    """
    if state is None:
        state = lattice_state(n_atoms, density, temperature, seed)
    _check_cutoff(state.box.length, r_cut)

    logger.info(
        "SLLOD fluid: N=%d, rho=%.4f, T=%.4f, strain rate=%g, r_cut=%g",
        state.n_atoms,
        state.density,
        state.kinetic_temperature,
        strain_rate,
        r_cut,
    )

    engine = ShellForceEngine(state.n_atoms, ShellCutoffs((r_cut,)), backend=backend)
    integrator = IsokineticSLLODIntegrator(dt, strain_rate, engine)
    return _run(
        state,
        integrator,
        n_blocks,
        n_steps,
        r_cut,
        compute_hessian,
        reporters,
        output_dir,
    )


def mts_fluid(
    n_atoms: int = 256,
    density: float = 0.75,
    temperature: float = 1.0,
    n_blocks: int = 10,
    n_steps: int = 100,
    dt: float = 0.002,
    shell_cutoffs: tuple[float, ...] = (1.5, 2.0, 2.5),
    n_mts: tuple[int, ...] = (1, 2, 2),
    switch_width: float = 0.1,
    seed: int = 42,
    state: ParticleState | None = None,
    compute_hessian: bool = False,
    backend: ParallelBackend | str | None = None,
    reporters: list[Reporter] | None = None,
    output_dir: str | Path | None = None,
) -> SimulationResult:
    """
    Run a constant-NVE Lennard-Jones fluid with multiple-timestep shells.

    Args:
        n_atoms: Number of atoms (ignored when ``state`` is given).
        density: Reduced density (ignored when ``state`` is given).
        temperature: Initial temperature.
        n_blocks: Number of blocks.
        n_steps: Outer steps per block.
        dt: Innermost timestep.
        shell_cutoffs: Increasing shell cutoffs.
        n_mts: Timestep multiplier per shell, first entry 1.
        switch_width: Switching width between shells.
        seed: Random seed for the lattice and velocities.
        state: Optional starting state.
        compute_hessian: Apply the 1/N correction to T(con).
        backend: Parallel backend for pair blocks.
        reporters: Additional reporters.
        output_dir: If given, a configuration is written there after each
            block and the final one to ``cnf.out``.

    Returns:
        SimulationResult with the observable series.

    Raises:
        OverlapError: If any configuration, including the final one, has
            an overlap.
    """
    if state is None:
        state = lattice_state(n_atoms, density, temperature, seed)
    cutoffs = ShellCutoffs(tuple(shell_cutoffs), switch_width)
    _check_cutoff(state.box.length, cutoffs.outer)

    logger.info(
        "MTS fluid: N=%d, rho=%.4f, shells=%s, n_mts=%s, lambda=%g",
        state.n_atoms,
        state.density,
        cutoffs.radii,
        tuple(n_mts),
        switch_width,
    )

    engine = ShellForceEngine(state.n_atoms, cutoffs, backend=backend)
    integrator = MultipleTimestepIntegrator(dt, n_mts, engine)
    return _run(
        state,
        integrator,
        n_blocks,
        n_steps,
        cutoffs.outer,
        compute_hessian,
        reporters,
        output_dir,
    )


def run(
    config: RunConfig,
    state: ParticleState | None = None,
    n_atoms: int = 256,
    density: float = 0.75,
    temperature: float = 1.0,
    output_dir: str | Path | None = None,
    backend: ParallelBackend | str | None = None,
) -> SimulationResult:
    """
    Run the simulation described by a RunConfig.

    Args:
        config: Run configuration.
        state: Optional starting state (e.g. from ``state_from_reader``).
        n_atoms: Number of atoms for a lattice start.
        density: Density for a lattice start.
        temperature: Temperature for a lattice start.
        output_dir: If given, a configuration is written there after each
            block and the final one to ``cnf.out``.
        backend: Parallel backend for pair blocks.

    Returns:
        SimulationResult.
    """
    config.validate()
    if state is None:
        state = lattice_state(n_atoms, density, temperature, config.seed)

    if config.multiple_timestep:
        return mts_fluid(
            n_blocks=config.n_blocks,
            n_steps=config.n_steps,
            dt=config.dt,
            shell_cutoffs=config.shell_cutoffs,
            n_mts=config.n_mts,
            switch_width=config.switch_width,
            state=state,
            backend=backend,
            output_dir=output_dir,
        )
    return sllod_fluid(
        n_blocks=config.n_blocks,
        n_steps=config.n_steps,
        dt=config.dt,
        strain_rate=config.strain_rate,
        r_cut=config.r_cut,
        state=state,
        backend=backend,
        output_dir=output_dir,
    )
