"""
Multi-shell pair force engine.

The interaction range is split into K nested shells with cutoffs
r_cut[0] < r_cut[1] < ... < r_cut[K-1]. A pair contributes to shell k with
weight w_k(r) = S_k(r) - S_{k-1}(r), where S_k switches smoothly from 1 to 0
over [r_cut[k] - width, r_cut[k]] (no switch at the outermost cutoff). The
weights sum to one over all shells, so summing the per-shell forces or
virials recovers the plain cut-and-shifted potential, while each shell on its
own is smooth enough to be integrated with its own timestep.

Forces are kept per shell in a (K, N, 3) array. The virial of each shell
includes the derivative of the switching weight because it is used to build
the forces; these extra terms cancel when the shells are summed. The
Laplacian carries the weight only, since it is only ever needed summed over
all shells at the end of a full step.

Positions are in box units; all energies, virials and forces are in
sigma = epsilon = 1 units.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError
from ..parallel import get_backend
from .lj import LennardJones
from .switching import switch_off, switch_on

if TYPE_CHECKING:
    from ..parallel import ParallelBackend
    from ..system import LeesEdwardsBox, ParticleState
    from .base import PairPotential

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShellCutoffs:
    """
    Ordered shell cutoffs and the switching width between shells.

    Attributes:
        radii: Cutoff distance of each shell, strictly increasing.
        switch_width: Width of the switching region (lambda). Consecutive
            cutoffs must be at least this far apart.
    """

    radii: tuple[float, ...]
    switch_width: float = 0.0

    def __post_init__(self) -> None:
        """Validate the cutoff set."""
        radii = tuple(float(r) for r in np.atleast_1d(self.radii))
        object.__setattr__(self, "radii", radii)
        object.__setattr__(self, "switch_width", float(self.switch_width))

        if len(radii) == 0:
            raise ConfigurationError("At least one shell cutoff is required")
        if self.switch_width < 0.0:
            raise ConfigurationError(
                f"Switch width must be non-negative, got {self.switch_width}"
            )
        if radii[0] <= 0.0:
            raise ConfigurationError(f"Cutoffs must be positive, got {radii}")
        if len(radii) > 1 and radii[0] < self.switch_width:
            raise ConfigurationError(
                f"Innermost cutoff {radii[0]} is shorter than switch width "
                f"{self.switch_width}"
            )
        for inner, outer in zip(radii[:-1], radii[1:]):
            if outer <= inner:
                raise ConfigurationError(
                    f"Cutoffs must be strictly increasing, got {radii}"
                )
            if outer - inner < self.switch_width:
                raise ConfigurationError(
                    f"Cutoffs {inner} and {outer} are closer than switch width "
                    f"{self.switch_width}"
                )

    @property
    def n_shells(self) -> int:
        """Return number of shells K."""
        return len(self.radii)

    @property
    def outer(self) -> float:
        """Return the outermost cutoff."""
        return self.radii[-1]

    def __len__(self) -> int:
        return len(self.radii)

    def __getitem__(self, shell: int) -> float:
        return self.radii[shell]

    def check_shell(self, shell: int) -> None:
        """Raise ConfigurationError unless 0 <= shell < K."""
        if not 0 <= shell < self.n_shells:
            raise ConfigurationError(
                f"Shell index {shell} out of range [0, {self.n_shells})"
            )

    def bounds(self, shell: int) -> tuple[float, float]:
        """
        Return (inner, outer) cutoff of a shell.

        The inner cutoff of shell 0 is zero.
        """
        self.check_shell(shell)
        inner = 0.0 if shell == 0 else self.radii[shell - 1]
        return inner, self.radii[shell]


@dataclass(frozen=True)
class ShellResult:
    """
    Totals from one (or several summed) shell force evaluations.

    Attributes:
        potential: Cut-and-shifted potential energy.
        cut_potential: Cut (but not shifted) potential energy.
        virial: Total virial, already divided by 3.
        laplacian: Total Laplacian of the potential, counting ij and ji.
        overlap: True if any pair was closer than the overlap threshold; if
            set, none of the other values may be used.
    """

    potential: float = 0.0
    cut_potential: float = 0.0
    virial: float = 0.0
    laplacian: float = 0.0
    overlap: bool = False

    def __add__(self, other: ShellResult) -> ShellResult:
        if not isinstance(other, ShellResult):
            return NotImplemented
        return ShellResult(
            potential=self.potential + other.potential,
            cut_potential=self.cut_potential + other.cut_potential,
            virial=self.virial + other.virial,
            laplacian=self.laplacian + other.laplacian,
            overlap=self.overlap or other.overlap,
        )

    @classmethod
    def total(cls, results: Iterable[ShellResult]) -> ShellResult:
        """Sum an iterable of results."""
        total = cls()
        for result in results:
            total = total + result
        return total


@dataclass
class _PairBlock:
    """One contiguous block of pairs evaluated for a single shell."""

    positions: NDArray[np.floating]
    box: LeesEdwardsBox
    i_indices: NDArray[np.integer]
    j_indices: NDArray[np.integer]
    potential: PairPotential
    inner: float
    inner_lower: float
    outer: float
    switch_width: float
    switch_outer: bool
    pot_shift: float


@dataclass
class _PartialSums:
    """Accumulators for one pair block, merged after all blocks finish."""

    forces: NDArray[np.floating]
    potential: float = 0.0
    cut_potential: float = 0.0
    virial: float = 0.0
    laplacian: float = 0.0
    overlap: bool = False
    n_pairs: int = 0


def _evaluate_pair_block(block: _PairBlock) -> _PartialSums:
    """Evaluate the shell contribution of one block of pairs."""
    n_atoms = len(block.positions)
    partial = _PartialSums(forces=np.zeros((n_atoms, 3), dtype=np.float64))

    box = block.box
    dr = box.minimum_image(
        block.positions[block.i_indices] - block.positions[block.j_indices]
    )
    dr = box.to_physical(dr)
    r_sq = np.sum(dr**2, axis=1)

    in_shell = (r_sq <= block.outer**2) & (r_sq >= block.inner_lower**2)
    if not np.any(in_shell):
        return partial

    i_indices = block.i_indices[in_shell]
    j_indices = block.j_indices[in_shell]
    dr = dr[in_shell]
    r_sq = r_sq[in_shell]

    partial.overlap = bool(np.any(1.0 / r_sq > block.potential.overlap_sr2))

    terms = block.potential.evaluate(r_sq)
    pot_shifted = terms.cut - block.pot_shift

    weight = np.ones_like(r_sq)
    dweight = np.zeros_like(r_sq)

    # Switching on across the previous shell's boundary
    rising = r_sq < block.inner**2
    if np.any(rising):
        weight[rising], dweight[rising] = switch_on(
            np.sqrt(r_sq[rising]), block.inner, block.switch_width
        )

    # Switching off across this shell's own boundary
    if block.switch_outer:
        falling = ~rising & (r_sq > (block.outer - block.switch_width) ** 2)
        if np.any(falling):
            weight[falling], dweight[falling] = switch_off(
                np.sqrt(r_sq[falling]), block.outer, block.switch_width
            )

    pot_ij = weight * pot_shifted
    cut_ij = weight * terms.cut
    vir_ij = weight * terms.virial + dweight * pot_shifted
    lap_ij = weight * terms.laplacian

    fij = dr * (vir_ij / r_sq)[:, np.newaxis]
    np.add.at(partial.forces, i_indices, fij)
    np.add.at(partial.forces, j_indices, -fij)

    partial.potential = float(np.sum(pot_ij))
    partial.cut_potential = float(np.sum(cut_ij))
    partial.virial = float(np.sum(vir_ij))
    partial.laplacian = float(np.sum(lap_ij))
    partial.n_pairs = len(r_sq)

    return partial


class ShellForceEngine:
    """
    Switched multi-shell pair force engine.

    Holds the per-shell force array of shape (K, N, 3). Each call to
    ``compute_shell`` zeroes and rewrites exactly one shell slice, so the
    slices of other shells keep the forces from their own last evaluation;
    this is what a multiple-timestep integrator needs.

    Example:
        engine = ShellForceEngine(
            n_atoms=256,
            cutoffs=ShellCutoffs((1.5, 2.5), switch_width=0.2),
        )
        result = engine.compute_all(state)
        if result.overlap:
            ...
        total = engine.total_forces

    Attributes:
        cutoffs: Shell cutoffs and switch width.
        potential: Pair potential (Lennard-Jones by default).
        forces: Per-shell forces, shape (K, N, 3).
    """

    def __init__(
        self,
        n_atoms: int,
        cutoffs: ShellCutoffs | Sequence[float],
        potential: PairPotential | None = None,
        switch_width: float | None = None,
        backend: ParallelBackend | str | None = None,
        max_block_size: int = 262144,
    ) -> None:
        """
        Initialize the force engine.

        Args:
            n_atoms: Number of particles N (fixed for the run).
            cutoffs: ShellCutoffs, or a sequence of cutoff radii.
            potential: Pair potential. Defaults to LennardJones().
            switch_width: Switch width when ``cutoffs`` is a plain sequence.
            backend: Parallel backend (instance or name) for pair blocks.
            max_block_size: Maximum number of pairs per block.
        """
        if not isinstance(cutoffs, ShellCutoffs):
            cutoffs = ShellCutoffs(tuple(cutoffs), switch_width or 0.0)
        elif switch_width is not None and switch_width != cutoffs.switch_width:
            raise ConfigurationError(
                "switch_width given twice with different values: "
                f"{switch_width} and {cutoffs.switch_width}"
            )

        self.cutoffs = cutoffs
        self.potential = potential if potential is not None else LennardJones()
        self.backend = get_backend(backend)
        self.max_block_size = max_block_size

        self._n_atoms = n_atoms
        self._i_indices, self._j_indices = np.triu_indices(n_atoms, k=1)
        self.forces = np.zeros((cutoffs.n_shells, n_atoms, 3), dtype=np.float64)

    @property
    def n_atoms(self) -> int:
        """Return number of particles."""
        return self._n_atoms

    @property
    def n_shells(self) -> int:
        """Return number of shells."""
        return self.cutoffs.n_shells

    @property
    def total_forces(self) -> NDArray[np.floating]:
        """Return forces summed over shells, shape (N, 3)."""
        return self.forces.sum(axis=0)

    def _blocks(self, state: ParticleState, shell: int) -> list[_PairBlock]:
        inner, outer = self.cutoffs.bounds(shell)
        width = self.cutoffs.switch_width
        inner_lower = 0.0 if shell == 0 else inner - width
        pot_shift = self.potential.shift(self.cutoffs.outer)

        return [
            _PairBlock(
                positions=state.positions,
                box=state.box,
                i_indices=self._i_indices[start:end],
                j_indices=self._j_indices[start:end],
                potential=self.potential,
                inner=inner,
                inner_lower=inner_lower,
                outer=outer,
                switch_width=width,
                switch_outer=shell < self.n_shells - 1,
                pot_shift=pot_shift,
            )
            for start, end in self.backend.partition_pairs(
                len(self._i_indices), self.max_block_size
            )
        ]

    def compute_shell(self, state: ParticleState, shell: int) -> ShellResult:
        """
        Compute forces and totals for one shell.

        Overwrites ``forces[shell]``. An overlap does not stop the
        evaluation: every pair is still accumulated and the flag is returned
        for the caller to act on.

        Args:
            state: Particle state (positions in box units).
            shell: Shell index in [0, K).

        Returns:
            ShellResult for this shell.

        Raises:
            ConfigurationError: If ``shell`` is out of range.
            ValueError: If the state does not have ``n_atoms`` particles.
        """
        self.cutoffs.check_shell(shell)
        if state.n_atoms != self._n_atoms:
            raise ValueError(
                f"State has {state.n_atoms} atoms, engine was built for "
                f"{self._n_atoms}"
            )

        partials = self.backend.parallel_map(
            _evaluate_pair_block, self._blocks(state, shell)
        )

        self.forces[shell] = 0.0
        potential = cut_potential = virial = laplacian = 0.0
        overlap = False
        n_pairs = 0
        for partial in partials:
            self.forces[shell] += partial.forces
            potential += partial.potential
            cut_potential += partial.cut_potential
            virial += partial.virial
            laplacian += partial.laplacian
            overlap = overlap or partial.overlap
            n_pairs += partial.n_pairs

        logger.debug(
            "Shell %d: %d pairs in %d blocks, pot=%.6f vir=%.6f",
            shell,
            n_pairs,
            len(partials),
            potential,
            virial / 3.0,
        )
        if overlap:
            logger.warning("Overlap detected in shell %d", shell)

        return ShellResult(
            potential=potential,
            cut_potential=cut_potential,
            virial=virial / 3.0,
            laplacian=laplacian * 2.0,
            overlap=overlap,
        )

    def compute_all(self, state: ParticleState) -> ShellResult:
        """
        Compute every shell in turn and return the summed result.

        Args:
            state: Particle state.

        Returns:
            ShellResult summed over shells.
        """
        return ShellResult.total(
            self.compute_shell(state, shell) for shell in range(self.n_shells)
        )
