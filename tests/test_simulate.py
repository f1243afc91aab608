"""
CI-friendly smoke tests for the high-level drivers.

These tests are designed to:
1. Run fast
2. Be deterministic (seeded RNG)
3. Run in serial (single rank)
"""

import numpy as np
import pytest

from shearmd import simulate
from shearmd.config import RunConfig
from shearmd.errors import ConfigurationError, OverlapError
from shearmd.forcefields import ShellCutoffs, ShellForceEngine
from shearmd.integrators import IsokineticSLLODIntegrator
from shearmd.io import CnfReader
from shearmd.system import LeesEdwardsBox, ParticleState


class TestLatticeState:
    """Tests for initial configurations."""

    def test_density_and_temperature(self):
        state = simulate.lattice_state(n_atoms=100, density=0.7, temperature=1.3)
        assert state.n_atoms == 100
        assert state.density == pytest.approx(0.7)
        assert state.kinetic_temperature == pytest.approx(1.3)
        assert np.allclose(state.velocities.sum(axis=0), 0.0)

    def test_no_overlaps(self):
        state = simulate.lattice_state(n_atoms=256, density=0.8)
        i, j = np.triu_indices(state.n_atoms, k=1)
        dr = state.box.minimum_image(state.positions[i] - state.positions[j])
        r_sq = np.sum(state.box.to_physical(dr) ** 2, axis=1)
        assert np.min(r_sq) > 1.0 / 1.8

    def test_deterministic(self):
        a = simulate.lattice_state(n_atoms=32, seed=4)
        b = simulate.lattice_state(n_atoms=32, seed=4)
        assert np.array_equal(a.positions, b.positions)
        assert np.array_equal(a.velocities, b.velocities)

    def test_jitter_and_velocities_share_generator(self):
        """Positions and velocities are successive draws from one generator."""
        rng = np.random.default_rng(9)
        box_length = (64 / 0.7) ** (1 / 3)
        positions = simulate._create_lattice_positions(64, box_length, rng)
        velocities = simulate._initial_velocities(64, 1.2, rng)

        state = simulate.lattice_state(n_atoms=64, density=0.7, temperature=1.2, seed=9)
        assert np.allclose(state.velocities, velocities)
        assert np.allclose(
            state.positions, state.box.wrap_positions(positions / box_length)
        )

    def test_invalid(self):
        with pytest.raises(ValueError):
            simulate.lattice_state(n_atoms=1)
        with pytest.raises(ValueError):
            simulate.lattice_state(density=0.0)


class TestDrivers:
    """Tests for sllod_fluid, mts_fluid and run."""

    def test_sllod_fluid(self):
        result = simulate.sllod_fluid(
            n_atoms=108, density=0.6, n_blocks=2, n_steps=5, strain_rate=0.5
        )
        assert len(result.energy) == 10
        assert result.mean_temperature == pytest.approx(1.0)
        assert result.strain[-1] == pytest.approx(10 * 0.005 * 0.5)
        assert result.final_state.step == 10
        assert result.mean_config_temperature > 0.0

    def test_mts_fluid(self):
        result = simulate.mts_fluid(n_atoms=108, density=0.6, n_blocks=1, n_steps=5)
        assert len(result.temperature) == 5
        assert result.timestep == pytest.approx(0.002 * 4)
        assert np.all(result.strain == 0.0)

    def test_cutoff_too_long_for_box(self):
        with pytest.raises(ConfigurationError):
            simulate.sllod_fluid(n_atoms=32, density=0.8, r_cut=2.5, n_steps=1)

    def test_run_from_config(self, tmp_path):
        config = RunConfig(n_blocks=2, n_steps=2, strain_rate=0.2)
        result = simulate.run(config, n_atoms=108, density=0.6, output_dir=tmp_path)
        assert len(result.energy) == 4
        assert (tmp_path / "cnf.002").exists()

        final = CnfReader(tmp_path / "cnf.out").read()
        assert final.n_atoms == 108
        assert final.box_length == pytest.approx(result.final_state.box.length)
        assert np.allclose(
            final.positions, result.final_state.physical_positions, atol=1e-9
        )
        assert np.allclose(final.velocities, result.final_state.velocities, atol=1e-9)

    def test_no_final_file_without_output_dir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        simulate.sllod_fluid(n_atoms=108, density=0.6, n_blocks=1, n_steps=1)
        assert not (tmp_path / "cnf.out").exists()

    def test_final_overlap_raises(self, tmp_path):
        box = LeesEdwardsBox.cubic(6.0)
        positions = np.array([[0.0, 0.0, 0.0], [0.05, 0.0, 0.0]])
        state = ParticleState(positions, np.ones((2, 3)), box)
        engine = ShellForceEngine(2, ShellCutoffs((2.5,)))
        integrator = IsokineticSLLODIntegrator(0.005, 0.0, engine)

        with pytest.raises(OverlapError, match="final configuration"):
            simulate._check_final_configuration(state, integrator, tmp_path)
        assert not (tmp_path / "cnf.out").exists()

    def test_run_mts_config(self):
        config = RunConfig(
            n_blocks=1,
            n_steps=2,
            dt=0.002,
            shell_cutoffs=(1.5, 2.5),
            n_mts=(1, 2),
            switch_width=0.2,
        )
        result = simulate.run(config, n_atoms=108, density=0.6)
        assert result.final_state.step == 2
        assert result.timestep == pytest.approx(0.004)


class TestPlotting:
    """Plots of a short run (skipped without matplotlib)."""

    @pytest.fixture
    def result(self):
        return simulate.sllod_fluid(
            n_atoms=108, density=0.6, n_blocks=1, n_steps=3, strain_rate=0.1
        )

    def test_observables_saved(self, result, tmp_path):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from shearmd import plotting

        plotting.observables(result, show=False)
        plotting.save(tmp_path / "observables.png")
        plt.close("all")
        assert (tmp_path / "observables.png").stat().st_size > 0

    def test_temperature_panel(self, result):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from shearmd import plotting

        plotting.temperature(result, show=False)
        assert len(plt.gcf().axes) == 1
        plt.close("all")
