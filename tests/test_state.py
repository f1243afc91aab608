"""Tests for ParticleState class."""

import numpy as np
import pytest

from shearmd.system import LeesEdwardsBox, ParticleState


@pytest.fixture
def simple_state():
    """Four particles in a 4 sigma box."""
    box = LeesEdwardsBox.cubic(4.0)
    positions = np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )
    velocities = np.array(
        [
            [1.0, 0.0, 0.0],
            [-1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, -1.0, 0.0],
        ]
    )
    return ParticleState.from_physical(positions, box, velocities)


class TestStateCreation:
    """Test state creation."""

    def test_from_physical_scales_positions(self, simple_state):
        """Positions are stored in box units."""
        assert np.allclose(simple_state.positions[1], [0.25, 0.0, 0.0])
        assert np.allclose(simple_state.physical_positions[1], [1.0, 0.0, 0.0])

    def test_from_physical_wraps(self):
        """Positions outside the box are wrapped in."""
        box = LeesEdwardsBox.cubic(4.0)
        state = ParticleState.from_physical(np.array([[3.0, 0.0, 0.0]]), box)
        assert np.allclose(state.positions, [[-0.25, 0.0, 0.0]])

    def test_default_velocities(self):
        """Velocities default to zero."""
        box = LeesEdwardsBox.cubic(4.0)
        state = ParticleState.from_physical(np.zeros((2, 3)), box)
        assert np.all(state.velocities == 0.0)

    def test_invalid_positions_shape(self):
        """Positions must be (N, 3)."""
        box = LeesEdwardsBox.cubic(4.0)
        with pytest.raises(ValueError):
            ParticleState(np.zeros((3, 2)), np.zeros((3, 2)), box)

    def test_mismatched_velocities(self):
        """Velocities must match positions."""
        box = LeesEdwardsBox.cubic(4.0)
        with pytest.raises(ValueError):
            ParticleState(np.zeros((3, 3)), np.zeros((2, 3)), box)


class TestStateProperties:
    """Test derived quantities."""

    def test_n_atoms(self, simple_state):
        assert simple_state.n_atoms == 4

    def test_density(self, simple_state):
        assert np.isclose(simple_state.density, 4 / 64.0)

    def test_kinetic_energy(self, simple_state):
        """KE = 0.5 * sum(v^2) with unit masses."""
        assert np.isclose(simple_state.kinetic_energy, 2.0)

    def test_kinetic_temperature(self, simple_state):
        """T = 2 KE / (3N - 3)."""
        assert np.isclose(simple_state.kinetic_temperature, 4.0 / 9.0)

    def test_single_atom_temperature(self):
        """A single atom has no temperature."""
        box = LeesEdwardsBox.cubic(4.0)
        state = ParticleState.from_physical(np.zeros((1, 3)), box, np.ones((1, 3)))
        assert state.kinetic_temperature == 0.0

    def test_copy_is_deep(self, simple_state):
        """Copies share neither arrays nor box."""
        other = simple_state.copy()
        other.positions[0, 0] = 0.4
        other.velocities[0, 0] = 7.0
        other.box.advance_strain(0.5)

        assert simple_state.positions[0, 0] == 0.0
        assert simple_state.velocities[0, 0] == 1.0
        assert simple_state.box.strain == 0.0
