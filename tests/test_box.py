"""Tests for LeesEdwardsBox class."""

import numpy as np
import pytest

from shearmd.system.box import LeesEdwardsBox


class TestBoxCreation:
    """Test box creation methods."""

    def test_cubic_box(self):
        """Test creating a cubic box."""
        box = LeesEdwardsBox.cubic(10.0)
        assert box.length == 10.0
        assert box.strain == 0.0
        assert np.isclose(box.volume, 1000.0)

    def test_initial_strain(self):
        """Test creating a box with initial strain."""
        box = LeesEdwardsBox.cubic(5.0, strain=0.25)
        assert box.strain == 0.25

    def test_invalid_length(self):
        """Test that non-positive lengths raise errors."""
        with pytest.raises(ValueError):
            LeesEdwardsBox(0.0)
        with pytest.raises(ValueError):
            LeesEdwardsBox(-1.0)

    def test_density(self):
        """Test number density."""
        box = LeesEdwardsBox.cubic(2.0)
        assert np.isclose(box.density(16), 2.0)


class TestStrain:
    """Test strain bookkeeping."""

    def test_advance_strain(self):
        """Strain accumulates without being wrapped."""
        box = LeesEdwardsBox.cubic(10.0)
        for _ in range(15):
            box.advance_strain(0.1)
        assert np.isclose(box.strain, 1.5)

    def test_copy_is_independent(self):
        """Copies do not share strain."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.1)
        other = box.copy()
        other.advance_strain(0.2)
        assert box.strain == 0.1
        assert np.isclose(other.strain, 0.3)


class TestMinimumImage:
    """Test Lees-Edwards minimum image convention."""

    def test_unstrained_matches_periodic(self):
        """Without strain the convention is ordinary periodic wrapping."""
        box = LeesEdwardsBox.cubic(10.0)
        dr = np.array([[0.7, -0.6, 0.2], [0.4, 0.45, -0.51]])
        expected = dr - np.floor(dr + 0.5)
        assert np.allclose(box.minimum_image(dr), expected)

    def test_strain_shifts_x_across_y_boundary(self):
        """A separation crossing the y boundary has x shifted by the strain."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.3)
        result = box.minimum_image(np.array([0.0, 0.9, 0.0]))
        assert np.allclose(result, [-0.3, -0.1, 0.0])

    def test_strain_no_shift_inside_box(self):
        """Separations within half a box in y are not shifted."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.3)
        dr = np.array([0.2, 0.4, -0.1])
        assert np.allclose(box.minimum_image(dr), dr)

    def test_negative_y_crossing(self):
        """Crossing the lower y boundary shifts x the other way."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.3)
        result = box.minimum_image(np.array([0.0, -0.9, 0.0]))
        assert np.allclose(result, [0.3, 0.1, 0.0])

    def test_components_bounded(self):
        """Every component of the result lies within half a box."""
        rng = np.random.default_rng(0)
        box = LeesEdwardsBox.cubic(10.0, strain=0.77)
        dr = rng.uniform(-3.0, 3.0, (200, 3))
        result = box.minimum_image(dr)
        assert np.all(np.abs(result) <= 0.5 + 1e-12)

    def test_input_not_modified(self):
        """The input array is left untouched."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.3)
        dr = np.array([[0.0, 0.9, 0.0]])
        box.minimum_image(dr)
        assert np.allclose(dr, [[0.0, 0.9, 0.0]])


class TestWrapAndUnits:
    """Test position wrapping and unit conversion."""

    def test_wrap_positions(self):
        """Wrapped positions lie in the primary box."""
        box = LeesEdwardsBox.cubic(10.0)
        positions = np.array([[0.6, -0.7, 1.2]])
        assert np.allclose(box.wrap_positions(positions), [[-0.4, 0.3, 0.2]])

    def test_wrap_with_strain(self):
        """Positions leaving through y are shifted in x by the strain."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.2)
        wrapped = box.wrap_positions(np.array([[0.1, 0.55, 0.0]]))
        assert np.allclose(wrapped, [[-0.1, -0.45, 0.0]])

    def test_wrap_half_box_ties(self):
        """Coordinates exactly on a half-box boundary wrap to -0.5."""
        box = LeesEdwardsBox.cubic(10.0)
        wrapped = box.wrap_positions(np.array([[0.5, 2.5, -0.5]]))
        assert np.all(wrapped >= -0.5)
        assert np.all(wrapped < 0.5)
        assert np.allclose(wrapped, [[-0.5, -0.5, -0.5]])

    def test_minimum_image_tie_shifts_x(self):
        """A separation of exactly half a box in y counts as crossing."""
        box = LeesEdwardsBox.cubic(10.0, strain=0.2)
        result = box.minimum_image(np.array([0.1, 0.5, 0.0]))
        assert np.allclose(result, [-0.1, -0.5, 0.0])

    def test_unit_conversion(self):
        """to_physical and to_box_units are inverse."""
        box = LeesEdwardsBox.cubic(4.0)
        vectors = np.array([[0.1, -0.2, 0.3]])
        assert np.allclose(box.to_physical(vectors), [[0.4, -0.8, 1.2]])
        assert np.allclose(box.to_box_units(box.to_physical(vectors)), vectors)
