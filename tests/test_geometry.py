"""Tests for geometry primitives and their gradients."""

import numpy as np
import pytest

from mmcore import geometry


def finite_difference(func, points, h=1e-6):
    """Central difference gradient of ``func(*points)`` for every point."""
    points = [np.array(p, dtype=np.float64) for p in points]
    gradient = np.zeros((len(points), 3))
    for i in range(len(points)):
        for axis in range(3):
            plus = [p.copy() for p in points]
            minus = [p.copy() for p in points]
            plus[i][axis] += h
            minus[i][axis] -= h
            gradient[i, axis] = (func(*plus) - func(*minus)) / (2 * h)
    return gradient


class TestDistance:
    """Tests for distance and its gradient."""

    def test_value(self):
        assert geometry.distance([0, 0, 0], [3, 4, 0]) == pytest.approx(5.0)

    def test_gradient_matches_finite_difference(self):
        a, b = [0.1, -0.2, 0.3], [1.2, 0.7, -0.4]
        np.testing.assert_allclose(
            geometry.distance_gradient(a, b),
            finite_difference(geometry.distance, [a, b]),
            atol=1e-7,
        )

    def test_gradients_are_opposite(self):
        grad = geometry.distance_gradient([0, 0, 0], [1, 1, 1])
        np.testing.assert_allclose(grad[0], -grad[1])

    def test_coincident_points_give_zero_gradient(self):
        grad = geometry.distance_gradient([1, 2, 3], [1, 2, 3])
        assert np.all(grad == 0.0)


class TestBondAngle:
    """Tests for bond angles."""

    def test_right_angle(self):
        assert geometry.bond_angle([1, 0, 0], [0, 0, 0], [0, 1, 0]) == pytest.approx(90.0)

    def test_linear_angle(self):
        assert geometry.bond_angle([1, 0, 0], [0, 0, 0], [-2, 0, 0]) == pytest.approx(180.0)

    def test_radians(self):
        value = geometry.bond_angle_radians([1, 0, 0], [0, 0, 0], [1, 1, 0])
        assert value == pytest.approx(np.pi / 4)

    def test_gradient_matches_finite_difference(self):
        points = [[1.1, 0.2, -0.1], [0.0, 0.1, 0.0], [-0.3, 1.0, 0.4]]
        np.testing.assert_allclose(
            geometry.bond_angle_gradient_radians(*points),
            finite_difference(geometry.bond_angle_radians, points),
            atol=1e-6,
        )

    def test_gradient_near_linear(self):
        # about 179 degrees
        points = [[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [-1.0, 0.0175, 0.0]]
        np.testing.assert_allclose(
            geometry.bond_angle_gradient_radians(*points),
            finite_difference(geometry.bond_angle_radians, points),
            atol=1e-5,
        )

    def test_gradient_is_translation_invariant(self):
        grad = geometry.bond_angle_gradient([1.0, 0.3, 0.0], [0, 0, 0], [0.2, 1.0, 0.5])
        np.testing.assert_allclose(grad.sum(axis=0), 0.0, atol=1e-10)

    def test_degree_gradient_is_scaled(self):
        points = [[1.0, 0.3, 0.0], [0, 0, 0], [0.2, 1.0, 0.5]]
        np.testing.assert_allclose(
            geometry.bond_angle_gradient(*points),
            geometry.bond_angle_gradient_radians(*points) * 180.0 / np.pi,
        )


class TestTorsionAngle:
    """Tests for torsion angles."""

    def test_cis_is_zero(self):
        value = geometry.torsion_angle([0, 1, 0], [0, 0, 0], [1, 0, 0], [1, 1, 0])
        assert value == pytest.approx(0.0, abs=1e-10)

    def test_trans_is_180(self):
        value = geometry.torsion_angle([0, 1, 0], [0, 0, 0], [1, 0, 0], [1, -1, 0])
        assert abs(value) == pytest.approx(180.0)

    def test_signed_90(self):
        value = geometry.torsion_angle([0, 1, 0], [0, 0, 0], [1, 0, 0], [1, 0, 1])
        assert value == pytest.approx(90.0)
        mirrored = geometry.torsion_angle([0, 1, 0], [0, 0, 0], [1, 0, 0], [1, 0, -1])
        assert mirrored == pytest.approx(-90.0)

    def test_gradient_matches_finite_difference(self):
        points = [[0.1, 1.0, 0.2], [0.0, 0.0, 0.0], [1.5, 0.1, 0.0], [1.7, 0.4, 1.1]]
        np.testing.assert_allclose(
            geometry.torsion_angle_gradient_radians(*points),
            finite_difference(geometry.torsion_angle_radians, points),
            atol=1e-6,
        )

    def test_gradient_near_cis(self):
        points = [[0.0, 1.0, 0.0], [0.0, 0.0, 0.0], [1.5, 0.0, 0.0], [1.5, 1.0, 0.02]]
        np.testing.assert_allclose(
            geometry.torsion_angle_gradient_radians(*points),
            finite_difference(geometry.torsion_angle_radians, points),
            atol=1e-5,
        )

    def test_collinear_atoms_give_finite_gradient(self):
        points = [[-1.0, 0, 0], [0, 0, 0], [1.0, 0, 0], [2.0, 0.5, 0]]
        grad = geometry.torsion_angle_gradient_radians(*points)
        assert np.all(np.isfinite(grad))


class TestWilsonAngle:
    """Tests for the out-of-plane (Wilson) angle."""

    def test_in_plane_is_zero(self):
        value = geometry.wilson_angle([1, 0, 0], [0, 0, 0], [0, 1, 0], [-1, -1, 0])
        assert value == pytest.approx(0.0, abs=1e-10)

    def test_perpendicular_is_90(self):
        value = geometry.wilson_angle([1, 0, 0], [0, 0, 0], [0, 1, 0], [0, 0, 1])
        assert value == pytest.approx(90.0)

    def test_45_degrees(self):
        value = geometry.wilson_angle([1, 0, 0], [0, 0, 0], [0, 1, 0], [1, 0, 1])
        assert value == pytest.approx(45.0)

    def test_sign_follows_normal(self):
        value = geometry.wilson_angle([1, 0, 0], [0, 0, 0], [0, 1, 0], [-1, -1, -0.5])
        assert value < 0.0

    def test_gradient_matches_finite_difference(self):
        points = [[1.0, 0.1, 0.0], [0.0, 0.0, 0.1], [-0.4, 1.0, 0.0], [-0.5, -0.8, 0.6]]
        np.testing.assert_allclose(
            geometry.wilson_angle_gradient_radians(*points),
            finite_difference(geometry.wilson_angle_radians, points),
            atol=1e-6,
        )

    def test_gradient_near_planar(self):
        points = [[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [-0.5, 0.87, 0.0], [-0.5, -0.87, 0.01]]
        np.testing.assert_allclose(
            geometry.wilson_angle_gradient_radians(*points),
            finite_difference(geometry.wilson_angle_radians, points),
            atol=1e-5,
        )
