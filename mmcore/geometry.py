"""Geometry primitives over 3D points and their analytic gradients.

Every gradient function returns an array of shape (n_points, 3) whose row i
is the derivative of the quantity with respect to point i. Angle gradients
are computed in radians; the degree variants are scaled copies.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .constants import RADIANS_TO_DEGREES

# Floor applied to squared norms that appear in denominators
_EPSILON = 1e-10


def _as_point(point: ArrayLike) -> NDArray[np.floating]:
    return np.asarray(point, dtype=np.float64).reshape(3)


def _perpendicular(vector: NDArray[np.floating]) -> NDArray[np.floating]:
    """Return an arbitrary unit vector perpendicular to ``vector``."""
    axis = np.zeros(3)
    axis[np.argmin(np.abs(vector))] = 1.0
    normal = np.cross(vector, axis)
    return normal / np.linalg.norm(normal)


# --- Distance -------------------------------------------------------------- #


def distance(a: ArrayLike, b: ArrayLike) -> float:
    """Return the distance between points a and b."""
    return np.float64(np.linalg.norm(_as_point(a) - _as_point(b)))


def distance_gradient(a: ArrayLike, b: ArrayLike) -> NDArray[np.floating]:
    """
    Return the gradient of the distance between a and b.

    Coincident points have no defined direction; their gradient is zero.

    Returns:
        Array of shape (2, 3).
    """
    dr = _as_point(a) - _as_point(b)
    r = np.linalg.norm(dr)

    if r == 0.0:
        return np.zeros((2, 3))

    unit = dr / r
    return np.array([unit, -unit])


# --- Bond angle ------------------------------------------------------------ #


def bond_angle_radians(a: ArrayLike, b: ArrayLike, c: ArrayLike) -> float:
    """Return the angle a-b-c in radians, with b as the vertex."""
    ba = _as_point(a) - _as_point(b)
    bc = _as_point(c) - _as_point(b)

    # atan2 stays accurate near 0 and 180 degrees where acos does not
    return np.float64(np.arctan2(np.linalg.norm(np.cross(ba, bc)), np.dot(ba, bc)))


def bond_angle(a: ArrayLike, b: ArrayLike, c: ArrayLike) -> float:
    """Return the angle a-b-c in degrees, with b as the vertex."""
    return bond_angle_radians(a, b, c) * RADIANS_TO_DEGREES


def bond_angle_gradient_radians(
    a: ArrayLike, b: ArrayLike, c: ArrayLike
) -> NDArray[np.floating]:
    """
    Return the gradient of the angle a-b-c in radians.

    For exactly collinear points the bending plane is undefined and an
    arbitrary plane containing the three points is used.

    Returns:
        Array of shape (3, 3) ordered (a, b, c).
    """
    ba = _as_point(a) - _as_point(b)
    bc = _as_point(c) - _as_point(b)

    d_ba = max(np.linalg.norm(ba), _EPSILON)
    d_bc = max(np.linalg.norm(bc), _EPSILON)
    u = ba / d_ba
    v = bc / d_bc

    normal = np.cross(u, v)
    normal_length = np.linalg.norm(normal)
    if normal_length < 1e-12:
        normal = _perpendicular(u)
    else:
        normal = normal / normal_length

    grad_a = -np.cross(normal, u) / d_ba
    grad_c = np.cross(normal, v) / d_bc
    grad_b = -(grad_a + grad_c)

    return np.array([grad_a, grad_b, grad_c])


def bond_angle_gradient(a: ArrayLike, b: ArrayLike, c: ArrayLike) -> NDArray[np.floating]:
    """Return the gradient of the angle a-b-c in degrees per unit length."""
    return bond_angle_gradient_radians(a, b, c) * RADIANS_TO_DEGREES


# --- Torsion angle --------------------------------------------------------- #


def torsion_angle_radians(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> float:
    """
    Return the signed torsion angle a-b-c-d in radians, in (-pi, pi].

    Uses the atan2 formulation, which has no singularity at 0 or 180 degrees.
    """
    b1 = _as_point(b) - _as_point(a)
    b2 = _as_point(c) - _as_point(b)
    b3 = _as_point(d) - _as_point(c)

    n1 = np.cross(b1, b2)
    n2 = np.cross(b2, b3)

    y = np.linalg.norm(b2) * np.dot(b1, n2)
    x = np.dot(n1, n2)

    return np.float64(np.arctan2(y, x))


def torsion_angle(a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike) -> float:
    """Return the signed torsion angle a-b-c-d in degrees."""
    return torsion_angle_radians(a, b, c, d) * RADIANS_TO_DEGREES


def torsion_angle_gradient_radians(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> NDArray[np.floating]:
    """
    Return the gradient of the torsion angle a-b-c-d in radians.

    Follows Blondel and Karplus, J. Comput. Chem. 17, 1132 (1996).

    Returns:
        Array of shape (4, 3) ordered (a, b, c, d).
    """
    b1 = _as_point(b) - _as_point(a)
    b2 = _as_point(c) - _as_point(b)
    b3 = _as_point(d) - _as_point(c)

    n1 = np.cross(b1, b2)
    n2 = np.cross(b2, b3)

    b2_norm = max(np.linalg.norm(b2), _EPSILON)
    n1_sq = max(np.dot(n1, n1), _EPSILON)
    n2_sq = max(np.dot(n2, n2), _EPSILON)

    grad_a = -b2_norm / n1_sq * n1
    grad_d = b2_norm / n2_sq * n2

    # Projections of the outer bonds onto the central bond
    p1 = np.dot(b1, b2) / (n1_sq * b2_norm)
    p3 = np.dot(b3, b2) / (n2_sq * b2_norm)

    grad_b = (b2_norm / n1_sq + p1) * n1 + p3 * n2
    grad_c = -(b2_norm / n2_sq + p3) * n2 - p1 * n1

    return np.array([grad_a, grad_b, grad_c, grad_d])


def torsion_angle_gradient(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> NDArray[np.floating]:
    """Return the gradient of the torsion angle a-b-c-d in degrees."""
    return torsion_angle_gradient_radians(a, b, c, d) * RADIANS_TO_DEGREES


# --- Wilson (out-of-plane) angle ------------------------------------------- #


def _wilson_terms(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> tuple[NDArray, NDArray, NDArray, NDArray, float, float, float]:
    ba = _as_point(a) - _as_point(b)
    bc = _as_point(c) - _as_point(b)
    bd = _as_point(d) - _as_point(b)

    normal = np.cross(ba, bc)
    normal_length = max(np.linalg.norm(normal), _EPSILON)
    bd_length = max(np.linalg.norm(bd), _EPSILON)

    unit_normal = normal / normal_length
    unit_bd = bd / bd_length
    sin_chi = float(np.clip(np.dot(unit_normal, unit_bd), -1.0, 1.0))

    return ba, bc, unit_normal, unit_bd, sin_chi, normal_length, bd_length


def wilson_angle_radians(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> float:
    """
    Return the out-of-plane angle of the bond b-d from the plane a-b-c.

    b is the central atom. The angle is the complement of the angle between
    b->d and the normal of the a-b-c plane, so it is zero when d lies in
    the plane and positive on the side of (a-b) x (c-b).
    """
    *_, sin_chi, _, _ = _wilson_terms(a, b, c, d)
    return np.float64(np.arcsin(sin_chi))


def wilson_angle(a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike) -> float:
    """Return the out-of-plane angle in degrees (see wilson_angle_radians)."""
    return wilson_angle_radians(a, b, c, d) * RADIANS_TO_DEGREES


def wilson_angle_gradient_radians(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> NDArray[np.floating]:
    """
    Return the gradient of the out-of-plane angle in radians.

    Returns:
        Array of shape (4, 3) ordered (a, b, c, d).
    """
    ba, bc, unit_normal, unit_bd, sin_chi, normal_length, bd_length = _wilson_terms(
        a, b, c, d
    )
    cos_chi = max(np.sqrt(1.0 - sin_chi**2), _EPSILON)

    # Derivatives of sin(chi) = n_hat . e_bd
    residual = unit_bd - sin_chi * unit_normal
    ds_da = np.cross(bc, residual) / normal_length
    ds_dc = np.cross(residual, ba) / normal_length
    ds_dd = (unit_normal - sin_chi * unit_bd) / bd_length
    ds_db = -(ds_da + ds_dc + ds_dd)

    return np.array([ds_da, ds_db, ds_dc, ds_dd]) / cos_chi


def wilson_angle_gradient(
    a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike
) -> NDArray[np.floating]:
    """Return the gradient of the out-of-plane angle in degrees."""
    return wilson_angle_gradient_radians(a, b, c, d) * RADIANS_TO_DEGREES
