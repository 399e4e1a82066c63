"""AMBER energy terms."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ...constants import COULOMB_CONSTANT, DEGREES_TO_RADIANS
from ..calculation import CalculationType, ForceFieldCalculation

if TYPE_CHECKING:
    from ..atom import ForceFieldAtom
    from .parameters import AmberParameters


class AmberBondCalculation(ForceFieldCalculation):
    """
    Harmonic bond stretch.

    E = kb * (r - r0)^2
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom) -> None:
        super().__init__(CalculationType.BOND_STRETCH, (a, b), 2)

    def setup(self, parameters: AmberParameters) -> bool:
        a, b = self.atoms
        values = parameters.bond_parameters(a.type, b.type)
        if values is None:
            return False

        kb, r0 = values
        self.set_parameter(0, kb)
        self.set_parameter(1, r0)
        return True

    def energy(self) -> float:
        a, b = self.atoms
        kb = self.parameter(0)
        r0 = self.parameter(1)
        dr = self.distance(a, b) - r0
        return kb * dr * dr

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        kb = self.parameter(0)
        r0 = self.parameter(1)

        de_dr = 2.0 * kb * (self.distance(a, b) - r0)
        return self.distance_gradient(a, b) * de_dr


class AmberAngleCalculation(ForceFieldCalculation):
    """
    Harmonic angle bend in radians.

    E = ka * (theta - theta0)^2
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom) -> None:
        super().__init__(CalculationType.ANGLE_BEND, (a, b, c), 2)

    def setup(self, parameters: AmberParameters) -> bool:
        a, b, c = self.atoms
        values = parameters.angle_parameters(a.type, b.type, c.type)
        if values is None:
            return False

        ka, theta0 = values
        self.set_parameter(0, ka)
        self.set_parameter(1, theta0 * DEGREES_TO_RADIANS)
        return True

    def energy(self) -> float:
        a, b, c = self.atoms
        ka = self.parameter(0)
        theta0 = self.parameter(1)
        dt = self.bond_angle_radians(a, b, c) - theta0
        return ka * dt * dt

    def gradient(self) -> NDArray[np.floating]:
        a, b, c = self.atoms
        ka = self.parameter(0)
        theta0 = self.parameter(1)

        de_dtheta = 2.0 * ka * (self.bond_angle_radians(a, b, c) - theta0)
        return self.bond_angle_gradient_radians(a, b, c) * de_dtheta


class AmberTorsionCalculation(ForceFieldCalculation):
    """
    Four-term Fourier torsion.

    E = sum_n Vn * (1 + cos(n * phi - gamma_n)),  n = 1..4

    Parameters 0-3 hold V1..V4, parameters 4-7 hold gamma1..gamma4 in
    radians.
    """

    def __init__(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> None:
        super().__init__(CalculationType.TORSION, (a, b, c, d), 8)

    def setup(self, parameters: AmberParameters) -> bool:
        a, b, c, d = self.atoms
        values = parameters.torsion_parameters(a.type, b.type, c.type, d.type)
        if values is None:
            return False

        for i in range(4):
            self.set_parameter(i, values[i])
            self.set_parameter(4 + i, values[4 + i] * DEGREES_TO_RADIANS)
        return True

    def _terms(self) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        parameters = self.parameters
        return parameters[:4], parameters[4:]

    def energy(self) -> float:
        barriers, phases = self._terms()
        phi = self.torsion_angle_radians(*self.atoms)
        n = np.arange(1, 5)
        return float(np.sum(barriers * (1.0 + np.cos(n * phi - phases))))

    def gradient(self) -> NDArray[np.floating]:
        barriers, phases = self._terms()
        phi = self.torsion_angle_radians(*self.atoms)
        n = np.arange(1, 5)

        de_dphi = float(np.sum(-n * barriers * np.sin(n * phi - phases)))
        return self.torsion_angle_gradient_radians(*self.atoms) * de_dphi


class AmberNonbondedCalculation(ForceFieldCalculation):
    """
    Combined Lennard-Jones and Coulomb interaction.

    E = epsilon * ((sigma/r)^12 - 2 (sigma/r)^6) + 332.0637 * qa * qb / r

    epsilon is the geometric mean of the well depths and sigma the sum of
    the R* radii. Charges are read from the atoms at evaluation time.
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom) -> None:
        super().__init__(
            CalculationType.VAN_DER_WAALS | CalculationType.ELECTROSTATIC, (a, b), 2
        )

    def setup(self, parameters: AmberParameters) -> bool:
        a, b = self.atoms
        values_a = parameters.nonbonded_parameters(a.type)
        values_b = parameters.nonbonded_parameters(b.type)
        if values_a is None or values_b is None:
            return False

        radius_a, well_depth_a = values_a
        radius_b, well_depth_b = values_b
        self.set_parameter(0, np.sqrt(well_depth_a * well_depth_b))
        self.set_parameter(1, radius_a + radius_b)
        return True

    def energy(self) -> float:
        a, b = self.atoms
        epsilon = self.parameter(0)
        sigma = self.parameter(1)
        r = self.distance(a, b)

        sr6 = (sigma / r) ** 6
        van_der_waals = epsilon * (sr6 * sr6 - 2.0 * sr6)
        electrostatic = COULOMB_CONSTANT * a.charge * b.charge / r
        return van_der_waals + electrostatic

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        epsilon = self.parameter(0)
        sigma = self.parameter(1)
        r = self.distance(a, b)

        sr6 = (sigma / r) ** 6
        de_dr = -12.0 * epsilon / r * (sr6 * sr6 - sr6)
        de_dr -= COULOMB_CONSTANT * a.charge * b.charge / (r * r)
        return self.distance_gradient(a, b) * de_dr
