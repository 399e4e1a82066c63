"""MMFF94 energy terms."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ...constants import MDYNE_TO_KCAL, MMFF_COULOMB_CONSTANT
from ..calculation import CalculationType, ForceFieldCalculation
from .parameters import LINEAR_TYPES

if TYPE_CHECKING:
    from ..atom import ForceFieldAtom
    from .parameters import MmffParameters

# Cubic stretch constant [1/A]
BOND_CUBIC = -2.0

# Angle bend unit conversion and cubic constant [1/deg]
ANGLE_CONSTANT = 0.043844
ANGLE_CUBIC = -0.006981317

STRETCH_BEND_CONSTANT = 2.51210

# Buffered 14-7 van der Waals constants
VDW_POWER = 0.25
VDW_B = 0.2
VDW_BETA = 12.0
VDW_DARAD = 0.8
VDW_DAEPS = 0.5

ELECTROSTATIC_BUFFER = 0.05
ONE_FOUR_SCALE = 0.75


def _row(atom: ForceFieldAtom) -> int:
    element = atom.atom.element
    return 0 if element.symbol == "H" else element.period - 1


class MmffBondStretchCalculation(ForceFieldCalculation):
    """
    Quartic bond stretch.

    E = 143.9325 / 2 * kb * dr^2 * (1 + cs dr + 7/12 cs^2 dr^2)
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom) -> None:
        super().__init__(CalculationType.BOND_STRETCH, (a, b), 2)

    def setup(self, parameters: MmffParameters) -> bool:
        a, b = self.atoms
        values = parameters.bond_parameters(a.type, b.type)
        if values is None:
            return False

        self.set_parameter(0, values[0])
        self.set_parameter(1, values[1])
        return True

    def energy(self) -> float:
        a, b = self.atoms
        kb = self.parameter(0)
        dr = self.distance(a, b) - self.parameter(1)

        return 0.5 * MDYNE_TO_KCAL * kb * dr**2 * (
            1.0 + BOND_CUBIC * dr + 7.0 / 12.0 * BOND_CUBIC**2 * dr**2
        )

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        kb = self.parameter(0)
        dr = self.distance(a, b) - self.parameter(1)

        de_dr = 0.5 * MDYNE_TO_KCAL * kb * (
            2.0 * dr + 3.0 * BOND_CUBIC * dr**2 + 7.0 / 3.0 * BOND_CUBIC**2 * dr**3
        )
        return self.distance_gradient(a, b) * de_dr


class MmffAngleBendCalculation(ForceFieldCalculation):
    """
    Cubic angle bend, in degrees.

    E = 0.043844 / 2 * ka * dtheta^2 * (1 + cb dtheta)

    Linear centers use E = 143.9325 * ka * (1 + cos(theta)).
    Parameters: ka, theta0, linear flag.
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom) -> None:
        super().__init__(CalculationType.ANGLE_BEND, (a, b, c), 3)

    def setup(self, parameters: MmffParameters) -> bool:
        a, b, c = self.atoms
        values = parameters.angle_parameters(a.type, b.type, c.type)
        if values is None:
            return False

        ka, theta0 = values
        linear = b.type in LINEAR_TYPES or theta0 >= 180.0
        self.set_parameter(0, ka)
        self.set_parameter(1, theta0)
        self.set_parameter(2, 1.0 if linear else 0.0)
        return True

    @property
    def is_linear(self) -> bool:
        return self.parameter(2) != 0.0

    def energy(self) -> float:
        a, b, c = self.atoms
        ka = self.parameter(0)

        if self.is_linear:
            return MDYNE_TO_KCAL * ka * (1.0 + np.cos(self.bond_angle_radians(a, b, c)))

        dt = self.bond_angle(a, b, c) - self.parameter(1)
        return 0.5 * ANGLE_CONSTANT * ka * dt**2 * (1.0 + ANGLE_CUBIC * dt)

    def gradient(self) -> NDArray[np.floating]:
        a, b, c = self.atoms
        ka = self.parameter(0)

        if self.is_linear:
            de_dtheta = -MDYNE_TO_KCAL * ka * np.sin(self.bond_angle_radians(a, b, c))
            return self.bond_angle_gradient_radians(a, b, c) * de_dtheta

        dt = self.bond_angle(a, b, c) - self.parameter(1)
        de_dtheta = 0.5 * ANGLE_CONSTANT * ka * (2.0 * dt + 3.0 * ANGLE_CUBIC * dt**2)
        return self.bond_angle_gradient(a, b, c) * de_dtheta


class MmffStretchBendCalculation(ForceFieldCalculation):
    """
    Coupling between the two bond lengths and the angle a-b-c.

    E = 2.51210 * (kba_abc * dr_ab + kba_cba * dr_cb) * dtheta

    Parameters: kba_abc, kba_cba, r0_ab, r0_cb, theta0. Linear angles
    carry zero force constants.
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom) -> None:
        super().__init__(CalculationType.BOND_STRETCH | CalculationType.ANGLE_BEND, (a, b, c), 5)

    def setup(self, parameters: MmffParameters) -> bool:
        a, b, c = self.atoms
        bond_ab = parameters.bond_parameters(a.type, b.type)
        bond_cb = parameters.bond_parameters(c.type, b.type)
        angle = parameters.angle_parameters(a.type, b.type, c.type)
        if bond_ab is None or bond_cb is None or angle is None:
            return False

        self.set_parameter(2, bond_ab[1])
        self.set_parameter(3, bond_cb[1])
        self.set_parameter(4, angle[1])

        if b.type in LINEAR_TYPES or angle[1] >= 180.0:
            self.set_parameter(0, 0.0)
            self.set_parameter(1, 0.0)
            return True

        constants = parameters.stretch_bend_parameters(
            a.type, b.type, c.type, (_row(a), _row(b), _row(c))
        )
        if constants is None:
            return False

        self.set_parameter(0, constants[0])
        self.set_parameter(1, constants[1])
        return True

    def _deltas(self) -> tuple[float, float, float]:
        a, b, c = self.atoms
        dr_ab = self.distance(a, b) - self.parameter(2)
        dr_cb = self.distance(c, b) - self.parameter(3)
        dt = self.bond_angle(a, b, c) - self.parameter(4)
        return dr_ab, dr_cb, dt

    def energy(self) -> float:
        kba_abc = self.parameter(0)
        kba_cba = self.parameter(1)
        dr_ab, dr_cb, dt = self._deltas()
        return STRETCH_BEND_CONSTANT * (kba_abc * dr_ab + kba_cba * dr_cb) * dt

    def gradient(self) -> NDArray[np.floating]:
        a, b, c = self.atoms
        kba_abc = self.parameter(0)
        kba_cba = self.parameter(1)
        dr_ab, dr_cb, dt = self._deltas()

        gradient = self.bond_angle_gradient(a, b, c) * (kba_abc * dr_ab + kba_cba * dr_cb)

        grad_ab = self.distance_gradient(a, b) * (kba_abc * dt)
        gradient[0] += grad_ab[0]
        gradient[1] += grad_ab[1]

        grad_cb = self.distance_gradient(c, b) * (kba_cba * dt)
        gradient[2] += grad_cb[0]
        gradient[1] += grad_cb[1]

        return gradient * STRETCH_BEND_CONSTANT


class MmffOutOfPlaneBendingCalculation(ForceFieldCalculation):
    """
    Out-of-plane bending of bond b-d from the plane a-b-c, in degrees.

    E = 0.043844 / 2 * koop * chi^2
    """

    def __init__(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> None:
        super().__init__(CalculationType.INVERSION, (a, b, c, d), 1)

    def setup(self, parameters: MmffParameters) -> bool:
        a, b, c, d = self.atoms
        koop = parameters.out_of_plane_parameters(a.type, b.type, c.type, d.type)
        if koop is None:
            return False

        self.set_parameter(0, koop)
        return True

    def energy(self) -> float:
        chi = self.wilson_angle(*self.atoms)
        return 0.5 * ANGLE_CONSTANT * self.parameter(0) * chi**2

    def gradient(self) -> NDArray[np.floating]:
        chi = self.wilson_angle(*self.atoms)
        de_dchi = ANGLE_CONSTANT * self.parameter(0) * chi
        return self.wilson_angle_gradient(*self.atoms) * de_dchi


class MmffTorsionCalculation(ForceFieldCalculation):
    """
    Three-term torsion.

    E = 0.5 * (V1 (1 + cos phi) + V2 (1 - cos 2phi) + V3 (1 + cos 3phi))
    """

    def __init__(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> None:
        super().__init__(CalculationType.TORSION, (a, b, c, d), 3)

    def setup(self, parameters: MmffParameters) -> bool:
        a, b, c, d = self.atoms
        values = parameters.torsion_parameters(a.type, b.type, c.type, d.type)
        if values is None:
            return False

        for i, value in enumerate(values):
            self.set_parameter(i, value)
        return True

    def energy(self) -> float:
        v1, v2, v3 = self.parameters
        phi = self.torsion_angle_radians(*self.atoms)

        return 0.5 * (
            v1 * (1.0 + np.cos(phi)) + v2 * (1.0 - np.cos(2.0 * phi)) + v3 * (1.0 + np.cos(3.0 * phi))
        )

    def gradient(self) -> NDArray[np.floating]:
        v1, v2, v3 = self.parameters
        phi = self.torsion_angle_radians(*self.atoms)

        de_dphi = 0.5 * (
            -v1 * np.sin(phi) + 2.0 * v2 * np.sin(2.0 * phi) - 3.0 * v3 * np.sin(3.0 * phi)
        )
        return self.torsion_angle_gradient_radians(*self.atoms) * de_dphi


class MmffVanDerWaalsCalculation(ForceFieldCalculation):
    """
    Buffered 14-7 van der Waals interaction.

    E = eps * (1.07 R* / (R + 0.07 R*))^7 * (1.12 R*^7 / (R^7 + 0.12 R*^7) - 2)

    Parameters: R*, eps, from the MMFF combination rules.
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom) -> None:
        super().__init__(CalculationType.VAN_DER_WAALS, (a, b), 2)

    def setup(self, parameters: MmffParameters) -> bool:
        a, b = self.atoms
        pa = parameters.van_der_waals_parameters(a.type)
        pb = parameters.van_der_waals_parameters(b.type)
        if pa is None or pb is None:
            return False

        r_aa = pa.a * pa.alpha**VDW_POWER
        r_bb = pb.a * pb.alpha**VDW_POWER

        if pa.donor_acceptor == "D" or pb.donor_acceptor == "D":
            r_ab = 0.5 * (r_aa + r_bb)
        else:
            gamma = (r_aa - r_bb) / (r_aa + r_bb)
            r_ab = 0.5 * (r_aa + r_bb) * (1.0 + VDW_B * (1.0 - np.exp(-VDW_BETA * gamma**2)))

        epsilon = (
            181.16 * pa.g * pb.g * pa.alpha * pb.alpha
            / (np.sqrt(pa.alpha / pa.n) + np.sqrt(pb.alpha / pb.n))
            / r_ab**6
        )

        if {pa.donor_acceptor, pb.donor_acceptor} == {"D", "A"}:
            r_ab *= VDW_DARAD
            epsilon *= VDW_DAEPS

        self.set_parameter(0, r_ab)
        self.set_parameter(1, epsilon)
        return True

    def energy(self) -> float:
        a, b = self.atoms
        r_star = self.parameter(0)
        epsilon = self.parameter(1)
        r = self.distance(a, b)

        repulsion = (1.07 * r_star / (r + 0.07 * r_star)) ** 7
        attraction = 1.12 * r_star**7 / (r**7 + 0.12 * r_star**7) - 2.0
        return epsilon * repulsion * attraction

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        r_star = self.parameter(0)
        epsilon = self.parameter(1)
        r = self.distance(a, b)

        repulsion = (1.07 * r_star / (r + 0.07 * r_star)) ** 7
        denominator = r**7 + 0.12 * r_star**7
        attraction = 1.12 * r_star**7 / denominator - 2.0

        d_repulsion = -7.0 * repulsion / (r + 0.07 * r_star)
        d_attraction = -7.84 * r_star**7 * r**6 / denominator**2

        de_dr = epsilon * (d_repulsion * attraction + repulsion * d_attraction)
        return self.distance_gradient(a, b) * de_dr


class MmffElectrostaticCalculation(ForceFieldCalculation):
    """
    Buffered Coulomb interaction.

    E = scale * 332.0716 * qa * qb / (R + 0.05)

    The scale is 0.75 for 1-4 pairs and 1 otherwise.
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom, one_four: bool = False) -> None:
        super().__init__(CalculationType.ELECTROSTATIC, (a, b), 1)
        self.one_four = one_four

    def setup(self, parameters: MmffParameters) -> bool:
        self.set_parameter(0, ONE_FOUR_SCALE if self.one_four else 1.0)
        return True

    def energy(self) -> float:
        a, b = self.atoms
        r = self.distance(a, b)
        return (
            self.parameter(0) * MMFF_COULOMB_CONSTANT * a.charge * b.charge
            / (r + ELECTROSTATIC_BUFFER)
        )

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        r = self.distance(a, b)
        de_dr = (
            -self.parameter(0) * MMFF_COULOMB_CONSTANT * a.charge * b.charge
            / (r + ELECTROSTATIC_BUFFER) ** 2
        )
        return self.distance_gradient(a, b) * de_dr
