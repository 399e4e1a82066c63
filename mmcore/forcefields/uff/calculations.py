"""UFF energy terms."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ...constants import DEGREES_TO_RADIANS, PI
from ..calculation import CalculationType, ForceFieldCalculation

if TYPE_CHECKING:
    from ..atom import ForceFieldAtom
    from .parameters import UffAtomParameters, UffParameters

# Force constant prefactor of the bond and angle terms [kcal*A/mol]
FORCE_CONSTANT = 664.12

SP2_CENTERS = frozenset({"C_2", "C_R"})


def hybridization(type_label: str) -> str:
    """Return the hybridization character of a UFF type ("3", "2", "1", "R")."""
    return type_label[2] if len(type_label) > 2 else ""


def is_sp2(type_label: str) -> bool:
    return hybridization(type_label) in ("2", "R")


def is_group_six(atom: ForceFieldAtom) -> bool:
    return atom.atom.element.group == 16


def effective_bond_order(a: ForceFieldAtom, b: ForceFieldAtom, bond_order: float) -> float:
    """Return 1.5 between two resonant atoms, otherwise ``bond_order``."""
    if hybridization(a.type) == "R" and hybridization(b.type) == "R":
        return 1.5
    return bond_order


def bond_length(a: UffAtomParameters, b: UffAtomParameters, bond_order: float) -> float:
    """
    Return the natural bond length r_ij = r_i + r_j + r_bo - r_en.

    r_bo corrects for the bond order, r_en for the electronegativity
    difference.
    """
    r_bo = -0.1332 * (a.r + b.r) * np.log(bond_order)
    r_en = a.r * b.r * (np.sqrt(a.X) - np.sqrt(b.X)) ** 2 / (a.X * a.r + b.X * b.r)
    return a.r + b.r + r_bo - r_en


class UffBondStretchCalculation(ForceFieldCalculation):
    """
    Harmonic bond stretch.

    E = 1/2 * kb * (r - r0)^2,  kb = 664.12 * Z_i * Z_j / r0^3
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom, bond_order: float = 1.0) -> None:
        super().__init__(CalculationType.BOND_STRETCH, (a, b), 2)
        self.bond_order = bond_order

    def setup(self, parameters: UffParameters) -> bool:
        a, b = self.atoms
        pa = parameters.parameters(a.type)
        pb = parameters.parameters(b.type)
        if pa is None or pb is None:
            return False

        r0 = bond_length(pa, pb, effective_bond_order(a, b, self.bond_order))
        self.set_parameter(0, FORCE_CONSTANT * pa.Z * pb.Z / r0**3)
        self.set_parameter(1, r0)
        return True

    def energy(self) -> float:
        a, b = self.atoms
        kb = self.parameter(0)
        dr = self.distance(a, b) - self.parameter(1)
        return 0.5 * kb * dr * dr

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        kb = self.parameter(0)
        de_dr = kb * (self.distance(a, b) - self.parameter(1))
        return self.distance_gradient(a, b) * de_dr


class UffAngleBendCalculation(ForceFieldCalculation):
    """
    Cosine Fourier angle bend.

    E = ka * (c0 + c1 cos(theta) + c2 cos(2 theta))

    Linear centers use E = ka * (1 + cos(theta)). Parameters: ka, c0, c1, c2.
    """

    def __init__(
        self,
        a: ForceFieldAtom,
        b: ForceFieldAtom,
        c: ForceFieldAtom,
        bond_orders: tuple[float, float] = (1.0, 1.0),
    ) -> None:
        super().__init__(CalculationType.ANGLE_BEND, (a, b, c), 4)
        self.bond_orders = bond_orders

    def setup(self, parameters: UffParameters) -> bool:
        a, b, c = self.atoms
        pa = parameters.parameters(a.type)
        pb = parameters.parameters(b.type)
        pc = parameters.parameters(c.type)
        if pa is None or pb is None or pc is None:
            return False

        theta0 = pb.theta * DEGREES_TO_RADIANS
        cos_theta0 = np.cos(theta0)

        r_ab = bond_length(pa, pb, effective_bond_order(a, b, self.bond_orders[0]))
        r_bc = bond_length(pb, pc, effective_bond_order(b, c, self.bond_orders[1]))
        r_ac = np.sqrt(r_ab**2 + r_bc**2 - 2.0 * r_ab * r_bc * cos_theta0)

        beta = FORCE_CONSTANT / (r_ab * r_bc)
        ka = (
            beta
            * (pa.Z * pc.Z / r_ac**5)
            * r_ab
            * r_bc
            * (3.0 * r_ab * r_bc * (1.0 - cos_theta0**2) - r_ac**2 * cos_theta0)
        )

        if pb.theta >= 180.0:
            c0, c1, c2 = 1.0, 1.0, 0.0
        else:
            c2 = 1.0 / (4.0 * np.sin(theta0) ** 2)
            c1 = -4.0 * c2 * cos_theta0
            c0 = c2 * (2.0 * cos_theta0**2 + 1.0)

        for i, value in enumerate((ka, c0, c1, c2)):
            self.set_parameter(i, value)
        return True

    def energy(self) -> float:
        ka, c0, c1, c2 = self.parameters
        theta = self.bond_angle_radians(*self.atoms)
        return ka * (c0 + c1 * np.cos(theta) + c2 * np.cos(2.0 * theta))

    def gradient(self) -> NDArray[np.floating]:
        ka, _, c1, c2 = self.parameters
        theta = self.bond_angle_radians(*self.atoms)

        de_dtheta = -ka * (c1 * np.sin(theta) + 2.0 * c2 * np.sin(2.0 * theta))
        return self.bond_angle_gradient_radians(*self.atoms) * de_dtheta


class UffTorsionCalculation(ForceFieldCalculation):
    """
    Torsion about the bond b-c.

    E = 1/2 * V * (1 - cos(n phi0) cos(n phi))

    V, n and phi0 depend on the hybridization of b and c. Parameters:
    V, n, phi0 (radians).
    """

    def __init__(
        self,
        a: ForceFieldAtom,
        b: ForceFieldAtom,
        c: ForceFieldAtom,
        d: ForceFieldAtom,
        bond_order: float = 1.0,
    ) -> None:
        super().__init__(CalculationType.TORSION, (a, b, c, d), 3)
        self.bond_order = bond_order

    def setup(self, parameters: UffParameters) -> bool:
        _, b, c, _ = self.atoms
        pb = parameters.parameters(b.type)
        pc = parameters.parameters(c.type)
        if pb is None or pc is None:
            return False

        hb = hybridization(b.type)
        hc = hybridization(c.type)

        if hb == "3" and hc == "3":
            if is_group_six(b) and is_group_six(c):
                oxygens = sum(1 for atom in (b, c) if atom.atom.is_element("O"))
                if oxygens == 2:
                    barrier = 2.0
                elif oxygens == 1:
                    barrier = np.sqrt(2.0 * 6.8)
                else:
                    barrier = 6.8
                n, phi0 = 2.0, 90.0
            else:
                barrier = np.sqrt(pb.V * pc.V)
                n, phi0 = 3.0, 180.0
        elif is_sp2(b.type) and is_sp2(c.type):
            bond_order = effective_bond_order(b, c, self.bond_order)
            barrier = 5.0 * np.sqrt(pb.U * pc.U) * (1.0 + 4.18 * np.log(bond_order))
            n, phi0 = 2.0, 180.0
        elif (is_group_six(b) and hb == "3" and is_sp2(c.type)) or (
            is_group_six(c) and hc == "3" and is_sp2(b.type)
        ):
            bond_order = effective_bond_order(b, c, self.bond_order)
            barrier = 5.0 * np.sqrt(pb.U * pc.U) * (1.0 + 4.18 * np.log(bond_order))
            n, phi0 = 2.0, 90.0
        elif (hb == "3" and is_sp2(c.type)) or (hc == "3" and is_sp2(b.type)):
            barrier = 1.0
            n, phi0 = 6.0, 0.0
        else:
            return False

        self.set_parameter(0, barrier)
        self.set_parameter(1, n)
        self.set_parameter(2, phi0 * DEGREES_TO_RADIANS)
        return True

    def energy(self) -> float:
        barrier, n, phi0 = self.parameters
        phi = self.torsion_angle_radians(*self.atoms)
        return 0.5 * barrier * (1.0 - np.cos(n * phi0) * np.cos(n * phi))

    def gradient(self) -> NDArray[np.floating]:
        barrier, n, phi0 = self.parameters
        phi = self.torsion_angle_radians(*self.atoms)

        de_dphi = 0.5 * barrier * n * np.cos(n * phi0) * np.sin(n * phi)
        return self.torsion_angle_gradient_radians(*self.atoms) * de_dphi


class UffInversionCalculation(ForceFieldCalculation):
    """
    Inversion of the sp2 carbon b, with d measured against plane a-b-c.

    E = k * (c0 + c1 sin(y) + c2 cos(2y)),  y = w + pi/2

    k is 50 for carbonyl carbons and 6 otherwise, divided over the three
    inversion terms of each center. Parameters: k, c0, c1, c2.
    """

    def __init__(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> None:
        super().__init__(CalculationType.INVERSION, (a, b, c, d), 4)

    def setup(self, parameters: UffParameters) -> bool:
        a, b, c, d = self.atoms
        if b.type not in SP2_CENTERS:
            return False

        k = 50.0 if "O_2" in (a.type, c.type, d.type) else 6.0
        for i, value in enumerate((k / 3.0, 1.0, -1.0, 0.0)):
            self.set_parameter(i, value)
        return True

    def energy(self) -> float:
        k, c0, c1, c2 = self.parameters
        y = self.wilson_angle_radians(*self.atoms) + PI / 2.0
        return k * (c0 + c1 * np.sin(y) + c2 * np.cos(2.0 * y))

    def gradient(self) -> NDArray[np.floating]:
        k, _, c1, c2 = self.parameters
        y = self.wilson_angle_radians(*self.atoms) + PI / 2.0

        de_dw = k * (c1 * np.cos(y) - 2.0 * c2 * np.sin(2.0 * y))
        return self.wilson_angle_gradient_radians(*self.atoms) * de_dw


class UffVanDerWaalsCalculation(ForceFieldCalculation):
    """
    Lennard-Jones 12-6 interaction.

    E = D * ((x/r)^12 - 2 (x/r)^6),  D = sqrt(D_i D_j), x = sqrt(x_i x_j)
    """

    def __init__(self, a: ForceFieldAtom, b: ForceFieldAtom) -> None:
        super().__init__(CalculationType.VAN_DER_WAALS, (a, b), 2)

    def setup(self, parameters: UffParameters) -> bool:
        a, b = self.atoms
        pa = parameters.parameters(a.type)
        pb = parameters.parameters(b.type)
        if pa is None or pb is None:
            return False

        self.set_parameter(0, np.sqrt(pa.D * pb.D))
        self.set_parameter(1, np.sqrt(pa.x * pb.x))
        return True

    def energy(self) -> float:
        a, b = self.atoms
        well_depth = self.parameter(0)
        xr6 = (self.parameter(1) / self.distance(a, b)) ** 6
        return well_depth * (xr6 * xr6 - 2.0 * xr6)

    def gradient(self) -> NDArray[np.floating]:
        a, b = self.atoms
        well_depth = self.parameter(0)
        r = self.distance(a, b)
        xr6 = (self.parameter(1) / r) ** 6

        de_dr = -12.0 * well_depth / r * (xr6 * xr6 - xr6)
        return self.distance_gradient(a, b) * de_dr
