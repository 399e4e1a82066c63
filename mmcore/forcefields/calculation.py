"""Base class for a single force field energy term."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from .. import geometry

if TYPE_CHECKING:
    from .atom import ForceFieldAtom
    from .forcefield import ForceField

# Perturbation used by numerical gradients
NUMERICAL_GRADIENT_STEP = 1.0e-10


class CalculationType(enum.IntFlag):
    """Bitmask identifying the category of an energy term."""

    BOND_STRETCH = 0x01
    ANGLE_BEND = 0x02
    TORSION = 0x04
    INVERSION = 0x08
    VAN_DER_WAALS = 0x10
    ELECTROSTATIC = 0x20


class ForceFieldCalculation(ABC):
    """
    Abstract base class for one additive energy term.

    A calculation owns a fixed-size tuple of ForceFieldAtoms and a fixed-size
    parameter vector. Both sizes are chosen by the subclass at construction
    and never change.

    Subclasses implement:
    - setup(parameters): fill the parameter vector, return False when the
      parameter source does not cover the atoms' types
    - energy(): closed-form potential
    - gradient(): analytic derivative (defaults to numerical_gradient)
    """

    def __init__(
        self,
        calculation_type: CalculationType,
        atoms: tuple[ForceFieldAtom, ...],
        parameter_count: int,
    ) -> None:
        """
        Initialize the calculation.

        Args:
            calculation_type: Category bitmask.
            atoms: Participating atoms.
            parameter_count: Length of the parameter vector.
        """
        self._type = CalculationType(calculation_type)
        self._atoms = tuple(atoms)
        self._parameters = np.zeros(parameter_count, dtype=np.float64)
        self._setup = False
        self.force_field: ForceField | None = None

    def __repr__(self) -> str:
        indices = ", ".join(str(atom.index) for atom in self._atoms)
        return f"{type(self).__name__}({indices})"

    # --- Properties -------------------------------------------------------- #

    @property
    def type(self) -> CalculationType:
        """Return the category bitmask."""
        return self._type

    @property
    def is_setup(self) -> bool:
        """Return True if setup() succeeded for this calculation."""
        return self._setup

    def _set_setup(self, setup: bool) -> None:
        self._setup = bool(setup)

    # --- Atoms ------------------------------------------------------------- #

    @property
    def atoms(self) -> tuple[ForceFieldAtom, ...]:
        """Return the participating atoms."""
        return self._atoms

    @property
    def atom_count(self) -> int:
        """Return the number of participating atoms."""
        return len(self._atoms)

    def atom(self, index: int) -> ForceFieldAtom:
        """Return the atom at ``index`` in the atom tuple."""
        if index < 0 or index >= len(self._atoms):
            raise IndexError(f"Atom index {index} out of range [0, {len(self._atoms)})")
        return self._atoms[index]

    def contains(self, atom: ForceFieldAtom) -> bool:
        """Return True if ``atom`` participates in this calculation."""
        return any(member is atom for member in self._atoms)

    # --- Parameters -------------------------------------------------------- #

    @property
    def parameter_count(self) -> int:
        """Return the length of the parameter vector."""
        return len(self._parameters)

    def parameter(self, index: int) -> float:
        """Return the parameter at ``index``."""
        if index < 0 or index >= len(self._parameters):
            raise IndexError(
                f"Parameter index {index} out of range [0, {len(self._parameters)})"
            )
        return float(self._parameters[index])

    def set_parameter(self, index: int, value: float) -> None:
        """
        Set the parameter at ``index``.

        Raises:
            IndexError: If index is outside the fixed parameter vector.
        """
        if index < 0 or index >= len(self._parameters):
            raise IndexError(
                f"Parameter index {index} out of range [0, {len(self._parameters)})"
            )
        self._parameters[index] = value

    @property
    def parameters(self) -> NDArray[np.floating]:
        """Return a copy of the parameter vector."""
        return self._parameters.copy()

    # --- Calculations ------------------------------------------------------ #

    @abstractmethod
    def setup(self, parameters: Any) -> bool:
        """
        Look up this term's constants from a parameter source.

        Args:
            parameters: Parameterization-specific parameter object.

        Returns:
            True if all constants were found.
        """
        ...

    @abstractmethod
    def energy(self) -> float:
        """Return the energy of this term in kcal/mol."""
        ...

    def gradient(self) -> NDArray[np.floating]:
        """
        Return dE/dx for each atom, shape (atom_count, 3).

        The default implementation is numerical; subclasses override it with
        the analytic chain-rule form.
        """
        return self.numerical_gradient()

    def numerical_gradient(self, step: float = NUMERICAL_GRADIENT_STEP) -> NDArray[np.floating]:
        """
        Estimate the gradient by central differences.

        Each coordinate of each atom is displaced by +/- step and restored.

        Args:
            step: Displacement in Angstrom.

        Returns:
            Array of shape (atom_count, 3).
        """
        gradient = np.zeros((len(self._atoms), 3), dtype=np.float64)

        for i, atom in enumerate(self._atoms):
            original = atom.position.copy()
            for axis in range(3):
                displaced = original.copy()

                x_plus = original[axis] + step
                displaced[axis] = x_plus
                atom.set_position(displaced)
                e_plus = self.energy()

                x_minus = original[axis] - step
                displaced[axis] = x_minus
                atom.set_position(displaced)
                e_minus = self.energy()

                # divide by the representable displacement, not 2 * step
                gradient[i, axis] = (e_plus - e_minus) / (x_plus - x_minus)
            atom.set_position(original)

        return gradient

    # --- Geometry ---------------------------------------------------------- #

    @staticmethod
    def distance(a: ForceFieldAtom, b: ForceFieldAtom) -> float:
        """Return the distance between two atoms."""
        return geometry.distance(a.position, b.position)

    @staticmethod
    def distance_gradient(a: ForceFieldAtom, b: ForceFieldAtom) -> NDArray[np.floating]:
        return geometry.distance_gradient(a.position, b.position)

    @staticmethod
    def bond_angle(a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom) -> float:
        """Return the angle a-b-c in degrees."""
        return geometry.bond_angle(a.position, b.position, c.position)

    @staticmethod
    def bond_angle_radians(a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom) -> float:
        """Return the angle a-b-c in radians."""
        return geometry.bond_angle_radians(a.position, b.position, c.position)

    @staticmethod
    def bond_angle_gradient(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom
    ) -> NDArray[np.floating]:
        return geometry.bond_angle_gradient(a.position, b.position, c.position)

    @staticmethod
    def bond_angle_gradient_radians(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom
    ) -> NDArray[np.floating]:
        return geometry.bond_angle_gradient_radians(a.position, b.position, c.position)

    @staticmethod
    def torsion_angle(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the torsion angle a-b-c-d in degrees."""
        return geometry.torsion_angle(a.position, b.position, c.position, d.position)

    @staticmethod
    def torsion_angle_radians(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the torsion angle a-b-c-d in radians."""
        return geometry.torsion_angle_radians(a.position, b.position, c.position, d.position)

    @staticmethod
    def torsion_angle_gradient(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> NDArray[np.floating]:
        return geometry.torsion_angle_gradient(a.position, b.position, c.position, d.position)

    @staticmethod
    def torsion_angle_gradient_radians(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> NDArray[np.floating]:
        return geometry.torsion_angle_gradient_radians(
            a.position, b.position, c.position, d.position
        )

    @staticmethod
    def wilson_angle(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the out-of-plane angle of b-d from plane a-b-c in degrees."""
        return geometry.wilson_angle(a.position, b.position, c.position, d.position)

    @staticmethod
    def wilson_angle_radians(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the out-of-plane angle of b-d from plane a-b-c in radians."""
        return geometry.wilson_angle_radians(a.position, b.position, c.position, d.position)

    @staticmethod
    def wilson_angle_gradient(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> NDArray[np.floating]:
        return geometry.wilson_angle_gradient(a.position, b.position, c.position, d.position)

    @staticmethod
    def wilson_angle_gradient_radians(
        a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> NDArray[np.floating]:
        return geometry.wilson_angle_gradient_radians(
            a.position, b.position, c.position, d.position
        )
