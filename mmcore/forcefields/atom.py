"""Per-atom record used inside a force field."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from ..topology import Atom
    from .forcefield import ForceField


class ForceFieldAtom:
    """
    Force field view of one structural atom.

    The position is engine-local: it starts as a copy of the structural
    atom's position and only flows back through ForceField.write_coordinates.

    Attributes:
        force_field: Owning force field.
        atom: The structural atom this record represents (not owned).
    """

    def __init__(self, force_field: ForceField, atom: Atom) -> None:
        self.force_field = force_field
        self.atom = atom
        self.index = -1
        self._position = np.array(atom.position, dtype=np.float64).reshape(3)
        self._charge = 0.0
        self._type = ""

    def __repr__(self) -> str:
        return f"ForceFieldAtom(index={self.index}, type={self._type!r})"

    @property
    def position(self) -> NDArray[np.floating]:
        """Return the engine-local position."""
        return self._position

    def set_position(self, position: ArrayLike) -> None:
        """Set the engine-local position (copied)."""
        self._position = np.array(position, dtype=np.float64).reshape(3)

    def move_by(self, displacement: ArrayLike) -> None:
        """Translate the atom by ``displacement``."""
        self._position = self._position + np.asarray(displacement, dtype=np.float64)

    @property
    def charge(self) -> float:
        """Return the partial charge."""
        return self._charge

    def set_charge(self, charge: float) -> None:
        self._charge = float(charge)

    @property
    def type(self) -> str:
        """Return the parameterization-specific type label."""
        return self._type

    def set_type(self, type_label: str) -> None:
        self._type = str(type_label)

    def energy(self) -> float:
        """Return the summed energy of the set up calculations containing this atom."""
        return float(
            sum(
                calculation.energy()
                for calculation in self.force_field.calculations
                if calculation.is_setup and calculation.contains(self)
            )
        )
