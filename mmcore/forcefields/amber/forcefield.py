"""AMBER force field."""

from __future__ import annotations

import logging
from typing import Any

from ...topology import ForceFieldInteractions
from ..atom import ForceFieldAtom
from ..forcefield import ForceField, ForceFieldFlags
from ..typer import TypeFunction
from .calculations import (
    AmberAngleCalculation,
    AmberBondCalculation,
    AmberNonbondedCalculation,
    AmberTorsionCalculation,
)
from .parameters import load_parm99
from .typer import AmberAtomTyper

logger = logging.getLogger(__name__)


class AmberForceField(ForceField):
    """
    AMBER force field with analytic gradients.

    Partial charges are taken from the structural atoms. Nonbonded terms
    cover atom pairs three or more bonds apart and pairs in different
    fragments.

    Example:
        ff = AmberForceField()
        ff.add_molecule(ethane)
        ff.setup()
        ff.energy()
    """

    def __init__(self, *, atom_typer: TypeFunction | None = None, **kwargs: Any) -> None:
        """
        Initialize AMBER force field.

        Args:
            atom_typer: Function mapping a structural atom to its AMBER type.
                Defaults to the built-in AmberAtomTyper.
            **kwargs: Forwarded to ForceField.
        """
        super().__init__("amber", flags=ForceFieldFlags.ANALYTICAL_GRADIENT, **kwargs)
        self.atom_typer = atom_typer

        self.add_parameter_set("parm99", load_parm99)
        self.set_parameter_set("parm99")

    def setup(self) -> bool:
        """Type atoms, create calculations and look up their parameters."""
        parameters = self._load_parameters()
        if parameters is None:
            return False

        self._reset()

        for molecule in self.molecules:
            typer = self.atom_typer or AmberAtomTyper(molecule)

            for atom in molecule.atoms:
                ff_atom = ForceFieldAtom(self, atom)
                ff_atom.set_type(typer(atom))
                ff_atom.set_charge(atom.partial_charge)
                self.add_atom(ff_atom)

                if not ff_atom.type:
                    logger.warning("No AMBER type for atom %s", atom.name)

            interactions = ForceFieldInteractions(molecule, self)

            for a, b in interactions.bonded_pairs():
                self.add_calculation(AmberBondCalculation(a, b))

            for a, b, c in interactions.angle_groups():
                self.add_calculation(AmberAngleCalculation(a, b, c))

            for a, b, c, d in interactions.torsion_groups():
                self.add_calculation(AmberTorsionCalculation(a, b, c, d))

            for a, b in interactions.nonbonded_pairs():
                self.add_calculation(AmberNonbondedCalculation(a, b))

        return self._setup_calculations(parameters)
