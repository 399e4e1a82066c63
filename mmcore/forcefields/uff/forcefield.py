"""Universal force field."""

from __future__ import annotations

import logging
from typing import Any

from ...topology import ForceFieldInteractions
from ..atom import ForceFieldAtom
from ..forcefield import ForceField, ForceFieldFlags
from ..typer import TypeFunction
from .calculations import (
    SP2_CENTERS,
    UffAngleBendCalculation,
    UffBondStretchCalculation,
    UffInversionCalculation,
    UffTorsionCalculation,
    UffVanDerWaalsCalculation,
    hybridization,
)
from .parameters import load_uff
from .typer import UffAtomTyper

logger = logging.getLogger(__name__)


class UffForceField(ForceField):
    """
    Universal force field with analytic gradients.

    UFF has no electrostatic terms. Inversion terms are created for sp2
    carbon centers only and torsions about sp atoms are omitted.
    """

    def __init__(self, *, atom_typer: TypeFunction | None = None, **kwargs: Any) -> None:
        """
        Initialize UFF.

        Args:
            atom_typer: Function mapping a structural atom to its UFF type
                (e.g. "C_3"). Defaults to the built-in UffAtomTyper.
            **kwargs: Forwarded to ForceField.
        """
        super().__init__("uff", flags=ForceFieldFlags.ANALYTICAL_GRADIENT, **kwargs)
        self.atom_typer = atom_typer

        self.add_parameter_set("uff", load_uff)
        self.set_parameter_set("uff")

    def setup(self) -> bool:
        """Type atoms, create calculations and set them up."""
        parameters = self._load_parameters()
        if parameters is None:
            return False

        self._reset()

        for molecule in self.molecules:
            typer = self.atom_typer or UffAtomTyper(molecule)

            for atom in molecule.atoms:
                ff_atom = ForceFieldAtom(self, atom)
                ff_atom.set_type(typer(atom))
                self.add_atom(ff_atom)

                if not ff_atom.type:
                    logger.warning("No UFF type for atom %s", atom.name)

            interactions = ForceFieldInteractions(molecule, self)

            for a, b in interactions.bonded_pairs():
                order = molecule.bond_order(a.atom, b.atom)
                self.add_calculation(UffBondStretchCalculation(a, b, order))

            for a, b, c in interactions.angle_groups():
                orders = (
                    molecule.bond_order(a.atom, b.atom),
                    molecule.bond_order(b.atom, c.atom),
                )
                self.add_calculation(UffAngleBendCalculation(a, b, c, orders))

            for a, b, c, d in interactions.torsion_groups():
                if hybridization(b.type) == "1" or hybridization(c.type) == "1":
                    continue
                order = molecule.bond_order(b.atom, c.atom)
                self.add_calculation(UffTorsionCalculation(a, b, c, d, order))

            for atom in molecule.atoms:
                neighbors = molecule.neighbors(atom)
                center = self.atom_for(atom)
                if len(neighbors) != 3 or center.type not in SP2_CENTERS:
                    continue

                a, c, d = (self.atom_for(neighbor) for neighbor in neighbors)
                self.add_calculation(UffInversionCalculation(a, center, c, d))
                self.add_calculation(UffInversionCalculation(a, center, d, c))
                self.add_calculation(UffInversionCalculation(c, center, d, a))

            for a, b in interactions.nonbonded_pairs():
                self.add_calculation(UffVanDerWaalsCalculation(a, b))

        return self._setup_calculations(parameters)
