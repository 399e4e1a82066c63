"""MMFF94 force field."""

from __future__ import annotations

import logging
from typing import Any

from ...topology import ForceFieldInteractions
from ..atom import ForceFieldAtom
from ..forcefield import ForceField, ForceFieldFlags
from ..typer import TypeFunction
from .calculations import (
    MmffAngleBendCalculation,
    MmffBondStretchCalculation,
    MmffElectrostaticCalculation,
    MmffOutOfPlaneBendingCalculation,
    MmffStretchBendCalculation,
    MmffTorsionCalculation,
    MmffVanDerWaalsCalculation,
)
from .charges import bond_charge_increment_charges
from .parameters import LINEAR_TYPES, load_mmff94
from .typer import MmffAtomTyper

logger = logging.getLogger(__name__)


class MmffForceField(ForceField):
    """
    MMFF94 force field with analytic gradients.

    Partial charges are derived from bond charge increments, ignoring the
    charges stored on the structural atoms. Every trigonal center gets three
    out-of-plane terms, one per neighbor. Torsions about a linear atom are
    not created.
    """

    def __init__(self, *, atom_typer: TypeFunction | None = None, **kwargs: Any) -> None:
        """
        Initialize MMFF force field.

        Args:
            atom_typer: Function mapping a structural atom to its MMFF type
                number as a string. Defaults to the built-in MmffAtomTyper.
            **kwargs: Forwarded to ForceField.
        """
        super().__init__("mmff", flags=ForceFieldFlags.ANALYTICAL_GRADIENT, **kwargs)
        self.atom_typer = atom_typer

        self.add_parameter_set("mmff94", load_mmff94)
        self.set_parameter_set("mmff94")

    def setup(self) -> bool:
        """Type atoms, assign charges, create calculations and set them up."""
        parameters = self._load_parameters()
        if parameters is None:
            return False

        self._reset()

        for molecule in self.molecules:
            typer = self.atom_typer or MmffAtomTyper(molecule)
            types = {atom: typer(atom) for atom in molecule.atoms}
            charges = bond_charge_increment_charges(molecule, types.__getitem__, parameters)

            for atom in molecule.atoms:
                ff_atom = ForceFieldAtom(self, atom)
                ff_atom.set_type(types[atom])
                ff_atom.set_charge(charges[atom])
                self.add_atom(ff_atom)

                if not ff_atom.type:
                    logger.warning("No MMFF type for atom %s", atom.name)

            interactions = ForceFieldInteractions(molecule, self)

            for a, b in interactions.bonded_pairs():
                self.add_calculation(MmffBondStretchCalculation(a, b))

            for a, b, c in interactions.angle_groups():
                self.add_calculation(MmffAngleBendCalculation(a, b, c))
                self.add_calculation(MmffStretchBendCalculation(a, b, c))

            for atom in molecule.atoms:
                neighbors = molecule.neighbors(atom)
                if len(neighbors) != 3:
                    continue

                a, c, d = (self.atom_for(neighbor) for neighbor in neighbors)
                b = self.atom_for(atom)
                self.add_calculation(MmffOutOfPlaneBendingCalculation(a, b, c, d))
                self.add_calculation(MmffOutOfPlaneBendingCalculation(a, b, d, c))
                self.add_calculation(MmffOutOfPlaneBendingCalculation(c, b, d, a))

            for a, b, c, d in interactions.torsion_groups():
                if b.type in LINEAR_TYPES or c.type in LINEAR_TYPES:
                    continue
                self.add_calculation(MmffTorsionCalculation(a, b, c, d))

            for a, b in interactions.nonbonded_pairs():
                one_four = interactions.is_one_four(a.atom, b.atom)
                self.add_calculation(MmffVanDerWaalsCalculation(a, b))
                self.add_calculation(MmffElectrostaticCalculation(a, b, one_four=one_four))

        return self._setup_calculations(parameters)
