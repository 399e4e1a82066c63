"""Enumeration of bonded and nonbonded interaction tuples of a molecule."""

from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING

from .molecule import Atom, Molecule

if TYPE_CHECKING:
    from ..forcefields.atom import ForceFieldAtom
    from ..forcefields.forcefield import ForceField


class ForceFieldInteractions:
    """
    Interaction enumerator for one molecule.

    Walks the bond graph of ``molecule`` and yields tuples of the
    ForceFieldAtoms that ``force_field`` created for its atoms:

    - bonded pairs (a, b)
    - angle groups (a, b, c) with b the central atom
    - torsion groups (a, b, c, d) around the central bond b-c
    - nonbonded pairs, i.e. atoms separated by three or more bonds or
      lying in different fragments

    The force field must already hold an atom for every structural atom.
    """

    def __init__(self, molecule: Molecule, force_field: ForceField) -> None:
        self.molecule = molecule
        self.force_field = force_field
        self._distances: dict[Atom, dict[Atom, int]] = {}

    def _ff(self, atom: Atom) -> ForceFieldAtom:
        ff_atom = self.force_field.atom_for(atom)
        if ff_atom is None:
            raise ValueError(f"No force field atom for {atom.name}")
        return ff_atom

    def _bond_distance(self, a: Atom, b: Atom) -> int | None:
        if a not in self._distances:
            self._distances[a] = self.molecule.bond_distances(a, max_bonds=3)
        return self._distances[a].get(b)

    def bonded_pairs(self) -> list[tuple[ForceFieldAtom, ForceFieldAtom]]:
        """Return one pair per bond."""
        return [(self._ff(bond.first), self._ff(bond.second)) for bond in self.molecule.bonds]

    def angle_groups(self) -> list[tuple[ForceFieldAtom, ForceFieldAtom, ForceFieldAtom]]:
        """Return every (a, b, c) where a and c are both bonded to b."""
        groups = []
        for center in self.molecule.atoms:
            for a, c in combinations(self.molecule.neighbors(center), 2):
                groups.append((self._ff(a), self._ff(center), self._ff(c)))
        return groups

    def torsion_groups(
        self,
    ) -> list[tuple[ForceFieldAtom, ForceFieldAtom, ForceFieldAtom, ForceFieldAtom]]:
        """Return every (a, b, c, d) where a-b, b-c and c-d are bonds."""
        groups = []
        for bond in self.molecule.bonds:
            b, c = bond.first, bond.second
            for a in self.molecule.neighbors(b):
                if a is c:
                    continue
                for d in self.molecule.neighbors(c):
                    # skip three-membered rings
                    if d is b or d is a:
                        continue
                    groups.append((self._ff(a), self._ff(b), self._ff(c), self._ff(d)))
        return groups

    def nonbonded_pairs(self) -> list[tuple[ForceFieldAtom, ForceFieldAtom]]:
        """Return pairs separated by at least three bonds, 1-4 pairs included."""
        pairs = []
        for a, b in combinations(self.molecule.atoms, 2):
            bonds = self._bond_distance(a, b)
            if bonds is None or bonds >= 3:
                pairs.append((self._ff(a), self._ff(b)))
        return pairs

    def is_one_four(self, a: Atom, b: Atom) -> bool:
        """Return True if a and b are separated by exactly three bonds."""
        return self._bond_distance(a, b) == 3
