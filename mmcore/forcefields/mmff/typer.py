"""MMFF atom typing for H, C, N and O."""

from __future__ import annotations

from ...topology import Atom
from ..typer import AtomTyper


class MmffAtomTyper(AtomTyper):
    """
    Assigns MMFF94 symbolic type numbers (as strings).

    ===  ====  =====================================
    1    CR    sp3 carbon
    2    C=C   vinylic carbon
    3    C=O   carbonyl carbon
    4    CSP   sp carbon
    37   CB    aromatic carbon
    6    OR    alcohol or ether oxygen
    7    O=C   carbonyl oxygen
    8    NR    sp3 amine nitrogen
    10   NC=O  amide nitrogen
    5    HC    hydrogen on carbon
    21   HOR   hydrogen on oxygen
    23   HNR   hydrogen on amine nitrogen
    28   HNCO  hydrogen on amide nitrogen
    ===  ====  =====================================
    """

    def type(self, atom: Atom) -> str:
        if atom.is_element("H"):
            return self._hydrogen_type(atom)
        elif atom.is_element("C"):
            return self._carbon_type(atom)
        elif atom.is_element("N"):
            return self._nitrogen_type(atom)
        elif atom.is_element("O"):
            return self._oxygen_type(atom)
        return ""

    def _carbon_type(self, atom: Atom) -> str:
        if self.is_aromatic(atom):
            return "37"
        if self.is_sp(atom):
            return "4"
        if self.is_carbonyl_carbon(atom):
            return "3"
        if self.double_bonded_to(atom, "C"):
            return "2"
        if self.neighbor_count(atom) == 4:
            return "1"
        return ""

    def _nitrogen_type(self, atom: Atom) -> str:
        if self.is_amide_nitrogen(atom):
            return "10"
        if self.neighbor_count(atom) == 3 and all(
            bond.order == 1.0 for bond in self.molecule.bonds_of(atom)
        ):
            return "8"
        return ""

    def _oxygen_type(self, atom: Atom) -> str:
        if self.has_bond_order(atom, 2.0):
            return "7"
        if self.neighbor_count(atom) == 2:
            return "6"
        return ""

    def _hydrogen_type(self, atom: Atom) -> str:
        neighbors = self.molecule.neighbors(atom)
        if len(neighbors) != 1:
            return ""

        parent = neighbors[0]
        if parent.is_element("C"):
            return "5"
        if parent.is_element("O"):
            return "21"
        if parent.is_element("N"):
            return "28" if self.is_amide_nitrogen(parent) else "23"
        return ""
