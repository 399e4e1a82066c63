"""AMBER atom typing for H, C, N and O."""

from __future__ import annotations

from ...topology import Atom
from ..typer import AtomTyper


class AmberAtomTyper(AtomTyper):
    """
    Assigns parm99 atom types.

    Carbon: CT (sp3), CA (aromatic), C (carbonyl), CM (other sp2).
    Nitrogen: N (amide), N3 (sp3 amine). Oxygen: OH (hydroxyl),
    OS (ether), O (carbonyl). Hydrogen types follow the atom they are
    bonded to: HC and H1 on sp3 carbon (H1 when the carbon carries an
    N or O), HA on sp2 carbon, HO on oxygen, H on nitrogen.
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
            return "CA"
        if self.is_sp(atom):
            return ""
        if self.is_carbonyl_carbon(atom):
            return "C"
        if self.double_bonded_to(atom, "C"):
            return "CM"
        if self.neighbor_count(atom) == 4:
            return "CT"
        return ""

    def _nitrogen_type(self, atom: Atom) -> str:
        if self.is_amide_nitrogen(atom):
            return "N"
        if self.neighbor_count(atom) == 3 and all(
            bond.order == 1.0 for bond in self.molecule.bonds_of(atom)
        ):
            return "N3"
        return ""

    def _oxygen_type(self, atom: Atom) -> str:
        if self.has_bond_order(atom, 2.0):
            return "O"
        neighbors = self.molecule.neighbors(atom)
        if len(neighbors) != 2:
            return ""
        if any(neighbor.is_element("H") for neighbor in neighbors):
            return "OH"
        return "OS"

    def _hydrogen_type(self, atom: Atom) -> str:
        neighbors = self.molecule.neighbors(atom)
        if len(neighbors) != 1:
            return ""

        parent = neighbors[0]
        if parent.is_element("O"):
            return "HO"
        if parent.is_element("N"):
            return "H"
        if not parent.is_element("C"):
            return ""

        parent_type = self._carbon_type(parent)
        if parent_type in ("CA", "CM", "C"):
            return "HA"
        if parent_type == "CT":
            return "H1" if self.electronegative_neighbor_count(parent) else "HC"
        return ""
