"""UFF atom typing for H, C, N and O."""

from __future__ import annotations

from ...topology import Atom
from ..typer import AtomTyper


class UffAtomTyper(AtomTyper):
    """
    Assigns UFF types: element symbol, underscore, hybridization.

    The hybridization character is 3, 2 or 1 for sp3, sp2 and sp atoms
    and R for resonant (aromatic) atoms. Amide nitrogens are resonant.
    """

    def type(self, atom: Atom) -> str:
        if atom.is_element("H"):
            return "H_"
        elif atom.is_element("C"):
            return "C_" + self._carbon_hybridization(atom)
        elif atom.is_element("N"):
            return "N_" + self._nitrogen_hybridization(atom)
        elif atom.is_element("O"):
            return "O_" + self._oxygen_hybridization(atom)
        return ""

    def _carbon_hybridization(self, atom: Atom) -> str:
        if self.is_aromatic(atom):
            return "R"
        if self.is_sp(atom):
            return "1"
        if self.has_bond_order(atom, 2.0):
            return "2"
        return "3"

    def _nitrogen_hybridization(self, atom: Atom) -> str:
        if self.is_aromatic(atom) or self.is_amide_nitrogen(atom):
            return "R"
        if self.has_bond_order(atom, 3.0):
            return "1"
        if self.has_bond_order(atom, 2.0):
            return "2"
        return "3"

    def _oxygen_hybridization(self, atom: Atom) -> str:
        if self.is_aromatic(atom):
            return "R"
        if self.has_bond_order(atom, 2.0):
            return "2"
        return "3"
