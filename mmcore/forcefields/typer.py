"""Base class for rule-based atom typers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from ..topology import Atom, Molecule

# Signature accepted by force fields in place of their built-in typer
TypeFunction = Callable[[Atom], str]


class AtomTyper(ABC):
    """
    Assigns parameterization-specific type labels to the atoms of a molecule.

    Typers only look at elements, neighbors and bond orders. An atom the
    rules do not cover gets the empty string, which makes every calculation
    that involves it fail setup.
    """

    def __init__(self, molecule: Molecule) -> None:
        self.molecule = molecule

    def __call__(self, atom: Atom) -> str:
        return self.type(atom)

    @abstractmethod
    def type(self, atom: Atom) -> str:
        """Return the type label of ``atom``, or "" if not covered."""
        ...

    # --- Helpers ----------------------------------------------------------- #

    def neighbor_count(self, atom: Atom) -> int:
        return len(self.molecule.neighbors(atom))

    def heavy_neighbors(self, atom: Atom) -> list[Atom]:
        """Return the non-hydrogen neighbors of ``atom``."""
        return [neighbor for neighbor in self.molecule.neighbors(atom) if not neighbor.is_element("H")]

    def has_bond_order(self, atom: Atom, order: float) -> bool:
        """Return True if ``atom`` has at least one bond of ``order``."""
        return any(bond.order == order for bond in self.molecule.bonds_of(atom))

    def double_bond_count(self, atom: Atom) -> int:
        return sum(1 for bond in self.molecule.bonds_of(atom) if bond.order == 2.0)

    def is_aromatic(self, atom: Atom) -> bool:
        """Return True if ``atom`` has an aromatic (order 1.5) bond."""
        return any(bond.is_aromatic for bond in self.molecule.bonds_of(atom))

    def is_sp(self, atom: Atom) -> bool:
        """Return True for atoms with a triple bond or two double bonds."""
        return self.has_bond_order(atom, 3.0) or self.double_bond_count(atom) >= 2

    def double_bonded_to(self, atom: Atom, symbol: str) -> bool:
        """Return True if ``atom`` has a double bond to an atom of element ``symbol``."""
        return any(
            bond.order == 2.0 and bond.other(atom).is_element(symbol)
            for bond in self.molecule.bonds_of(atom)
        )

    def is_carbonyl_carbon(self, atom: Atom) -> bool:
        return atom.is_element("C") and self.double_bonded_to(atom, "O")

    def is_amide_nitrogen(self, atom: Atom) -> bool:
        """Return True for a nitrogen single bonded to a carbonyl carbon."""
        return atom.is_element("N") and any(
            self.molecule.bond_order(atom, neighbor) == 1.0 and self.is_carbonyl_carbon(neighbor)
            for neighbor in self.molecule.neighbors(atom)
        )

    def electronegative_neighbor_count(self, atom: Atom) -> int:
        """Return the number of N and O neighbors of ``atom``."""
        return sum(
            1
            for neighbor in self.molecule.neighbors(atom)
            if neighbor.is_element("N") or neighbor.is_element("O")
        )
