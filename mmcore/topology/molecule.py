"""Structural molecule: atoms with positions, bonds with orders."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .elements import Element, element


@dataclass(eq=False)
class Atom:
    """
    Atom of a structural molecule.

    Atoms compare and hash by identity, so they can be used as mapping keys.

    Attributes:
        symbol: Element symbol.
        position: Cartesian position in Angstrom, shape (3,).
        partial_charge: Partial charge, used by force fields that do not
            derive their own charges.
        formal_charge: Integer formal charge.
        name: Optional atom name.
        index: Index within the owning molecule, set by Molecule.add_atom.
    """

    symbol: str
    position: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    partial_charge: float = 0.0
    formal_charge: int = 0
    name: str = ""
    index: int = -1

    def __post_init__(self) -> None:
        """Validate and convert the position."""
        self.position = np.asarray(self.position, dtype=np.float64).reshape(3)

    @property
    def element(self) -> Element:
        """Return the element of this atom."""
        return element(self.symbol)

    def is_element(self, symbol: str) -> bool:
        """Return True if the atom is of element ``symbol``."""
        return self.symbol == symbol

    def set_position(self, position: ArrayLike) -> None:
        """Set the position (copied)."""
        self.position = np.array(position, dtype=np.float64).reshape(3)


@dataclass(eq=False)
class Bond:
    """
    Bond between two atoms.

    Attributes:
        first: First atom.
        second: Second atom.
        order: Bond order; 1.5 marks an aromatic bond.
    """

    first: Atom
    second: Atom
    order: float = 1.0

    def contains(self, atom: Atom) -> bool:
        """Return True if ``atom`` is one of the bonded atoms."""
        return atom is self.first or atom is self.second

    def other(self, atom: Atom) -> Atom:
        """Return the bonded partner of ``atom``."""
        if atom is self.first:
            return self.second
        if atom is self.second:
            return self.first
        raise ValueError("Atom is not part of this bond")

    @property
    def is_aromatic(self) -> bool:
        """Return True for aromatic (order 1.5) bonds."""
        return self.order == 1.5


class Molecule:
    """
    Molecular graph with 3D coordinates.

    Atoms are kept in a stable, index-ordered list. Neighbor lists are
    maintained incrementally as bonds are added.

    Example:
        mol = Molecule("water")
        o = mol.add_atom("O", [0.0, 0.0, 0.0])
        h1 = mol.add_atom("H", [0.96, 0.0, 0.0])
        mol.add_bond(o, h1)
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._atoms: list[Atom] = []
        self._bonds: list[Bond] = []
        self._neighbors: dict[Atom, list[Atom]] = {}
        self._bond_lookup: dict[tuple[int, int], Bond] = {}

    def __repr__(self) -> str:
        return f"Molecule(name={self.name!r}, n_atoms={self.n_atoms}, n_bonds={self.n_bonds})"

    # --- Atoms -------------------------------------------------------------- #

    @property
    def atoms(self) -> list[Atom]:
        """Return the atoms in index order."""
        return list(self._atoms)

    @property
    def n_atoms(self) -> int:
        """Return number of atoms."""
        return len(self._atoms)

    def atom(self, index: int) -> Atom:
        """Return the atom at ``index``."""
        self._validate_atom_index(index)
        return self._atoms[index]

    def add_atom(
        self,
        symbol: str,
        position: ArrayLike = (0.0, 0.0, 0.0),
        partial_charge: float = 0.0,
        formal_charge: int = 0,
        name: str = "",
    ) -> Atom:
        """Create an atom, append it to the molecule and return it."""
        element(symbol)
        atom = Atom(
            symbol=symbol,
            position=position,
            partial_charge=partial_charge,
            formal_charge=formal_charge,
            name=name or f"{symbol}{len(self._atoms) + 1}",
            index=len(self._atoms),
        )
        self._atoms.append(atom)
        self._neighbors[atom] = []
        return atom

    def contains(self, atom: Atom) -> bool:
        """Return True if ``atom`` belongs to this molecule."""
        return atom in self._neighbors

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return a copy of all atom positions, shape (N, 3)."""
        if not self._atoms:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([atom.position for atom in self._atoms])

    # --- Bonds -------------------------------------------------------------- #

    @property
    def bonds(self) -> list[Bond]:
        """Return all bonds."""
        return list(self._bonds)

    @property
    def n_bonds(self) -> int:
        """Return number of bonds."""
        return len(self._bonds)

    def add_bond(self, a: Atom | int, b: Atom | int, order: float = 1.0) -> Bond:
        """
        Add a bond between atoms a and b (atoms or indices).

        Raises:
            ValueError: If the atoms are identical or already bonded.
        """
        a = self._resolve(a)
        b = self._resolve(b)
        if a is b:
            raise ValueError("Cannot bond an atom to itself")

        key = (min(a.index, b.index), max(a.index, b.index))
        if key in self._bond_lookup:
            raise ValueError(f"Atoms {key[0]} and {key[1]} are already bonded")

        bond = Bond(a, b, float(order))
        self._bonds.append(bond)
        self._bond_lookup[key] = bond
        self._neighbors[a].append(b)
        self._neighbors[b].append(a)
        return bond

    def bond(self, a: Atom, b: Atom) -> Bond | None:
        """Return the bond between a and b, or None."""
        return self._bond_lookup.get((min(a.index, b.index), max(a.index, b.index)))

    def bond_order(self, a: Atom, b: Atom) -> float:
        """Return the order of the bond between a and b, or 0 if unbonded."""
        bond = self.bond(a, b)
        return bond.order if bond is not None else 0.0

    def is_bonded(self, a: Atom, b: Atom) -> bool:
        """Return True if a and b share a bond."""
        return self.bond(a, b) is not None

    def neighbors(self, atom: Atom) -> list[Atom]:
        """Return atoms bonded to ``atom``, in bond insertion order."""
        return list(self._neighbors[atom])

    def bonds_of(self, atom: Atom) -> Iterator[Bond]:
        """Iterate over bonds that contain ``atom``."""
        for neighbor in self._neighbors[atom]:
            yield self.bond(atom, neighbor)

    def valence(self, atom: Atom) -> float:
        """Return the sum of bond orders around ``atom``."""
        return sum(bond.order for bond in self.bonds_of(atom))

    # --- Graph queries ------------------------------------------------------ #

    def bond_distances(self, atom: Atom, max_bonds: int | None = None) -> dict[Atom, int]:
        """
        Return the number of bonds separating ``atom`` from reachable atoms.

        Args:
            atom: Start atom.
            max_bonds: Stop the search after this many bonds. None searches
                the whole connected fragment.

        Returns:
            Mapping of atom to bond count; ``atom`` itself maps to 0.
        """
        distances = {atom: 0}
        current_level = [atom]
        depth = 0
        while current_level and (max_bonds is None or depth < max_bonds):
            depth += 1
            next_level: list[Atom] = []
            for current in current_level:
                for neighbor in self._neighbors[current]:
                    if neighbor not in distances:
                        distances[neighbor] = depth
                        next_level.append(neighbor)
            current_level = next_level
        return distances

    def fragments(self) -> list[list[Atom]]:
        """Return connected fragments as lists of atoms in index order."""
        seen: set[Atom] = set()
        fragments = []
        for atom in self._atoms:
            if atom in seen:
                continue
            members = self.bond_distances(atom)
            seen.update(members)
            fragments.append(sorted(members, key=lambda member: member.index))
        return fragments

    def _resolve(self, atom: Atom | int) -> Atom:
        if isinstance(atom, Atom):
            if not self.contains(atom):
                raise ValueError("Atom does not belong to this molecule")
            return atom
        return self.atom(atom)

    def _validate_atom_index(self, index: int) -> None:
        """Validate that atom index is in range."""
        if index < 0 or index >= len(self._atoms):
            raise IndexError(f"Atom index {index} out of range [0, {len(self._atoms)})")
