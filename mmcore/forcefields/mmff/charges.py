"""MMFF partial charges from bond charge increments."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...topology import Atom, Molecule
    from .parameters import MmffParameters

logger = logging.getLogger(__name__)


def bond_charge_increment_charges(
    molecule: Molecule,
    type_of: Callable[[Atom], str],
    parameters: MmffParameters,
) -> dict[Atom, float]:
    """
    Assign partial charges by summing bond charge increments.

    Each bond moves a fixed amount of charge from one atom to the other,
    so a neutral molecule stays neutral. Bonds whose types have neither an
    explicit nor a partial increment contribute nothing.

    Args:
        molecule: Molecule to assign.
        type_of: Maps an atom to its MMFF type label.
        parameters: MMFF parameters holding the increments.

    Returns:
        Mapping of atom to partial charge.
    """
    charges = {atom: float(atom.formal_charge) for atom in molecule.atoms}

    for bond in molecule.bonds:
        a, b = bond.first, bond.second
        increment = parameters.bond_charge_increment(type_of(a), type_of(b))
        if increment is None:
            logger.debug("No bond charge increment for %s-%s", a.name, b.name)
            continue
        charges[a] -= increment
        charges[b] += increment

    return charges
