"""
mmcore - Molecular mechanics force field engine.

A numpy-based library for evaluating molecular mechanics energies and
gradients and minimizing molecular geometries with the AMBER, MMFF94 and
UFF force fields.
"""

__version__ = "0.1.0"

from .forcefields import (
    CalculationType,
    ForceField,
    ForceFieldAtom,
    ForceFieldCalculation,
    ForceFieldFlags,
    MinimizationSettings,
)
from .topology import Atom, Bond, Molecule

__all__ = [
    "ForceField",
    "ForceFieldAtom",
    "ForceFieldCalculation",
    "ForceFieldFlags",
    "CalculationType",
    "MinimizationSettings",
    "Atom",
    "Bond",
    "Molecule",
]
