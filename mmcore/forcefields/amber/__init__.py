"""AMBER force field."""

from .calculations import (
    AmberAngleCalculation,
    AmberBondCalculation,
    AmberNonbondedCalculation,
    AmberTorsionCalculation,
)
from .forcefield import AmberForceField
from .parameters import AmberParameters, load_parm99
from .typer import AmberAtomTyper

__all__ = [
    "AmberForceField",
    "AmberAtomTyper",
    "AmberParameters",
    "load_parm99",
    "AmberBondCalculation",
    "AmberAngleCalculation",
    "AmberTorsionCalculation",
    "AmberNonbondedCalculation",
]
