"""Universal force field (UFF)."""

from .calculations import (
    UffAngleBendCalculation,
    UffBondStretchCalculation,
    UffInversionCalculation,
    UffTorsionCalculation,
    UffVanDerWaalsCalculation,
)
from .forcefield import UffForceField
from .parameters import UffAtomParameters, UffParameters, load_uff
from .typer import UffAtomTyper

__all__ = [
    "UffForceField",
    "UffAtomTyper",
    "UffAtomParameters",
    "UffParameters",
    "load_uff",
    "UffBondStretchCalculation",
    "UffAngleBendCalculation",
    "UffTorsionCalculation",
    "UffInversionCalculation",
    "UffVanDerWaalsCalculation",
]
