"""MMFF94 force field."""

from .calculations import (
    MmffAngleBendCalculation,
    MmffBondStretchCalculation,
    MmffElectrostaticCalculation,
    MmffOutOfPlaneBendingCalculation,
    MmffStretchBendCalculation,
    MmffTorsionCalculation,
    MmffVanDerWaalsCalculation,
)
from .charges import bond_charge_increment_charges
from .forcefield import MmffForceField
from .parameters import MmffParameters, MmffVanDerWaalsType, load_mmff94
from .typer import MmffAtomTyper

__all__ = [
    "MmffForceField",
    "MmffAtomTyper",
    "MmffParameters",
    "MmffVanDerWaalsType",
    "load_mmff94",
    "bond_charge_increment_charges",
    "MmffBondStretchCalculation",
    "MmffAngleBendCalculation",
    "MmffStretchBendCalculation",
    "MmffOutOfPlaneBendingCalculation",
    "MmffTorsionCalculation",
    "MmffVanDerWaalsCalculation",
    "MmffElectrostaticCalculation",
]
