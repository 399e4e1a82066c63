"""Force field engine, energy terms and parameterizations."""

from .atom import ForceFieldAtom
from .calculation import NUMERICAL_GRADIENT_STEP, CalculationType, ForceFieldCalculation
from .forcefield import PARALLEL_THRESHOLD, ForceField, ForceFieldFlags, MinimizationSettings
from .parameters import ParameterTable
from .registry import (
    create_force_field,
    force_field_names,
    register_force_field,
    unregister_force_field,
)
from .typer import AtomTyper

__all__ = [
    "ForceField",
    "ForceFieldAtom",
    "ForceFieldCalculation",
    "ForceFieldFlags",
    "CalculationType",
    "MinimizationSettings",
    "ParameterTable",
    "AtomTyper",
    "NUMERICAL_GRADIENT_STEP",
    "PARALLEL_THRESHOLD",
    "create_force_field",
    "force_field_names",
    "register_force_field",
    "unregister_force_field",
]
