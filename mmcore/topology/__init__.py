"""Structural molecules and interaction enumeration."""

from .elements import Element, element
from .interactions import ForceFieldInteractions
from .molecule import Atom, Bond, Molecule

__all__ = ["Atom", "Bond", "Molecule", "Element", "element", "ForceFieldInteractions"]
