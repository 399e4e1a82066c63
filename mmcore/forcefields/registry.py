"""Name-based creation of force fields."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .forcefield import ForceField

logger = logging.getLogger(__name__)

ForceFieldFactory = Callable[..., "ForceField"]

# User registered factories, looked up before the built-in ones
_factories: dict[str, ForceFieldFactory] = {}

_BUILTIN = ("amber", "mmff", "uff")


def _builtin_factory(name: str) -> ForceFieldFactory | None:
    if name == "amber":
        from .amber import AmberForceField

        return AmberForceField

    elif name == "mmff":
        from .mmff import MmffForceField

        return MmffForceField

    elif name == "uff":
        from .uff import UffForceField

        return UffForceField

    return None


def register_force_field(name: str, factory: ForceFieldFactory) -> None:
    """
    Register a force field factory under ``name``.

    Args:
        name: Case-insensitive force field name.
        factory: Callable returning a new ForceField; it receives the
            keyword arguments passed to create_force_field().
    """
    key = name.lower()
    if key in _factories:
        logger.debug("Replacing force field factory %r", key)
    _factories[key] = factory


def unregister_force_field(name: str) -> None:
    """Remove a registered factory. Built-in force fields cannot be removed."""
    _factories.pop(name.lower(), None)


def create_force_field(name: str, **kwargs: Any) -> ForceField | None:
    """
    Create a force field by name.

    Args:
        name: Case-insensitive force field name.
        **kwargs: Forwarded to the force field constructor.

    Returns:
        A new ForceField, or None if ``name`` is unknown.
    """
    key = name.lower()
    factory = _factories.get(key) or _builtin_factory(key)
    if factory is None:
        logger.debug("Unknown force field %r", name)
        return None
    return factory(**kwargs)


def force_field_names() -> list[str]:
    """Return the names of all available force fields."""
    return sorted(set(_BUILTIN) | set(_factories))
