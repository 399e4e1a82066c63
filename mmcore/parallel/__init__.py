"""Parallel map/reduce infrastructure."""

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend
from .backends.threads import ThreadBackend
from .dispatcher import backend_names, get_backend, reset_default_backend, set_default_backend

__all__ = [
    "ParallelBackend",
    "SerialBackend",
    "ThreadBackend",
    "backend_names",
    "get_backend",
    "set_default_backend",
    "reset_default_backend",
]
