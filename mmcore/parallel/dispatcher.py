"""Selection of the backend that evaluates large force fields."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend

BackendType = Literal["serial", "threads"]

# Backend used when a force field is given backend=None
_default_backend: ParallelBackend | None = None


def _thread_backend(**kwargs: Any) -> ParallelBackend:
    from .backends.threads import ThreadBackend

    return ThreadBackend(**kwargs)


_BACKENDS: dict[str, Callable[..., ParallelBackend]] = {
    "serial": lambda **kwargs: SerialBackend(),
    "threads": _thread_backend,
}


def backend_names() -> list[str]:
    """Return the names accepted by get_backend()."""
    return sorted(_BACKENDS)


def get_backend(
    backend: BackendType | ParallelBackend | None = None,
    **kwargs: Any,
) -> ParallelBackend:
    """
    Resolve a backend specification.

    Args:
        backend: A backend instance, which is returned unchanged, a backend
            name, or None for the process-wide default (serial until
            set_default_backend() is called).
        **kwargs: Passed to the backend constructor when ``backend`` is a name.

    Returns:
        ParallelBackend instance.

    Raises:
        ValueError: If ``backend`` names no known backend.
    """
    global _default_backend

    if isinstance(backend, ParallelBackend):
        return backend

    if backend is None:
        if _default_backend is None:
            _default_backend = SerialBackend()
        return _default_backend

    factory = _BACKENDS.get(backend.lower())
    if factory is None:
        raise ValueError(
            f"Unknown backend {backend!r}, expected one of {', '.join(backend_names())}"
        )
    return factory(**kwargs)


def set_default_backend(
    backend: BackendType | ParallelBackend,
    **kwargs: Any,
) -> ParallelBackend:
    """Make ``backend`` the one returned by get_backend(None)."""
    global _default_backend

    _default_backend = get_backend(backend, **kwargs)
    return _default_backend


def reset_default_backend() -> None:
    """Forget the default backend; get_backend(None) returns a serial one again."""
    global _default_backend
    _default_backend = None
