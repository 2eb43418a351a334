"""Lightweight dependency-injection registry for tensor backends."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

Provider = Callable[..., Any]

_BACKENDS: dict[str, Provider] = {}


def _norm(name: str) -> str:
    """Normalize backend names."""
    return name.strip().lower()


def register_backend(name: str, provider: Provider) -> None:
    """Register a backend provider under a name."""
    _BACKENDS[_norm(name)] = provider


def unregister_backend(name: str) -> None:
    """Remove a backend provider if registered."""
    _BACKENDS.pop(_norm(name), None)


def get_backend_provider(name: str) -> Provider | None:
    """Get the provider registered under a name."""
    return _BACKENDS.get(_norm(name))


def registered_backends() -> list[str]:
    """List registered backend names."""
    return sorted(_BACKENDS)
