"""Backend factory resolving names to tensor backends."""

from __future__ import annotations

from typing import Any

from detpyramid.core.errors import BackendError
from detpyramid.ml.backends.base import TensorBackend
from detpyramid.ml.backends.registry import (
    get_backend_provider,
    register_backend,
    registered_backends,
)
from detpyramid.ml.backends.torch_backend import TorchBackend

register_backend("torch", TorchBackend)


def get_backend(name: str | None = None, **kwargs: Any) -> TensorBackend:
    """Return a tensor backend for the given name."""
    name = (name or "torch").lower()
    provider = get_backend_provider(name)
    if provider is None:
        msg = f"Unknown backend: {name}. Registered: {registered_backends()}"
        raise BackendError(msg)
    backend = provider(**kwargs)
    if not hasattr(backend, "conv2d") or not hasattr(backend, "concat"):
        msg = f"Backend provider for '{name}' must return a TensorBackend"
        raise TypeError(msg)
    return backend
