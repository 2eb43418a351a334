"""Tensor backend implementations for the feature pyramid."""

from detpyramid.ml.backends.base import Layer, TensorBackend
from detpyramid.ml.backends.factory import get_backend
from detpyramid.ml.backends.registry import (
    register_backend,
    registered_backends,
    unregister_backend,
)
from detpyramid.ml.backends.torch_backend import TorchBackend

__all__ = [
    "Layer",
    "TensorBackend",
    "TorchBackend",
    "get_backend",
    "register_backend",
    "registered_backends",
    "unregister_backend",
]
