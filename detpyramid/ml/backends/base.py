"""Tensor backend interface used by the backbone and neck."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

Tensor = Any
Layer = Callable[[Tensor], Tensor]


class TensorBackend(Protocol):
    """Strategy for the tensor operations the feature pyramid needs.

    Layer factories return callables that own their parameters; functional
    operations are stateless. Tensors are channel-first ``[B, C, H, W]``.
    """

    name: str

    def conv2d(
        self,
        in_channels: int,
        out_channels: int,
        kernel_size: int,
        stride: int = 1,
        padding: int = 0,
    ) -> Layer:
        """Create a 2-D convolution layer."""
        ...

    def batch_norm(self, num_features: int) -> Layer:
        """Create a 2-D batch normalization layer."""
        ...

    def relu(self) -> Layer:
        """Create a parameter-free ReLU activation."""
        ...

    def max_pool(self, kernel_size: int, stride: int) -> Layer:
        """Create a 2-D max-pooling layer."""
        ...

    def concat(self, tensors: Sequence[Tensor]) -> Tensor:
        """Concatenate tensors along the channel axis, in the given order."""
        ...

    def upsample_nearest(self, x: Tensor, size: tuple[int, int]) -> Tensor:
        """Nearest-neighbour resample to an exact (height, width)."""
        ...

    def spatial_size(self, x: Tensor) -> tuple[int, int]:
        """Return the (height, width) of a tensor."""
        ...

    def shape(self, x: Tensor) -> tuple[int, ...]:
        """Return the full shape of a tensor."""
        ...
