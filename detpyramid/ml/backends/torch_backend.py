"""PyTorch implementation of the tensor backend."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import torch
import torch.nn.functional as F
from torch import nn


@dataclass(frozen=True)
class TorchBackend:
    """Tensor backend built on ``torch.nn`` layers.

    Layers are created on ``device`` with ``dtype``; ``None`` keeps the torch
    defaults.
    """

    device: torch.device | str | None = None
    dtype: torch.dtype | None = None
    name: str = "torch"

    def _factory_kwargs(self) -> dict:
        return {"device": self.device, "dtype": self.dtype}

    def conv2d(
        self,
        in_channels: int,
        out_channels: int,
        kernel_size: int,
        stride: int = 1,
        padding: int = 0,
    ) -> nn.Conv2d:
        """Create a 2-D convolution layer."""
        return nn.Conv2d(
            in_channels,
            out_channels,
            kernel_size=kernel_size,
            stride=stride,
            padding=padding,
            **self._factory_kwargs(),
        )

    def batch_norm(self, num_features: int) -> nn.BatchNorm2d:
        """Create a 2-D batch normalization layer."""
        return nn.BatchNorm2d(num_features, **self._factory_kwargs())

    def relu(self) -> nn.ReLU:
        """Create a ReLU activation."""
        return nn.ReLU()

    def max_pool(self, kernel_size: int, stride: int) -> nn.MaxPool2d:
        """Create a 2-D max-pooling layer."""
        return nn.MaxPool2d(kernel_size=kernel_size, stride=stride)

    def concat(self, tensors: Sequence[torch.Tensor]) -> torch.Tensor:
        """Concatenate along the channel axis."""
        return torch.cat(list(tensors), dim=1)

    def upsample_nearest(self, x: torch.Tensor, size: tuple[int, int]) -> torch.Tensor:
        """Nearest-neighbour resample to an exact (height, width)."""
        return F.interpolate(x, size=size, mode="nearest")

    def spatial_size(self, x: torch.Tensor) -> tuple[int, int]:
        """Return the (height, width) of a tensor."""
        height, width = x.shape[-2:]
        return (int(height), int(width))

    def shape(self, x: torch.Tensor) -> tuple[int, ...]:
        """Return the full shape of a tensor."""
        return tuple(x.shape)
