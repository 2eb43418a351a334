"""Three-stage convolutional backbone producing stride 2, 4 and 8 features."""

from __future__ import annotations

import logging

from torch import nn

from detpyramid.core.constants import BACKBONE_STRIDES, RGB_CHANNELS
from detpyramid.core.errors import ShapeMismatchError
from detpyramid.ml.backends import TensorBackend, get_backend
from detpyramid.ml.base import FeatureMaps, Tensor
from detpyramid.ml.config import BackboneConfig

logger = logging.getLogger(__name__)

POOL_SIZE = 2


class Backbone(nn.Module):
    """Conv -> batchnorm -> relu -> maxpool, three times.

    Convolutions use same padding so only pooling changes resolution. Each
    stage output is returned, giving feature maps at 1/2, 1/4 and 1/8 of the
    input size.
    """

    def __init__(
        self, cfg: BackboneConfig, backend: TensorBackend | None = None
    ) -> None:
        super().__init__()
        self.backend = backend or get_backend()
        self.channels = tuple(cfg.channels)
        self.kernel_size = cfg.kernel_size

        k = cfg.kernel_size
        pad = k // 2
        c = self.channels
        ops = self.backend

        # Stage 1: stride 2
        self.conv1 = ops.conv2d(RGB_CHANNELS, c[0], k, padding=pad)
        self.bn1 = ops.batch_norm(c[0])

        # Stage 2: stride 4
        self.conv2 = ops.conv2d(c[0], c[1], k, padding=pad)
        self.bn2 = ops.batch_norm(c[1])

        # Stage 3: stride 8
        self.conv3 = ops.conv2d(c[1], c[2], k, padding=pad)
        self.bn3 = ops.batch_norm(c[2])

        self.pool = ops.max_pool(POOL_SIZE, POOL_SIZE)
        # Parameter-free, shared by all stages
        self.relu = ops.relu()

        logger.debug("Built backbone channels=%s kernel_size=%d", c, k)

    @property
    def out_channels(self) -> tuple[int, int, int]:
        """Get the channel count of (c3, c4, c5)."""
        return self.channels

    @property
    def strides(self) -> tuple[int, int, int]:
        """Get the downsampling factor of (c3, c4, c5)."""
        return BACKBONE_STRIDES

    def _check_input(self, x: Tensor) -> None:
        shape = self.backend.shape(x)
        if len(shape) != 4 or shape[1] != RGB_CHANNELS:
            msg = f"Backbone expects [batch, {RGB_CHANNELS}, H, W], got {list(shape)}"
            raise ShapeMismatchError(msg)

        factor = BACKBONE_STRIDES[-1]
        height, width = shape[2], shape[3]
        if height % factor or width % factor:
            msg = (
                f"Backbone input height and width must be divisible by {factor}, "
                f"got {height}x{width}"
            )
            raise ShapeMismatchError(msg)

    def forward(self, x: Tensor) -> FeatureMaps:
        """Extract (c3, c4, c5) from an image batch."""
        self._check_input(x)

        c3 = self.pool(self.relu(self.bn1(self.conv1(x))))
        c4 = self.pool(self.relu(self.bn2(self.conv2(c3))))
        c5 = self.pool(self.relu(self.bn3(self.conv3(c4))))
        return c3, c4, c5


def build_backbone(
    cfg: BackboneConfig, backend: TensorBackend | None = None
) -> Backbone:
    """Create a backbone from its configuration."""
    return Backbone(cfg, backend)
