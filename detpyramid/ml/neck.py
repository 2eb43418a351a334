"""Feature pyramid neck: top-down (FPN) then bottom-up (PAN) fusion.

Given backbone maps ``(c3, c4, c5)`` at strides 2, 4 and 8::

    top-down   p5_latent = lateral(c5)
               p4_latent = fuse4(cat(up(p5_latent), c4))
               p3_out    = fuse3(cat(up(p4_latent), c3))
    bottom-up  p4_out    = pan4(cat(down3(p3_out), p4_latent))
               p5_out    = pan5(cat(down4(p4_out), p5_latent))

Upsampling resizes to the exact size of the map it is fused with. In every
concatenation the resampled tensor comes first; parameters depend on that
order.
"""

from __future__ import annotations

import logging

from torch import nn

from detpyramid.core.constants import PYRAMID_LEVELS
from detpyramid.core.errors import ShapeMismatchError
from detpyramid.ml.backends import TensorBackend, get_backend
from detpyramid.ml.base import FeatureMaps, FpnOutput, Tensor
from detpyramid.ml.config import NeckConfig

logger = logging.getLogger(__name__)

FUSE_KERNEL = 3
DOWNSAMPLE_STRIDE = 2


class Neck(nn.Module):
    """Fuse three backbone maps into an equal-width pyramid."""

    def __init__(self, cfg: NeckConfig, backend: TensorBackend | None = None) -> None:
        super().__init__()
        self.backend = backend or get_backend()
        self.in_channels = tuple(cfg.in_channels)
        self.out_channels = cfg.out_channels

        ops = self.backend
        c3, c4, c5 = self.in_channels
        out = self.out_channels
        pad = FUSE_KERNEL // 2

        # Top-down
        self.lateral = ops.conv2d(c5, out, 1)
        self.fuse4 = ops.conv2d(out + c4, out, FUSE_KERNEL, padding=pad)
        self.fuse3 = ops.conv2d(out + c3, out, FUSE_KERNEL, padding=pad)

        # Bottom-up
        self.down3 = ops.conv2d(
            out, out, FUSE_KERNEL, stride=DOWNSAMPLE_STRIDE, padding=pad
        )
        self.pan4 = ops.conv2d(out + out, out, FUSE_KERNEL, padding=pad)
        self.down4 = ops.conv2d(
            out, out, FUSE_KERNEL, stride=DOWNSAMPLE_STRIDE, padding=pad
        )
        self.pan5 = ops.conv2d(out + out, out, FUSE_KERNEL, padding=pad)

        logger.debug("Built neck in_channels=%s out_channels=%d", self.in_channels, out)

    def _check_inputs(self, features: FeatureMaps) -> None:
        expected_count = len(self.in_channels)
        if len(features) != expected_count:
            msg = f"Neck expects {expected_count} feature maps, got {len(features)}"
            raise ShapeMismatchError(msg)

        names = ("c3", "c4", "c5")
        for name, feature, expected in zip(
            names, features, self.in_channels, strict=True
        ):
            shape = self.backend.shape(feature)
            if len(shape) != 4 or shape[1] != expected:
                msg = (
                    f"Neck input {name} must be [batch, {expected}, H, W], "
                    f"got {list(shape)}"
                )
                raise ShapeMismatchError(msg)

    def top_down(self, features: FeatureMaps) -> FeatureMaps:
        """Run the FPN pass, returning (p3_out, p4_latent, p5_latent)."""
        c3, c4, c5 = features
        ops = self.backend

        p5_latent = self.lateral(c5)
        up5 = ops.upsample_nearest(p5_latent, ops.spatial_size(c4))
        p4_latent = self.fuse4(ops.concat([up5, c4]))
        up4 = ops.upsample_nearest(p4_latent, ops.spatial_size(c3))
        p3_out = self.fuse3(ops.concat([up4, c3]))
        return p3_out, p4_latent, p5_latent

    def bottom_up(
        self, p3_out: Tensor, p4_latent: Tensor, p5_latent: Tensor
    ) -> FpnOutput:
        """Run the PAN pass over the top-down results."""
        ops = self.backend
        p4_out = self.pan4(ops.concat([self.down3(p3_out), p4_latent]))
        p5_out = self.pan5(ops.concat([self.down4(p4_out), p5_latent]))
        return FpnOutput(p3=p3_out, p4=p4_out, p5=p5_out)

    def forward(self, features: FeatureMaps) -> FpnOutput:
        """Fuse (c3, c4, c5) into (p3, p4, p5)."""
        features = tuple(features)
        self._check_inputs(features)
        return self.bottom_up(*self.top_down(features))

    def extra_repr(self) -> str:
        """Describe the configured widths."""
        return (
            f"in_channels={self.in_channels}, out_channels={self.out_channels}, "
            f"levels={PYRAMID_LEVELS}"
        )


def build_neck(cfg: NeckConfig, backend: TensorBackend | None = None) -> Neck:
    """Create a neck from its configuration."""
    return Neck(cfg, backend)
