"""Model builder utilities for the feature pyramid."""

from __future__ import annotations

import logging
from typing import Any

import torch
from torch import nn

from detpyramid.core.constants import RGB_CHANNELS
from detpyramid.ml.backbone import Backbone
from detpyramid.ml.backends import TensorBackend, get_backend
from detpyramid.ml.base import FpnOutput, Tensor
from detpyramid.ml.config import FeaturePyramidConfig
from detpyramid.ml.neck import Neck
from detpyramid.ml.utils.device import module_device, select_device

logger = logging.getLogger(__name__)


class FeaturePyramid(nn.Module):
    """Backbone followed by the FPN + PAN neck."""

    def __init__(
        self, cfg: FeaturePyramidConfig, backend: TensorBackend | None = None
    ) -> None:
        super().__init__()
        backend = backend or get_backend(cfg.backend)
        self.backbone = Backbone(cfg.backbone, backend)
        self.neck = Neck(cfg.neck, backend)

    @property
    def out_channels(self) -> int:
        """Get the channel width shared by every pyramid level."""
        return self.neck.out_channels

    def forward(self, images: Tensor) -> FpnOutput:
        """Produce fused (p3, p4, p5) features for an image batch."""
        return self.neck(self.backbone(images))


def build_feature_pyramid(
    cfg: FeaturePyramidConfig,
    backend: TensorBackend | None = None,
    device: str | None = None,
) -> FeaturePyramid:
    """Create a feature pyramid according to config.

    ``device="auto"`` picks CUDA, then MPS, then CPU. Ignored when an explicit
    backend is passed.
    """
    if backend is None and device is not None:
        target = select_device(device)
        backend = get_backend(cfg.backend, device=target)
        logger.info("Building feature pyramid on %s", target)

    model = FeaturePyramid(cfg, backend)
    logger.debug("Feature pyramid parameters: %s", count_parameters(model))
    return model


def count_parameters(model: nn.Module) -> dict[str, Any]:
    """Count the number of parameters in the model."""
    total = sum(p.numel() for p in model.parameters())
    trainable = sum(p.numel() for p in model.parameters() if p.requires_grad)
    return {"total": total, "trainable": trainable}


def freeze(module: nn.Module) -> nn.Module:
    """Disable gradients for every parameter of a module."""
    for p in module.parameters():
        p.requires_grad = False
    logger.info("Froze %s", type(module).__name__)
    return module


@torch.no_grad()
def feature_shapes(model: FeaturePyramid, height: int, width: int) -> dict[str, Any]:
    """Run a dummy batch and report the shape of every pyramid level."""
    was_training = model.training
    model.eval()
    try:
        dtype = next(model.parameters()).dtype
        dummy = torch.zeros(
            1, RGB_CHANNELS, height, width, device=module_device(model), dtype=dtype
        )
        output = model(dummy)
    finally:
        model.train(was_training)
    return {name: tuple(level.shape) for name, level in output.as_dict().items()}
