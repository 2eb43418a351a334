"""Device resolution for building and running the feature pyramid."""

from __future__ import annotations

import logging

import torch
from torch import nn

logger = logging.getLogger(__name__)

AUTO = "auto"


def select_device(preferred: str | torch.device | None = None) -> torch.device:
    """Resolve a device; ``None`` or ``"auto"`` picks CUDA, then MPS, then CPU."""
    if preferred is not None and str(preferred).lower() != AUTO:
        return torch.device(preferred)
    if torch.cuda.is_available():
        device = torch.device("cuda")
    # MPS is missing from some builds
    elif getattr(torch.backends, "mps", None) and torch.backends.mps.is_available():
        device = torch.device("mps")
    else:
        device = torch.device("cpu")
    logger.debug("Auto-selected device %s", device)
    return device


def module_device(module: nn.Module) -> torch.device:
    """Return the device holding a module's parameters, CPU if it has none."""
    for param in module.parameters():
        return param.device
    return torch.device("cpu")
