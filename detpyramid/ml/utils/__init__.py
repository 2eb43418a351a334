"""ML utilities."""

from detpyramid.ml.utils.device import module_device, select_device

__all__ = ["module_device", "select_device"]
