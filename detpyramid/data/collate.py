"""Assemble dataset items into model-ready batches."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import torch

from detpyramid.core.models import BoundingBox, DetectionItem

logger = logging.getLogger(__name__)


@dataclass
class DetectionBatch:
    """Stacked images with per-item, unpadded box lists."""

    images: torch.Tensor  # (B, 3, H, W) float32
    targets: list[list[BoundingBox]]
    image_ids: list[int | None]

    def __len__(self) -> int:
        """Get the batch size."""
        return len(self.targets)

    def to(self, device: torch.device | str) -> DetectionBatch:
        """Move the image tensor to a device."""
        return DetectionBatch(
            images=self.images.to(device),
            targets=self.targets,
            image_ids=self.image_ids,
        )


def collate_items(batch: Sequence[DetectionItem | None]) -> DetectionBatch:
    """Collate dataset items, dropping absent ones."""
    items = [item for item in batch if item is not None]
    skipped = len(batch) - len(items)
    if skipped:
        logger.warning("Skipping %d absent items in batch of %d", skipped, len(batch))
    if not items:
        msg = "Cannot collate a batch without any items"
        raise ValueError(msg)

    sizes = {(item.width, item.height) for item in items}
    if len(sizes) > 1:
        msg = f"All items in a batch must share one size, got {sorted(sizes)}"
        raise ValueError(msg)

    return DetectionBatch(
        images=torch.stack([item.to_tensor() for item in items]),
        targets=[list(item.bboxes) for item in items],
        image_ids=[item.image_id for item in items],
    )
