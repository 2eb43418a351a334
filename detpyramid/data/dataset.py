"""COCO-style detection dataset producing normalized items."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from torch.utils.data import Dataset

from detpyramid.core.constants import DEFAULT_TARGET_SIZE
from detpyramid.core.models import BoundingBox, DetectionItem, ImageRecord
from detpyramid.data.annotations import AnnotationIndex, load_annotation_document
from detpyramid.data.loader import ImageSampleLoader
from detpyramid.ml.config import DataConfig

logger = logging.getLogger(__name__)


class RetrievalStatus(str, Enum):
    """Outcome of a dataset lookup."""

    OK = "ok"
    OUT_OF_RANGE = "out_of_range"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True)
class Retrieval:
    """A dataset lookup with the reason an item is absent."""

    status: RetrievalStatus
    item: DetectionItem | None = None

    @property
    def ok(self) -> bool:
        """Check whether an item was produced."""
        return self.status is RetrievalStatus.OK


class DetectionDataset(Dataset):
    """Random-access dataset over a COCO-style annotation file.

    Construction parses the annotation document and groups annotations per
    image; image files are only touched when an item is requested. Every
    lookup re-reads and re-decodes its image.
    """

    def __init__(
        self,
        image_dir: Path,
        annotation_file: Path,
        target_size: tuple[int, int] = DEFAULT_TARGET_SIZE,
    ) -> None:
        super().__init__()
        self.image_dir = Path(image_dir)
        self.annotation_file = Path(annotation_file)
        self.loader = ImageSampleLoader(target_size)

        document = load_annotation_document(self.annotation_file)
        self.images: tuple[ImageRecord, ...] = tuple(document.images)
        self.categories = document.category_names
        self.index = AnnotationIndex.from_document(document)

        logger.info(
            "Loaded %d images and %d annotations from %s",
            len(self.images),
            self.index.annotation_count,
            self.annotation_file,
        )

    @classmethod
    def from_config(cls, cfg: DataConfig) -> DetectionDataset:
        """Create a dataset from a data configuration."""
        return cls(cfg.images_dir, cfg.annotations_path, cfg.target_size)

    @property
    def target_size(self) -> tuple[int, int]:
        """Get the (width, height) every item is resized to."""
        return self.loader.target_size

    def __len__(self) -> int:
        """Get the number of image records."""
        return len(self.images)

    def normalized_boxes(self, image: ImageRecord) -> tuple[BoundingBox, ...]:
        """Normalize an image's annotations by its original size."""
        return tuple(
            BoundingBox.from_annotation(ann, image)
            for ann in self.index.for_image(image)
        )

    def fetch(self, index: int) -> Retrieval:
        """Look up an item and report why it is absent, if it is."""
        if not 0 <= index < len(self.images):
            logger.debug("Index %d out of range for %d images", index, len(self))
            return Retrieval(RetrievalStatus.OUT_OF_RANGE)

        image = self.images[index]
        pixels = self.loader.load(self.image_dir / image.file_name)
        if pixels is None:
            return Retrieval(RetrievalStatus.LOAD_FAILED)

        width, height = self.target_size
        item = DetectionItem(
            pixels=pixels,
            width=width,
            height=height,
            bboxes=self.normalized_boxes(image),
            image_id=image.id,
            file_name=image.file_name,
        )
        return Retrieval(RetrievalStatus.OK, item)

    def get(self, index: int) -> DetectionItem | None:
        """Get an item, or None if out of range or the image cannot be loaded."""
        return self.fetch(index).item

    def __getitem__(self, index: int) -> DetectionItem | None:
        """Get an item; out-of-range indices raise IndexError."""
        retrieval = self.fetch(index)
        if retrieval.status is RetrievalStatus.OUT_OF_RANGE:
            msg = f"Index {index} out of range for dataset of length {len(self)}"
            raise IndexError(msg)
        return retrieval.item

    def __repr__(self) -> str:
        """Return detailed representation."""
        width, height = self.target_size
        return (
            f"DetectionDataset(images={len(self)}, image_dir={self.image_dir}, "
            f"target_size=({width}, {height}))"
        )
