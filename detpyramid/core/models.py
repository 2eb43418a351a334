"""Core data models for annotation documents and dataset items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import numpy as np
import torch
from pydantic import BaseModel, Field

from detpyramid.core.constants import RGB_CHANNELS

# JSON ints are accepted; numeric strings, booleans, NaN and infinities are not
StrictCoordinate = Annotated[float, Field(strict=True, allow_inf_nan=False)]

_RECORD_CONFIG = {
    "frozen": True,
    "str_strip_whitespace": True,
}


class ImageRecord(BaseModel):
    """An image entry of the annotation document."""

    id: int = Field(..., strict=True, description="Image identifier")
    file_name: str = Field(
        ..., strict=True, min_length=1, description="Path relative to image_dir"
    )
    width: int = Field(..., strict=True, gt=0, description="Original width (px)")
    height: int = Field(..., strict=True, gt=0, description="Original height (px)")

    model_config = _RECORD_CONFIG


class AnnotationRecord(BaseModel):
    """An object annotation in absolute pixel coordinates."""

    id: int = Field(..., strict=True)
    image_id: int = Field(..., strict=True)
    category_id: int = Field(..., strict=True)
    bbox: tuple[
        StrictCoordinate, StrictCoordinate, StrictCoordinate, StrictCoordinate
    ] = Field(..., description="(x, y, width, height)")
    area: float = Field(..., strict=True, allow_inf_nan=False)

    model_config = _RECORD_CONFIG


class CategoryRecord(BaseModel):
    """A category entry. Kept for completeness, never used for validation."""

    id: int = Field(..., strict=True)
    name: str = Field(..., strict=True)

    model_config = _RECORD_CONFIG


class AnnotationDocument(BaseModel):
    """Parsed COCO-style annotation document."""

    images: list[ImageRecord]
    annotations: list[AnnotationRecord]
    categories: list[CategoryRecord]

    model_config = _RECORD_CONFIG

    @property
    def category_names(self) -> dict[int, str]:
        """Map category ids to their names."""
        return {category.id: category.name for category in self.categories}


class BoundingBox(BaseModel):
    """A box in image-relative coordinates.

    Values are nominally in [0, 1] but are not clamped: an annotation that
    exceeds the stated image size produces out-of-range values.
    """

    x: float = Field(..., description="Left edge / original image width")
    y: float = Field(..., description="Top edge / original image height")
    width: float = Field(..., description="Box width / original image width")
    height: float = Field(..., description="Box height / original image height")
    class_id: int = Field(..., description="Source category_id, not remapped")

    model_config = {"frozen": True}

    @property
    def x2(self) -> float:
        """Get the right coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Get the bottom coordinate."""
        return self.y + self.height

    @property
    def is_inside_image(self) -> bool:
        """Check whether the box lies within the unit square."""
        return 0.0 <= self.x <= self.x2 <= 1.0 and 0.0 <= self.y <= self.y2 <= 1.0

    @classmethod
    def from_annotation(
        cls, annotation: AnnotationRecord, image: ImageRecord
    ) -> BoundingBox:
        """Normalize an absolute annotation by its image's original size."""
        x, y, w, h = annotation.bbox
        return cls(
            x=x / image.width,
            y=y / image.height,
            width=w / image.width,
            height=h / image.height,
            class_id=annotation.category_id,
        )

    def denormalize(
        self, image_width: int, image_height: int
    ) -> tuple[float, float, float, float]:
        """Convert back to absolute [x, y, width, height] pixels."""
        return (
            self.x * image_width,
            self.y * image_height,
            self.width * image_width,
            self.height * image_height,
        )

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"BoundingBox(x={self.x:.4f}, y={self.y:.4f}, width={self.width:.4f}, "
            f"height={self.height:.4f}, class_id={self.class_id})"
        )


@dataclass(frozen=True, eq=False)
class DetectionItem:
    """A resized image with its normalized ground-truth boxes."""

    pixels: np.ndarray  # (H * W * 3,) float32, interleaved RGB, row-major
    width: int
    height: int
    bboxes: tuple[BoundingBox, ...] = ()
    image_id: int | None = None
    file_name: str | None = None

    def __post_init__(self) -> None:
        """Check the pixel buffer matches the declared size."""
        expected = self.width * self.height * RGB_CHANNELS
        if self.pixels.ndim != 1 or self.pixels.size != expected:
            msg = (
                f"pixels must be a flat buffer of {expected} values, "
                f"got shape {self.pixels.shape}"
            )
            raise ValueError(msg)

    def __eq__(self, other: object) -> bool:
        """Compare pixel bytes, size and boxes."""
        if not isinstance(other, DetectionItem):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.image_id == other.image_id
            and self.bboxes == other.bboxes
            and self.pixels.dtype == other.pixels.dtype
            and self.pixels.tobytes() == other.pixels.tobytes()
        )

    __hash__ = None  # type: ignore[assignment]

    def to_array(self) -> np.ndarray:
        """Return pixels as a (height, width, 3) array."""
        return self.pixels.reshape(self.height, self.width, RGB_CHANNELS)

    def to_tensor(self) -> torch.Tensor:
        """Return pixels as a channel-first (3, height, width) tensor."""
        return torch.from_numpy(self.to_array().copy()).permute(2, 0, 1)
