"""Core module - Fundamental data structures, errors and constants."""

from detpyramid.core.constants import (
    ANNOTATION_SECTIONS,
    BACKBONE_STRIDES,
    DEFAULT_TARGET_SIZE,
    PYRAMID_LEVELS,
)
from detpyramid.core.errors import (
    AnnotationError,
    AnnotationIOError,
    AnnotationParseError,
    BackendError,
    DetPyramidError,
    ShapeMismatchError,
)
from detpyramid.core.models import (
    AnnotationDocument,
    AnnotationRecord,
    BoundingBox,
    CategoryRecord,
    DetectionItem,
    ImageRecord,
)

__all__ = [
    # Models
    "AnnotationDocument",
    "AnnotationRecord",
    "BoundingBox",
    "CategoryRecord",
    "DetectionItem",
    "ImageRecord",
    # Errors
    "AnnotationError",
    "AnnotationIOError",
    "AnnotationParseError",
    "BackendError",
    "DetPyramidError",
    "ShapeMismatchError",
    # Constants
    "ANNOTATION_SECTIONS",
    "BACKBONE_STRIDES",
    "DEFAULT_TARGET_SIZE",
    "PYRAMID_LEVELS",
]
