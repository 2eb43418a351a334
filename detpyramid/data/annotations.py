"""Annotation document parsing and per-image grouping."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from detpyramid.core.constants import ANNOTATION_SECTIONS
from detpyramid.core.errors import AnnotationIOError, AnnotationParseError
from detpyramid.core.models import AnnotationDocument, AnnotationRecord, ImageRecord

logger = logging.getLogger(__name__)


def _error_location(error: ValidationError) -> str:
    """Render the location of the first validation error as a dotted path."""
    first = error.errors()[0]
    return ".".join(str(part) for part in first["loc"]) or "<root>"


def parse_annotation_document(
    data: Any, source: Path | None = None
) -> AnnotationDocument:
    """Validate already-decoded JSON data as an annotation document."""
    if not isinstance(data, Mapping):
        msg = f"Annotation document {source} must be a JSON object"
        raise AnnotationParseError(msg, path=source, field="<root>")

    for section, description in ANNOTATION_SECTIONS.items():
        if section not in data:
            msg = (
                f"Invalid annotation document {source}: missing section "
                f"'{section}' ({description.lower()})"
            )
            raise AnnotationParseError(msg, path=source, field=section)

    try:
        return AnnotationDocument.model_validate(data)
    except ValidationError as e:
        location = _error_location(e)
        reason = e.errors()[0]["msg"]
        msg = f"Invalid annotation document {source}: field '{location}': {reason}"
        raise AnnotationParseError(msg, path=source, field=location) from e


def load_annotation_document(annotation_file: Path) -> AnnotationDocument:
    """Read and parse a COCO-style annotation file."""
    annotation_file = Path(annotation_file)
    try:
        with annotation_file.open("r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read annotation file {annotation_file}: {e}"
        raise AnnotationIOError(msg, path=annotation_file) from e

    def reject_constant(literal: str) -> float:
        msg = f"Non-finite number {literal} in {annotation_file}"
        raise AnnotationParseError(msg, path=annotation_file)

    try:
        data = json.loads(text, parse_constant=reject_constant)
    except json.JSONDecodeError as e:
        msg = (
            f"Malformed JSON in {annotation_file} "
            f"at line {e.lineno}, column {e.colno}: {e.msg}"
        )
        raise AnnotationParseError(msg, path=annotation_file) from e

    document = parse_annotation_document(data, source=annotation_file)
    logger.debug(
        "Parsed %s: %d images, %d annotations, %d categories",
        annotation_file,
        len(document.images),
        len(document.annotations),
        len(document.categories),
    )
    return document


class AnnotationIndex(Mapping[int, tuple[AnnotationRecord, ...]]):
    """Annotations grouped by image id, in document order.

    Only image ids that occur in some annotation are keys. Looking up an
    image without annotations through :meth:`for_image` yields an empty tuple.
    """

    def __init__(self, annotations: list[AnnotationRecord]) -> None:
        grouped: dict[int, list[AnnotationRecord]] = {}
        for ann in annotations:
            grouped.setdefault(ann.image_id, []).append(ann)
        self._groups = {image_id: tuple(anns) for image_id, anns in grouped.items()}

    @classmethod
    def from_document(cls, document: AnnotationDocument) -> AnnotationIndex:
        """Build the index from a parsed document."""
        return cls(document.annotations)

    def for_image(self, image: ImageRecord | int) -> tuple[AnnotationRecord, ...]:
        """Return the annotations of an image, empty if it has none."""
        image_id = image.id if isinstance(image, ImageRecord) else image
        return self._groups.get(image_id, ())

    def __getitem__(self, image_id: int) -> tuple[AnnotationRecord, ...]:
        """Get the annotations of an image id present in the index."""
        return self._groups[image_id]

    def __iter__(self) -> Iterator[int]:
        """Iterate image ids in first-seen order."""
        return iter(self._groups)

    def __len__(self) -> int:
        """Get the number of annotated images."""
        return len(self._groups)

    @property
    def annotation_count(self) -> int:
        """Get the total number of indexed annotations."""
        return sum(len(anns) for anns in self._groups.values())

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"AnnotationIndex(images={len(self)}, "
            f"annotations={self.annotation_count})"
        )
