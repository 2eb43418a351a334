"""Shared fixtures: a small COCO-style dataset on disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

RED = (255, 0, 0)
GRAY = (128, 128, 128)


def make_document() -> dict[str, Any]:
    """Build an annotation document with three images.

    Image 1 has two annotations, image 2 has none, image 3 references a file
    that is never written.
    """
    return {
        "info": {"description": "fixture"},
        "images": [
            {"id": 1, "file_name": "test_image.png", "width": 100, "height": 80},
            {"id": 2, "file_name": "blank.png", "width": 64, "height": 48},
            {"id": 3, "file_name": "missing.png", "width": 50, "height": 50},
        ],
        "annotations": [
            {
                "id": 1,
                "image_id": 1,
                "category_id": 5,
                "bbox": [10.0, 20.0, 30.0, 40.0],
                "area": 1200.0,
            },
            {
                "id": 2,
                "image_id": 3,
                "category_id": 1,
                "bbox": [0, 0, 10, 10],
                "area": 100,
            },
            {
                "id": 3,
                "image_id": 1,
                "category_id": 90,
                "bbox": [0.0, 0.0, 100.0, 80.0],
                "area": 8000.0,
                "iscrowd": 0,
            },
        ],
        "categories": [{"id": 5, "name": "test_cat"}],
    }


@pytest.fixture
def coco_dir(tmp_path: Path) -> tuple[Path, Path]:
    """Write images and annotations, returning (image_dir, annotation_file)."""
    image_dir = tmp_path / "images"
    image_dir.mkdir()
    Image.new("RGB", (100, 80), RED).save(image_dir / "test_image.png")
    Image.new("RGB", (64, 48), GRAY).save(image_dir / "blank.png")

    annotation_file = tmp_path / "annotations.json"
    annotation_file.write_text(json.dumps(make_document()), encoding="utf-8")
    return image_dir, annotation_file
