"""Tests for core data models."""

import numpy as np
import pytest
import torch
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from detpyramid.core.models import (
    AnnotationDocument,
    AnnotationRecord,
    BoundingBox,
    DetectionItem,
    ImageRecord,
)


def _annotation(bbox, category_id=5) -> AnnotationRecord:
    return AnnotationRecord(
        id=1, image_id=1, category_id=category_id, bbox=bbox, area=0.0
    )


class TestImageRecord:
    """Tests for ImageRecord model."""

    def test_valid_creation(self):
        """Test creating a valid image record."""
        image = ImageRecord(id=1, file_name="a.png", width=100, height=80)
        assert image.width == 100
        assert image.height == 80

    def test_zero_dimensions_rejected(self):
        """Test that zero dimensions raise error."""
        with pytest.raises(ValidationError, match="greater than 0"):
            ImageRecord(id=1, file_name="a.png", width=0, height=80)

    def test_string_id_rejected(self):
        """Test that ids are not coerced from strings."""
        with pytest.raises(ValidationError):
            ImageRecord(id="1", file_name="a.png", width=10, height=10)

    def test_immutability(self):
        """Test that image records are immutable."""
        image = ImageRecord(id=1, file_name="a.png", width=100, height=80)
        with pytest.raises(ValidationError, match="Instance is frozen"):
            image.width = 10


class TestAnnotationRecord:
    """Tests for AnnotationRecord model."""

    def test_integer_bbox_accepted(self):
        """Test that integer coordinates are accepted as floats."""
        ann = _annotation([1, 2, 3, 4])
        assert ann.bbox == (1.0, 2.0, 3.0, 4.0)

    def test_bbox_is_read_only(self):
        """Test that the stored bbox cannot be changed in place."""
        ann = _annotation([1.0, 2.0, 3.0, 4.0])
        assert isinstance(ann.bbox, tuple)
        with pytest.raises(TypeError):
            ann.bbox[0] = 9.0  # type: ignore[index]

    @pytest.mark.parametrize(
        ("bbox", "area"),
        [
            (["10", 2, 3, 4], 1.0),
            ([True, 2, 3, 4], 1.0),
            ([1, 2, 3, 4], "12"),
            ([1, 2, 3, 4], False),
            ([float("nan"), 2, 3, 4], 1.0),
            ([1, 2, float("inf"), 4], 1.0),
        ],
    )
    def test_non_numeric_values_rejected(self, bbox, area):
        """Test coordinates and area are not coerced from other types."""
        with pytest.raises(ValidationError):
            AnnotationRecord(id=1, image_id=1, category_id=1, bbox=bbox, area=area)

    def test_bbox_length_enforced(self):
        """Test that a bbox must have exactly four values."""
        with pytest.raises(ValidationError):
            _annotation([1.0, 2.0, 3.0])


class TestAnnotationDocument:
    """Tests for AnnotationDocument model."""

    def test_category_names(self):
        """Test category id to name mapping."""
        doc = AnnotationDocument(
            images=[],
            annotations=[],
            categories=[{"id": 3, "name": "car"}, {"id": 9, "name": "bus"}],
        )
        assert doc.category_names == {3: "car", 9: "bus"}


class TestBoundingBox:
    """Tests for normalized BoundingBox."""

    def test_normalization_scenario(self):
        """Test normalization uses the original image size."""
        image = ImageRecord(id=1, file_name="a.png", width=100, height=80)
        bbox = BoundingBox.from_annotation(_annotation([10, 20, 30, 40]), image)

        assert bbox.x == pytest.approx(0.10)
        assert bbox.y == pytest.approx(0.25)
        assert bbox.width == pytest.approx(0.30)
        assert bbox.height == pytest.approx(0.50)
        assert bbox.class_id == 5

    def test_sparse_category_id_passed_through(self):
        """Test that category ids are not remapped."""
        image = ImageRecord(id=1, file_name="a.png", width=10, height=10)
        bbox = BoundingBox.from_annotation(_annotation([0, 0, 1, 1], 1234), image)
        assert bbox.class_id == 1234

    def test_out_of_bounds_not_clamped(self):
        """Test that boxes past the image edge keep out-of-range values."""
        image = ImageRecord(id=1, file_name="a.png", width=100, height=100)
        bbox = BoundingBox.from_annotation(_annotation([90, -10, 30, 20]), image)

        assert bbox.x2 == pytest.approx(1.2)
        assert bbox.y == pytest.approx(-0.1)
        assert bbox.is_inside_image is False

    @given(
        st.integers(min_value=1, max_value=4000),
        st.integers(min_value=1, max_value=4000),
        st.floats(min_value=0, max_value=1),
        st.floats(min_value=0, max_value=1),
        st.floats(min_value=0, max_value=1),
        st.floats(min_value=0, max_value=1),
    )
    def test_property_denormalize_roundtrip(self, width, height, fx, fy, fw, fh):
        """Property-based test: denormalizing recovers the absolute box."""
        raw = [fx * width, fy * height, fw * width, fh * height]
        image = ImageRecord(id=1, file_name="a.png", width=width, height=height)
        bbox = BoundingBox.from_annotation(_annotation(raw), image)

        recovered = bbox.denormalize(width, height)
        assert recovered == pytest.approx(tuple(raw), rel=1e-9, abs=1e-9)

    def test_repr(self):
        """Test string representations."""
        bbox = BoundingBox(x=0.1, y=0.2, width=0.3, height=0.4, class_id=2)
        assert "class_id=2" in repr(bbox)


class TestDetectionItem:
    """Tests for DetectionItem."""

    def _pixels(self, width=4, height=2):
        return np.linspace(0, 1, width * height * 3, dtype=np.float32)

    def test_pixel_size_checked(self):
        """Test that a buffer of the wrong length is rejected."""
        with pytest.raises(ValueError, match="flat buffer of 24"):
            DetectionItem(pixels=np.zeros(10, dtype=np.float32), width=4, height=2)

    def test_equality_compares_bytes(self):
        """Test equality over pixels and boxes."""
        a = DetectionItem(pixels=self._pixels(), width=4, height=2)
        b = DetectionItem(pixels=self._pixels().copy(), width=4, height=2)
        c = DetectionItem(pixels=np.zeros(24, dtype=np.float32), width=4, height=2)

        assert a == b
        assert a != c

    def test_to_tensor_is_channel_first(self):
        """Test interleaved pixels become a (3, H, W) tensor."""
        pixels = np.zeros(4 * 2 * 3, dtype=np.float32)
        pixels[0::3] = 1.0  # red channel of every pixel
        item = DetectionItem(pixels=pixels, width=4, height=2)

        tensor = item.to_tensor()
        assert tensor.shape == (3, 2, 4)
        assert torch.all(tensor[0] == 1.0)
        assert torch.all(tensor[1:] == 0.0)
