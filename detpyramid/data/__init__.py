"""Data module - annotation parsing, image loading and the detection dataset."""

from detpyramid.data.annotations import (
    AnnotationIndex,
    load_annotation_document,
    parse_annotation_document,
)
from detpyramid.data.collate import DetectionBatch, collate_items
from detpyramid.data.dataset import DetectionDataset, Retrieval, RetrievalStatus
from detpyramid.data.loader import ImageSampleLoader

__all__ = [
    "AnnotationIndex",
    "DetectionBatch",
    "DetectionDataset",
    "ImageSampleLoader",
    "Retrieval",
    "RetrievalStatus",
    "collate_items",
    "load_annotation_document",
    "parse_annotation_document",
]
