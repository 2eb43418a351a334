"""Multi-scale detection features and COCO-style annotation ingestion."""

__version__ = "0.1.0"
