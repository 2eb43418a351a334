"""Exception hierarchy for dataset and model errors."""

from __future__ import annotations

from pathlib import Path


class DetPyramidError(Exception):
    """Base exception for detpyramid errors."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class AnnotationError(DetPyramidError):
    """Base exception for annotation document failures."""

    def __init__(
        self, message: str, path: Path | None = None, error_code: str | None = None
    ) -> None:
        super().__init__(message, error_code)
        self.path = path


class AnnotationIOError(AnnotationError):
    """Raised when the annotation file cannot be read."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message, path, "IO_ERROR")


class AnnotationParseError(AnnotationError):
    """Raised when the annotation document is structurally invalid."""

    def __init__(
        self, message: str, path: Path | None = None, field: str | None = None
    ) -> None:
        super().__init__(message, path, "PARSE_ERROR")
        self.field = field


class ShapeMismatchError(DetPyramidError):
    """Raised when a tensor does not have the shape a module expects."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "SHAPE_MISMATCH")


class BackendError(DetPyramidError):
    """Raised when a tensor backend cannot be resolved."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "UNKNOWN_BACKEND")
