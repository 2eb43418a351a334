"""Configuration models for the data pipeline and feature extractor."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

from detpyramid.core.constants import DEFAULT_TARGET_SIZE


class DataConfig(BaseModel):
    """Dataset-related configuration."""

    images_dir: Path = Field(..., description="Directory with the referenced images")
    annotations_path: Path = Field(..., description="COCO-style JSON annotations")
    target_size: tuple[int, int] = Field(
        DEFAULT_TARGET_SIZE, description="(width, height) every image is resized to"
    )

    model_config = {"frozen": True}

    @field_validator("images_dir", "annotations_path")
    @classmethod
    def _to_path(cls, v: Path) -> Path:
        return Path(v)

    @field_validator("target_size")
    @classmethod
    def _positive_size(cls, v: tuple[int, int]) -> tuple[int, int]:
        if min(v) <= 0:
            msg = f"target_size values must be positive, got {v}"
            raise ValueError(msg)
        return v


class BackboneConfig(BaseModel):
    """Backbone configuration.

    ``channels`` holds the output width of each of the three stages, shallow
    to deep. ``kernel_size`` is shared by every convolution and must be odd so
    that same-padding is symmetric.
    """

    channels: tuple[int, int, int] = Field(..., description="Per-stage channels")
    kernel_size: int = Field(3, ge=1, description="Convolution kernel size")

    model_config = {"frozen": True}

    @field_validator("channels")
    @classmethod
    def _positive_channels(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        if min(v) <= 0:
            msg = f"channels must be positive, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("kernel_size")
    @classmethod
    def _odd_kernel(cls, v: int) -> int:
        if v % 2 == 0:
            msg = f"kernel_size must be odd for same padding, got {v}"
            raise ValueError(msg)
        return v


class NeckConfig(BaseModel):
    """FPN + PAN neck configuration."""

    in_channels: tuple[int, int, int] = Field(
        ..., description="Backbone channels, shallow to deep"
    )
    out_channels: int = Field(..., gt=0, description="Fused pyramid width")

    model_config = {"frozen": True}

    @field_validator("in_channels")
    @classmethod
    def _positive_channels(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        if min(v) <= 0:
            msg = f"in_channels must be positive, got {v}"
            raise ValueError(msg)
        return v


class FeaturePyramidConfig(BaseModel):
    """Backbone and neck bundle, checked for channel consistency."""

    backbone: BackboneConfig
    neck: NeckConfig
    backend: str = Field("torch", description="Tensor backend name")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _channels_match(self) -> Self:
        if self.neck.in_channels != self.backbone.channels:
            msg = (
                f"neck.in_channels {self.neck.in_channels} must equal "
                f"backbone.channels {self.backbone.channels}"
            )
            raise ValueError(msg)
        return self

    @classmethod
    def from_channels(
        cls,
        channels: tuple[int, int, int],
        out_channels: int,
        kernel_size: int = 3,
    ) -> FeaturePyramidConfig:
        """Create a consistent config from the backbone channels."""
        return cls(
            backbone=BackboneConfig(channels=channels, kernel_size=kernel_size),
            neck=NeckConfig(in_channels=channels, out_channels=out_channels),
        )


class PipelineConfig(BaseModel):
    """Full pipeline configuration bundle."""

    data: DataConfig
    model: FeaturePyramidConfig

    model_config = {"frozen": True}
