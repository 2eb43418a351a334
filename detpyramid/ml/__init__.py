"""Machine Learning submodule.

Provides the three-stage backbone, the FPN + PAN neck, their configuration
models and the tensor backend they are built on.
"""

from detpyramid.ml.backbone import Backbone, build_backbone
from detpyramid.ml.backends import TensorBackend, TorchBackend, get_backend
from detpyramid.ml.base import FeatureMaps, FpnOutput
from detpyramid.ml.config import (
    BackboneConfig,
    DataConfig,
    FeaturePyramidConfig,
    NeckConfig,
    PipelineConfig,
)
from detpyramid.ml.models import (
    FeaturePyramid,
    build_feature_pyramid,
    count_parameters,
    feature_shapes,
    freeze,
)
from detpyramid.ml.neck import Neck, build_neck

__all__ = [
    # Configs
    "BackboneConfig",
    "DataConfig",
    "FeaturePyramidConfig",
    "NeckConfig",
    "PipelineConfig",
    # Modules
    "Backbone",
    "FeaturePyramid",
    "Neck",
    # Outputs
    "FeatureMaps",
    "FpnOutput",
    # Backends
    "TensorBackend",
    "TorchBackend",
    "get_backend",
    # Builders
    "build_backbone",
    "build_feature_pyramid",
    "build_neck",
    "count_parameters",
    "feature_shapes",
    "freeze",
]
