"""Package-wide constants."""

# Pixel layout
RGB_CHANNELS = 3
PIXEL_SCALE = 255.0

# Default resized image size as (width, height)
DEFAULT_TARGET_SIZE = (224, 224)

# Downsampling factor of each backbone output, shallow to deep
BACKBONE_STRIDES = (2, 4, 8)
PYRAMID_LEVELS = ("p3", "p4", "p5")

# Required top-level keys of an annotation document
ANNOTATION_SECTIONS = {
    "images": "Image records with original pixel dimensions",
    "annotations": "Per-object boxes in absolute pixel coordinates",
    "categories": "Category id to name mapping",
}
