"""
Image Resizer Core - declarative multi-format image resizing

This library provides:
- FormatSpec: immutable, validated description of one output rendition
- ImageResizer: applies a set of formats to a source image and tracks the
  generated files for later cleanup
- Named format groups, loadable from YAML/JSON settings
- A Pillow-based image backend

Example:
    >>> from image_resizer import ImageResizer
    >>>
    >>> resizer = ImageResizer("/tmp/variants", format_groups={
    ...     "avatar": [
    ...         {"name": "big", "width": 800, "height": None, "resizeMode": "proportional",
    ...          "outputFormat": "jpg", "quality": 90},
    ...         {"name": "small", "width": 100, "height": 100, "resizeMode": "crop",
    ...          "outputFormat": "jpg", "quality": 85},
    ...     ],
    ... })
    >>> outputs = resizer.use_formats_group("avatar").resize("upload.jpg")
    >>> print(outputs["small"])
"""

import logging

from .version import __version__

# Errors
from .exceptions import (
    CleanupFailed,
    ImageResizerError,
    ImageWriteFailed,
    InvalidFormatSpec,
    MissingField,
    SourceImageUnreadable,
    TempDirUnavailable,
    UnknownGroup,
)

# Models
from .models import FormatSpec, ResizeMode, ResizeResult, validate_format_map

# Image backend
from .image import FormatDetector, OutputFormat, PillowBackend

# Resizer
from .resizer import ImageResizer

# Configuration
from .config import ResizerSettings, create_resizer, load_settings

# High-level API
from .api import batch_resize, resize_image

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Errors
    "ImageResizerError",
    "InvalidFormatSpec",
    "MissingField",
    "UnknownGroup",
    "TempDirUnavailable",
    "SourceImageUnreadable",
    "ImageWriteFailed",
    "CleanupFailed",
    # Models
    "FormatSpec",
    "ResizeMode",
    "validate_format_map",
    # Image
    "PillowBackend",
    "FormatDetector",
    "OutputFormat",
    # Resizer
    "ImageResizer",
    # Configuration
    "ResizerSettings",
    "load_settings",
    "create_resizer",
    # High-level API
    "resize_image",
    "batch_resize",
    "ResizeResult",
]
