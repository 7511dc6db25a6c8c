"""Data models for image-resizer-core"""

from .format_spec import FormatSpec, ResizeMode, validate_format_map
from .resize_result import ResizeResult

__all__ = ["FormatSpec", "ResizeMode", "ResizeResult", "validate_format_map"]
