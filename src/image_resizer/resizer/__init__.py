"""Resizing session module"""

from .resizer import ImageResizer

__all__ = ["ImageResizer"]
