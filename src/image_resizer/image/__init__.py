"""Image collaborator module"""

from .backend import PillowBackend
from .formats import FormatDetector, OutputFormat

__all__ = ["PillowBackend", "FormatDetector", "OutputFormat"]
