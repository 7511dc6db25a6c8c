"""
Exceptions for image-resizer-core

Every error raised by the library derives from ImageResizerError, so a host
application can catch the whole family with a single except clause.
"""

from pathlib import Path
from typing import List, Tuple, Union


class ImageResizerError(Exception):
    """Base exception for all image resizer errors."""
    pass


class InvalidFormatSpec(ImageResizerError, ValueError):
    """Raised when a format spec has inconsistent or invalid attributes."""
    pass


class MissingField(InvalidFormatSpec):
    """Raised when a format map lacks one of the required keys."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Format map is missing required field '{field}'")


class UnknownGroup(ImageResizerError, LookupError):
    """Raised when a requested format group has not been registered."""

    def __init__(self, group: str):
        self.group = group
        super().__init__(f"Unknown formats group '{group}'")


class TempDirUnavailable(ImageResizerError):
    """Raised when the temp directory is missing and uncreatable, or not a directory."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        super().__init__(f"Temp directory '{path}' is unavailable: {reason}")


class SourceImageUnreadable(ImageResizerError):
    """Raised when the source image is missing or cannot be decoded."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        super().__init__(f"Cannot read source image '{path}': {reason}")


class ImageWriteFailed(ImageResizerError):
    """Raised when a resized variant cannot be encoded or saved."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        super().__init__(f"Cannot write image '{path}': {reason}")


class CleanupFailed(ImageResizerError):
    """
    Raised after a cleanup pass when one or more generated files survived.

    Attributes:
        failures: List of (key, path, error) for every file that could not be deleted
    """

    def __init__(self, failures: List[Tuple[str, Path, OSError]]):
        self.failures = failures
        names = ", ".join(f'"{key}" ("{path}")' for key, path, _ in failures)
        super().__init__(f"Cannot delete {len(failures)} generated file(s): {names}")
