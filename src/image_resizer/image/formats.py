"""
Output Format Detection

Maps the output format identifiers used in format specs to Pillow codecs.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Set, Union


class OutputFormat(Enum):
    """Pillow codecs that variants can be encoded with"""
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WEBP"
    TIFF = "TIFF"
    BMP = "BMP"


class FormatDetector:
    """Resolve output identifiers and file extensions to Pillow codecs"""

    FORMAT_MAP: Dict[str, OutputFormat] = {
        'jpg': OutputFormat.JPEG,
        'jpeg': OutputFormat.JPEG,
        'png': OutputFormat.PNG,
        'gif': OutputFormat.GIF,
        'webp': OutputFormat.WEBP,
        'tiff': OutputFormat.TIFF,
        'tif': OutputFormat.TIFF,
        'bmp': OutputFormat.BMP,
    }

    # Codecs that take a "quality" save option
    QUALITY_FORMATS: Set[OutputFormat] = {OutputFormat.JPEG, OutputFormat.WEBP}

    # Codecs that cannot store alpha or palette images
    RGB_ONLY_FORMATS: Set[OutputFormat] = {OutputFormat.JPEG}

    @staticmethod
    def from_identifier(identifier: str) -> Optional[OutputFormat]:
        """
        Resolve a format identifier such as "jpg" or ".PNG".

        Args:
            identifier: Output format identifier or extension

        Returns:
            OutputFormat enum or None if unsupported
        """
        return FormatDetector.FORMAT_MAP.get(identifier.lower().lstrip('.'))

    @staticmethod
    def detect_format(file_path: Union[str, Path]) -> Optional[OutputFormat]:
        """
        Detect output codec from a file extension.

        Args:
            file_path: Path of the file to write

        Returns:
            OutputFormat enum or None if unsupported
        """
        suffix = Path(file_path).suffix
        if not suffix:
            return None
        return FormatDetector.from_identifier(suffix)

    @staticmethod
    def is_supported(identifier: str) -> bool:
        """Check if an output identifier can be encoded"""
        return FormatDetector.from_identifier(identifier) is not None

    @staticmethod
    def accepts_quality(output_format: OutputFormat) -> bool:
        """Check if the codec honours the quality option"""
        return output_format in FormatDetector.QUALITY_FORMATS
