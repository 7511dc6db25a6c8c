"""
Pillow Image Backend

The pixel-level collaborator used by ImageResizer: decoding, resizing,
fit-and-crop and encoding are all delegated to Pillow here. Errors raised by
Pillow are left untouched; the resizer re-tags them into its own exceptions.
"""

from pathlib import Path
from typing import Tuple, Union

from PIL import Image, ImageOps

from .formats import FormatDetector

PathLike = Union[str, Path]

EXIF_ORIENTATION_TAG = 0x0112

# Orientations 5-8 rotate the image by 90 degrees, swapping width and height
TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}


class PillowBackend:
    """Image operations on top of Pillow"""

    RESAMPLE = Image.Resampling.LANCZOS

    def open(self, path: PathLike) -> Image.Image:
        """
        Open and fully load an image, applying its EXIF orientation.

        Args:
            path: Path to image file

        Returns:
            Loaded PIL Image, detached from the file handle
        """
        with Image.open(path) as img:
            img.load()
            oriented = ImageOps.exif_transpose(img)
            return oriented if oriented is not img else img.copy()

    def read_dimensions(self, path: PathLike) -> Tuple[int, int]:
        """
        Read (width, height) from the image header without decoding pixels.

        Dimensions are reported as displayed, i.e. after EXIF orientation,
        so they agree with the size of the image returned by open().

        Args:
            path: Path to image file

        Returns:
            (width, height) tuple
        """
        with Image.open(path) as img:
            width, height = img.size
            orientation = img.getexif().get(EXIF_ORIENTATION_TAG)

        if orientation in TRANSPOSED_ORIENTATIONS:
            return height, width
        return width, height

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """Resize the whole image to exactly width x height"""
        return image.resize((width, height), self.RESAMPLE)

    def crop_to_fit(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """Scale the image to cover width x height and crop the overflow (centered)"""
        return ImageOps.fit(image, (width, height), method=self.RESAMPLE)

    def save(self, image: Image.Image, path: PathLike, quality: int) -> None:
        """
        Encode image to path, picking the codec from the file extension.

        Args:
            image: PIL Image to write
            path: Destination path; its extension selects the codec
            quality: Encoder quality 0-100 (ignored by lossless codecs)

        Raises:
            ValueError: if the extension has no known codec
            OSError: if the file cannot be written or encoded
        """
        output_format = FormatDetector.detect_format(path)
        if output_format is None:
            raise ValueError(f"Unsupported output format: '{Path(path).suffix}'")

        if output_format in FormatDetector.RGB_ONLY_FORMATS and image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")

        options = {"format": output_format.value}
        if FormatDetector.accepts_quality(output_format):
            options["quality"] = quality

        image.save(path, **options)
