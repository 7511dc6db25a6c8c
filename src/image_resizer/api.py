"""
High-level API for image-resizer-core

Convenience functions for resizing images without managing a session.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .exceptions import ImageResizerError, TempDirUnavailable
from .models.format_spec import FormatSpec
from .models.resize_result import ResizeResult
from .resizer.resizer import ImageResizer

logger = logging.getLogger(__name__)


def resize_image(
    source: Union[str, Path],
    formats: Iterable[Union[FormatSpec, Mapping[str, Any]]],
    temp_directory: Union[str, Path],
    skip_bigger_formats: bool = False
) -> Dict[str, Path]:
    """
    Resize one image to a list of formats in a single call.

    Args:
        source: Path to the source image
        formats: FormatSpecs or format maps to generate
        temp_directory: Directory where variants are written
        skip_bigger_formats: Skip formats larger than the source

    Returns:
        {format name: output path}

    Example:
        >>> from image_resizer import resize_image, FormatSpec
        >>>
        >>> outputs = resize_image(
        ...     "photo.jpg",
        ...     [FormatSpec("thumb", 150, 150, "crop")],
        ...     "/tmp/variants",
        ... )
    """
    resizer = ImageResizer(temp_directory, skip_bigger_formats=skip_bigger_formats)
    resizer.use_formats(formats)
    return resizer.resize(source)


def batch_resize(
    resizer: ImageResizer,
    sources: Iterable[Union[str, Path]],
    progress_callback: Optional[Callable[[int, int, ResizeResult], None]] = None
) -> List[ResizeResult]:
    """
    Resize multiple images with the formats attached to resizer.

    A failing source is reported in its ResizeResult and does not stop the
    remaining sources. A temp directory problem is not per-source and is
    raised straight away.

    Args:
        resizer: Configured ImageResizer
        sources: Paths of the source images
        progress_callback: Optional callback(current, total, result)

    Returns:
        List of ResizeResult objects, in source order

    Raises:
        TempDirUnavailable: if the temp directory cannot be used

    Example:
        >>> from pathlib import Path
        >>> from image_resizer import FormatSpec, ImageResizer, batch_resize
        >>>
        >>> resizer = ImageResizer("/tmp/variants").use_format(FormatSpec("web", 1024, None, "proportional"))
        >>>
        >>> def on_progress(current, total, result):
        ...     status = "ok" if result.success else result.error
        ...     print(f"[{current}/{total}] {result.source.name}: {status}")
        >>>
        >>> results = batch_resize(resizer, Path("./photos").glob("*.jpg"), on_progress)
    """
    sources = [Path(source) for source in sources]
    results = []
    total = len(sources)

    for i, source in enumerate(sources, 1):
        try:
            outputs = resizer.resize(source)
            result = ResizeResult(source=source, success=True, outputs=outputs)
        except TempDirUnavailable:
            raise
        except ImageResizerError as e:
            logger.error("Resizing '%s' failed: %s", source, e)
            result = ResizeResult(source=source, success=False, error=str(e))
        results.append(result)

        if progress_callback:
            progress_callback(i, total, result)

    return results
