"""
Image Resizer

Generates resized variants of a source image for every attached FormatSpec.

Suppose you need big, medium and small renditions of an uploaded picture:
register the formats (directly or as a named group), call resize() and get
back a {format name: output path} mapping. Every written file is remembered
so it can be removed later with delete_generated_files().

Example:
    >>> from image_resizer import FormatSpec, ImageResizer
    >>>
    >>> resizer = ImageResizer("/tmp/variants")
    >>> resizer.use_format(FormatSpec("big", width=800, resize_mode="proportional"))
    >>> resizer.use_format({"name": "small", "width": 100, "height": 100,
    ...                     "resizeMode": "crop", "outputFormat": "png", "quality": 90})
    >>> outputs = resizer.resize("picture.jpg")
    >>> sorted(outputs)
    ['big', 'small']
"""

import hashlib
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..exceptions import (
    CleanupFailed,
    ImageResizerError,
    ImageWriteFailed,
    SourceImageUnreadable,
    TempDirUnavailable,
    UnknownGroup,
)
from ..image.backend import PillowBackend
from ..models.format_spec import FormatSpec, ResizeMode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
FormatLike = Union[FormatSpec, Mapping[str, Any]]


class ImageResizer:
    """
    Resizing session: format groups, active formats and generated files.

    One instance owns its own state; run independent instances for
    independent sessions instead of sharing one across threads.

    Attributes:
        skip_bigger_formats: When True, formats larger than the source (on
            either axis) are skipped instead of upscaling
        backend: Image collaborator (PillowBackend by default)
    """

    def __init__(
        self,
        temp_directory: PathLike,
        format_groups: Optional[Mapping[str, Iterable[FormatLike]]] = None,
        default_formats: Optional[Iterable[FormatLike]] = None,
        skip_bigger_formats: bool = False,
        backend: Optional[Any] = None
    ):
        """
        Args:
            temp_directory: Directory where all variants are written
            format_groups: Optional {group name: formats} to register
            default_formats: Formats attached at construction and restored by
                load_default_formats()
            skip_bigger_formats: Initial value of the skip policy
            backend: Image collaborator exposing open, read_dimensions,
                resize, crop_to_fit and save
        """
        self._temp_directory = Path(temp_directory)
        self._format_groups: Dict[str, Tuple[FormatSpec, ...]] = {}
        self._formats: List[FormatSpec] = []
        self._generated_files: Dict[str, Path] = {}
        self.skip_bigger_formats = skip_bigger_formats
        self.backend = backend if backend is not None else PillowBackend()

        for name, specs in (format_groups or {}).items():
            self.add_formats_group(name, specs)

        self._default_formats = tuple(FormatSpec.coerce(f) for f in (default_formats or ()))
        self.load_default_formats()

    # ------------------------------------------------------------------
    # Accessors

    @property
    def temp_directory(self) -> Path:
        """Directory where variants are written"""
        return self._temp_directory

    @temp_directory.setter
    def temp_directory(self, value: PathLike) -> None:
        self._temp_directory = Path(value)

    @property
    def formats(self) -> List[FormatSpec]:
        """Formats attached for the next resize(), in attachment order"""
        return list(self._formats)

    @property
    def format_groups(self) -> Dict[str, Tuple[FormatSpec, ...]]:
        """Registered format groups"""
        return dict(self._format_groups)

    @property
    def default_formats(self) -> Tuple[FormatSpec, ...]:
        return self._default_formats

    @property
    def generated_files(self) -> Dict[str, Path]:
        """Files written so far, as {"<hash>_<format name>": output path}"""
        return dict(self._generated_files)

    def enable_skip_bigger_formats(self, enabled: bool = True) -> "ImageResizer":
        """Set the skip policy; returns self for chaining"""
        self.skip_bigger_formats = enabled
        return self

    # ------------------------------------------------------------------
    # Format groups and active formats

    def add_formats_group(self, name: str, specs: Iterable[FormatLike]) -> "ImageResizer":
        """
        Register a named, ordered group of formats.

        Maps are converted right away, so a group is never stored half valid.
        Registering an existing name replaces the previous group.

        Raises:
            InvalidFormatSpec: if any member is not a valid format
        """
        group = tuple(FormatSpec.coerce(spec) for spec in specs)
        self._format_groups[name] = group
        logger.debug("Registered formats group '%s' with %d format(s)", name, len(group))
        return self

    def has_formats_group(self, name: str) -> bool:
        return name in self._format_groups

    def use_formats_group(self, name: str) -> "ImageResizer":
        """
        Attach every format of a registered group, in group order.

        Raises:
            UnknownGroup: if no group is registered under name
        """
        try:
            group = self._format_groups[name]
        except KeyError:
            raise UnknownGroup(name) from None
        self._formats.extend(group)
        return self

    def use_format(self, spec: FormatLike) -> "ImageResizer":
        """Attach one format (FormatSpec or map)"""
        self._formats.append(FormatSpec.coerce(spec))
        return self

    def use_formats(self, specs: Iterable[FormatLike]) -> "ImageResizer":
        """Attach several formats (FormatSpecs or maps), in order"""
        converted = [FormatSpec.coerce(spec) for spec in specs]
        self._formats.extend(converted)
        return self

    def set_formats(self, specs: Iterable[FormatLike]) -> "ImageResizer":
        """Replace the attached formats"""
        self._formats = [FormatSpec.coerce(spec) for spec in specs]
        return self

    def detach_all_formats(self) -> "ImageResizer":
        """Remove all attached formats; groups and generated files are kept"""
        self._formats = []
        return self

    def load_default_formats(self) -> "ImageResizer":
        """Replace the attached formats with the default ones"""
        self._formats = list(self._default_formats)
        return self

    # ------------------------------------------------------------------
    # Resizing

    def resize(self, source_path: PathLike) -> Dict[str, Path]:
        """
        Generate every attached format from one source image.

        Formats run in attachment order; when two formats share a name the
        later one wins in the returned mapping. Skipped formats (see
        skip_bigger_formats) are simply absent. There is no rollback: if a
        format fails, files already written stay on disk and in
        generated_files.

        Args:
            source_path: Path to the source image

        Returns:
            {format name: output path}

        Raises:
            TempDirUnavailable: if the temp directory cannot be used
            SourceImageUnreadable: if the source cannot be read or decoded
            ImageWriteFailed: if a variant cannot be saved
        """
        self._ensure_temp_directory()

        generated: Dict[str, Path] = {}
        for spec in self._formats:
            output = self._process_format(source_path, spec)
            if output is not None:
                generated[spec.name] = output

        logger.info(
            "Resized '%s': %d of %d format(s) generated",
            source_path, len(generated), len(self._formats)
        )
        return generated

    def output_key(self, source_path: PathLike, spec: FormatSpec) -> str:
        """Key under which the variant of source_path for spec is recorded"""
        source_hash = hashlib.md5(str(source_path).encode("utf-8")).hexdigest()
        return f"{source_hash}_{spec.name}"

    def output_path(self, source_path: PathLike, spec: FormatSpec) -> Path:
        """Deterministic output path: <temp dir>/<md5(source path)>_<name>.<ext>"""
        return self._temp_directory / f"{self.output_key(source_path, spec)}.{spec.extension}"

    def _ensure_temp_directory(self) -> None:
        path = self._temp_directory
        if path.exists():
            if not path.is_dir():
                raise TempDirUnavailable(path, "path exists but is not a directory")
            return

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise TempDirUnavailable(path, f"cannot create directory ({err})") from err
        logger.debug("Created temp directory %s", path)

    def _process_format(self, source_path: PathLike, spec: FormatSpec) -> Optional[Path]:
        """Generate a single variant; returns None when the format is skipped"""
        try:
            source_size = self.backend.read_dimensions(source_path)
        except ImageResizerError:
            raise
        except Exception as err:
            raise SourceImageUnreadable(source_path, str(err)) from err

        target_width, target_height = spec.target_size(source_size)
        source_width, source_height = source_size

        if self.skip_bigger_formats and (source_width < target_width or source_height < target_height):
            logger.debug(
                "Skipping format '%s' (%dx%d) for '%s' (%dx%d)",
                spec.name, target_width, target_height, source_path, source_width, source_height
            )
            return None

        try:
            image = self.backend.open(source_path)
        except ImageResizerError:
            raise
        except Exception as err:
            raise SourceImageUnreadable(source_path, str(err)) from err

        if spec.resize_mode is ResizeMode.CROP:
            image = self.backend.crop_to_fit(image, target_width, target_height)
        else:
            image = self.backend.resize(image, target_width, target_height)

        output = self.output_path(source_path, spec)
        try:
            self.backend.save(image, output, spec.quality)
        except ImageResizerError:
            raise
        except Exception as err:
            raise ImageWriteFailed(output, str(err)) from err

        key = self.output_key(source_path, spec)
        replaced = self._generated_files.get(key)
        if replaced is not None and replaced != output:
            # Same name with another extension: the older file loses its entry
            logger.debug("Removing replaced variant %s", replaced)
            try:
                replaced.unlink(missing_ok=True)
            except OSError as err:
                raise ImageWriteFailed(replaced, f"cannot remove replaced variant ({err})") from err
        self._generated_files[key] = output
        logger.debug(
            "Generated format '%s' (%s, %dx%d) at %s",
            spec.name, spec.resize_mode.value, target_width, target_height, output
        )
        return output

    # ------------------------------------------------------------------
    # Cleanup

    def delete_generated_files(self) -> "ImageResizer":
        """
        Delete every generated file that still exists.

        All files are attempted even if some fail. Entries are forgotten once
        their file is gone; entries whose deletion failed are kept so a later
        call can retry them.

        Raises:
            CleanupFailed: if one or more files could not be deleted
        """
        failures = []
        deleted = 0

        for key, path in list(self._generated_files.items()):
            if path.is_file():
                try:
                    path.unlink()
                except OSError as err:
                    logger.warning("Cannot delete generated file %s: %s", path, err)
                    failures.append((key, path, err))
                    continue
                deleted += 1
            del self._generated_files[key]

        logger.info("Deleted %d generated file(s)", deleted)
        if failures:
            raise CleanupFailed(failures)
        return self
