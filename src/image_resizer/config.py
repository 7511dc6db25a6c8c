"""
Resizer Configuration

Loads resizer settings (temp directory, skip policy and format groups) from a
YAML or JSON file and wires an ImageResizer from them.

Example settings file:

    image_resizer:
      temp_directory: /var/tmp/variants
      skip_bigger_formats: true
      default_group: default
      formats_groups:
        default:
          - { name: big,    width: 800, resizeMode: proportional }
          - { name: medium, width: 300, resizeMode: proportional }
          - { name: small,  width: 100, height: 100, resizeMode: crop }
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .exceptions import InvalidFormatSpec, MissingField, UnknownGroup
from .models.format_spec import FORMAT_MAP_FIELDS, FormatSpec, find_map_key
from .resizer.resizer import ImageResizer

ROOT_KEY = "image_resizer"
TEMP_DIR_ENV = "IMAGE_RESIZER_TEMP_DIR"
DEFAULT_TEMP_DIRECTORY = Path(tempfile.gettempdir()) / "image_resizer"


@dataclass
class ResizerSettings:
    """
    Validated resizer settings.

    Attributes:
        temp_directory: Where variants are written
        skip_bigger_formats: Skip formats larger than the source
        default_group: Group attached when a resizer is created (optional)
        formats_groups: {group name: ordered formats}
    """
    temp_directory: Path = DEFAULT_TEMP_DIRECTORY
    skip_bigger_formats: bool = False
    default_group: Optional[str] = None
    formats_groups: Dict[str, List[FormatSpec]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary in the settings file layout"""
        return {
            "temp_directory": str(self.temp_directory),
            "skip_bigger_formats": self.skip_bigger_formats,
            "default_group": self.default_group,
            "formats_groups": {
                name: [spec.to_map() for spec in specs]
                for name, specs in self.formats_groups.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResizerSettings":
        """
        Build settings from a parsed configuration mapping.

        The top-level "image_resizer" key is optional. Format entries may omit
        any key except "name"; omitted keys are filled with None so the
        FormatSpec defaults apply. The IMAGE_RESIZER_TEMP_DIR environment
        variable overrides temp_directory.

        Raises:
            InvalidFormatSpec: if a format entry is invalid
            UnknownGroup: if default_group names an undefined group
            ValueError: if the structure is not as expected
        """
        data = data or {}
        if isinstance(data, Mapping) and ROOT_KEY in data:
            data = data[ROOT_KEY] or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Settings must be a mapping, got {type(data).__name__}")

        skip_bigger_formats = data.get("skip_bigger_formats", False)
        if not isinstance(skip_bigger_formats, bool):
            raise ValueError("'skip_bigger_formats' must be a boolean")

        groups = data.get("formats_groups") or {}
        if not isinstance(groups, Mapping):
            raise ValueError("'formats_groups' must map group names to lists of formats")

        formats_groups = {}
        for group_name, entries in groups.items():
            if not isinstance(entries, list):
                raise ValueError(f"Formats group '{group_name}' must be a list")
            formats_groups[str(group_name)] = [_format_from_entry(entry) for entry in entries]

        default_group = data.get("default_group")
        if default_group is not None and default_group not in formats_groups:
            raise UnknownGroup(default_group)

        temp_directory = os.getenv(TEMP_DIR_ENV) or data.get("temp_directory") or DEFAULT_TEMP_DIRECTORY

        return cls(
            temp_directory=Path(temp_directory),
            skip_bigger_formats=skip_bigger_formats,
            default_group=default_group,
            formats_groups=formats_groups,
        )


def _format_from_entry(entry: Any) -> FormatSpec:
    if isinstance(entry, FormatSpec):
        return entry
    if not isinstance(entry, Mapping):
        raise InvalidFormatSpec(f"Format entry must be a mapping, got {type(entry).__name__}")
    if "name" not in entry:
        raise MissingField("name")

    # Absent keys default to None, as in the framework configuration tree
    filled = dict(entry)
    for _, key, aliases in FORMAT_MAP_FIELDS:
        if find_map_key(filled, key, aliases) is None:
            filled[key] = None
    return FormatSpec.from_map(filled)


def load_settings(config_path: Union[str, Path]) -> ResizerSettings:
    """
    Load settings from a YAML (.yaml/.yml) or JSON (.json) file.

    Args:
        config_path: Path to the settings file

    Returns:
        ResizerSettings object

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file type is unsupported or the content is malformed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix in ['.yaml', '.yml']:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif config_path.suffix == '.json':
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported config format: {config_path.suffix}")

    return ResizerSettings.from_dict(data or {})


def create_resizer(settings: ResizerSettings, backend: Optional[Any] = None) -> ImageResizer:
    """
    Build an ImageResizer from settings.

    All groups are registered and the default group, if any, is attached.
    """
    default_formats = None
    if settings.default_group is not None:
        default_formats = settings.formats_groups[settings.default_group]

    return ImageResizer(
        settings.temp_directory,
        format_groups=settings.formats_groups,
        default_formats=default_formats,
        skip_bigger_formats=settings.skip_bigger_formats,
        backend=backend,
    )
