"""
Tests for settings loading and resizer wiring
"""

import json

import pytest

from image_resizer import (
    FormatSpec,
    InvalidFormatSpec,
    MissingField,
    ResizeMode,
    ResizerSettings,
    UnknownGroup,
    create_resizer,
    load_settings,
)
from image_resizer.config import DEFAULT_TEMP_DIRECTORY, TEMP_DIR_ENV

YAML_SETTINGS = """
image_resizer:
  temp_directory: {temp_dir}
  skip_bigger_formats: true
  default_group: default
  formats_groups:
    default:
      - {{ name: big,    width: 800, resizeMode: proportional }}
      - {{ name: medium, width: 300, resizeMode: proportional }}
      - {{ name: small,  width: 100, height: 100, resizeMode: crop, outputFormat: png, quality: 80 }}
    avatar:
      - {{ name: avatar, width: 64, height: 64, resizeMode: crop }}
"""


@pytest.fixture
def yaml_file(tmp_path, temp_dir):
    path = tmp_path / "resizer.yml"
    path.write_text(YAML_SETTINGS.format(temp_dir=temp_dir))
    return path


class TestLoadSettings:
    """Test loading YAML and JSON settings files"""

    def test_load_yaml(self, yaml_file, temp_dir):
        settings = load_settings(yaml_file)

        assert settings.temp_directory == temp_dir
        assert settings.skip_bigger_formats is True
        assert settings.default_group == "default"
        assert list(settings.formats_groups) == ["default", "avatar"]
        assert [f.name for f in settings.formats_groups["default"]] == ["big", "medium", "small"]

    def test_absent_keys_default_to_none(self, yaml_file):
        big = load_settings(yaml_file).formats_groups["default"][0]

        assert big == FormatSpec("big", 800, None, ResizeMode.PROPORTIONAL, "jpg", 100)

    def test_explicit_values_kept(self, yaml_file):
        small = load_settings(yaml_file).formats_groups["default"][2]

        assert small.output_format == "png"
        assert small.quality == 80

    def test_load_json_without_root_key(self, tmp_path):
        path = tmp_path / "resizer.json"
        path.write_text(json.dumps({
            "temp_directory": str(tmp_path / "out"),
            "formats_groups": {"thumbs": [{"name": "t", "width": 10, "height": 10}]},
        }))

        settings = load_settings(path)

        assert settings.temp_directory == tmp_path / "out"
        assert settings.skip_bigger_formats is False
        assert settings.default_group is None
        assert settings.formats_groups["thumbs"][0].resize_mode is ResizeMode.STRETCH

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "resizer.ini"
        path.write_text("[image_resizer]")

        with pytest.raises(ValueError, match="Unsupported config format"):
            load_settings(path)

    def test_scalar_document(self, tmp_path):
        path = tmp_path / "scalar.yml"
        path.write_text("5\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_settings(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        settings = load_settings(path)

        assert settings.formats_groups == {}
        assert settings.temp_directory == DEFAULT_TEMP_DIRECTORY


class TestSettingsFromDict:
    """Test validation of parsed settings"""

    def test_invalid_format_entry(self):
        data = {"formats_groups": {"g": [{"name": "x", "width": 10, "resizeMode": "crop"}]}}

        with pytest.raises(InvalidFormatSpec):
            ResizerSettings.from_dict(data)

    def test_entry_without_name(self):
        with pytest.raises(MissingField) as exc_info:
            ResizerSettings.from_dict({"formats_groups": {"g": [{"width": 10, "height": 10}]}})

        assert exc_info.value.field == "name"

    def test_group_must_be_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            ResizerSettings.from_dict({"formats_groups": {"g": {"name": "x"}}})

    def test_unknown_default_group(self):
        with pytest.raises(UnknownGroup):
            ResizerSettings.from_dict({"default_group": "missing", "formats_groups": {}})

    @pytest.mark.parametrize("value", ["false", "0", 1])
    def test_skip_bigger_formats_must_be_bool(self, value):
        """Quoted or numeric values must not switch the policy on"""
        with pytest.raises(ValueError, match="must be a boolean"):
            ResizerSettings.from_dict({"skip_bigger_formats": value, "formats_groups": {}})

    @pytest.mark.parametrize("document", [5, "text", ["a", "b"]])
    def test_document_must_be_mapping(self, document):
        with pytest.raises(ValueError, match="must be a mapping"):
            ResizerSettings.from_dict(document)

    def test_format_key_alias(self):
        settings = ResizerSettings.from_dict(
            {"formats_groups": {"g": [{"name": "x", "width": 10, "height": 10, "format": "png"}]}}
        )

        assert settings.formats_groups["g"][0].output_format == "png"

    def test_env_overrides_temp_directory(self, monkeypatch, tmp_path):
        monkeypatch.setenv(TEMP_DIR_ENV, str(tmp_path / "from_env"))

        settings = ResizerSettings.from_dict({"temp_directory": "/somewhere/else"})

        assert settings.temp_directory == tmp_path / "from_env"

    def test_to_dict_round_trip(self, yaml_file):
        settings = load_settings(yaml_file)

        assert ResizerSettings.from_dict(settings.to_dict()) == settings


class TestCreateResizer:
    """Test wiring a resizer from settings"""

    def test_groups_and_default_group(self, yaml_file, temp_dir):
        resizer = create_resizer(load_settings(yaml_file))

        assert resizer.temp_directory == temp_dir
        assert resizer.skip_bigger_formats is True
        assert set(resizer.format_groups) == {"default", "avatar"}
        assert [f.name for f in resizer.formats] == ["big", "medium", "small"]

    def test_no_default_group(self, tmp_path):
        settings = ResizerSettings(
            temp_directory=tmp_path,
            formats_groups={"g": [FormatSpec("x", 10, 10)]},
        )

        resizer = create_resizer(settings)

        assert resizer.formats == []
        resizer.use_formats_group("g")
        assert [f.name for f in resizer.formats] == ["x"]

    def test_resize_with_loaded_settings(self, yaml_file, landscape_image):
        resizer = create_resizer(load_settings(yaml_file))

        outputs = resizer.resize(landscape_image)

        assert list(outputs) == ["big", "medium", "small"]
        assert outputs["small"].suffix == ".png"
