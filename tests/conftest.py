"""
Shared fixtures for image-resizer-core tests

Source images are generated with Pillow into tmp_path, so the suite needs no
binary fixtures on disk.
"""

from pathlib import Path
from typing import Optional, Tuple

import pytest
from PIL import Image, ImageDraw

from image_resizer.config import TEMP_DIR_ENV

EXIF_ORIENTATION_TAG = 0x0112


def create_basic_image(width: int, height: int, color: tuple = (70, 130, 180), text: str = "") -> Image.Image:
    """Create a simple colored image with optional text"""
    img = Image.new('RGB', (width, height), color)

    if text:
        draw = ImageDraw.Draw(img)
        # Draw text in center
        bbox = draw.textbbox((0, 0), text)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        position = ((width - text_width) // 2, (height - text_height) // 2)
        draw.text(position, text, fill='white')

    return img


def create_noise_image(width: int, height: int) -> Image.Image:
    """Create a noisy image, whose JPEG size depends strongly on quality"""
    return Image.effect_noise((width, height), 64).convert('RGB')


@pytest.fixture(autouse=True)
def _clear_temp_dir_env(monkeypatch):
    monkeypatch.delenv(TEMP_DIR_ENV, raising=False)


@pytest.fixture
def images_dir(tmp_path) -> Path:
    path = tmp_path / "sources"
    path.mkdir()
    return path


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    return tmp_path / "variants"


@pytest.fixture
def make_image(images_dir):
    """Factory: make_image("photo.jpg", (1600, 1200)) -> Path"""

    def _make(
        filename: str = "photo.jpg",
        size: Tuple[int, int] = (1600, 1200),
        mode: str = "RGB",
        orientation: Optional[int] = None,
        noise: bool = False,
    ) -> Path:
        width, height = size
        img = create_noise_image(width, height) if noise else create_basic_image(width, height, text=filename)
        if mode != "RGB":
            img = img.convert(mode)

        path = images_dir / filename
        save_kwargs = {}
        if orientation is not None:
            exif = Image.Exif()
            exif[EXIF_ORIENTATION_TAG] = orientation
            save_kwargs["exif"] = exif.tobytes()
        img.save(path, **save_kwargs)
        return path

    return _make


@pytest.fixture
def landscape_image(make_image) -> Path:
    """1600x1200 (4:3) JPEG"""
    return make_image("landscape.jpg", (1600, 1200))


@pytest.fixture
def portrait_image(make_image) -> Path:
    """600x800 (3:4) PNG"""
    return make_image("portrait.png", (600, 800))


class RecordingBackend:
    """Image backend double that records calls and writes placeholder files"""

    def __init__(self, size: Tuple[int, int] = (1600, 1200)):
        self.size = size
        self.calls = []

    def read_dimensions(self, path):
        self.calls.append(("read_dimensions", str(path)))
        return self.size

    def open(self, path):
        self.calls.append(("open", str(path)))
        return ("image", str(path))

    def resize(self, image, width, height):
        self.calls.append(("resize", width, height))
        return ("resized", width, height)

    def crop_to_fit(self, image, width, height):
        self.calls.append(("crop_to_fit", width, height))
        return ("cropped", width, height)

    def save(self, image, path, quality):
        self.calls.append(("save", Path(path).name, quality))
        Path(path).write_bytes(repr(image).encode())

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()
