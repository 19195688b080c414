"""Pytest configuration and fixtures."""
from io import BytesIO

import pytest
from PIL import Image

from avifpress.config import Settings


def make_jpeg(size=(160, 160), quality=90) -> bytes:
    """A gradient with noise, so the JPEG is not trivially small."""
    gradient = Image.linear_gradient("L").resize(size).convert("RGB")
    noise = Image.effect_noise(size, 40).convert("RGB")
    image = Image.blend(gradient, noise, 0.35)
    buffer = BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def make_png_with_alpha(size=(64, 64)) -> bytes:
    image = Image.new("RGBA", size, (200, 40, 40, 128))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes():
    return make_jpeg()


@pytest.fixture
def source_image(tmp_path, jpeg_bytes):
    """A JPEG already sitting in an incoming directory."""
    incoming = tmp_path / "tmp"
    incoming.mkdir()
    path = incoming / "1700000000000_abcd1234_photo.jpg"
    path.write_bytes(jpeg_bytes)
    return path


@pytest.fixture
def derived_dir(tmp_path):
    """Derived directory path; deliberately not created."""
    return tmp_path / "compressed"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        incoming_dir=str(tmp_path / "tmp"),
        derived_dir=str(tmp_path / "compressed"),
        encode_timeout_seconds=60.0
    )
