"""
AVIF encoding through Pillow.

This module wraps Pillow's AVIF writer and translates the caller-facing
compression percentage into the encoder's quality scale.
"""
import io
import math
import logging
from pathlib import Path
from typing import Any, Dict, Union

from PIL import Image, features

from avifpress.errors import CodecError

# Set up logging
logger = logging.getLogger(__name__)

# Constants
AVIF_FORMAT = "AVIF"
AVIF_MEDIA_TYPE = "image/avif"
LOSSLESS_QUALITY = 100
LOSSLESS_SUBSAMPLING = "4:4:4"

# Modes the AVIF writer accepts as-is
_NATIVE_MODES = ("RGB", "RGBA")


def avif_available() -> bool:
    """Check whether the installed Pillow build can write AVIF."""
    return bool(features.check("avif"))


def to_codec_quality(quality_percentage: float) -> int:
    """
    Convert a compression percentage into the encoder's quality setting.

    Higher compression means lower quality: 0% maps to quality 100 and
    100% maps to quality 0. Halves round up.
    """
    return int(math.floor(100 - quality_percentage + 0.5))


def _prepare(image: Image.Image) -> Image.Image:
    """Convert palette, greyscale and CMYK images into a mode the writer accepts."""
    if image.mode in _NATIVE_MODES:
        return image
    has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def encode_avif(
    source: Union[str, Path, bytes],
    quality: int,
    lossless: bool = False
) -> bytes:
    """
    Encode an image to AVIF in memory.

    Args:
        source: Path to an image file, or the raw image bytes
        quality: Encoder quality (0-100, higher is better)
        lossless: Encode at maximum quality with full chroma resolution

    Returns:
        The AVIF file as bytes

    Raises:
        CodecError: If the image cannot be decoded or encoded
    """
    params: Dict[str, Any] = {"quality": quality}
    if lossless:
        params = {"quality": LOSSLESS_QUALITY, "subsampling": LOSSLESS_SUBSAMPLING}

    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        with Image.open(source) as image:
            image.load()
            prepared = _prepare(image)
            buffer = io.BytesIO()
            prepared.save(buffer, format=AVIF_FORMAT, **params)
    except Exception as e:
        logger.error(f"AVIF encoding failed: {str(e)}")
        raise CodecError(f"AVIF encoding failed: {str(e)}") from e

    data = buffer.getvalue()
    if not data:
        raise CodecError("AVIF encoder produced no output")
    return data
