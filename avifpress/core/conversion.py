"""
Conversion of uploaded images into derived AVIF artifacts.
"""
import re
import math
import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from avifpress.core.avif import encode_avif, to_codec_quality
from avifpress.errors import ConversionTimeoutError, NotFoundError, ValidationError
from avifpress.models.compression import CompressionRequest
from avifpress.utils.file_handling import ensure_dir, resolve_derived_path, write_derived
from avifpress.utils.metrics import PerformanceTimer, measure_compression_performance

# Set up logging
logger = logging.getLogger(__name__)

MIN_PERCENTAGE = 0
MAX_PERCENTAGE = 100

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
MAX_DIGITS = 32


def parse_quality_percentage(raw: Optional[str]) -> int:
    """
    Parse the compression percentage sent by a client as form text.

    Only a plain base-10 integer is accepted; values such as ``"abc"``,
    ``"12.5"``, ``"80abc"`` or ``"8_0"`` are rejected, as is anything longer
    than ``MAX_DIGITS`` characters. Range checking happens later in
    :func:`convert_to_avif`.

    Raises:
        ValidationError: If the text is not an integer
    """
    text = (raw or "").strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValidationError(f"Compression percentage must be an integer, got {raw!r}")
    if len(text) > MAX_DIGITS:
        raise ValidationError("Compression percentage has too many digits")
    return int(text)


def build_compression_request(
    quality_percentage: float,
    output_path: Optional[str] = None,
    lossless: bool = False
) -> CompressionRequest:
    """
    Build a :class:`CompressionRequest`, reporting unusable numbers as ``ValidationError``.

    Integers too large to convert to a float fail here rather than in the
    range check.
    """
    try:
        return CompressionRequest(
            quality_percentage=quality_percentage, output_path=output_path, lossless=lossless
        )
    except (PydanticValidationError, OverflowError) as e:
        raise ValidationError(f"Invalid compression percentage: {str(e)}") from e


def validate_quality_percentage(quality_percentage: float) -> None:
    """Reject NaN and anything outside 0-100 inclusive."""
    if isinstance(quality_percentage, float) and math.isnan(quality_percentage):
        raise ValidationError("Compression percentage must be a number")
    if not MIN_PERCENTAGE <= quality_percentage <= MAX_PERCENTAGE:
        raise ValidationError(
            f"Compression percentage must be between {MIN_PERCENTAGE} and {MAX_PERCENTAGE}, "
            f"got {quality_percentage}"
        )


async def convert_to_avif(
    source_path: Union[str, Path],
    request: CompressionRequest,
    derived_dir: Union[str, Path],
    timeout: Optional[float] = None
) -> Path:
    """
    Encode a stored upload as AVIF and persist the result.

    Args:
        source_path: Path of the uploaded image
        request: Compression parameters
        derived_dir: Directory for derived artifacts
        timeout: Seconds to wait for the encoder, or None to wait indefinitely

    Returns:
        Path of the AVIF file

    Raises:
        NotFoundError: If the source file does not exist
        ValidationError: If the compression percentage is invalid
        CodecError: If the encoder fails
        ConversionTimeoutError: If the encoder misses the deadline
        FilesystemError: If the output cannot be written
    """
    source = Path(source_path)
    if not source.is_file():
        raise NotFoundError(f"Input file does not exist: {source}")

    validate_quality_percentage(request.quality_percentage)
    codec_quality = to_codec_quality(request.quality_percentage)

    directory = ensure_dir(derived_dir)
    output_path = resolve_derived_path(
        source, request.quality_percentage, request.output_path, derived_dir=directory
    )
    if request.output_path:
        ensure_dir(output_path.parent)

    logger.info(
        f"Encoding {source.name} to AVIF (percentage={request.quality_percentage}, "
        f"quality={codec_quality}, lossless={request.lossless})"
    )

    with PerformanceTimer() as timer:
        try:
            data = await asyncio.wait_for(
                asyncio.to_thread(encode_avif, source, codec_quality, request.lossless),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            raise ConversionTimeoutError(
                f"Encoding {source.name} did not finish within {timeout} seconds"
            ) from None

    write_derived(output_path, data)

    stats = measure_compression_performance(source.stat().st_size, len(data), timer.execution_time)
    logger.info(
        f"Encoded {source.name} -> {output_path.name}: {len(data)} bytes "
        f"(ratio: {stats['compression_ratio']}, savings: {stats['space_savings_percent']}%, "
        f"time: {timer.execution_time:.3f}s)"
    )
    return output_path
