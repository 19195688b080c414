"""
AVIF compression endpoint.
"""
import logging
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from avifpress.api.dependencies import get_settings
from avifpress.config import Settings
from avifpress.core.avif import AVIF_MEDIA_TYPE
from avifpress.core.conversion import (
    build_compression_request,
    convert_to_avif,
    parse_quality_percentage
)
from avifpress.errors import FilesystemError
from avifpress.utils.file_handling import ensure_dir, save_incoming

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["AVIF Compression"])

DOWNLOAD_FILENAME = "compressed.avif"


@router.post("/compress", response_class=Response)
async def compress_image(
    image: UploadFile = File(..., description="Image to convert"),
    compression_percentage: str = Form(
        ..., alias="compressionPercentage", description="Compression percentage (0-100)"
    ),
    settings: Settings = Depends(get_settings)
):
    """
    Convert an uploaded image to AVIF.

    - **image**: The image file to convert
    - **compressionPercentage**: Integer 0-100; higher values give smaller, lossier files

    Returns the AVIF file as a download. Any failure yields a plain-text 500.
    """
    quality_percentage = parse_quality_percentage(compression_percentage)

    content = await image.read()
    logger.info(
        f"Compressing upload {image.filename!r} ({len(content)} bytes) at {quality_percentage}%"
    )

    incoming_dir = ensure_dir(settings.incoming_dir)
    source_path = save_incoming(incoming_dir, image.filename, content)

    output_path = await convert_to_avif(
        source_path,
        build_compression_request(quality_percentage, lossless=False),
        settings.derived_dir,
        timeout=settings.encode_timeout_seconds
    )

    try:
        data = output_path.read_bytes()
    except OSError as e:
        raise FilesystemError(f"Cannot read output {output_path}: {e}") from e

    return Response(
        content=data,
        media_type=AVIF_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={DOWNLOAD_FILENAME}"}
    )
