"""
Core of the AVIF compression service.

- avif: Pillow-backed AVIF encoding
- conversion: request validation and derived artifact creation
- reaper: periodic cleanup of expired artifacts
"""
from avifpress.core.avif import (
    AVIF_MEDIA_TYPE,
    avif_available,
    encode_avif,
    to_codec_quality
)

from avifpress.core.conversion import (
    build_compression_request,
    convert_to_avif,
    parse_quality_percentage,
    validate_quality_percentage
)

from avifpress.core.reaper import Reaper

__all__ = [
    'AVIF_MEDIA_TYPE',
    'avif_available',
    'encode_avif',
    'to_codec_quality',
    'build_compression_request',
    'convert_to_avif',
    'parse_quality_percentage',
    'validate_quality_percentage',
    'Reaper'
]
