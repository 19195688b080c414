"""
Data models for the AVIF compression service.

Pydantic models for conversion parameters and health check responses.
"""
from avifpress.models.compression import CompressionRequest

from avifpress.models.health import (
    HealthResponse,
    SystemStatus,
    DirectoryStatus,
    DetailedHealthResponse
)

__all__ = [
    'CompressionRequest',
    'HealthResponse',
    'SystemStatus',
    'DirectoryStatus',
    'DetailedHealthResponse'
]
