"""
Models for AVIF compression requests.
"""
from typing import Optional
from pydantic import BaseModel, Field


class CompressionRequest(BaseModel):
    """Parameters for one AVIF conversion. Range checks happen at conversion time."""
    quality_percentage: float = Field(
        ..., description="Compression percentage (0-100); higher means smaller, lossier output"
    )
    output_path: Optional[str] = Field(
        None, description="Explicit output path, overriding the derived-directory naming"
    )
    lossless: bool = Field(False, description="Encode without quality loss")
