"""
Models for the health check endpoints.
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Basic liveness response"""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")


class SystemStatus(BaseModel):
    """Host resource usage"""
    cpu_usage: float = Field(..., description="CPU usage (%)")
    memory_usage: float = Field(..., description="Memory usage (%)")
    disk_usage: float = Field(..., description="Disk usage of the working directory (%)")
    python_version: str
    platform: str


class DirectoryStatus(BaseModel):
    """State of one artifact directory"""
    path: str = Field(..., description="Absolute directory path")
    exists: bool
    writable: bool = False
    file_count: int = Field(0, description="Number of files currently stored")
    error: Optional[str] = None


class DetailedHealthResponse(HealthResponse):
    """Liveness plus system, codec and storage details"""
    system: SystemStatus
    avif_available: bool = Field(..., description="Whether Pillow can encode AVIF")
    reaper_running: bool
    directories: Dict[str, DirectoryStatus]
    timestamp: float
