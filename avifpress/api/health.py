"""
Health check endpoints.
"""
import os
import time
import platform
from pathlib import Path
from fastapi import APIRouter, Depends, Request

from avifpress.api.dependencies import get_settings
from avifpress.config import VERSION, Settings
from avifpress.core.avif import avif_available
from avifpress.models.health import (
    DetailedHealthResponse,
    DirectoryStatus,
    HealthResponse,
    SystemStatus
)
from avifpress.utils.metrics import get_cpu_mem, get_disk_usage

router = APIRouter(prefix="/health", tags=["Health"])


def _directory_status(name: str) -> DirectoryStatus:
    path = Path(name).resolve()
    status = DirectoryStatus(path=str(path), exists=path.is_dir())
    if not status.exists:
        return status

    try:
        status.writable = os.access(path, os.W_OK)
        status.file_count = sum(1 for entry in path.iterdir() if entry.is_file())
    except OSError as e:
        status.error = str(e)
    return status


@router.get("", response_model=HealthResponse)
async def health_check():
    """Check if the API is running."""
    return HealthResponse(status="healthy", version=VERSION)


@router.get("/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(request: Request, settings: Settings = Depends(get_settings)):
    """
    Provides detailed health information including system metrics, AVIF
    codec availability and the state of the artifact directories.
    """
    cpu_mem = get_cpu_mem()
    system = SystemStatus(
        cpu_usage=cpu_mem["cpu_usage"],
        memory_usage=cpu_mem["memory_usage"],
        disk_usage=get_disk_usage(os.getcwd()),
        python_version=platform.python_version(),
        platform=platform.platform()
    )

    reaper = getattr(request.app.state, "reaper", None)

    return DetailedHealthResponse(
        status="healthy",
        version=VERSION,
        system=system,
        avif_available=avif_available(),
        reaper_running=bool(reaper and reaper.is_running),
        directories={
            "incoming": _directory_status(settings.incoming_dir),
            "derived": _directory_status(settings.derived_dir)
        },
        timestamp=time.time()
    )
