"""
Landing page.
"""
from pathlib import Path
from fastapi import APIRouter
from fastapi.responses import FileResponse

router = APIRouter(tags=["Pages"])

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


@router.get("/", response_class=FileResponse, include_in_schema=False)
async def landing_page():
    """Serve the upload form."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")
