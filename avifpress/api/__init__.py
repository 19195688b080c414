"""
API module for the AVIF compression service.
"""
import uuid
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from avifpress.api.compress import router as compress_router
from avifpress.api.health import router as health_router
from avifpress.api.pages import router as pages_router
from avifpress.config import VERSION, Settings
from avifpress.core.reaper import Reaper
from avifpress.errors import ConversionError
from avifpress.utils.file_handling import ensure_dir

# Set up logging
logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Compression failed"
CORRELATION_HEADER = "X-Correlation-ID"


def _failure_response(exc: Exception, kind: str) -> PlainTextResponse:
    """Log a failure with its kind and a correlation id, and hide both from the body."""
    correlation_id = uuid.uuid4().hex[:12]
    logger.error(
        f"Compression failed [kind={kind} correlation_id={correlation_id}]: {str(exc)}",
        extra={"error_kind": kind, "correlation_id": correlation_id}
    )
    return PlainTextResponse(
        FAILURE_MESSAGE,
        status_code=500,
        headers={CORRELATION_HEADER: correlation_id}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the artifact directories, then run the reaper for the app's lifetime."""
    settings: Settings = app.state.settings

    # A FilesystemError here aborts startup
    incoming_dir = ensure_dir(settings.incoming_dir)
    derived_dir = ensure_dir(settings.derived_dir)
    logger.info(f"Storing uploads in {incoming_dir} and outputs in {derived_dir}")

    reaper = Reaper(
        [incoming_dir, derived_dir],
        retention_seconds=settings.retention_seconds,
        interval_seconds=settings.sweep_interval_seconds
    )
    app.state.reaper = reaper
    await reaper.start()
    try:
        yield
    finally:
        await reaper.stop()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings; read from the environment when omitted
    """
    app = FastAPI(
        title="AVIF Compression API",
        description="""
        Converts uploaded images to AVIF at a requested compression percentage.

        Uploads and outputs are kept on disk for a limited time and then removed.
        """,
        version=VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings or Settings.from_env()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(pages_router)
    app.include_router(compress_router)
    app.include_router(health_router)

    @app.exception_handler(ConversionError)
    async def conversion_exception_handler(request: Request, exc: ConversionError):
        """Collapse every pipeline failure into the same generic response."""
        return _failure_response(exc, exc.kind)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        """Missing or malformed form fields fail like any other conversion error."""
        return _failure_response(exc, "request")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Unknown routes and unsupported methods are plain 404s."""
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unexpected errors."""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return PlainTextResponse(FAILURE_MESSAGE, status_code=500)

    return app


app = create_app()
