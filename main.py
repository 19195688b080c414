"""
AVIF Compression API Entry Point

This file serves as the main entry point for the application,
importing and running the FastAPI application defined in the avifpress package.

Run with uvicorn:
    uvicorn main:app --reload
"""
import os
import logging
import sys
from avifpress import app, Settings

# Configure logging based on environment variables
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure root logger
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format=LOG_FORMAT,
    stream=sys.stdout
)

# Set up logger
logger = logging.getLogger(__name__)

# Check that required dependencies are installed
try:
    import PIL
    import fastapi
    import psutil
    logger.info("All required dependencies are available")
except ImportError as e:
    logger.critical(f"Missing required dependency: {str(e)}")
    logger.critical("Please install all dependencies: pip install -e .")
    sys.exit(1)

# Check for AVIF support in Pillow
from avifpress.core.avif import avif_available

if avif_available():
    logger.info("Pillow AVIF support is available")
else:
    logger.critical("This Pillow build cannot encode AVIF. Install Pillow 11.3 or newer.")
    sys.exit(1)

# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()

    logger.info(f"Starting AVIF Compression API on port {settings.port}")
    logger.info(f"Visit: http://localhost:{settings.port}")

    uvicorn.run(
        "avifpress:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
