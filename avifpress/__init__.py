"""
AVIF Compression API Application

This package implements a FastAPI application that converts uploaded images
to AVIF at a caller-chosen compression percentage.

Features include:
- Upload storage under collision-free names
- Pillow-backed AVIF encoding with a per-request deadline
- Hourly cleanup of expired uploads and outputs
- Health and codec availability checks
"""
from avifpress.config import VERSION, Settings
from avifpress.api import app, create_app

__version__ = VERSION

__all__ = ['app', 'create_app', 'Settings', '__version__']
