"""
FastAPI dependencies shared by the routers.
"""
from fastapi import Request

from avifpress.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings
