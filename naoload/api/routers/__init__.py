"""
NaoLoad - API Routers
=====================

Route handlers for the API.
"""

from .health import router as health_router
from .download import router as download_router
from .admin import router as admin_router

__all__ = [
    "health_router",
    "download_router",
    "admin_router",
]
