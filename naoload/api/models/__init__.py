"""
NaoLoad - API Models
====================

Pydantic models for API request/response schemas.
"""

from .base import HealthResponse, SuccessResponse
from .download import DownloadRequest, LogDownloadRequest
from .admin import AdminRequest, DownloadLogEntry, StatsResponse, StatsSummary

__all__ = [
    # Base
    "HealthResponse",
    "SuccessResponse",
    # Download
    "DownloadRequest",
    "LogDownloadRequest",
    # Admin
    "AdminRequest",
    "DownloadLogEntry",
    "StatsResponse",
    "StatsSummary",
]
