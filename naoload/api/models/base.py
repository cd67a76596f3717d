"""
NaoLoad - Base API Models
=========================

Common response models.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Bare acknowledgement."""

    success: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    service: str = "NaoLoad"
    version: str
    uptime: str
    uptime_seconds: int
    started_at: datetime
    timestamp: datetime
    backends: List[str] = Field(default_factory=list)
    store: str = Field(description="enabled, disabled or unhealthy")


__all__ = ["SuccessResponse", "HealthResponse"]
