"""
NaoLoad - Admin Models
======================

Schemas for the admin dashboard endpoints.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from naoload.core.constants import NO_TOP_PLATFORM


class AdminRequest(BaseModel):
    """Body of the admin endpoints."""

    password: Optional[str] = None


class DownloadLogEntry(BaseModel):
    """One usage log row."""

    id: int
    platform: str
    format: str
    created_at: int = Field(description="Unix timestamp")


class StatsSummary(BaseModel):
    """Aggregate over logged downloads."""

    total: int = 0
    today: int = 0
    topPlatform: str = NO_TOP_PLATFORM
    byPlatform: Dict[str, int] = Field(default_factory=dict)


class StatsResponse(BaseModel):
    """Body of POST /admin/stats."""

    logs: List[DownloadLogEntry] = Field(default_factory=list)
    stats: StatsSummary


__all__ = ["AdminRequest", "DownloadLogEntry", "StatsSummary", "StatsResponse"]
