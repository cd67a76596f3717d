"""
NaoLoad - Health Router
=======================

Health check and service status endpoint.
"""

import time
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from naoload import __version__
from naoload.api.dependencies import get_resolver_service
from naoload.api.models.base import HealthResponse
from naoload.api.utils import format_uptime
from naoload.services.database import Database, get_database
from naoload.services.resolver import ResolverService


router = APIRouter(tags=["Health"])

# Track startup time
_start_time: float = 0


def set_start_time() -> None:
    """Set the API start time."""
    global _start_time
    _start_time = time.time()


def get_store() -> Optional[Database]:
    """Get the counter/log store, if configured."""
    return get_database()


def store_status(db: Optional[Database]) -> str:
    if db is None:
        return "disabled"
    return "enabled" if db.is_healthy else "unhealthy"


@router.get("/health")
async def health_check(
    resolver: ResolverService = Depends(get_resolver_service),
    db: Optional[Database] = Depends(get_store),
) -> HealthResponse:
    """Service status, uptime, configured backends and store state."""
    now = datetime.now()
    start = datetime.fromtimestamp(_start_time) if _start_time else now
    uptime_seconds = int(time.time() - _start_time) if _start_time else 0

    return HealthResponse(
        status="healthy" if resolver.backends else "degraded",
        version=__version__,
        uptime=format_uptime(uptime_seconds),
        uptime_seconds=uptime_seconds,
        started_at=start,
        timestamp=now,
        backends=resolver.backend_names,
        store=store_status(db),
    )


__all__ = ["router", "set_start_time", "get_store"]
