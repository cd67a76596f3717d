"""
NaoLoad - Admin Router
======================

Password-protected dashboard endpoints.
"""

from fastapi import APIRouter, Depends

from naoload.core.logger import logger
from naoload.api.dependencies import get_admin_password, get_usage, verify_admin_password
from naoload.api.models import AdminRequest, StatsResponse, SuccessResponse
from naoload.services.usage import UsageLogger, compute_stats


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/auth")
async def admin_auth(
    payload: AdminRequest,
    expected: str = Depends(get_admin_password),
) -> SuccessResponse:
    """Verify the admin password."""
    verify_admin_password(payload.password, expected)
    logger.tree("Admin Login", [
        ("Status", "Accepted"),
    ], emoji="🔓")
    return SuccessResponse()


@router.post("/stats")
async def admin_stats(
    payload: AdminRequest,
    expected: str = Depends(get_admin_password),
    usage: UsageLogger = Depends(get_usage),
) -> StatsResponse:
    """
    Recent usage logs and aggregate statistics.

    Returns zeroed stats when no store is configured.
    """
    verify_admin_password(payload.password, expected)

    logs = usage.recent()
    stats = compute_stats(logs, total=usage.total())

    return StatsResponse(logs=logs, stats=stats.to_dict())


__all__ = ["router"]
