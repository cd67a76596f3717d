"""
NaoLoad - API Package
=====================

FastAPI-based REST API for the downloader.

Features:
- POST /download: resolve a page URL into a direct link or picker
- POST /log-download: client-reported usage logging
- POST /admin/auth, /admin/stats: password-protected dashboard data
- GET /health: uptime, backends and store status
- Daily per-IP quotas and burst throttling

Standalone (for development):
    uvicorn naoload.api.app:app --reload --port 8000
"""

from naoload.api.config import APIConfig, get_api_config
from naoload.api.app import create_app

__all__ = [
    "APIConfig",
    "get_api_config",
    "create_app",
]
