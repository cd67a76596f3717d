"""
NaoLoad - Utilities
===================

Shared helpers used across services.
"""

from naoload.utils.http import HTTPSessionManager, http_session, make_timeout

__all__ = ["HTTPSessionManager", "http_session", "make_timeout"]
