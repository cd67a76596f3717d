"""
NaoLoad - Resolver Module
=========================

Turns social-media URLs into direct media links using the configured
backend chain (RapidAPI, Cobalt instances, keyless endpoints).

Supported platforms:
- TikTok
- Instagram (posts, reels)
- Facebook
- YouTube / YouTube Music
- Twitter/X
"""

from typing import Optional

from naoload.core.config import get_config
from naoload.utils.http import http_session
from .backends import build_backends
from .errors import BackendError, BackendTimeout, InvalidInput, ResolveError, UnsupportedPlatform
from .platforms import Platform, detect_platform, extract_identifier
from .result import MediaResult, PickerItem
from .service import ResolverService


_resolver: Optional[ResolverService] = None


def get_resolver() -> ResolverService:
    """Get or create the resolver singleton from configuration."""
    global _resolver
    if _resolver is None:
        _resolver = ResolverService(build_backends(get_config(), http_session))
    return _resolver


__all__ = [
    "ResolverService",
    "get_resolver",
    "MediaResult",
    "PickerItem",
    "Platform",
    "detect_platform",
    "extract_identifier",
    "ResolveError",
    "InvalidInput",
    "UnsupportedPlatform",
    "BackendError",
    "BackendTimeout",
]
