"""
NaoLoad - Resolver Errors
=========================

Exceptions raised while resolving a media URL.
"""

from typing import Optional


class ResolveError(Exception):
    """Base class for resolution failures."""

    code = "RESOLVE_FAILED"

    def __init__(self, message: str = "", code: Optional[str] = None):
        # Upstream payloads sometimes put objects where a message belongs
        if not isinstance(message, str):
            message = "" if message is None else str(message)
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidInput(ResolveError):
    """Missing or malformed URL / media kind."""

    code = "INVALID_INPUT"


class UnsupportedPlatform(ResolveError):
    """URL belongs to no platform any configured backend handles."""

    code = "UNSUPPORTED_PLATFORM"


class BackendError(ResolveError):
    """Upstream service unreachable, returned a failure, or an unusable payload."""

    code = "BACKEND_ERROR"

    def __init__(
        self,
        message: str = "",
        http_status: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message, code=code)
        self.http_status = http_status


class BackendTimeout(BackendError):
    """Polling exhausted its attempts without a final answer."""

    code = "TIMEOUT"

    def __init__(self, message: str = "Download timed out. Please try again.", code: Optional[str] = None):
        super().__init__(message, http_status=504, code=code)


__all__ = [
    "ResolveError",
    "InvalidInput",
    "UnsupportedPlatform",
    "BackendError",
    "BackendTimeout",
]
