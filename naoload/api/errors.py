"""
NaoLoad - API Error System
==========================

Centralized error codes and exception handling for consistent API responses.

Every error renders as ``{"status": "error", "error": {"code", "message"}}``,
plus any extra top-level fields (``remaining`` on quota errors).
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_429_TOO_MANY_REQUESTS,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """
    Centralized error codes for the API.

    Categories:
    - Input: missing or malformed request data
    - AUTH: admin authentication errors
    - RATE_LIMIT: daily quota and burst throttle
    - SERVER: Server-side errors
    """

    # Input errors (400)
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_PLATFORM = "UNSUPPORTED_PLATFORM"

    # Authentication errors (401)
    AUTH_INVALID_PASSWORD = "AUTH_INVALID_PASSWORD"

    # Rate limit errors (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"

    # Server errors (500)
    SERVER_ERROR = "SERVER_ERROR"


# =============================================================================
# Error Messages
# =============================================================================

ERROR_MESSAGES: Dict[ErrorCode, str] = {
    # Input
    ErrorCode.INVALID_INPUT: "Invalid request",
    ErrorCode.UNSUPPORTED_PLATFORM: "Unsupported URL. Supported: TikTok, Instagram, Facebook, YouTube, Twitter.",

    # Auth
    ErrorCode.AUTH_INVALID_PASSWORD: "Invalid password",

    # Rate limiting
    ErrorCode.RATE_LIMIT_EXCEEDED: "Daily download limit reached. Try again tomorrow.",
    ErrorCode.TOO_MANY_REQUESTS: "Too many requests, please slow down",

    # Server
    ErrorCode.SERVER_ERROR: "An internal server error occurred",
}


# =============================================================================
# Default Status Codes
# =============================================================================

ERROR_STATUS_CODES: Dict[ErrorCode, int] = {
    # Input - 400
    ErrorCode.INVALID_INPUT: HTTP_400_BAD_REQUEST,
    ErrorCode.UNSUPPORTED_PLATFORM: HTTP_400_BAD_REQUEST,

    # Auth - 401
    ErrorCode.AUTH_INVALID_PASSWORD: HTTP_401_UNAUTHORIZED,

    # Rate limit - 429
    ErrorCode.RATE_LIMIT_EXCEEDED: HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.TOO_MANY_REQUESTS: HTTP_429_TOO_MANY_REQUESTS,

    # Server - 500
    ErrorCode.SERVER_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
}


# =============================================================================
# API Error Exception
# =============================================================================

def error_body(code: str, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the canonical error payload."""
    body: Dict[str, Any] = {
        "status": "error",
        "error": {"code": code, "message": message},
    }
    if extra:
        body.update(extra)
    return body


class APIError(HTTPException):
    """
    Custom API exception with error codes.

    Usage:
        raise APIError(ErrorCode.INVALID_INPUT, message="Missing URL")
        raise APIError(ErrorCode.RATE_LIMIT_EXCEEDED, extra={"remaining": 0})
    """

    def __init__(
        self,
        code: ErrorCode,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = code
        self.error_message = message or ERROR_MESSAGES.get(code, "An error occurred")
        self.error_extra = extra

        # Use default status code if not provided
        if status_code is None:
            status_code = ERROR_STATUS_CODES.get(code, HTTP_400_BAD_REQUEST)

        super().__init__(
            status_code=status_code,
            detail=error_body(code.value, self.error_message, extra),
            headers=headers,
        )


# =============================================================================
# Helper Functions
# =============================================================================

def error_response(
    code: ErrorCode,
    status_code: Optional[int] = None,
    message: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Create a JSON error response without raising an exception.

    Useful for returning errors in exception handlers and middleware.
    """
    if status_code is None:
        status_code = ERROR_STATUS_CODES.get(code, HTTP_400_BAD_REQUEST)

    return JSONResponse(
        status_code=status_code,
        content=error_body(code.value, message or ERROR_MESSAGES.get(code, "An error occurred"), extra),
        headers=headers,
    )


def bad_request(message: Optional[str] = None, code: ErrorCode = ErrorCode.INVALID_INPUT) -> APIError:
    """Shorthand for 400 errors."""
    return APIError(code, message=message)


def unauthorized() -> APIError:
    """Shorthand for 401 errors."""
    return APIError(ErrorCode.AUTH_INVALID_PASSWORD)


def rate_limit_exceeded(message: Optional[str] = None) -> APIError:
    """Shorthand for daily quota errors."""
    return APIError(ErrorCode.RATE_LIMIT_EXCEEDED, message=message, extra={"remaining": 0})


__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_STATUS_CODES",
    "APIError",
    "error_body",
    "error_response",
    "bad_request",
    "unauthorized",
    "rate_limit_exceeded",
]
