"""
NaoLoad - FastAPI Application
=============================

FastAPI application factory and configuration.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from naoload import __version__
from naoload.core.logger import logger
from naoload.api.config import get_api_config
from naoload.api.errors import APIError, ErrorCode, error_response
from naoload.api.middleware.rate_limit import RateLimitMiddleware, get_throttle
from naoload.api.middleware.logging import LoggingMiddleware
from naoload.api.routers import admin_router, download_router, health_router
from naoload.api.routers.health import set_start_time
from naoload.utils.http import http_session


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Handles startup and shutdown events.
    """
    # Startup
    set_start_time()

    logger.tree("API Starting", [
        ("Version", __version__),
        ("Framework", "FastAPI"),
    ], emoji="🚀")

    yield

    # Shutdown
    await http_session.close()
    logger.tree("API Stopping", [], emoji="🛑")


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    config = get_api_config()

    app = FastAPI(
        title="NaoLoad API",
        description="Social-media download link resolver",
        version=__version__,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
        openapi_url="/openapi.json" if config.debug else None,
        lifespan=lifespan,
    )

    # ==========================================================================
    # Middleware (order matters - last added = first executed)
    # ==========================================================================

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Burst throttle
    app.add_middleware(RateLimitMiddleware, throttle=get_throttle())

    # Request logging
    app.add_middleware(LoggingMiddleware)

    # ==========================================================================
    # Exception Handlers
    # ==========================================================================

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle APIError exceptions with structured response."""
        # Wrong admin passwords are expected; keep them out of the log
        if exc.status_code != 401:
            logger.tree("API Error", [
                ("Path", str(request.url.path)[:50]),
                ("Code", exc.error_code.value),
                ("Status", str(exc.status_code)),
                ("Message", exc.error_message[:80]),
            ], emoji="⚠️")

        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Malformed JSON and schema violations are plain input errors."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request body")
        if field:
            message = f"{field}: {message}"

        logger.tree("Invalid Request", [
            ("Path", str(request.url.path)[:50]),
            ("Error", message[:80]),
        ], emoji="⚠️")

        return error_response(ErrorCode.INVALID_INPUT, message=message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error_tree("Unhandled API Error", exc, [
            ("Path", str(request.url.path)[:50]),
        ])

        return error_response(ErrorCode.SERVER_ERROR)

    # ==========================================================================
    # Routers
    # ==========================================================================

    app.include_router(health_router)
    app.include_router(download_router)
    app.include_router(admin_router)

    return app


# =============================================================================
# Module-level app for uvicorn standalone
# =============================================================================

# This allows running with: uvicorn naoload.api.app:app
app = create_app()


__all__ = ["create_app", "app"]
