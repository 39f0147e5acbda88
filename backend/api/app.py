"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import Settings, get_settings
from shared.exceptions import InterceptorError
from modules.auth.routes import router as auth_router, legacy_router
from modules.billing.routes import checkout_router, webhook_router

from .dependencies import ServiceContainer, set_container
from .models.errors import ErrorResponse
from .routes import health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings: Settings = app.state.settings
    missing = settings.missing_secrets()
    if missing:
        logger.warning(
            f"Missing configuration: {', '.join(missing)}. "
            "Endpoints that need these will fail with 500."
        )
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


async def handle_interceptor_error(request: Request, exc: InterceptorError) -> JSONResponse:
    """Render a module error that no route translated itself."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Turn any other failure (database, network) into a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error").model_dump(exclude_none=True),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to build services with. Defaults to the
            environment-loaded settings.

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    set_container(ServiceContainer(settings))

    app = FastAPI(
        title=settings.app_name,
        description="Magic-link auth and Stripe-backed premium status for the Privacy Interceptor extension",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(InterceptorError, handle_interceptor_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Register routes
    app.include_router(health.router, tags=["health"])
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(checkout_router, prefix="/checkout", tags=["checkout"])
    app.include_router(webhook_router, tags=["webhooks"])
    app.include_router(legacy_router, tags=["legacy"])

    return app


# Application instance for uvicorn
app = create_app()
