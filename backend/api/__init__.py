"""
Interceptor API package.

Provides the FastAPI application for the Privacy Interceptor premium backend.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
