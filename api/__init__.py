"""
Tandem API package.

Provides the FastAPI application for the Tandem matchmaking service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
