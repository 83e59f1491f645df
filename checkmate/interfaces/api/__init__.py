"""API interface for Checkmate.

This module exports the FastAPI router and app factory.
"""

from checkmate.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
