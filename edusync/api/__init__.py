"""API module."""

from edusync.api.router import api_router, function_router

__all__ = ["api_router", "function_router"]
