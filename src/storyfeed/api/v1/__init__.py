# src/storyfeed/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import stories_router
from .errors import register_exception_handlers

__all__ = [
    "register_exception_handlers",
    "stories_router",
]
