# src/storyfeed/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .stories import router as stories_router

__all__ = [
    "stories_router",
]
