# src/storyfeed/services/__init__.py
"""Business logic services for the story feed."""

from .abuse_guard import AbuseGuard, Decision
from .engagement import EngagementLedger
from .feed import FeedQuery, FeedQueryBuilder
from .postcard import PostcardRenderer

__all__ = [
    "AbuseGuard",
    "Decision",
    "EngagementLedger",
    "FeedQuery",
    "FeedQueryBuilder",
    "PostcardRenderer",
]
