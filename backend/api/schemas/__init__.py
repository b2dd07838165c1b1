"""
API request and response schemas.
"""

from .related_posts import (
    CurrentPostMeta,
    RelatedPostItem,
    RelatedPostsResponse,
)

__all__ = [
    "CurrentPostMeta",
    "RelatedPostItem",
    "RelatedPostsResponse",
]
