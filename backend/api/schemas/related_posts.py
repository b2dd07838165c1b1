"""
Related posts API schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.domain import RelatedResult


class RelatedPostItem(BaseModel):
    """A related post as rendered by the caller."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    excerpt: str = ""
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    date: Optional[datetime] = None


class CurrentPostMeta(BaseModel):
    """Taxonomy of the post being viewed, e.g. for "More in {category}"."""

    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class RelatedPostsResponse(BaseModel):
    """Related posts response."""

    model_config = ConfigDict(populate_by_name=True)

    related_posts: List[RelatedPostItem] = Field(
        default_factory=list,
        alias="relatedPosts",
        description="Related posts, most relevant first",
    )
    current_post: CurrentPostMeta = Field(
        default_factory=CurrentPostMeta,
        alias="currentPost",
    )

    @classmethod
    def from_result(cls, result: RelatedResult) -> "RelatedPostsResponse":
        return cls(
            related_posts=[RelatedPostItem.model_validate(doc) for doc in result.results],
            current_post=CurrentPostMeta(
                categories=list(result.reference_meta.categories),
                tags=list(result.reference_meta.tags),
            ),
        )
