"""
Service layer for business logic.
"""

from functools import lru_cache

from infrastructure.config.settings import settings
from services.content_similarity import ContentSimilarityScorer, SimilarityWeights
from services.interlinking import InterlinkingService
from services.related_posts import RelatedPostsService
from services.text_normalizer import TextNormalizer


@lru_cache
def get_similarity_scorer() -> ContentSimilarityScorer:
    """
    Get singleton similarity scorer instance.

    Returns:
        ContentSimilarityScorer configured from application settings
    """
    normalizer = TextNormalizer(
        min_token_length=settings.normalizer_min_token_length,
    )

    return ContentSimilarityScorer(
        weights=SimilarityWeights.from_settings(settings),
        normalizer=normalizer,
    )


@lru_cache
def get_related_posts_service() -> RelatedPostsService:
    """
    Get singleton related posts service instance.

    Returns:
        RelatedPostsService configured from application settings
    """
    return RelatedPostsService(
        scorer=get_similarity_scorer(),
        default_limit=settings.related_posts_default_limit,
        max_limit=settings.related_posts_max_limit,
    )


@lru_cache
def get_interlinking_service() -> InterlinkingService:
    """
    Get singleton interlinking service instance.

    Returns:
        InterlinkingService configured from application settings
    """
    return InterlinkingService(
        scorer=get_similarity_scorer(),
        pillar_min_words=settings.pillar_min_words,
        pillar_link_min_score=settings.pillar_link_min_score,
    )


__all__ = [
    "InterlinkingService",
    "RelatedPostsService",
    "get_interlinking_service",
    "get_related_posts_service",
    "get_similarity_scorer",
]
