"""
Related Posts Selection Service.

Picks the documents most related to a reference document from a candidate
pool. Selection runs through three tiers, each entered only while the result
is still under the requested limit:

1. Similarity: candidates with a positive similarity score, best first
2. Category: candidates sharing a category with the reference, in pool order
3. Recency: everything left, newest first

Candidates already selected by an earlier tier are never selected again.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from core.domain import Document, ReferenceMeta, RelatedResult, ScoredCandidate, SelectionTier
from services.content_similarity import ContentSimilarityScorer, content_similarity_scorer

logger = logging.getLogger(__name__)

DEFAULT_RELATED_LIMIT = 6


def coerce_limit(limit: Any) -> int:
    """Clamp a caller-supplied limit to a non-negative int (0 when unusable)."""
    if isinstance(limit, bool):
        return 0
    try:
        value = int(limit)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(value, 0)


def _identity(document: Document) -> str:
    return document.id or f"slug:{document.slug}"


def _recency_key(candidate: ScoredCandidate) -> tuple:
    """Newest first; undated documents sort last."""
    date: Optional[datetime] = candidate.document.date
    if date is None:
        return (1, 0.0)
    return (0, -date.timestamp())


class _Selection:
    """Output list and selected-id set shared by every tier."""

    def __init__(self, limit: int, excluded_ids: Iterable[str] = ()):
        self.limit = limit
        self.selected_ids: set[str] = set(excluded_ids)
        self.documents: list[Document] = []
        self.tiers: dict[str, SelectionTier] = {}

    @property
    def is_full(self) -> bool:
        return len(self.documents) >= self.limit

    def take(self, candidates: Iterable[ScoredCandidate], tier: SelectionTier) -> int:
        """Append unselected candidates until the limit is reached."""
        taken = 0
        for candidate in candidates:
            if self.is_full:
                break
            key = _identity(candidate.document)
            if key in self.selected_ids:
                continue
            self.selected_ids.add(key)
            self.documents.append(candidate.document)
            self.tiers[key] = tier
            taken += 1
        return taken


def _run_tiers(
    reference: Document,
    pool: Optional[Iterable[Document]],
    limit: Any,
    scorer: ContentSimilarityScorer,
) -> tuple[_Selection, dict[str, int], int]:
    limit = coerce_limit(limit)
    # Copies of the reference under another slug share its id and are never returned
    excluded_ids = [reference.id] if reference.id else []
    selection = _Selection(limit, excluded_ids)
    tier_counts = {tier.value: 0 for tier in SelectionTier}

    # Reference is matched by slug; its id is pre-seeded above
    candidates = [
        doc for doc in (pool or [])
        if doc is not None and not (reference.slug and doc.slug == reference.slug)
    ]
    if selection.is_full or not candidates:
        return selection, tier_counts, len(candidates)

    reference_profile = scorer.profile(reference)
    profiles = [scorer.profile(doc) for doc in candidates]
    scored = [
        ScoredCandidate(
            document=doc,
            score=scorer.score_profiles(reference_profile, profiles[position]).total,
            position=position,
        )
        for position, doc in enumerate(candidates)
    ]

    # Tier 1: similarity (sorted() is stable, so ties keep pool order)
    ranked = sorted(
        (c for c in scored if c.score > 0),
        key=lambda c: c.score,
        reverse=True,
    )
    tier_counts[SelectionTier.SIMILARITY.value] = selection.take(ranked, SelectionTier.SIMILARITY)

    # Tier 2: shared category
    if not selection.is_full and reference_profile.categories:
        same_category = (
            c for c in scored
            if reference_profile.categories & profiles[c.position].categories
        )
        tier_counts[SelectionTier.CATEGORY.value] = selection.take(same_category, SelectionTier.CATEGORY)

    # Tier 3: recency
    if not selection.is_full:
        newest_first = sorted(scored, key=_recency_key)
        tier_counts[SelectionTier.RECENCY.value] = selection.take(newest_first, SelectionTier.RECENCY)

    return selection, tier_counts, len(candidates)


def select_related(
    reference: Document,
    pool: Optional[Iterable[Document]],
    limit: Any,
    scorer: ContentSimilarityScorer = None,
) -> list[Document]:
    """
    Select up to ``limit`` documents related to ``reference``.

    Args:
        reference: Document the results should relate to
        pool: Candidate documents; the reference is excluded by slug
        limit: Maximum number of results (unusable values yield no results)
        scorer: Similarity scorer, defaults to the shared scorer

    Returns:
        Documents in similarity, category, then recency order, unique by id
    """
    if reference is None:
        return []
    selection, _, _ = _run_tiers(reference, pool, limit, scorer or content_similarity_scorer)
    return selection.documents


class RelatedPostsService:
    """Finds related posts for display next to an article."""

    def __init__(
        self,
        scorer: ContentSimilarityScorer = None,
        default_limit: int = DEFAULT_RELATED_LIMIT,
        max_limit: Optional[int] = None,
    ):
        """
        Initialize related posts service.

        Args:
            scorer: Similarity scorer with the weights to rank by
            default_limit: Result count used when the caller passes none
            max_limit: Upper bound applied to every requested limit
        """
        self.scorer = scorer or content_similarity_scorer
        self.default_limit = default_limit
        self.max_limit = max_limit

    def find_related(
        self,
        reference: Document,
        pool: Optional[Iterable[Document]],
        limit: Any = None,
    ) -> RelatedResult:
        """
        Rank and fill related posts for a reference document.

        Args:
            reference: The article being viewed
            pool: Already-fetched candidate articles
            limit: Maximum results, defaults to ``default_limit``

        Returns:
            RelatedResult with the ordered documents and the reference's
            categories and tags
        """
        if reference is None:
            return RelatedResult()
        if limit is None:
            limit = self.default_limit
        limit = coerce_limit(limit)
        if self.max_limit is not None:
            limit = min(limit, self.max_limit)

        selection, tier_counts, pool_size = _run_tiers(reference, pool, limit, self.scorer)

        logger.debug(
            "Related posts for %s: %d selected from %d candidates (%s)",
            reference.slug,
            len(selection.documents),
            pool_size,
            ", ".join(f"{tier}={count}" for tier, count in tier_counts.items()),
            extra={
                "reference_slug": reference.slug,
                "pool_size": pool_size,
                "limit": selection.limit,
                "tier_counts": tier_counts,
            },
        )

        return RelatedResult(
            results=selection.documents,
            reference_meta=ReferenceMeta(
                categories=list(reference.categories),
                tags=list(reference.tags),
            ),
            tiers=selection.tiers,
        )


def find_related(
    reference: Document,
    pool: Optional[Iterable[Document]],
    limit: Any = DEFAULT_RELATED_LIMIT,
    scorer: ContentSimilarityScorer = None,
) -> RelatedResult:
    """Find related posts with the given (or shared) scorer."""
    return RelatedPostsService(scorer=scorer).find_related(reference, pool, limit)
