"""
Content Similarity Scoring.

Scores how related two documents are as a weighted sum of independent
signals:
- Category overlap: shared categories × category weight (strongest signal)
- Tag overlap: shared tags × tag weight
- Lexical overlap: Jaccard index of normalized title + excerpt tokens × text weight
- Title boost: extra credit when the titles themselves overlap heavily

Each term can be inspected through ScoreBreakdown.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from core.domain import Document
from services.text_normalizer import TextNormalizer, text_normalizer

TITLE_BOOST_ADDITIVE = "additive"
TITLE_BOOST_MULTIPLICATIVE = "multiplicative"
TITLE_BOOST_MODES = (TITLE_BOOST_ADDITIVE, TITLE_BOOST_MULTIPLICATIVE)


class InvalidWeightsError(ValueError):
    """Raised when similarity weights are misconfigured."""
    pass


@dataclass(frozen=True)
class SimilarityWeights:
    """
    Tunable constants of the similarity score.

    One shared category (5.0) outweighs a shared tag plus a perfect lexical
    match with title boost (2.0 + 1.0 + 0.5).
    """

    category_weight: float = 5.0
    tag_weight: float = 2.0
    text_weight: float = 1.0
    title_boost: float = 0.5
    title_overlap_threshold: float = 0.5
    title_boost_mode: str = TITLE_BOOST_ADDITIVE
    # Excerpts with fewer tokens than this are supplemented with content
    thin_excerpt_tokens: int = 5

    def __post_init__(self):
        for name in ("category_weight", "tag_weight", "text_weight", "title_boost"):
            if getattr(self, name) < 0:
                raise InvalidWeightsError(f"{name} must be non-negative")
        if not 0 <= self.title_overlap_threshold <= 1:
            raise InvalidWeightsError("title_overlap_threshold must be between 0 and 1")
        if self.title_boost_mode not in TITLE_BOOST_MODES:
            raise InvalidWeightsError(
                f"title_boost_mode must be one of {', '.join(TITLE_BOOST_MODES)}"
            )
        if self.thin_excerpt_tokens < 0:
            raise InvalidWeightsError("thin_excerpt_tokens must be non-negative")

    @classmethod
    def from_settings(cls, settings) -> "SimilarityWeights":
        """Build weights from application settings."""
        return cls(
            category_weight=settings.similarity_category_weight,
            tag_weight=settings.similarity_tag_weight,
            text_weight=settings.similarity_text_weight,
            title_boost=settings.similarity_title_boost,
            title_overlap_threshold=settings.similarity_title_overlap_threshold,
            title_boost_mode=settings.similarity_title_boost_mode,
            thin_excerpt_tokens=settings.similarity_thin_excerpt_tokens,
        )


DEFAULT_WEIGHTS = SimilarityWeights()


@dataclass(frozen=True)
class DocumentProfile:
    """Pre-normalized view of a document used for pairwise scoring."""

    categories: frozenset[str]
    tags: frozenset[str]
    text_tokens: frozenset[str]
    title_tokens: frozenset[str]


@dataclass(frozen=True)
class ScoreBreakdown:
    """Contribution of each signal to a similarity score."""

    category: float = 0.0
    tag: float = 0.0
    text: float = 0.0
    title_boost: float = 0.0

    @property
    def total(self) -> float:
        return self.category + self.tag + self.text + self.title_boost


def _name_set(values: Any) -> frozenset[str]:
    """Lowercased, trimmed names; tolerates None and stray types."""
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, Iterable):
        values = []
    return frozenset(
        str(value).strip().lower()
        for value in values
        if value is not None and str(value).strip()
    )


def jaccard(first: frozenset, second: frozenset) -> float:
    """|A ∩ B| / |A ∪ B|, or 0.0 when either set is empty."""
    if not first or not second:
        return 0.0
    return len(first & second) / len(first | second)


class ContentSimilarityScorer:
    """
    Composite similarity between a reference document and a candidate.

    Weights are injected so that scoring regimes can be swapped per caller
    and per test without touching module state.
    """

    def __init__(
        self,
        weights: SimilarityWeights = None,
        normalizer: TextNormalizer = None,
    ):
        self.weights = weights or DEFAULT_WEIGHTS
        self.normalizer = normalizer or text_normalizer

    def profile(self, document: Document) -> DocumentProfile:
        """Normalize a document's taxonomy and text once for repeated scoring."""
        title_tokens = self.normalizer.normalize(getattr(document, "title", None))
        excerpt_tokens = self.normalizer.normalize(getattr(document, "excerpt", None))
        text_tokens = title_tokens | excerpt_tokens

        if len(excerpt_tokens) < self.weights.thin_excerpt_tokens:
            text_tokens |= self.normalizer.normalize(getattr(document, "content", None))

        return DocumentProfile(
            categories=_name_set(getattr(document, "categories", None)),
            tags=_name_set(getattr(document, "tags", None)),
            text_tokens=text_tokens,
            title_tokens=title_tokens,
        )

    def score_profiles(self, reference: DocumentProfile, candidate: DocumentProfile) -> ScoreBreakdown:
        """Score two pre-computed profiles."""
        weights = self.weights

        category = len(reference.categories & candidate.categories) * weights.category_weight
        tag = len(reference.tags & candidate.tags) * weights.tag_weight
        text = jaccard(reference.text_tokens, candidate.text_tokens) * weights.text_weight

        title_boost = 0.0
        title_overlap = jaccard(reference.title_tokens, candidate.title_tokens)
        if title_overlap > 0 and title_overlap >= weights.title_overlap_threshold:
            if weights.title_boost_mode == TITLE_BOOST_MULTIPLICATIVE:
                title_boost = text * weights.title_boost
            else:
                title_boost = weights.title_boost * weights.text_weight

        return ScoreBreakdown(category=category, tag=tag, text=text, title_boost=title_boost)

    def breakdown(self, reference: Document, candidate: Document) -> ScoreBreakdown:
        """Per-signal contributions of the similarity between two documents."""
        return self.score_profiles(self.profile(reference), self.profile(candidate))

    def score(self, reference: Document, candidate: Document) -> float:
        """Non-negative similarity score; 0 means no detected relation."""
        return self.breakdown(reference, candidate).total


# Singleton instance
content_similarity_scorer = ContentSimilarityScorer()


def calculate_content_similarity(reference: Document, candidate: Document) -> float:
    """Score two documents with the default weights."""
    return content_similarity_scorer.score(reference, candidate)
