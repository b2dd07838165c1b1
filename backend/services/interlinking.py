"""
Blog Interlinking Service.

Strategic helpers for internal linking built on the similarity scorer:
keyword extraction, in-content link opportunities, and hub-and-spoke
(pillar/spoke) organization.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from core.domain import Document
from services.content_similarity import ContentSimilarityScorer, content_similarity_scorer
from services.text_normalizer import strip_html, text_normalizer

logger = logging.getLogger(__name__)

PILLAR_TITLE_PATTERN = re.compile(r"guide|complete|ultimate|comprehensive|everything", re.IGNORECASE)
DEFAULT_PILLAR_MIN_WORDS = 2000
MIN_SENTENCE_LENGTH = 20
SNIPPET_LENGTH = 100


@dataclass
class LinkOpportunity:
    """A sentence in the source content that could link to a target post."""

    text: str
    position: int
    relevance: float


@dataclass
class ContentHierarchy:
    """Pillar (hub) posts and the spoke posts that support them."""

    pillar_posts: list[Document] = field(default_factory=list)
    spoke_posts: list[Document] = field(default_factory=list)


def extract_keywords(text: str, limit: int = 10, min_length: int = 4) -> list[str]:
    """
    Extract the most frequent meaningful words from text.

    Args:
        text: Raw text, markup allowed
        limit: Maximum keywords to return
        min_length: Shortest word considered a keyword

    Returns:
        Keywords ordered by frequency, ties by first appearance
    """
    if limit <= 0:
        return []
    tokens = [t for t in text_normalizer.tokenize(text) if len(t) >= min_length]
    # Counter preserves insertion order, and most_common() sorts stably
    return [word for word, _ in Counter(tokens).most_common(limit)]


def _word_count(document: Document) -> int:
    return len(strip_html(document.content).split())


def find_link_opportunities(
    content: str,
    target: Document,
    max_links: int = 3,
) -> list[LinkOpportunity]:
    """
    Find sentences in content that mention the target post's key terms.

    Args:
        content: Article body (HTML or plain text) that would hold the links
        target: Post to link to
        max_links: Maximum opportunities to return

    Returns:
        Opportunities sorted by relevance (0-100), best first
    """
    target_terms = list(dict.fromkeys(
        extract_keywords(f"{target.title} {target.excerpt}", limit=10)
        + [w for w in target.title.lower().split() if len(w) > 3]
    ))
    if not target_terms or max_links <= 0:
        return []

    sentences = [
        s.strip()
        for s in re.split(r"[.!?]+", strip_html(content))
        if len(s.strip()) > MIN_SENTENCE_LENGTH
    ]

    opportunities = []
    for index, sentence in enumerate(sentences):
        sentence_lower = sentence.lower()
        match_count = sum(1 for term in target_terms if term in sentence_lower)
        if not match_count:
            continue

        snippet = sentence if len(sentence) <= SNIPPET_LENGTH else sentence[:SNIPPET_LENGTH] + "..."
        opportunities.append(
            LinkOpportunity(
                text=snippet,
                position=index,
                relevance=min(match_count / len(target_terms) * 100, 100),
            )
        )

    opportunities.sort(key=lambda o: o.relevance, reverse=True)
    return opportunities[:max_links]


def organize_content_hierarchy(
    documents: Iterable[Document],
    pillar_min_words: int = DEFAULT_PILLAR_MIN_WORDS,
) -> ContentHierarchy:
    """
    Split posts into pillar (comprehensive) and spoke (focused) content.

    A pillar is long-form (more than ``pillar_min_words`` words) or carries
    a comprehensive-guide title.
    """
    documents = list(documents)
    word_counts = {id(doc): _word_count(doc) for doc in documents}

    pillars = [
        doc for doc in documents
        if word_counts[id(doc)] > pillar_min_words or PILLAR_TITLE_PATTERN.search(doc.title)
    ]
    pillars.sort(key=lambda doc: word_counts[id(doc)], reverse=True)

    pillar_ids = {doc.id for doc in pillars}
    spokes = [doc for doc in documents if doc.id not in pillar_ids]

    logger.debug("Organized %d posts into %d pillars and %d spokes", len(documents), len(pillars), len(spokes))
    return ContentHierarchy(pillar_posts=pillars, spoke_posts=spokes)


def suggest_pillar_links(
    spoke: Document,
    pillars: Iterable[Document],
    min_score: float = 1.0,
    max_links: int = 2,
    scorer: ContentSimilarityScorer = None,
) -> list[Document]:
    """Pillar posts a spoke post should link to, most similar first."""
    scorer = scorer or content_similarity_scorer
    spoke_profile = scorer.profile(spoke)

    scored = []
    for pillar in pillars:
        if pillar.id == spoke.id:
            continue
        score = scorer.score_profiles(spoke_profile, scorer.profile(pillar)).total
        if score > min_score:
            scored.append((score, pillar))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [pillar for _, pillar in scored[:max_links]]


class InterlinkingService:
    """Pillar/spoke organization with configured thresholds."""

    def __init__(
        self,
        scorer: ContentSimilarityScorer = None,
        pillar_min_words: int = DEFAULT_PILLAR_MIN_WORDS,
        pillar_link_min_score: float = 1.0,
    ):
        """
        Initialize interlinking service.

        Args:
            scorer: Similarity scorer used to rank pillar links
            pillar_min_words: Word count above which a post is a pillar
            pillar_link_min_score: Similarity a pillar must exceed to be suggested
        """
        self.scorer = scorer or content_similarity_scorer
        self.pillar_min_words = pillar_min_words
        self.pillar_link_min_score = pillar_link_min_score

    def organize_content_hierarchy(self, documents: Iterable[Document]) -> ContentHierarchy:
        return organize_content_hierarchy(documents, pillar_min_words=self.pillar_min_words)

    def suggest_pillar_links(
        self,
        spoke: Document,
        pillars: Iterable[Document],
        max_links: int = 2,
    ) -> list[Document]:
        return suggest_pillar_links(
            spoke,
            pillars,
            min_score=self.pillar_link_min_score,
            max_links=max_links,
            scorer=self.scorer,
        )
