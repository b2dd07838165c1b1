"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from datetime import datetime, timedelta, timezone

# Import after path is set
from core.domain import Document
from services.content_similarity import ContentSimilarityScorer, SimilarityWeights


BASE_DATE = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_document():
    """
    Factory for documents with sensible defaults.

    Each call gets a unique id/slug unless given explicitly; ``days_ago``
    sets the publication date relative to a fixed base date.
    """
    counter = {"n": 0}

    def _make(
        title: str = "",
        excerpt: str = "",
        content: str = "",
        categories=None,
        tags=None,
        days_ago: int = None,
        **overrides,
    ) -> Document:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": str(n),
            "slug": f"post-{n}",
            "title": title,
            "excerpt": excerpt,
            "content": content,
            "categories": categories or [],
            "tags": tags or [],
            "date": BASE_DATE - timedelta(days=days_ago) if days_ago is not None else None,
        }
        fields.update(overrides)
        return Document(**fields)

    return _make


@pytest.fixture
def scorer() -> ContentSimilarityScorer:
    """Scorer with the default weights."""
    return ContentSimilarityScorer(weights=SimilarityWeights())


@pytest.fixture
def seo_reference(make_document) -> Document:
    """Reference article in the SEO category."""
    return make_document(
        title="Keyword Research for Small Business Blogs",
        excerpt="<p>How to find <strong>keywords</strong> your customers search for.</p>",
        categories=["SEO"],
        tags=[],
        days_ago=0,
        id="ref",
        slug="keyword-research",
    )
