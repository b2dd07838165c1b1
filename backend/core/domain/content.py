"""Content domain entities for related-post selection."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional


class SelectionTier(str, Enum):
    """Tier that placed a document in a related-posts result."""
    SIMILARITY = "similarity"
    CATEGORY = "category"
    RECENCY = "recency"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_name_list(value: Any) -> list[str]:
    """Coerce a category/tag field into a list of non-blank names."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    elif not isinstance(value, Iterable):
        return []

    names = []
    for item in value:
        if item is None:
            continue
        name = _as_text(item).strip()
        if name:
            names.append(name)
    return names


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 value into an aware datetime, or None if unusable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    # Naive timestamps are treated as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Document:
    """One article as seen by the relevance engine."""

    id: str = ""
    title: str = ""
    slug: str = ""
    excerpt: str = ""
    content: str = ""
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    date: Optional[datetime] = None

    def __post_init__(self):
        self.id = _as_text(self.id)
        self.title = _as_text(self.title)
        self.slug = _as_text(self.slug)
        self.excerpt = _as_text(self.excerpt)
        self.content = _as_text(self.content)
        self.categories = _as_name_list(self.categories)
        self.tags = _as_name_list(self.tags)
        self.date = parse_date(self.date)

    @property
    def primary_category(self) -> Optional[str]:
        """First category, used for "More in {category}" display."""
        return self.categories[0] if self.categories else None


@dataclass(frozen=True)
class ScoredCandidate:
    """A pool member with its similarity score and original pool position."""

    document: Document
    score: float
    position: int


@dataclass
class ReferenceMeta:
    """Taxonomy of the reference document, returned for caller display."""

    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class RelatedResult:
    """Ordered related documents plus the reference's own taxonomy."""

    results: list[Document] = field(default_factory=list)
    reference_meta: ReferenceMeta = field(default_factory=ReferenceMeta)

    # Tier that selected each document, keyed by document id
    tiers: dict[str, SelectionTier] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "results": [
                {
                    "id": doc.id,
                    "title": doc.title,
                    "slug": doc.slug,
                    "excerpt": doc.excerpt,
                    "categories": list(doc.categories),
                    "tags": list(doc.tags),
                    "date": doc.date.isoformat() if doc.date else None,
                }
                for doc in self.results
            ],
            "referenceMeta": {
                "categories": list(self.reference_meta.categories),
                "tags": list(self.reference_meta.tags),
            },
        }
