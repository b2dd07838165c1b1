# Domain Entities
# Pure business objects with no external dependencies
from .content import (
    Document,
    ReferenceMeta,
    RelatedResult,
    ScoredCandidate,
    SelectionTier,
    parse_date,
)

__all__ = [
    "Document",
    "ReferenceMeta",
    "RelatedResult",
    "ScoredCandidate",
    "SelectionTier",
    "parse_date",
]
