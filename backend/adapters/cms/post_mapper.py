"""
WordPress post payload mapping.

Converts already-fetched WordPress REST (wp/v2 and the posts proxy) and
WPGraphQL post payloads into Document objects for the relevance engine.
No HTTP happens here.
"""

import logging
from typing import Any, Callable, Iterable, List, Optional

from core.domain import Document
from services.text_normalizer import decode_html_entities

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


def _rendered(value: Any) -> str:
    """Unwrap REST fields that arrive as {"rendered": "..."}."""
    if isinstance(value, dict):
        value = value.get("rendered")
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str) and item]
    return []


def _node_names(connection: Any) -> List[str]:
    """Names from a GraphQL connection: {"nodes": [{"name": ...}]}."""
    if not isinstance(connection, dict):
        return []
    nodes = connection.get("nodes") or []
    return [
        node["name"]
        for node in nodes
        if isinstance(node, dict) and isinstance(node.get("name"), str) and node["name"]
    ]


def document_from_rest_post(payload: dict) -> Document:
    """
    Map a REST post payload to a Document.

    Args:
        payload: Post dict; categories come from ``category_name`` (list or
            string) or a string-valued ``categories`` list

    Returns:
        Document with decoded title
    """
    categories = _string_list(payload.get("category_name"))
    if not categories:
        categories = _string_list(payload.get("categories"))

    post_id = payload.get("id")
    return Document(
        id=str(post_id) if post_id is not None else "",
        title=decode_html_entities(_rendered(payload.get("title"))),
        slug=payload.get("slug") or "",
        excerpt=_rendered(payload.get("excerpt")),
        content=_rendered(payload.get("content")),
        categories=categories,
        tags=_string_list(payload.get("tags")),
        date=payload.get("date"),
    )


def document_from_graphql_post(payload: dict) -> Document:
    """Map a WPGraphQL post node to a Document."""
    post_id = payload.get("id")
    return Document(
        id=str(post_id) if post_id is not None else "",
        title=decode_html_entities(payload.get("title") or UNTITLED),
        slug=payload.get("slug") or "",
        excerpt=payload.get("excerpt") or "",
        content=payload.get("content") or "",
        categories=_node_names(payload.get("categories")),
        tags=_node_names(payload.get("tags")),
        date=payload.get("date"),
    )


def documents_from_payloads(
    payloads: Optional[Iterable[dict]],
    mapper: Callable[[dict], Document] = document_from_rest_post,
) -> List[Document]:
    """Map a list of payloads, skipping entries that have no slug."""
    documents = []
    for payload in payloads or []:
        if not isinstance(payload, dict):
            logger.warning("Skipping non-object post payload: %r", type(payload).__name__)
            continue
        document = mapper(payload)
        if not document.slug:
            logger.warning("Skipping post %s without slug", document.id or "<unknown>")
            continue
        documents.append(document)
    return documents
