# CMS Adapters
# WordPress post payload mapping

from .post_mapper import (
    document_from_graphql_post,
    document_from_rest_post,
    documents_from_payloads,
)

__all__ = [
    "document_from_rest_post",
    "document_from_graphql_post",
    "documents_from_payloads",
]
