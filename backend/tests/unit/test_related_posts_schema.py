"""
Unit tests for related posts response schemas.
"""

from api.schemas.related_posts import RelatedPostsResponse
from core.domain import Document, ReferenceMeta, RelatedResult


def test_from_result_serializes_with_aliases():
    result = RelatedResult(
        results=[
            Document(
                id="7",
                slug="meta-tags",
                title="Meta tags",
                excerpt="<p>Short</p>",
                categories=["SEO"],
                date="2024-04-02T00:00:00Z",
            )
        ],
        reference_meta=ReferenceMeta(categories=["SEO"], tags=["meta"]),
    )

    payload = RelatedPostsResponse.from_result(result).model_dump(by_alias=True, mode="json")

    assert set(payload) == {"relatedPosts", "currentPost"}
    post = payload["relatedPosts"][0]
    assert post["id"] == "7"
    assert post["slug"] == "meta-tags"
    assert post["categories"] == ["SEO"]
    assert post["date"].startswith("2024-04-02T00:00:00")
    assert payload["currentPost"] == {"categories": ["SEO"], "tags": ["meta"]}


def test_accepts_field_names_and_aliases():
    by_name = RelatedPostsResponse(related_posts=[])
    by_alias = RelatedPostsResponse.model_validate({"relatedPosts": [], "currentPost": {"categories": ["A"]}})

    assert by_name.related_posts == []
    assert by_alias.current_post.categories == ["A"]


def test_undated_post_serializes_null():
    result = RelatedResult(results=[Document(id="1", slug="a", title="A")])

    payload = RelatedPostsResponse.from_result(result).model_dump(by_alias=True, mode="json")

    assert payload["relatedPosts"][0]["date"] is None
