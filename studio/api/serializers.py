"""
JSON shapes for blog posts.

Posts go over the wire in the dashboard's camelCase layout, with author and
reading data under ``metadata`` and search fields under ``seo``. Incoming
payloads may use that layout or flat model field names.
"""

from collections.abc import Mapping

from django.forms.models import model_to_dict

from studio.forms import BlogPostForm

EDITABLE_FIELDS = tuple(BlogPostForm.Meta.fields)

FIELD_ALIASES = {
    "featuredImage": "featured_image",
    "readTime": "read_time",
    "metaTitle": "meta_title",
    "metaDescription": "meta_description",
    "ogImage": "og_image",
    "publishedAt": "published_at",
}

NESTED_GROUPS = ("metadata", "seo")


def _isoformat(value):
    return value.isoformat() if value else None


def serialize_post(post, include_content: bool = True) -> dict:
    data = {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "featuredImage": post.featured_image,
        "metadata": {
            "author": post.author,
            "category": post.category,
            "tags": list(post.tags or []),
            "readTime": post.read_time,
        },
        "seo": {
            "metaTitle": post.meta_title,
            "metaDescription": post.meta_description,
            "keywords": list(post.keywords or []),
            "ogImage": post.og_image,
        },
        "published": post.published,
        "publishedAt": _isoformat(post.published_at),
        "wordCount": post.word_count,
        "url": post.get_absolute_url(),
        "createdAt": _isoformat(post.created_at),
        "updatedAt": _isoformat(post.updated_at),
    }
    if include_content:
        data["content"] = post.content
    return data


def payload_to_fields(payload: Mapping) -> dict:
    """Flatten a request payload into editable model field names; unknown keys are dropped."""
    fields = {}
    for key, value in payload.items():
        if key in NESTED_GROUPS and isinstance(value, Mapping):
            fields.update(payload_to_fields(value))
            continue
        name = FIELD_ALIASES.get(key, key)
        if name in EDITABLE_FIELDS:
            fields[name] = value
    return fields


def form_data_for_update(post, payload: Mapping) -> dict:
    """Current values of ``post`` overlaid with the fields present in ``payload``."""
    data = model_to_dict(post, fields=EDITABLE_FIELDS)
    data.update(payload_to_fields(payload))
    return data
