"""
Page metadata for blog posts: meta tags, Open Graph, Twitter card and
schema.org JSON-LD.
"""

from django.conf import settings
from django.templatetags.static import static

DEFAULT_OG_IMAGE = "studio/img/default-og-image.jpg"
OG_IMAGE_WIDTH = 1200
OG_IMAGE_HEIGHT = 630


def absolute_url(path: str) -> str:
    """Prefix site-relative paths with SITE_URL; absolute URLs pass through."""
    if not path or path.startswith(("http://", "https://")):
        return path
    return f"{settings.SITE_URL}/{path.lstrip('/')}"


def _isoformat(value):
    return value.isoformat() if value else None


def build_post_metadata(post) -> dict:
    """
    Template-ready metadata for a post, falling back to the title and
    excerpt when the SEO fields are empty.
    """
    title = post.effective_meta_title
    description = post.effective_meta_description
    image = absolute_url(post.social_image or static(DEFAULT_OG_IMAGE))
    url = absolute_url(post.get_absolute_url())

    return {
        "title": title,
        "description": description,
        "keywords": ", ".join(post.keywords or []),
        "canonical_url": url,
        "open_graph": {
            "title": title,
            "description": description,
            "type": "article",
            "url": url,
            "site_name": settings.SITE_NAME,
            "published_time": _isoformat(post.published_at),
            "author": post.author,
            "image": image,
            "image_width": OG_IMAGE_WIDTH,
            "image_height": OG_IMAGE_HEIGHT,
            "image_alt": post.title,
        },
        "twitter": {
            "card": "summary_large_image",
            "title": title,
            "description": description,
            "image": image,
        },
    }


def build_post_json_ld(post) -> dict:
    """schema.org BlogPosting for a post."""
    data = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post.title,
        "description": post.excerpt,
        "url": absolute_url(post.get_absolute_url()),
        "datePublished": _isoformat(post.published_at),
        "dateModified": _isoformat(post.updated_at),
        "wordCount": post.word_count,
        "author": {"@type": "Person", "name": post.author},
        "publisher": {
            "@type": "Organization",
            "name": settings.SITE_NAME,
            "logo": {
                "@type": "ImageObject",
                "url": absolute_url(static("studio/img/logo.png")),
            },
        },
    }
    if post.featured_image:
        data["image"] = absolute_url(post.featured_image)
    if post.keywords:
        data["keywords"] = ", ".join(post.keywords)
    return data
