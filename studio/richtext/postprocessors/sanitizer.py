# studio/richtext/postprocessors/sanitizer.py

import logging
from functools import lru_cache

import bleach

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_bleach_config():
    """Allow-list matching exactly what the tree renderer emits."""
    allowed_tags = {
        # blocks
        "p",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "blockquote",
        "pre",
        "br",
        # media
        "figure",
        "img",
        "figcaption",
        # inline marks
        "strong",
        "em",
        "u",
        "s",
        "code",
        "a",
    }

    allowed_attrs = {
        "*": ["class", "id"],
        "a": ["href", "target", "rel"],
        "img": ["src", "alt", "loading"],
        "ol": ["start", "class"],
    }

    allowed_protocols = ["http", "https", "mailto", "tel"]

    return allowed_tags, allowed_attrs, allowed_protocols


def sanitize_html(html, context):
    """
    Sanitize rendered HTML using bleach.

    The renderer already escapes text and filters URL schemes; this pass
    guarantees nothing outside the allow-list reaches a page.
    """
    allowed_tags, allowed_attrs, allowed_protocols = _get_bleach_config()

    return bleach.clean(
        html,
        tags=allowed_tags,
        attributes=allowed_attrs,
        protocols=allowed_protocols,
        strip=False,  # Escape disallowed tags instead of dropping their text
    )
