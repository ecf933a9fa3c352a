"""
Storage of document trees on blog posts.

The tree is stored verbatim in ``BlogPost.content``; nothing here inspects
its internals. Saving replaces the whole value in one UPDATE (last write
wins) and clears the cached HTML so readers never see markup from an older
tree.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from .renderer import render_document

logger = logging.getLogger(__name__)


def save_content(post, tree: Any) -> None:
    """Persist ``tree`` as the post's content and drop stale derived HTML."""
    post.content = copy.deepcopy(tree)
    post.content_html_cached = ""
    if post.pk is None:
        post.save()
        return
    post.save(update_fields=["content", "content_html_cached", "word_count", "read_time", "updated_at"])
    logger.debug("Saved content for post %s", post.pk)


def load_content(post) -> Any:
    """Return the stored tree exactly as it was saved."""
    return copy.deepcopy(post.content)


def render_post(post, context: dict | None = None) -> str:
    """Cached HTML when available, otherwise a fresh page render."""
    if post.content_html_cached:
        return post.content_html_cached
    context = dict(context or {})
    context.setdefault("post", post)
    return render_document(load_content(post), context)
