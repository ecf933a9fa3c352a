"""
Celery tasks for the studio app.

Run a worker with: celery -A WaysProject worker -l info
"""

import logging

from celery import shared_task
from django.db import transaction

logger = logging.getLogger(__name__)


@shared_task
def render_post_content(post_id: int):
    """
    Render a post's document tree and cache the HTML and table of contents.

    Called after a BlogPost is saved with new content.
    """
    from .models import BlogPost
    from .richtext.renderer import render_document
    from .richtext.toc import count_headings, extract_toc

    try:
        post = BlogPost.objects.get(pk=post_id)
    except BlogPost.DoesNotExist:
        return {"success": False, "error": f"Post {post_id} not found."}

    try:
        html = render_document(post.content, {"post": post})
        toc = extract_toc(html)

        with transaction.atomic():
            current = (
                BlogPost.objects.select_for_update()
                .filter(pk=post_id)
                .values_list("content", flat=True)
                .first()
            )
            # A newer save already queued its own render; keep its result
            if current != post.content:
                logger.info("Post %s changed while rendering, result discarded", post_id)
                return {"success": False, "post_id": post_id, "error": "Content changed during render."}

            # Update fields directly to avoid re-triggering save()
            BlogPost.objects.filter(pk=post_id).update(
                content_html_cached=html,
                table_of_contents=toc,
            )
    except Exception as e:
        logger.exception("Rendering failed for post %s", post_id)
        return {"success": False, "post_id": post_id, "error": str(e)}

    return {
        "success": True,
        "post_id": post_id,
        "headings": count_headings(toc),
    }
