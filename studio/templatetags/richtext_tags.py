# studio/templatetags/richtext_tags.py

import logging

from django import template
from django.utils.safestring import mark_safe

from studio.richtext.persistence import render_post
from studio.richtext.renderer import render_document
from studio.richtext.toc import extract_toc

logger = logging.getLogger(__name__)

register = template.Library()


@register.filter(name="richtext")
def richtext_filter(value):
    """Render a stored document tree to HTML."""
    try:
        return mark_safe(render_document(value))
    except Exception:
        logger.exception("Rich-text rendering failed")
        return ""


@register.simple_tag(takes_context=True)
def richtext_post(context, post):
    """Cached HTML for a post, rendered on the fly when the cache is empty."""
    processor_context = {
        "request": context.get("request"),
        "post": post,
    }
    try:
        return mark_safe(render_post(post, context=processor_context))
    except Exception:
        logger.exception("Rich-text rendering failed for post %s", getattr(post, "pk", None))
        return ""


@register.simple_tag
def richtext_toc(post):
    """Table of contents for a post, from the stored copy when present."""
    if post.table_of_contents:
        return post.table_of_contents
    return extract_toc(render_post(post))
