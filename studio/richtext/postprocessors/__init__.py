# studio/richtext/postprocessors/__init__.py

from .heading_anchors import heading_anchors
from .sanitizer import sanitize_html

POSTPROCESSORS = [
    sanitize_html,  # Must run first, before any other HTML modifications
    heading_anchors,  # Give headings unique ids for in-page links and the TOC
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
