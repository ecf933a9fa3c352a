"""
Tree-to-HTML renderer for rich-text documents.

``render_node`` is the pure mapping from a document tree to markup. It never
raises: missing attributes fall back to defaults, malformed fields are read
as absent and unknown node or mark types produce no output. The same tree
always renders to the same bytes.

``render_document`` is the page-level pipeline: ``render_node`` followed by
the HTML postprocessors.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from django.utils.html import escape

from .nodes import (
    BLOCKQUOTE,
    BOLD,
    BULLET_LIST,
    CODE,
    CODE_BLOCK,
    DOC,
    DOCUMENT,
    HARD_BREAK,
    HEADING,
    IMAGE,
    ITALIC,
    LINK,
    LIST_ITEM,
    ORDERED_LIST,
    PARAGRAPH,
    STRIKE,
    TEXT,
    UNDERLINE,
    attr_str,
    heading_level,
    node_attrs,
    node_content,
    node_marks,
    node_text,
    node_type,
)
from .postprocessors import apply_postprocessors

ALLOWED_URL_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

# Always present on rendered links so the target page cannot reach window.opener
LINK_SAFETY_REL = "noopener noreferrer"
# SEO hints an author may set on a link; kept ahead of the safety tokens
LINK_SEO_REL = ("nofollow", "ugc", "sponsored")

HEADING_TAGS = {
    1: ("h1", "rt-heading rt-heading-1"),
    2: ("h2", "rt-heading rt-heading-2"),
    3: ("h3", "rt-heading rt-heading-3"),
    4: ("h4", "rt-heading rt-heading-4"),
    5: ("h5", "rt-heading rt-heading-5"),
    6: ("h6", "rt-heading rt-heading-6"),
}

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_LANGUAGE_RE = re.compile(r"^[A-Za-z0-9_+\-]+$")


def safe_url(url: str) -> str:
    """
    Return ``url`` if it is relative or uses an allowed scheme, else "".

    Browsers ignore whitespace and control characters inside a scheme
    ("java\\tscript:"), so those are removed before the scheme is read.
    """
    url = url.strip()
    if not url:
        return ""
    compact = re.sub(r"[\x00-\x20]", "", url)
    match = _SCHEME_RE.match(compact)
    if match and match.group(1).lower() not in ALLOWED_URL_SCHEMES:
        return ""
    return url


def link_rel(rel: str) -> str:
    tokens = rel.lower().split()
    kept = [token for token in LINK_SEO_REL if token in tokens]
    return " ".join(kept + [LINK_SAFETY_REL])


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------


def _wrap_link(html: str, attrs: Mapping[str, Any]) -> str:
    href = safe_url(attr_str(attrs, "href")) or "#"
    target = attr_str(attrs, "target")
    target_attr = f' target="{escape(target)}"' if target else ""
    rel = link_rel(attr_str(attrs, "rel"))
    return f'<a href="{escape(href)}"{target_attr} rel="{rel}">{html}</a>'


MARK_WRAPPERS: dict[str, Callable[[str, Mapping[str, Any]], str]] = {
    BOLD: lambda html, attrs: f"<strong>{html}</strong>",
    ITALIC: lambda html, attrs: f"<em>{html}</em>",
    UNDERLINE: lambda html, attrs: f"<u>{html}</u>",
    STRIKE: lambda html, attrs: f"<s>{html}</s>",
    CODE: lambda html, attrs: f'<code class="rt-code">{html}</code>',
    LINK: _wrap_link,
}


# ---------------------------------------------------------------------------
# Leaves (rendered in one step, children are never visited)
# ---------------------------------------------------------------------------


def _render_text(node: Mapping[str, Any]) -> str:
    """
    Escape the text, then wrap it once per mark in stored order.

    Each mark wraps the output of the marks before it, so ``[bold, italic]``
    renders as ``<em><strong>text</strong></em>``.
    """
    html = escape(node_text(node))
    for mark in node_marks(node):
        wrap = MARK_WRAPPERS.get(node_type(mark))
        if wrap is not None:
            html = wrap(html, node_attrs(mark))
    return html


def _render_image(node: Mapping[str, Any]) -> str:
    attrs = node_attrs(node)
    src = safe_url(attr_str(attrs, "src"))
    alt = attr_str(attrs, "alt")
    title = attr_str(attrs, "title")
    html = (
        f'<figure class="rt-image">'
        f'<img src="{escape(src)}" alt="{escape(alt)}" loading="lazy">'
    )
    if title:
        html += f'<figcaption class="rt-caption">{escape(title)}</figcaption>'
    return html + "</figure>"


def _code_text(node: Mapping[str, Any]) -> str:
    """Raw text of a code block's descendants, marks ignored."""
    parts: list[str] = []
    stack = list(reversed(node_content(node)))
    while stack:
        child = stack.pop()
        kind = node_type(child)
        if kind == TEXT:
            parts.append(node_text(child))
        elif kind == HARD_BREAK:
            parts.append("\n")
        else:
            stack.extend(reversed(node_content(child)))
    return "".join(parts)


def _render_code_block(node: Mapping[str, Any]) -> str:
    language = attr_str(node_attrs(node), "language")
    code_attr = (
        f' class="language-{language}"' if language and _LANGUAGE_RE.match(language) else ""
    )
    return (
        f'<pre class="rt-code-block"><code{code_attr}>'
        f"{escape(_code_text(node))}</code></pre>"
    )


LEAF_RENDERERS: dict[str, Callable[[Mapping[str, Any]], str]] = {
    TEXT: _render_text,
    IMAGE: _render_image,
    HARD_BREAK: lambda node: "<br>",
    CODE_BLOCK: _render_code_block,
}


# ---------------------------------------------------------------------------
# Containers (an opening and closing tag around rendered children)
# ---------------------------------------------------------------------------


def _heading_tags(node: Mapping[str, Any]) -> tuple[str, str]:
    tag, css_class = HEADING_TAGS[heading_level(node)]
    return f'<{tag} class="{css_class}">', f"</{tag}>"


def _ordered_list_tags(node: Mapping[str, Any]) -> tuple[str, str]:
    start = node_attrs(node).get("start")
    start_attr = ""
    if isinstance(start, int) and not isinstance(start, bool) and start != 1:
        start_attr = f' start="{start}"'
    return f'<ol class="rt-list rt-list-ordered"{start_attr}>', "</ol>"


CONTAINER_TAGS: dict[str, Callable[[Mapping[str, Any]], tuple[str, str]]] = {
    DOC: lambda node: ("", ""),
    DOCUMENT: lambda node: ("", ""),
    PARAGRAPH: lambda node: ('<p class="rt-paragraph">', "</p>"),
    HEADING: _heading_tags,
    BULLET_LIST: lambda node: ('<ul class="rt-list rt-list-bullet">', "</ul>"),
    ORDERED_LIST: _ordered_list_tags,
    LIST_ITEM: lambda node: ("<li>", "</li>"),
    BLOCKQUOTE: lambda node: ('<blockquote class="rt-blockquote">', "</blockquote>"),
}


class _Closing(str):
    """A closing tag waiting on the render stack."""


def render_node(node: Any) -> str:
    """
    Render a document tree (or any subtree) to HTML.

    Works on an explicit stack of nodes still to render and ``_Closing``
    tags waiting to be emitted. Anything that is not a mapping renders as
    nothing, so raw strings never reach the output.
    """
    parts: list[str] = []
    stack: list[Any] = [node] if isinstance(node, Mapping) else []
    while stack:
        item = stack.pop()
        if isinstance(item, _Closing):
            parts.append(item)
            continue
        if not isinstance(item, Mapping):
            continue

        kind = node_type(item)
        leaf = LEAF_RENDERERS.get(kind)
        if leaf is not None:
            parts.append(leaf(item))
            continue

        tags = CONTAINER_TAGS.get(kind)
        if tags is None:
            # Unknown or untyped node: skip it and its subtree
            continue
        opening, closing = tags(item)
        parts.append(opening)
        stack.append(_Closing(closing))
        stack.extend(reversed(node_content(item)))
    return "".join(parts)


def render_document(tree: Any, context: dict | None = None) -> str:
    """
    Page-level rendering: tree to HTML, then the postprocessor pipeline.

    Args:
        tree: Stored document tree (loosely-typed JSON)
        context: Optional dict shared by postprocessors
    """
    context = context or {}
    html = render_node(tree)
    return apply_postprocessors(html, context)
