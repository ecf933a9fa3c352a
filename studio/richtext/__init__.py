"""
Rich-text documents: tree model, HTML rendering, editing and storage.
"""

from .editor import EditingSurface, EditorError, EditorNotReady, Selection
from .nodes import Mark, Node, count_characters, count_words, empty_document, plain_text
from .persistence import load_content, render_post, save_content
from .renderer import render_document, render_node
from .toc import extract_toc

__all__ = [
    "EditingSurface",
    "EditorError",
    "EditorNotReady",
    "Mark",
    "Node",
    "Selection",
    "count_characters",
    "count_words",
    "empty_document",
    "extract_toc",
    "load_content",
    "plain_text",
    "render_document",
    "render_node",
    "render_post",
    "save_content",
]
