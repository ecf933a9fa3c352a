"""
Server-side editing surface for rich-text documents.

``EditingSurface`` owns a live document tree and exposes the editor commands
the save flow relies on: typing, block formatting, marks, links and image
insertion through the upload collaborator. It mirrors the behaviour of the
browser widget (see ``widgets.py`` and ``static/studio/js/richtext-editor.js``)
so posts can be composed from management commands and the command semantics
can be tested without a browser.

Positions follow the editor's conventions: a ``Selection`` addresses a block
by child indexes from the root, plus a start/end character offset inside
that block's inline content. Text counts one per character, inline leaves
(hard breaks, inline images) count one each.

Every mutation hands the complete tree (never a diff) to ``on_change``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import wraps
from typing import Any, Callable

from .nodes import (
    BLOCKQUOTE,
    BULLET_LIST,
    CODE_BLOCK,
    DOC,
    DOCUMENT_TYPES,
    HARD_BREAK,
    HEADING,
    HEADING_LEVELS,
    IMAGE,
    LINK,
    LIST_ITEM,
    MARK_TYPES,
    ORDERED_LIST,
    PARAGRAPH,
    Mark,
    Node,
    count_characters,
    empty_document,
)
from .renderer import render_node

logger = logging.getLogger(__name__)

TEXTBLOCK_TYPES = frozenset({PARAGRAPH, HEADING, CODE_BLOCK})
LIST_TYPES = frozenset({BULLET_LIST, ORDERED_LIST})


class EditorError(Exception):
    """Base error for editing surface commands."""


class EditorNotReady(EditorError):
    """A command ran before the surface was mounted."""


class InvalidPosition(EditorError):
    """A selection path does not address a node in the document."""


@dataclass(frozen=True)
class Selection:
    path: tuple[int, ...]
    start: int = 0
    end: int = 0

    @classmethod
    def caret(cls, path: tuple[int, ...], offset: int = 0) -> Selection:
        return cls(tuple(path), offset, offset)

    @property
    def empty(self) -> bool:
        return self.start == self.end


def requires_ready(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        if not self.ready:
            raise EditorNotReady("The editor has not been mounted yet")
        return method(self, *args, **kwargs)

    return wrapper


# ---------------------------------------------------------------------------
# Inline content helpers
# ---------------------------------------------------------------------------


def _inline_size(node: Node) -> int:
    return len(node.text or "") if node.is_text else 1


def _inline_length(block: Node) -> int:
    return sum(_inline_size(child) for child in block.content)


def _copy_marks(marks: list[Mark]) -> list[Mark]:
    return [Mark(mark.type, dict(mark.attrs)) for mark in marks]


def _same_marks(left: list[Mark], right: list[Mark]) -> bool:
    return [mark.to_json() for mark in left] == [mark.to_json() for mark in right]


def _split_inline(content: list[Node], offset: int) -> tuple[list[Node], list[Node]]:
    """Split inline content at ``offset``, cutting a text node if needed."""
    left: list[Node] = []
    right: list[Node] = []
    position = 0
    for node in content:
        size = _inline_size(node)
        if position + size <= offset:
            left.append(node)
        elif position >= offset:
            right.append(node)
        else:
            cut = offset - position
            text = node.text or ""
            left.append(Node.text_node(text[:cut], _copy_marks(node.marks)))
            right.append(Node.text_node(text[cut:], _copy_marks(node.marks)))
        position += size
    return left, right


def _normalize_inline(content: list[Node]) -> list[Node]:
    """Drop empty text nodes and merge neighbours that carry identical marks."""
    result: list[Node] = []
    for node in content:
        if node.is_text:
            if not node.text:
                continue
            previous = result[-1] if result else None
            if previous is not None and previous.is_text and _same_marks(previous.marks, node.marks):
                result[-1] = Node.text_node((previous.text or "") + node.text, previous.marks)
                continue
        result.append(node)
    return result


def _link_mark(node: Node) -> Mark | None:
    for mark in node.marks:
        if mark.type == LINK:
            return mark
    return None


# ---------------------------------------------------------------------------
# Editing surface
# ---------------------------------------------------------------------------


class EditingSurface:
    """
    A live, mutable document with editor commands.

    Args:
        content: Initial tree (JSON). Defaults to an empty document.
        on_change: Called with the full tree after every mutation.
        uploader: Callable taking an uploaded file and returning an
            ``UploadResult``; used by ``add_image``.
    """

    def __init__(
        self,
        content: Any = None,
        *,
        on_change: Callable[[dict], None] | None = None,
        uploader: Callable[[Any], Any] | None = None,
    ):
        self._initial = content
        self.doc: Node | None = None
        self.selection: Selection | None = None
        self.on_change = on_change
        self.uploader = uploader
        self.last_error: str | None = None

    # --- lifecycle -------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self.doc is not None

    def mount(self) -> EditingSurface:
        """Load the initial content; commands are available afterwards."""
        doc = Node.from_json(self._initial if self._initial is not None else empty_document())
        if doc is None:
            doc = Node(type=DOC)
        elif doc.type not in DOCUMENT_TYPES:
            doc = Node(type=DOC, content=[doc])
        self.doc = doc
        self.selection = self._end_selection()
        return self

    @requires_ready
    def get_json(self) -> dict:
        return self.doc.to_json()

    def render_preview(self) -> str:
        """Rendered HTML of the current tree, empty until mounted."""
        if not self.ready:
            return ""
        return render_node(self.get_json())

    @requires_ready
    def character_count(self) -> int:
        return count_characters(self.get_json())

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.get_json())

    # --- positions -------------------------------------------------------

    def _resolve(self, path: tuple[int, ...]) -> tuple[Node, int, Node]:
        if not path:
            raise InvalidPosition("An empty path addresses the document itself")
        node = self.doc
        parent = node
        for index in path:
            parent = node
            if index < 0 or index >= len(parent.content):
                raise InvalidPosition(f"No node at path {list(path)}")
            node = parent.content[index]
        return parent, path[-1], node

    def _end_selection(self) -> Selection:
        if not self.doc.content:
            return Selection.caret(())
        path: list[int] = []
        node = self.doc
        while node.content and node.type not in TEXTBLOCK_TYPES:
            path.append(len(node.content) - 1)
            node = node.content[-1]
        offset = _inline_length(node) if node.type in TEXTBLOCK_TYPES else 0
        return Selection.caret(tuple(path), offset)

    @requires_ready
    def select(self, path, start: int = 0, end: int | None = None) -> Selection:
        """Place the caret (``end`` omitted) or a range inside the block at ``path``."""
        path = tuple(path)
        _, _, block = self._resolve(path)
        length = _inline_length(block) if block.type in TEXTBLOCK_TYPES else 0
        end = start if end is None else end
        start, end = sorted((max(0, min(start, length)), max(0, min(end, length))))
        self.selection = Selection(path, start, end)
        return self.selection

    @requires_ready
    def select_end(self) -> Selection:
        self.selection = self._end_selection()
        return self.selection

    def _textblock(self) -> Node | None:
        if not self.selection.path:
            return None
        _, _, block = self._resolve(self.selection.path)
        return block if block.type in TEXTBLOCK_TYPES else None

    # --- block commands --------------------------------------------------

    def _insert_block(self, new: Node) -> None:
        """Insert a block at the caret, splitting the current textblock if needed."""
        selection = self.selection
        if not selection.path:
            self.doc.content.append(new)
            self._place_after_insert(new, (len(self.doc.content) - 1,))
            return

        parent, index, block = self._resolve(selection.path)
        prefix = selection.path[:-1]

        if block.type not in TEXTBLOCK_TYPES:
            parent.content.insert(index + 1, new)
            self._place_after_insert(new, prefix + (index + 1,))
            return

        length = _inline_length(block)
        if block.type == PARAGRAPH and length == 0:
            parent.content[index] = new
            self._place_after_insert(new, selection.path)
        elif selection.start <= 0:
            parent.content.insert(index, new)
            # The caret stays at the start of the block, now after the new one
            self.selection = Selection.caret(prefix + (index + 1,), 0)
        elif selection.start >= length:
            parent.content.insert(index + 1, new)
            self._place_after_insert(new, prefix + (index + 1,))
        else:
            left, right = _split_inline(block.content, selection.start)
            block.content = _normalize_inline(left)
            tail = Node(type=block.type, attrs=dict(block.attrs), content=_normalize_inline(right))
            parent.content[index + 1:index + 1] = [new, tail]
            self.selection = Selection.caret(prefix + (index + 2,), 0)

    def _place_after_insert(self, new: Node, path: tuple[int, ...]) -> None:
        offset = _inline_length(new) if new.type in TEXTBLOCK_TYPES else 0
        self.selection = Selection.caret(path, offset)

    @requires_ready
    def insert_paragraph(self, text: str = "") -> bool:
        content = [Node.text_node(text)] if text else []
        self._insert_block(Node(type=PARAGRAPH, content=content))
        self._changed()
        return True

    @requires_ready
    def insert_heading(self, text: str, level: int = 2) -> bool:
        if level not in HEADING_LEVELS:
            raise EditorError(f"Heading level must be between 1 and 6, got {level}")
        content = [Node.text_node(text)] if text else []
        self._insert_block(Node(type=HEADING, attrs={"level": level}, content=content))
        self._changed()
        return True

    @requires_ready
    def insert_code_block(self, text: str, language: str | None = None) -> bool:
        attrs = {"language": language} if language else {}
        content = [Node.text_node(text)] if text else []
        self._insert_block(Node(type=CODE_BLOCK, attrs=attrs, content=content))
        self._changed()
        return True

    @requires_ready
    def set_heading(self, level: int) -> bool:
        if level not in HEADING_LEVELS:
            raise EditorError(f"Heading level must be between 1 and 6, got {level}")
        block = self._textblock()
        if block is None:
            return False
        if block.type == CODE_BLOCK:
            return False
        block.type = HEADING
        block.attrs = {"level": level}
        self._changed()
        return True

    @requires_ready
    def set_paragraph(self) -> bool:
        block = self._textblock()
        if block is None:
            return False
        block.type = PARAGRAPH
        block.attrs = {}
        self._changed()
        return True

    def _wrap_current_block(self, wrapper: Node, inner_path: tuple[int, ...]) -> bool:
        if not self.selection.path:
            return False
        parent, index, block = self._resolve(self.selection.path)
        parent.content[index] = wrapper
        leaf = wrapper
        for step in inner_path[:-1]:
            leaf = leaf.content[step]
        leaf.content.insert(inner_path[-1], block)
        self.selection = replace(self.selection, path=self.selection.path + inner_path)
        self._changed()
        return True

    @requires_ready
    def wrap_in_list(self, kind: str = BULLET_LIST) -> bool:
        if kind not in LIST_TYPES:
            raise EditorError(f"Unknown list type {kind!r}")
        wrapper = Node(type=kind, content=[Node(type=LIST_ITEM)])
        return self._wrap_current_block(wrapper, (0, 0))

    @requires_ready
    def wrap_in_blockquote(self) -> bool:
        return self._wrap_current_block(Node(type=BLOCKQUOTE), (0,))

    # --- inline commands -------------------------------------------------

    def _ensure_textblock(self) -> Node:
        block = self._textblock()
        if block is None:
            self._insert_block(Node(type=PARAGRAPH))
            block = self._textblock()
        return block

    def _inherited_marks(self, block: Node, offset: int) -> list[Mark]:
        """Marks a new character at ``offset`` picks up from its left neighbour."""
        if block.type == CODE_BLOCK:
            return []
        left, _ = _split_inline(block.content, offset)
        if left and left[-1].is_text:
            # Links do not extend past their end
            return [mark for mark in _copy_marks(left[-1].marks) if mark.type != LINK]
        return []

    @requires_ready
    def insert_text(self, text: str) -> bool:
        """Type ``text`` at the caret, replacing the selected range."""
        if not text:
            return False
        block = self._ensure_textblock()
        selection = self.selection
        marks = self._inherited_marks(block, selection.start)
        left, rest = _split_inline(block.content, selection.start)
        _, right = _split_inline(rest, selection.end - selection.start)
        block.content = _normalize_inline(left + [Node.text_node(text, marks)] + right)
        self.selection = Selection.caret(selection.path, selection.start + len(text))
        self._changed()
        return True

    @requires_ready
    def insert_hard_break(self) -> bool:
        block = self._ensure_textblock()
        selection = self.selection
        left, right = _split_inline(block.content, selection.start)
        block.content = _normalize_inline(left + [Node(type=HARD_BREAK)] + right)
        self.selection = Selection.caret(selection.path, selection.start + 1)
        self._changed()
        return True

    def _map_selected_text(self, apply: Callable[[Node], None]) -> bool:
        block = self._textblock()
        selection = self.selection
        if block is None or block.type == CODE_BLOCK or selection.empty:
            return False
        left, rest = _split_inline(block.content, selection.start)
        middle, right = _split_inline(rest, selection.end - selection.start)
        for node in middle:
            if node.is_text:
                apply(node)
        block.content = _normalize_inline(left + middle + right)
        return True

    def _selected_text_nodes(self) -> list[Node]:
        block = self._textblock()
        selection = self.selection
        if block is None:
            return []
        if selection.empty:
            # The node just left of the caret, else the one right of it
            left, right = _split_inline(block.content, selection.start)
            candidates = left[-1:] + right[:1]
            return [node for node in candidates if node.is_text]
        _, rest = _split_inline(block.content, selection.start)
        middle, _ = _split_inline(rest, selection.end - selection.start)
        return [node for node in middle if node.is_text]

    @requires_ready
    def is_active(self, mark_type: str) -> bool:
        nodes = self._selected_text_nodes()
        return bool(nodes) and all(
            any(mark.type == mark_type for mark in node.marks) for node in nodes
        )

    @requires_ready
    def toggle_mark(self, mark_type: str, attrs: dict | None = None) -> bool:
        """
        Add ``mark_type`` to the selected text, or remove it when every
        selected character already has it.

        New marks are appended to the node's mark list, so they wrap the
        existing ones when rendered.
        """
        if mark_type not in MARK_TYPES:
            raise EditorError(f"Unknown mark type {mark_type!r}")
        remove = self.is_active(mark_type)

        def apply(node: Node) -> None:
            node.marks = [mark for mark in node.marks if mark.type != mark_type]
            if not remove:
                node.marks.append(Mark(mark_type, dict(attrs or {})))

        changed = self._map_selected_text(apply)
        if changed:
            self._changed()
        return changed

    # --- links -----------------------------------------------------------

    @requires_ready
    def get_link_attributes(self) -> dict:
        """Attributes of the link at the selection, or {} when there is none."""
        for node in self._selected_text_nodes():
            mark = _link_mark(node)
            if mark is not None:
                return dict(mark.attrs)
        return {}

    @requires_ready
    def extend_mark_range(self, mark_type: str = LINK) -> Selection:
        """
        Grow a collapsed selection to cover the whole run of text carrying
        the same ``mark_type`` mark as the text at the caret.
        """
        block = self._textblock()
        selection = self.selection
        if block is None or not selection.empty:
            return selection

        target = None
        for node in self._selected_text_nodes():
            target = next((m for m in node.marks if m.type == mark_type), None)
            if target is not None:
                break
        if target is None:
            return selection

        # Offsets of every child, then the maximal run around the caret
        spans: list[tuple[int, int, Node]] = []
        position = 0
        for node in block.content:
            size = _inline_size(node)
            spans.append((position, position + size, node))
            position += size

        def carries(node: Node) -> bool:
            return node.is_text and any(m.to_json() == target.to_json() for m in node.marks)

        index = next(
            i
            for i, (start, end, node) in enumerate(spans)
            if start <= selection.start <= end and carries(node)
        )
        first = last = index
        while first > 0 and carries(spans[first - 1][2]):
            first -= 1
        while last < len(spans) - 1 and carries(spans[last + 1][2]):
            last += 1
        self.selection = Selection(selection.path, spans[first][0], spans[last][1])
        return self.selection

    @requires_ready
    def set_link(self, href: str, *, nofollow: bool = False, target: str = "_blank") -> bool:
        """Set or replace the link mark on the selection (or the link under the caret)."""
        self.extend_mark_range(LINK)
        attrs = {"href": href}
        if target:
            attrs["target"] = target
        if nofollow:
            attrs["rel"] = "nofollow"

        def apply(node: Node) -> None:
            existing = _link_mark(node)
            if existing is not None:
                existing.attrs = dict(attrs)
            else:
                node.marks.append(Mark(LINK, dict(attrs)))

        changed = self._map_selected_text(apply)
        if changed:
            self._changed()
        return changed

    @requires_ready
    def unset_link(self) -> bool:
        self.extend_mark_range(LINK)

        def apply(node: Node) -> None:
            node.marks = [mark for mark in node.marks if mark.type != LINK]

        changed = self._map_selected_text(apply)
        if changed:
            self._changed()
        return changed

    @requires_ready
    def edit_link(
        self,
        prompt: Callable[[str], str | None],
        confirm: Callable[[], bool],
    ) -> bool:
        """
        Interactive link editing.

        ``prompt`` receives the current href ("" when none) and returns the
        new URL, or None to cancel. An empty URL removes the link; otherwise
        ``confirm`` decides whether the link is marked nofollow.
        """
        previous = self.get_link_attributes().get("href") or ""
        url = prompt(previous)
        if url is None:
            return False
        url = url.strip()
        if url == "":
            return self.unset_link()
        return self.set_link(url, nofollow=bool(confirm()))

    # --- images ----------------------------------------------------------

    @requires_ready
    def add_image(self, upload_file, *, alt: str = "", title: str = ""):
        """
        Upload ``upload_file`` and insert an image at the caret.

        Returns the uploader's ``UploadResult``. On failure nothing is
        inserted and the message is kept on ``last_error``.
        """
        if self.uploader is None:
            raise EditorError("No uploader configured for image insertion")

        result = self.uploader(upload_file)
        if not result.success or not result.url:
            self.last_error = result.error or "Image upload failed"
            logger.warning("Image upload failed: %s", self.last_error)
            return result

        self.last_error = None
        attrs = {"src": result.url}
        if alt:
            attrs["alt"] = alt
        if title:
            attrs["title"] = title
        self._insert_block(Node(type=IMAGE, attrs=attrs))
        self._changed()
        return result
