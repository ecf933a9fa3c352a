"""
Rich-text document tree model.

The editor stores posts as a JSON tree of typed nodes. Inline ``text`` nodes
carry the text payload and an ordered list of formatting marks; every other
node is either a container (``content``) or an inline/block leaf
(``image``, ``hardBreak``).

The tree arrives from a third-party editor whose output shape may drift
between versions. A missing or wrong-typed field is treated as absent and
unknown node or mark types are kept as-is. Traversals use an explicit stack
and do not depend on the interpreter recursion limit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

# --- Node vocabulary ---
DOC = "doc"
DOCUMENT = "document"
PARAGRAPH = "paragraph"
HEADING = "heading"
BULLET_LIST = "bulletList"
ORDERED_LIST = "orderedList"
LIST_ITEM = "listItem"
BLOCKQUOTE = "blockquote"
CODE_BLOCK = "codeBlock"
IMAGE = "image"
TEXT = "text"
HARD_BREAK = "hardBreak"

# The editor writes "doc"; "document" is accepted for other writers.
DOCUMENT_TYPES = frozenset({DOC, DOCUMENT})
LEAF_TYPES = frozenset({TEXT, IMAGE, HARD_BREAK})
BLOCK_TYPES = frozenset(
    {PARAGRAPH, HEADING, BULLET_LIST, ORDERED_LIST, LIST_ITEM, BLOCKQUOTE, CODE_BLOCK}
)
CONTAINER_TYPES = DOCUMENT_TYPES | BLOCK_TYPES
NODE_TYPES = CONTAINER_TYPES | LEAF_TYPES

# --- Mark vocabulary ---
BOLD = "bold"
ITALIC = "italic"
UNDERLINE = "underline"
STRIKE = "strike"
CODE = "code"
LINK = "link"

MARK_TYPES = frozenset({BOLD, ITALIC, UNDERLINE, STRIKE, CODE, LINK})

DEFAULT_HEADING_LEVEL = 2
HEADING_LEVELS = range(1, 7)


# ---------------------------------------------------------------------------
# Accessors over raw JSON values
# ---------------------------------------------------------------------------


def node_type(value: Any) -> str:
    if isinstance(value, Mapping):
        kind = value.get("type")
        if isinstance(kind, str):
            return kind
    return ""


def node_attrs(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        attrs = value.get("attrs")
        if isinstance(attrs, Mapping):
            return attrs
    return {}


def node_content(value: Any) -> list[Mapping[str, Any]]:
    """Child nodes of ``value``; leaves never have children."""
    if not isinstance(value, Mapping) or node_type(value) in LEAF_TYPES:
        return []
    content = value.get("content")
    if not isinstance(content, list):
        return []
    return [child for child in content if isinstance(child, Mapping)]


def node_text(value: Any) -> str:
    if isinstance(value, Mapping) and node_type(value) == TEXT:
        text = value.get("text")
        if isinstance(text, str):
            return text
    return ""


def node_marks(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, Mapping) or node_type(value) != TEXT:
        return []
    marks = value.get("marks")
    if not isinstance(marks, list):
        return []
    return [mark for mark in marks if isinstance(mark, Mapping) and node_type(mark)]


def attr_str(attrs: Mapping[str, Any], name: str) -> str:
    """Return a string attribute, or "" when missing or not a string."""
    value = attrs.get(name)
    return value if isinstance(value, str) else ""


def heading_level(value: Any) -> int:
    """Heading level from attrs, falling back to level 2 when missing or invalid."""
    level = node_attrs(value).get("level")
    # bool is an int subclass; True must not read as level 1
    if isinstance(level, int) and not isinstance(level, bool) and level in HEADING_LEVELS:
        return level
    return DEFAULT_HEADING_LEVEL


# ---------------------------------------------------------------------------
# Typed model
# ---------------------------------------------------------------------------


@dataclass
class Mark:
    """An inline formatting annotation on a text node."""

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, value: Any) -> Mark | None:
        kind = node_type(value)
        if not kind:
            return None
        return cls(type=kind, attrs=dict(node_attrs(value)))

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        return data


@dataclass
class Node:
    """One element of the document tree."""

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)
    content: list[Node] = field(default_factory=list)
    text: str | None = None
    marks: list[Mark] = field(default_factory=list)

    @property
    def is_text(self) -> bool:
        return self.type == TEXT

    @property
    def is_leaf(self) -> bool:
        return self.type in LEAF_TYPES

    @classmethod
    def text_node(cls, text: str, marks: list[Mark] | None = None) -> Node:
        return cls(type=TEXT, text=text, marks=list(marks or []))

    @classmethod
    def _shallow_from_json(cls, value: Mapping[str, Any]) -> Node:
        kind = node_type(value)
        node = cls(type=kind, attrs=dict(node_attrs(value)))
        if kind == TEXT:
            node.text = node_text(value)
            node.marks = [
                mark for mark in map(Mark.from_json, node_marks(value)) if mark is not None
            ]
        return node

    @classmethod
    def from_json(cls, value: Any) -> Node | None:
        """
        Build a Node tree from loosely-typed JSON.

        Returns None when ``value`` is not an object at all. Children that are
        not objects are dropped; every other malformation degrades to an
        absent field.
        """
        if not isinstance(value, Mapping):
            return None
        root = cls._shallow_from_json(value)
        stack = [(value, root)]
        while stack:
            raw, node = stack.pop()
            for raw_child in node_content(raw):
                child = cls._shallow_from_json(raw_child)
                node.content.append(child)
                stack.append((raw_child, child))
        return root

    def _shallow_to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        if self.is_text:
            data["text"] = self.text or ""
            if self.marks:
                data["marks"] = [mark.to_json() for mark in self.marks]
        return data

    def to_json(self) -> dict[str, Any]:
        """
        Canonical JSON form: fixed field names, absent optional fields omitted.

        The root document always writes ``content``, even when empty.
        """
        root = self._shallow_to_json()
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            if node.content and not node.is_leaf:
                children = []
                for child in node.content:
                    child_out = child._shallow_to_json()
                    children.append(child_out)
                    stack.append((child, child_out))
                out["content"] = children
            elif node.type in DOCUMENT_TYPES:
                out["content"] = []
        return root


def empty_document() -> dict[str, Any]:
    """The tree a new editing session starts from."""
    return {"type": DOC, "content": []}


def is_document(value: Any) -> bool:
    return node_type(value) in DOCUMENT_TYPES


# ---------------------------------------------------------------------------
# Text extraction
# ---------------------------------------------------------------------------


_BLOCK_END = object()


def iter_text(tree: Any) -> Iterator[str]:
    """
    Yield the text payload of a tree in document order.

    Block boundaries and hard breaks yield a newline. Subtrees of unknown
    node types are skipped, matching what the renderer shows.
    """
    stack: list[Any] = [tree]
    while stack:
        item = stack.pop()
        if item is _BLOCK_END:
            yield "\n"
            continue
        kind = node_type(item)
        if kind == TEXT:
            yield node_text(item)
        elif kind == HARD_BREAK:
            yield "\n"
        elif kind in CONTAINER_TYPES:
            if kind in BLOCK_TYPES:
                stack.append(_BLOCK_END)
            stack.extend(reversed(node_content(item)))


def plain_text(tree: Any) -> str:
    text = "".join(iter_text(tree))
    return re.sub(r"\n{2,}", "\n", text).strip()


def count_words(tree: Any) -> int:
    text = plain_text(tree)
    if not text:
        return 0
    return len(re.findall(r"\w+", text))


def count_characters(tree: Any) -> int:
    """Number of characters across all text nodes."""
    total = 0
    stack: list[Any] = [tree]
    while stack:
        item = stack.pop()
        kind = node_type(item)
        if kind == TEXT:
            total += len(node_text(item))
        elif kind in CONTAINER_TYPES:
            stack.extend(node_content(item))
    return total
