from __future__ import annotations

from typing import TypedDict

from .postprocessors.utils import find_headings, heading_level, heading_title, parse_fragment


class HeadingNode(TypedDict):
    level: int
    id: str
    title: str
    children: list["HeadingNode"]


def extract_toc(html: str) -> list[HeadingNode]:
    """
    Nested table of contents from rendered post HTML.

    Only headings with an ``id`` (set by ``heading_anchors``) can be linked
    to; untitled or unanchored headings are left out. A heading nests under
    the closest preceding heading of a lower level.
    """
    roots: list[HeadingNode] = []
    open_sections: list[HeadingNode] = []

    for tag in find_headings(parse_fragment(html)):
        anchor = tag.get("id")
        title = heading_title(tag)
        if not anchor or not title:
            continue

        entry: HeadingNode = {
            "level": heading_level(tag),
            "id": anchor,
            "title": title,
            "children": [],
        }
        while open_sections and open_sections[-1]["level"] >= entry["level"]:
            open_sections.pop()

        siblings = open_sections[-1]["children"] if open_sections else roots
        siblings.append(entry)
        open_sections.append(entry)

    return roots


def count_headings(nodes: list[HeadingNode]) -> int:
    pending = list(nodes)
    total = 0
    while pending:
        total += 1
        pending.extend(pending.pop()["children"])
    return total
