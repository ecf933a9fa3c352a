"""BeautifulSoup helpers shared by the HTML passes over rendered posts."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

HEADING_NAMES = ("h1", "h2", "h3", "h4", "h5", "h6")


def parse_fragment(html: str) -> BeautifulSoup:
    # html.parser keeps the fragment as-is (no <html>/<body> wrapper)
    return BeautifulSoup(html, "html.parser")


def find_headings(soup: BeautifulSoup) -> list[Tag]:
    """All heading elements in document order."""
    return soup.find_all(HEADING_NAMES)


def heading_level(tag: Tag) -> int:
    return int(tag.name[1])  # "h2" -> 2


def heading_title(tag: Tag) -> str:
    return tag.get_text(" ", strip=True)
