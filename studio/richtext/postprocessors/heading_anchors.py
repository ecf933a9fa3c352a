# studio/richtext/postprocessors/heading_anchors.py

from django.utils.text import slugify

from .utils import find_headings, heading_title, parse_fragment


def heading_anchors(html: str, context: dict) -> str:
    """
    Give every heading a unique slug ``id``.

    Headings that already carry an id keep it. Duplicate titles get a
    numeric suffix ("cast", "cast-2", ...).
    """
    soup = parse_fragment(html)
    headings = find_headings(soup)
    if not headings:
        return html

    used = {tag["id"] for tag in soup.find_all(id=True)}
    for heading in headings:
        if heading.get("id"):
            continue
        base = slugify(heading_title(heading)) or "section"
        identifier = base
        counter = 2
        while identifier in used:
            identifier = f"{base}-{counter}"
            counter += 1
        used.add(identifier)
        heading["id"] = identifier

    return str(soup)
