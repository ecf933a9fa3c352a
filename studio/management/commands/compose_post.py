"""
Management command to create a blog post from a plain text file.

The file is split into blocks on blank lines. A block starting with ``#``
marks becomes a heading of that level, a block fenced with triple
backticks becomes a code block (without blank lines inside), anything
else a paragraph. Images given with ``--image`` are uploaded to storage
and appended after the text.

    python manage.py compose_post notes.txt --title "Behind the scenes" \\
        --excerpt "Making of Taraharu" --image still.jpg --publish
"""

import mimetypes
import re
from pathlib import Path

from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management.base import BaseCommand, CommandError

from studio.models import BlogPost
from studio.richtext import EditingSurface
from studio.richtext.persistence import save_content
from studio.uploads import upload_image

HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$", re.DOTALL)
FENCE = "```"


def parse_blocks(text: str) -> list[tuple[str, dict, str]]:
    """Split text into ``(kind, attrs, body)`` blocks."""
    blocks = []
    for chunk in re.split(r"\n\s*\n", text.replace("\r\n", "\n")):
        chunk = chunk.strip("\n")
        if not chunk.strip():
            continue
        if chunk.startswith(FENCE):
            first_line, _, rest = chunk.partition("\n")
            language = first_line[len(FENCE):].strip()
            body = rest.rstrip()
            if body.endswith(FENCE):
                body = body[: -len(FENCE)].rstrip("\n")
            blocks.append(("code", {"language": language}, body))
            continue
        match = HEADING_RE.match(chunk)
        if match:
            blocks.append(("heading", {"level": len(match.group(1))}, " ".join(match.group(2).split())))
        else:
            blocks.append(("paragraph", {}, " ".join(chunk.split())))
    return blocks


def open_image(path: Path) -> SimpleUploadedFile:
    content_type, _ = mimetypes.guess_type(path.name)
    return SimpleUploadedFile(path.name, path.read_bytes(), content_type=content_type or "")


class Command(BaseCommand):
    help = "Create a blog post from a plain text file"

    def add_arguments(self, parser):
        parser.add_argument("path", type=str, help="Text file with the post body")
        parser.add_argument("--title", type=str, required=True)
        parser.add_argument("--excerpt", type=str, default="")
        parser.add_argument("--author", type=str, default="Admin")
        parser.add_argument("--category", type=str, default="")
        parser.add_argument(
            "--image",
            action="append",
            default=[],
            help="Image to upload and append (repeatable)",
        )
        parser.add_argument(
            "--publish",
            action="store_true",
            help="Publish immediately instead of saving a draft",
        )

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.is_file():
            raise CommandError(f"File not found: {path}")

        surface = EditingSurface(uploader=upload_image).mount()
        for kind, attrs, body in parse_blocks(path.read_text(encoding="utf-8")):
            if kind == "heading":
                surface.insert_heading(body, level=attrs["level"])
            elif kind == "code":
                surface.insert_code_block(body, language=attrs["language"] or None)
            else:
                surface.insert_paragraph(body)

        for image_path in map(Path, options["image"]):
            if not image_path.is_file():
                raise CommandError(f"Image not found: {image_path}")
            result = surface.add_image(open_image(image_path), alt=options["title"])
            if not result.success:
                raise CommandError(f"Could not upload {image_path.name}: {surface.last_error}")
            self.stdout.write(f"Uploaded {image_path.name} -> {result.url}")

        post = BlogPost(
            title=options["title"],
            excerpt=options["excerpt"] or options["title"],
            author=options["author"],
            category=options["category"],
            published=options["publish"],
        )
        save_content(post, surface.get_json())

        state = "Published" if post.published else "Saved draft"
        self.stdout.write(
            self.style.SUCCESS(
                f"{state} '{post.title}' ({post.word_count} words) at {post.get_absolute_url()}"
            )
        )
