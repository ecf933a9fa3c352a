"""
Management command to (re)render blog post HTML.

Renders the content tree of each post and stores the HTML and table of
contents. Useful after changing the renderer or postprocessors.
"""

from django.core.management.base import BaseCommand

from studio.models import BlogPost
from studio.tasks import render_post_content


class Command(BaseCommand):
    help = "Render blog post content to cached HTML"

    def add_arguments(self, parser):
        parser.add_argument(
            "--slug",
            type=str,
            help="Render a single post by slug",
        )
        parser.add_argument(
            "--published-only",
            action="store_true",
            help="Skip drafts",
        )

    def handle(self, *args, **options):
        slug = options.get("slug")
        posts = BlogPost.objects.all()
        if slug:
            posts = posts.filter(slug=slug.lower())
            if not posts.exists():
                self.stdout.write(self.style.ERROR(f"No post found with slug: {slug}"))
                return
        elif options.get("published_only"):
            posts = posts.published()

        rendered = failed = 0
        for post_id, post_slug in posts.values_list("pk", "slug"):
            result = render_post_content(post_id)
            if result.get("success"):
                rendered += 1
                if options["verbosity"] > 1:
                    self.stdout.write(f"  {post_slug}: {result['headings']} heading(s)")
            else:
                failed += 1
                self.stdout.write(self.style.WARNING(f"  {post_slug}: {result.get('error')}"))

        self.stdout.write(self.style.SUCCESS(f"Rendered {rendered} post(s), {failed} failed"))
