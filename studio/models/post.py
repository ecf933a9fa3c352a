"""
Blog post model.

Content is a rich-text document tree stored as JSON. Rendering to HTML
happens outside the model (``studio.richtext``), optionally cached in
``content_html_cached`` by a Celery task scheduled after save.
"""

import logging

from django.db import models, transaction
from django.template.defaultfilters import slugify
from django.urls import NoReverseMatch, reverse
from django.utils import timezone

from studio.richtext.nodes import count_words, empty_document

from .base import TimeStampedModel, UniqueSlugMixin

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 225
DEFAULT_READ_TIME = 5


class BlogPostQuerySet(models.QuerySet):
    def published(self):
        return self.filter(published=True)

    def drafts(self):
        return self.filter(published=False)

    def recent(self, limit: int = 3):
        return self.published()[:limit]


class BlogPost(TimeStampedModel, UniqueSlugMixin):
    # --- Core fields ---
    title = models.CharField(max_length=200)
    slug = models.SlugField(
        max_length=220,
        unique=True,
        blank=True,
        help_text="Auto-generated from title if blank.",
    )
    excerpt = models.CharField(max_length=300, help_text="Brief summary shown on cards.")
    content = models.JSONField(default=empty_document, help_text="Rich-text document tree.")
    featured_image = models.URLField(max_length=500, blank=True)

    # --- Metadata ---
    author = models.CharField(max_length=120, default="Admin")
    category = models.CharField(max_length=120, blank=True, db_index=True)
    tags = models.JSONField(default=list, blank=True)
    read_time = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        help_text="Minutes. Estimated from the word count when left blank.",
    )

    # --- SEO / Social ---
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.CharField(max_length=300, blank=True)
    keywords = models.JSONField(default=list, blank=True)
    og_image = models.URLField(max_length=500, blank=True)

    # --- Publication ---
    published = models.BooleanField(default=False, db_index=True)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    # --- Derived ---
    word_count = models.PositiveIntegerField(default=0)
    content_html_cached = models.TextField(
        blank=True, help_text="Cache of rendered+processed HTML."
    )
    table_of_contents = models.JSONField(blank=True, null=True)

    objects = BlogPostQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["published", "published_at"], name="blogpost_published_idx"),
        ]
        verbose_name = "Blog post"
        verbose_name_plural = "Blog posts"

    def __str__(self) -> str:
        return self.title

    # ---------------------------
    # Lifecycle
    # ---------------------------

    def save(self, *args, **kwargs):
        self.slug = (self.slug or "").strip().lower()
        if not self.slug:
            self.slug = self._unique_slug(slugify(self.title) or "post")

        if self.published and self.published_at is None:
            self.published_at = timezone.now()

        # --- Content changes invalidate the cached HTML ---
        render_async = False
        if self.pk is None:
            render_async = True
        else:
            original = (
                BlogPost.objects.filter(pk=self.pk)
                .values_list("content", flat=True)
                .first()
            )
            if original != self.content:
                render_async = True
                self.content_html_cached = ""
                self.table_of_contents = None

        # --- Update fast-running derived stats synchronously ---
        self.word_count = count_words(self.content)
        if not self.read_time:
            self.read_time = self.estimate_read_time(self.word_count)

        update_fields = kwargs.get("update_fields")
        if update_fields is not None and render_async:
            kwargs["update_fields"] = set(update_fields) | {
                "content_html_cached",
                "table_of_contents",
                "word_count",
                "read_time",
            }

        super().save(*args, **kwargs)

        # --- Schedule slow tasks after transaction commits ---
        if render_async:
            post_id = self.pk
            transaction.on_commit(lambda: schedule_render(post_id))

    @staticmethod
    def estimate_read_time(word_count: int) -> int:
        if not word_count:
            return DEFAULT_READ_TIME
        return max(1, round(word_count / WORDS_PER_MINUTE))

    # ---------------------------
    # Helpers
    # ---------------------------

    def get_absolute_url(self) -> str:
        try:
            return reverse("studio:blog-detail", kwargs={"slug": self.slug})
        except NoReverseMatch:
            return f"/blog/{self.slug}/"

    @property
    def effective_meta_title(self) -> str:
        return self.meta_title or self.title

    @property
    def effective_meta_description(self) -> str:
        return self.meta_description or self.excerpt

    @property
    def social_image(self) -> str:
        return self.og_image or self.featured_image


def schedule_render(post_id: int) -> None:
    """Queue HTML rendering for a post, rendering inline when no broker is reachable."""
    from studio.tasks import render_post_content

    try:
        render_post_content.delay(post_id)
    except Exception:
        logger.warning(
            "Could not queue render for post %s, rendering synchronously",
            post_id,
            exc_info=True,
        )
        render_post_content(post_id)
