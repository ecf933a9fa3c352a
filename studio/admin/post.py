"""
Admin for blog posts.

The content field is edited with ``RichTextWidget``; derived fields (word
count, cached HTML, table of contents) are read-only and refreshed by the
render task after each content change.
"""

from django.contrib import admin, messages
from django.utils import timezone
from django.utils.html import format_html
from django.utils.safestring import mark_safe
from unfold.admin import ModelAdmin
from unfold.decorators import action, display

from studio.models import BlogPost
from studio.models.post import schedule_render
from studio.richtext.widgets import RichTextField, RichTextWidget


@admin.register(BlogPost)
class BlogPostAdmin(ModelAdmin):
    save_on_top = True
    date_hierarchy = "published_at"

    list_display = (
        "title",
        "author",
        "category",
        "status_badge",
        "published_at",
        "word_count",
        "render_state",
    )
    list_filter = ("published", "category", "published_at", "created_at")
    search_fields = ("title", "slug", "excerpt", "author")
    ordering = ("-published_at", "-created_at")

    readonly_fields = (
        "word_count",
        "rendered_preview",
        "table_of_contents",
        "created_at",
        "updated_at",
    )

    actions = (
        "publish_selected",
        "unpublish_selected",
        "rerender_selected",
    )

    prepopulated_fields = {"slug": ("title",)}

    fieldsets = (
        (
            "Basic Information",
            {
                "fields": (
                    ("title", "slug"),
                    ("author", "category"),
                    "excerpt",
                    "featured_image",
                ),
            },
        ),
        (
            "Content",
            {
                "fields": ("content",),
            },
        ),
        (
            "Publishing",
            {
                "fields": (
                    ("published", "published_at"),
                    ("tags", "read_time"),
                ),
                "description": "Read time is estimated from the word count when left blank.",
            },
        ),
        (
            "SEO & Social",
            {
                "fields": (
                    ("meta_title", "og_image"),
                    "meta_description",
                    "keywords",
                ),
                "classes": ["collapse"],
            },
        ),
        (
            "Derived",
            {
                "fields": (
                    ("word_count", "created_at", "updated_at"),
                    "table_of_contents",
                    "rendered_preview",
                ),
                "classes": ["collapse"],
            },
        ),
    )

    def formfield_for_dbfield(self, db_field, request, **kwargs):
        if db_field.name == "content":
            kwargs["form_class"] = RichTextField
            kwargs["widget"] = RichTextWidget()
        return super().formfield_for_dbfield(db_field, request, **kwargs)

    @display(description="Status", ordering="published")
    def status_badge(self, obj):
        if obj.published:
            background, color, label = "#d4edda", "#155724", "Published"
        else:
            background, color, label = "#fff3cd", "#856404", "Draft"
        return format_html(
            '<span style="background: {}; color: {}; padding: 4px 8px; border-radius: 4px; font-size: 11px; font-weight: 500;">{}</span>',
            background,
            color,
            label,
        )

    @display(description="HTML")
    def render_state(self, obj):
        return "cached" if obj.content_html_cached else "pending"

    @display(description="Rendered HTML")
    def rendered_preview(self, obj):
        if not obj.content_html_cached:
            return "Not rendered yet"
        return format_html(
            '<div style="max-height: 400px; overflow: auto; border: 1px solid #e9ecef; padding: 12px;">{}</div>',
            mark_safe(obj.content_html_cached),
        )

    @action(description="Publish selected posts")
    def publish_selected(self, request, queryset):
        count = 0
        for post in queryset:
            post.published = True
            if not post.published_at:
                post.published_at = timezone.now()
            post.save()
            count += 1
        self.message_user(request, f"Published {count} post(s).")

    @action(description="Unpublish selected posts")
    def unpublish_selected(self, request, queryset):
        count = queryset.update(published=False)
        self.message_user(request, f"Unpublished {count} post(s).")

    @action(description="Re-render HTML for selected posts")
    def rerender_selected(self, request, queryset):
        count = 0
        for post_id in queryset.values_list("pk", flat=True):
            try:
                schedule_render(post_id)
                count += 1
            except Exception as e:
                self.message_user(
                    request,
                    f"Error rendering post {post_id}: {e}",
                    level=messages.ERROR,
                )
        self.message_user(request, f"Queued {count} post(s) for rendering.", level=messages.SUCCESS)
