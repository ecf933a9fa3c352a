"""
Celery task results, shown in terms of the blog posts they rendered.
"""

import json
import re

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from django_celery_results.admin import TaskResultAdmin as BaseTaskResultAdmin
from django_celery_results.models import TaskResult

from studio.models import BlogPost

RENDER_TASK = "studio.tasks.render_post_content"

# Stored args look like '"(42,)"' (JSON text of the args repr)
POST_ID_ARG = re.compile(r"^\W*(\d+)")

TASK_LABELS = {
    RENDER_TASK: "Render Blog Post",
    "celery.backend_cleanup": "Cleanup Old Results",
}

STATE_COLORS = {
    "SUCCESS": "#28a745",
    "FAILURE": "#dc3545",
    "PENDING": "#ffc107",
    "STARTED": "#17a2b8",
    "RETRY": "#fd7e14",
    "REVOKED": "#6c757d",
}


def readable_task_name(task_name: str) -> str:
    """Label for a task path; unknown tasks use their function name in title case."""
    if not task_name:
        return "-"
    return TASK_LABELS.get(task_name) or task_name.rsplit(".", 1)[-1].replace("_", " ").title()


def _loads(raw):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return None


def rendered_post_id(task_result) -> int | None:
    """Post id passed to a render task, if this result belongs to one."""
    if task_result.task_name != RENDER_TASK or not task_result.task_args:
        return None
    match = POST_ID_ARG.match(task_result.task_args)
    return int(match.group(1)) if match else None


def render_summary(task_result) -> str:
    """Outcome of a render task as reported in its result dict."""
    result = _loads(task_result.result)
    if not isinstance(result, dict):
        return "-"
    if result.get("success"):
        return f"{result.get('headings', 0)} heading(s)"
    return result.get("error") or "failed"


class TaskResultAdmin(BaseTaskResultAdmin):
    list_display = (
        "short_task_id",
        "task_display_name",
        "post_link",
        "colored_status",
        "outcome",
        "date_done",
    )
    list_filter = ("status", "date_done", "task_name")
    search_fields = ("task_name", "task_id", "status", "task_args")
    ordering = ("-date_done",)

    @admin.display(description="Task ID", ordering="task_id")
    def short_task_id(self, obj):
        return format_html('<span title="{}">{}</span>', obj.task_id, (obj.task_id or "-")[:8])

    @admin.display(description="Task", ordering="task_name")
    def task_display_name(self, obj):
        return readable_task_name(obj.task_name)

    @admin.display(description="Post")
    def post_link(self, obj):
        post_id = rendered_post_id(obj)
        if post_id is None:
            return "-"
        post = BlogPost.objects.filter(pk=post_id).only("title").first()
        if post is None:
            return f"#{post_id} (deleted)"
        url = reverse("admin:studio_blogpost_change", args=[post_id])
        return format_html('<a href="{}">{}</a>', url, post.title)

    @admin.display(description="Status", ordering="status")
    def colored_status(self, obj):
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            STATE_COLORS.get(obj.status, "#6c757d"),
            obj.status,
        )

    @admin.display(description="Outcome")
    def outcome(self, obj):
        if obj.task_name != RENDER_TASK:
            return "-"
        return render_summary(obj)


admin.site.unregister(TaskResult)
admin.site.register(TaskResult, TaskResultAdmin)
