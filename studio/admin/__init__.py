"""
Django admin configuration for the studio app.

- post: BlogPost admin with the rich-text editor
- task_result: Celery task results with readable task names

Admin classes register themselves via @admin.register() in their modules.
"""

from django.conf import settings
from django.contrib import admin

admin.site.site_header = getattr(settings, "ADMIN_SITE_HEADER", "Django Administration")
admin.site.site_title = getattr(settings, "ADMIN_SITE_TITLE", "Django site admin")
admin.site.index_title = getattr(settings, "ADMIN_INDEX_TITLE", "Site administration")

from .post import BlogPostAdmin  # noqa: E402
from .task_result import TaskResultAdmin  # noqa: E402

__all__ = [
    "BlogPostAdmin",
    "TaskResultAdmin",
]
