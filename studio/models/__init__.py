"""
Models for the studio app.

- base: Base models and mixins (TimeStampedModel, UniqueSlugMixin)
- post: Blog posts (BlogPost, BlogPostQuerySet)
"""

from .base import TimeStampedModel, UniqueSlugMixin
from .post import BlogPost, BlogPostQuerySet

__all__ = [
    "TimeStampedModel",
    "UniqueSlugMixin",
    "BlogPost",
    "BlogPostQuerySet",
]
