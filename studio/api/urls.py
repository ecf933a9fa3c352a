"""
URL patterns for the blog API (mounted under /api/).
"""

from django.urls import path

from .views import admin_auth, blog_by_slug, blog_collection, blog_detail, upload

app_name = "api"

urlpatterns = [
    path("admin/auth/", admin_auth, name="admin-auth"),
    path("blogs/", blog_collection, name="blogs"),
    path("blogs/slug/<str:slug>/", blog_by_slug, name="blog-by-slug"),
    path("blogs/<int:post_id>/", blog_detail, name="blog-detail"),
    path("upload/", upload, name="upload"),
]
