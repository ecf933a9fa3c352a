"""
URL configuration for WaysProject.
"""

from django.contrib import admin
from django.contrib.sitemaps.views import sitemap
from django.urls import include, path

from studio.sitemaps import sitemaps

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("studio.api.urls")),
    path("sitemap.xml", sitemap, {"sitemaps": sitemaps}, name="django.contrib.sitemaps.views.sitemap"),
    path("", include("studio.urls")),
]
