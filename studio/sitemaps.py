from django.contrib.sitemaps import Sitemap
from django.urls import reverse

from .models import BlogPost


class StaticViewSitemap(Sitemap):
    # url name -> (priority, changefreq)
    pages = {
        "studio:home": (1.0, "yearly"),
        "studio:about": (0.8, "monthly"),
        "studio:services": (0.8, "monthly"),
        "studio:portfolio": (0.8, "monthly"),
        "studio:contact": (0.8, "monthly"),
        "studio:testimonials": (0.5, "monthly"),
        "studio:blog-list": (0.9, "daily"),
    }

    def items(self):
        return list(self.pages)

    def location(self, item):
        return reverse(item)

    def priority(self, item):
        return self.pages[item][0]

    def changefreq(self, item):
        return self.pages[item][1]


class BlogPostSitemap(Sitemap):
    changefreq = "weekly"
    priority = 0.7

    def items(self):
        return BlogPost.objects.published().only("slug", "updated_at")

    def lastmod(self, obj):
        return obj.updated_at


sitemaps = {
    "static": StaticViewSitemap,
    "blog": BlogPostSitemap,
}
