"""Tests for the public site pages, blog pages and sitemap."""

import json

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse

from studio.seo import build_post_json_ld, build_post_metadata
from studio.tests.factories import BlogPostFactory, UserFactory, document, heading, paragraph


@override_settings(SITE_URL="https://www.waysprivate.com.np", SITE_NAME="Ways Private Limited")
class StaticPageTests(TestCase):
    def test_pages_render(self):
        for name in ("home", "about", "services", "testimonials", "contact", "portfolio", "blog-list"):
            with self.subTest(page=name):
                response = self.client.get(reverse(f"studio:{name}"))
                self.assertEqual(response.status_code, 200)
                self.assertContains(response, "Ways Private Limited")

    def test_home_shows_featured_projects_and_latest_posts(self):
        BlogPostFactory(title="Latest from set")
        BlogPostFactory(title="Hidden draft", draft=True)
        response = self.client.get(reverse("studio:home"))
        self.assertContains(response, "Taraharu")
        self.assertContains(response, "Latest from set")
        self.assertNotContains(response, "Hidden draft")

    def test_portfolio_detail(self):
        response = self.client.get(reverse("studio:portfolio-detail", kwargs={"slug": "kaancho-dhaago"}))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "The Golden Thread of Life")
        self.assertNotIn(response.context["project"], response.context["other_projects"])

    def test_portfolio_category_filter(self):
        response = self.client.get(reverse("studio:portfolio"), {"category": "Feature Film"})
        self.assertEqual([p.slug for p in response.context["projects"]], ["taraharu"])
        self.assertIn("Theatre", response.context["categories"])

        response = self.client.get(reverse("studio:portfolio"), {"category": "Opera"})
        self.assertContains(response, "No projects in this category.")

    def test_unknown_project(self):
        response = self.client.get(reverse("studio:portfolio-detail", kwargs={"slug": "missing"}))
        self.assertEqual(response.status_code, 404)


@override_settings(
    CONTACT_EMAIL="info@example.com",
    DEFAULT_FROM_EMAIL="noreply@example.com",
    EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
)
class ContactTests(TestCase):
    url = "/contact/"

    def test_valid_message_is_mailed(self):
        response = self.client.post(
            self.url,
            {"name": "Sita", "email": "sita@example.com", "message": "We want a music video."},
            follow=True,
        )
        self.assertRedirects(response, self.url)
        self.assertContains(response, "Message sent successfully!")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["info@example.com"])
        self.assertIn("We want a music video.", mail.outbox[0].body)

    def test_invalid_message(self):
        response = self.client.post(self.url, {"name": "", "email": "not-an-email", "message": ""})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].errors)
        self.assertEqual(len(mail.outbox), 0)


@override_settings(SITE_URL="https://www.waysprivate.com.np")
class BlogPageTests(TestCase):
    def test_list_shows_published_only(self):
        BlogPostFactory(title="Shoot wrapped")
        BlogPostFactory(title="Unfinished notes", draft=True)
        response = self.client.get(reverse("studio:blog-list"))
        self.assertContains(response, "Shoot wrapped")
        self.assertNotContains(response, "Unfinished notes")

    def test_list_pagination(self):
        BlogPostFactory.create_batch(10)
        response = self.client.get(reverse("studio:blog-list"), {"page": 2})
        self.assertEqual(len(response.context["posts"]), 1)

    def test_detail_renders_content(self):
        post = BlogPostFactory(
            content=document(heading("Cast"), paragraph("<b>not markup</b>"), heading("Crew")),
            keywords=["nepali film"],
        )
        response = self.client.get(post.get_absolute_url())
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'id="cast"')
        self.assertContains(response, "&lt;b&gt;not markup&lt;/b&gt;")
        self.assertContains(response, '<a href="#crew">Crew</a>', html=True)
        self.assertContains(response, '<meta name="keywords" content="nepali film">', html=True)
        self.assertContains(response, "application/ld+json")

    def test_detail_uses_cached_html(self):
        post = BlogPostFactory()
        type(post).objects.filter(pk=post.pk).update(content_html_cached="<p>from cache</p>")
        response = self.client.get(post.get_absolute_url())
        self.assertContains(response, "from cache")

    def test_draft_is_hidden_from_anonymous_users(self):
        post = BlogPostFactory(draft=True)
        self.assertEqual(self.client.get(post.get_absolute_url()).status_code, 404)

    def test_staff_can_preview_draft(self):
        post = BlogPostFactory(draft=True)
        self.client.force_login(UserFactory(staff=True))
        response = self.client.get(post.get_absolute_url())
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["is_preview"])
        self.assertContains(response, "Draft preview")

    def test_json_ld_cannot_close_script(self):
        post = BlogPostFactory(title="</script><script>alert(1)</script>")
        response = self.client.get(post.get_absolute_url())
        self.assertNotContains(response, "</script><script>alert(1)")
        payload = json.loads(response.context["json_ld"])
        self.assertEqual(payload["headline"], post.title)


@override_settings(SITE_URL="https://www.waysprivate.com.np", SITE_NAME="Ways Private Limited")
class SeoTests(TestCase):
    def test_metadata_fallbacks(self):
        post = BlogPostFactory(title="Title", excerpt="Excerpt")
        meta = build_post_metadata(post)
        self.assertEqual(meta["title"], "Title")
        self.assertEqual(meta["description"], "Excerpt")
        self.assertEqual(meta["canonical_url"], f"https://www.waysprivate.com.np/blog/{post.slug}/")
        self.assertTrue(meta["open_graph"]["image"].endswith("studio/img/default-og-image.jpg"))
        self.assertEqual(meta["twitter"]["card"], "summary_large_image")

    def test_metadata_prefers_seo_fields(self):
        post = BlogPostFactory(
            meta_title="SEO title",
            meta_description="SEO description",
            og_image="https://cdn.example.com/og.jpg",
        )
        meta = build_post_metadata(post)
        self.assertEqual(meta["title"], "SEO title")
        self.assertEqual(meta["description"], "SEO description")
        self.assertEqual(meta["open_graph"]["image"], "https://cdn.example.com/og.jpg")

    def test_json_ld(self):
        post = BlogPostFactory(featured_image="https://cdn.example.com/f.jpg", keywords=["film", "nepal"])
        data = build_post_json_ld(post)
        self.assertEqual(data["@type"], "BlogPosting")
        self.assertEqual(data["image"], "https://cdn.example.com/f.jpg")
        self.assertEqual(data["keywords"], "film, nepal")
        self.assertEqual(data["publisher"]["name"], "Ways Private Limited")


class SitemapTests(TestCase):
    def test_sitemap_lists_pages_and_published_posts(self):
        published = BlogPostFactory()
        draft = BlogPostFactory(draft=True)
        response = self.client.get("/sitemap.xml")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "/about/")
        self.assertContains(response, published.get_absolute_url())
        self.assertNotContains(response, draft.get_absolute_url())
