"""Tests for the BlogPost model, content storage and the render task."""

from unittest import mock

from django.test import TestCase

from studio.models import BlogPost
from studio.richtext.persistence import load_content, render_post, save_content
from studio.richtext.renderer import render_document
from studio.tasks import render_post_content
from studio.tests.factories import BlogPostFactory, document, heading, paragraph


class BlogPostModelTests(TestCase):
    def test_slug_from_title(self):
        post = BlogPostFactory(title="Premiere Night in Kathmandu")
        self.assertEqual(post.slug, "premiere-night-in-kathmandu")

    def test_duplicate_titles_get_numbered_slugs(self):
        first = BlogPostFactory(title="Casting Call")
        second = BlogPostFactory(title="Casting Call")
        third = BlogPostFactory(title="Casting Call")
        self.assertEqual(
            [first.slug, second.slug, third.slug],
            ["casting-call", "casting-call-2", "casting-call-3"],
        )

    def test_explicit_slug_is_lowercased(self):
        post = BlogPostFactory(slug=" Behind-The-Scenes ")
        self.assertEqual(post.slug, "behind-the-scenes")

    def test_publishing_stamps_published_at(self):
        post = BlogPostFactory(draft=True)
        self.assertIsNone(post.published_at)
        post.published = True
        post.save()
        self.assertIsNotNone(post.published_at)

    def test_word_count_and_read_time(self):
        words = " ".join(["word"] * 450)
        post = BlogPostFactory(content=document(paragraph(words)))
        self.assertEqual(post.word_count, 450)
        self.assertEqual(post.read_time, 2)

    def test_read_time_defaults_for_empty_content(self):
        post = BlogPostFactory(content=document())
        self.assertEqual(post.word_count, 0)
        self.assertEqual(post.read_time, 5)

    def test_author_read_time_is_kept(self):
        post = BlogPostFactory(read_time=12)
        self.assertEqual(post.read_time, 12)

    def test_content_change_clears_derived_html(self):
        post = BlogPostFactory()
        BlogPost.objects.filter(pk=post.pk).update(
            content_html_cached="<p>old</p>", table_of_contents=[{"id": "old"}]
        )
        post.refresh_from_db()
        post.content = document(paragraph("new"))
        post.save()
        post.refresh_from_db()
        self.assertEqual(post.content_html_cached, "")
        self.assertIsNone(post.table_of_contents)

    def test_unrelated_save_keeps_cached_html(self):
        post = BlogPostFactory()
        BlogPost.objects.filter(pk=post.pk).update(content_html_cached="<p>cached</p>")
        post.refresh_from_db()
        post.title = "Renamed"
        post.save()
        post.refresh_from_db()
        self.assertEqual(post.content_html_cached, "<p>cached</p>")

    def test_querysets(self):
        published = BlogPostFactory()
        draft = BlogPostFactory(draft=True)
        self.assertEqual(list(BlogPost.objects.published()), [published])
        self.assertEqual(list(BlogPost.objects.drafts()), [draft])
        self.assertEqual(list(BlogPost.objects.recent(3)), [published])

    def test_seo_fallbacks(self):
        post = BlogPostFactory(title="Title", excerpt="Excerpt", featured_image="https://cdn.example.com/f.jpg")
        self.assertEqual(post.effective_meta_title, "Title")
        self.assertEqual(post.effective_meta_description, "Excerpt")
        self.assertEqual(post.social_image, "https://cdn.example.com/f.jpg")
        self.assertEqual(post.get_absolute_url(), f"/blog/{post.slug}/")

    def test_render_is_scheduled_after_commit(self):
        with mock.patch.object(render_post_content, "delay") as delay:
            with self.captureOnCommitCallbacks(execute=True):
                post = BlogPostFactory()
        delay.assert_called_once_with(post.pk)

    def test_render_runs_inline_when_queueing_fails(self):
        with mock.patch.object(render_post_content, "delay", side_effect=OSError("no broker")):
            with self.captureOnCommitCallbacks(execute=True):
                post = BlogPostFactory(content=document(heading("Cast"), paragraph("Crew")))
        post.refresh_from_db()
        self.assertIn('id="cast"', post.content_html_cached)
        self.assertEqual(post.table_of_contents[0]["title"], "Cast")


class ContentStorageTests(TestCase):
    def test_round_trip_is_exact(self):
        tree = document(
            paragraph("Hello", marks=["bold", "italic"]),
            {"type": "callout", "attrs": {"tone": "warning", "nested": {"a": [1, 2]}}},
        )
        post = BlogPostFactory()
        save_content(post, tree)
        stored = BlogPost.objects.get(pk=post.pk)
        self.assertEqual(load_content(stored), tree)

    def test_saved_tree_is_a_snapshot(self):
        tree = document(paragraph("before"))
        post = BlogPostFactory()
        save_content(post, tree)
        tree["content"].append(paragraph("after"))
        self.assertEqual(BlogPost.objects.get(pk=post.pk).content, document(paragraph("before")))

    def test_save_clears_cache_and_updates_stats(self):
        post = BlogPostFactory()
        BlogPost.objects.filter(pk=post.pk).update(content_html_cached="<p>old</p>")
        post.refresh_from_db()
        save_content(post, document(paragraph("three new words")))
        post.refresh_from_db()
        self.assertEqual(post.content_html_cached, "")
        self.assertEqual(post.word_count, 3)

    def test_save_content_on_unsaved_post(self):
        post = BlogPost(title="Fresh", excerpt="New post")
        save_content(post, document(paragraph("text")))
        self.assertIsNotNone(post.pk)
        self.assertEqual(BlogPost.objects.get(pk=post.pk).content, document(paragraph("text")))

    def test_last_write_wins(self):
        post = BlogPostFactory()
        save_content(post, document(paragraph("first")))
        save_content(BlogPost.objects.get(pk=post.pk), document(paragraph("second")))
        self.assertEqual(BlogPost.objects.get(pk=post.pk).content, document(paragraph("second")))

    def test_render_post_prefers_cache(self):
        post = BlogPostFactory(content=document(paragraph("live")))
        self.assertIn("live", render_post(post))
        post.content_html_cached = "<p>cached</p>"
        self.assertEqual(render_post(post), "<p>cached</p>")


class RenderTaskTests(TestCase):
    def test_task_caches_html_and_toc(self):
        post = BlogPostFactory(content=document(heading("Cast"), heading("Leads", level=3), paragraph("x")))
        result = render_post_content(post.pk)
        self.assertEqual(result, {"success": True, "post_id": post.pk, "headings": 2})
        post.refresh_from_db()
        self.assertIn('<p class="rt-paragraph">x</p>', post.content_html_cached)
        self.assertEqual(post.table_of_contents[0]["children"][0]["id"], "leads")

    def test_task_discards_render_of_outdated_content(self):
        post = BlogPostFactory(content=document(paragraph("first cut")))
        newer = document(paragraph("final cut"))

        def edit_during_render(tree, context=None):
            BlogPost.objects.filter(pk=post.pk).update(content=newer)
            return render_document(tree, context)

        with mock.patch("studio.richtext.renderer.render_document", side_effect=edit_during_render):
            result = render_post_content(post.pk)

        self.assertFalse(result["success"])
        post.refresh_from_db()
        self.assertEqual(post.content_html_cached, "")
        self.assertIsNone(post.table_of_contents)
        self.assertIn("final cut", render_post(post))

    def test_task_missing_post(self):
        result = render_post_content(999999)
        self.assertFalse(result["success"])
