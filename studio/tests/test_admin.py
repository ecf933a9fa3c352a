"""Tests for the BlogPost admin."""

import json
from unittest import mock

from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django_celery_results.models import TaskResult

from studio.admin.task_result import readable_task_name, render_summary, rendered_post_id
from studio.richtext.widgets import RichTextWidget
from studio.tests.factories import BlogPostFactory, UserFactory


class BlogPostAdminTests(TestCase):
    def setUp(self):
        self.user = UserFactory(staff=True, is_superuser=True)
        self.client.force_login(self.user)

    def test_changelist(self):
        BlogPostFactory(title="Listed post")
        response = self.client.get(reverse("admin:studio_blogpost_changelist"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Listed post")

    def test_change_form_uses_rich_text_editor(self):
        post = BlogPostFactory()
        response = self.client.get(reverse("admin:studio_blogpost_change", args=[post.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertIsInstance(response.context["adminform"].form.fields["content"].widget, RichTextWidget)
        self.assertContains(response, "data-rt-mount")

    def test_publish_and_unpublish_actions(self):
        draft = BlogPostFactory(draft=True)
        url = reverse("admin:studio_blogpost_changelist")
        self.client.post(url, {"action": "publish_selected", "_selected_action": [draft.pk]})
        draft.refresh_from_db()
        self.assertTrue(draft.published)
        self.assertIsNotNone(draft.published_at)

        self.client.post(url, {"action": "unpublish_selected", "_selected_action": [draft.pk]})
        draft.refresh_from_db()
        self.assertFalse(draft.published)

    def test_rerender_action(self):
        post = BlogPostFactory()
        with mock.patch("studio.admin.post.schedule_render") as schedule:
            self.client.post(
                reverse("admin:studio_blogpost_changelist"),
                {"action": "rerender_selected", "_selected_action": [post.pk]},
            )
        schedule.assert_called_once_with(post.pk)

    def test_task_results_are_registered(self):
        response = self.client.get(reverse("admin:django_celery_results_taskresult_changelist"))
        self.assertEqual(response.status_code, 200)

    def test_render_task_results_link_to_their_post(self):
        post = BlogPostFactory(title="Rendered post")
        TaskResult.objects.create(
            task_id="abc12345-render",
            task_name="studio.tasks.render_post_content",
            task_args=json.dumps(f"({post.pk},)"),
            status="SUCCESS",
            result=json.dumps({"success": True, "post_id": post.pk, "headings": 3}),
        )
        response = self.client.get(reverse("admin:django_celery_results_taskresult_changelist"))
        self.assertContains(response, "Render Blog Post")
        self.assertContains(response, reverse("admin:studio_blogpost_change", args=[post.pk]))
        self.assertContains(response, "3 heading(s)")


class TaskResultHelperTests(SimpleTestCase):
    def result(self, **kwargs):
        defaults = {"task_name": "studio.tasks.render_post_content", "task_args": None, "result": None}
        defaults.update(kwargs)
        return TaskResult(**defaults)

    def test_readable_task_name(self):
        self.assertEqual(readable_task_name("studio.tasks.render_post_content"), "Render Blog Post")
        self.assertEqual(readable_task_name("other.tasks.send_digest"), "Send Digest")
        self.assertEqual(readable_task_name(""), "-")

    def test_rendered_post_id(self):
        self.assertEqual(rendered_post_id(self.result(task_args='"(42,)"')), 42)
        self.assertEqual(rendered_post_id(self.result(task_args="(7,)")), 7)
        self.assertIsNone(rendered_post_id(self.result(task_args='"()"')))
        self.assertIsNone(rendered_post_id(self.result(task_name="celery.backend_cleanup", task_args="(1,)")))

    def test_render_summary(self):
        failed = self.result(result=json.dumps({"success": False, "error": "Post 9 not found."}))
        self.assertEqual(render_summary(failed), "Post 9 not found.")
        self.assertEqual(render_summary(self.result(result="not json")), "-")
