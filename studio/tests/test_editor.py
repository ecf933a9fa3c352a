"""Tests for the server-side editing surface."""

from django.test import SimpleTestCase

from studio.richtext.editor import (
    EditingSurface,
    EditorError,
    EditorNotReady,
    InvalidPosition,
    Selection,
)
from studio.richtext.nodes import empty_document
from studio.tests.factories import document, paragraph
from studio.uploads import UploadResult


def surface_with(*blocks, **kwargs):
    return EditingSurface(document(*blocks), **kwargs).mount()


class LifecycleTests(SimpleTestCase):
    def test_commands_require_mount(self):
        surface = EditingSurface()
        self.assertFalse(surface.ready)
        with self.assertRaises(EditorNotReady):
            surface.get_json()
        with self.assertRaises(EditorNotReady):
            surface.insert_text("x")

    def test_preview_is_empty_until_mounted(self):
        surface = EditingSurface(document(paragraph("Hi")))
        self.assertEqual(surface.render_preview(), "")
        surface.mount()
        self.assertEqual(surface.render_preview(), '<p class="rt-paragraph">Hi</p>')

    def test_mount_defaults_to_empty_document(self):
        surface = EditingSurface().mount()
        self.assertEqual(surface.get_json(), empty_document())
        self.assertEqual(surface.selection, Selection.caret(()))

    def test_mount_wraps_a_bare_block(self):
        surface = EditingSurface(paragraph("Hi")).mount()
        self.assertEqual(surface.get_json(), document(paragraph("Hi")))

    def test_mount_ignores_non_object_content(self):
        surface = EditingSurface("garbage").mount()
        self.assertEqual(surface.get_json(), empty_document())

    def test_caret_starts_at_end(self):
        surface = surface_with(paragraph("One"), paragraph("Three"))
        self.assertEqual(surface.selection, Selection.caret((1,), 5))

    def test_character_count(self):
        self.assertEqual(surface_with(paragraph("Hello"), paragraph("you")).character_count(), 8)


class TypingTests(SimpleTestCase):
    def setUp(self):
        self.changes = []
        self.surface = EditingSurface(on_change=self.changes.append).mount()

    def test_typing_into_empty_document_creates_paragraph(self):
        self.surface.insert_text("Hello")
        self.assertEqual(self.surface.get_json(), document(paragraph("Hello")))
        self.assertEqual(self.surface.selection, Selection.caret((0,), 5))

    def test_every_change_reports_the_full_tree(self):
        self.surface.insert_text("Hello")
        self.surface.insert_text(" world")
        self.assertEqual(len(self.changes), 2)
        self.assertEqual(self.changes[-1], document(paragraph("Hello world")))
        self.assertEqual(self.changes[-1], self.surface.get_json())

    def test_typing_replaces_selection(self):
        self.surface.insert_text("Hello world")
        self.surface.select((0,), 6, 11)
        self.surface.insert_text("Nepal")
        self.assertEqual(self.surface.get_json(), document(paragraph("Hello Nepal")))

    def test_empty_text_is_a_no_op(self):
        self.assertFalse(self.surface.insert_text(""))
        self.assertEqual(self.changes, [])

    def test_hard_break(self):
        self.surface.insert_text("ab")
        self.surface.select((0,), 1)
        self.surface.insert_hard_break()
        self.assertEqual(self.surface.render_preview(), '<p class="rt-paragraph">a<br>b</p>')

    def test_select_is_clamped(self):
        self.surface.insert_text("Hello")
        self.assertEqual(self.surface.select((0,), 3, 99), Selection((0,), 3, 5))
        self.assertEqual(self.surface.select((0,), 4, 1), Selection((0,), 1, 4))

    def test_select_unknown_path(self):
        with self.assertRaises(InvalidPosition):
            self.surface.select((3,))


class MarkTests(SimpleTestCase):
    def setUp(self):
        self.surface = surface_with(paragraph("Hello world"))

    def test_toggle_bold_on_selection(self):
        self.surface.select((0,), 0, 5)
        self.assertTrue(self.surface.toggle_mark("bold"))
        self.assertEqual(
            self.surface.get_json()["content"][0]["content"],
            [
                {"type": "text", "text": "Hello", "marks": [{"type": "bold"}]},
                {"type": "text", "text": " world"},
            ],
        )
        self.assertTrue(self.surface.is_active("bold"))

    def test_toggle_twice_removes_mark(self):
        self.surface.select((0,), 0, 5)
        self.surface.toggle_mark("bold")
        self.surface.toggle_mark("bold")
        self.assertEqual(self.surface.get_json(), document(paragraph("Hello world")))

    def test_later_marks_wrap_earlier_ones(self):
        self.surface.select((0,), 0, 11)
        self.surface.toggle_mark("bold")
        self.surface.toggle_mark("italic")
        self.assertEqual(
            self.surface.render_preview(),
            '<p class="rt-paragraph"><em><strong>Hello world</strong></em></p>',
        )

    def test_collapsed_selection_changes_nothing(self):
        self.surface.select((0,), 3)
        self.assertFalse(self.surface.toggle_mark("bold"))

    def test_unknown_mark(self):
        self.surface.select((0,), 0, 5)
        with self.assertRaises(EditorError):
            self.surface.toggle_mark("highlight")

    def test_typing_inherits_marks(self):
        self.surface.select((0,), 0, 5)
        self.surface.toggle_mark("bold")
        self.surface.select((0,), 5)
        self.surface.insert_text("!")
        self.assertEqual(
            self.surface.get_json()["content"][0]["content"][0],
            {"type": "text", "text": "Hello!", "marks": [{"type": "bold"}]},
        )

    def test_marks_do_not_apply_inside_code_blocks(self):
        surface = EditingSurface().mount()
        surface.insert_code_block("x = 1", language="python")
        surface.select((0,), 0, 5)
        self.assertFalse(surface.toggle_mark("bold"))


class BlockTests(SimpleTestCase):
    def test_heading_after_paragraph(self):
        surface = surface_with(paragraph("Intro"))
        surface.insert_heading("Cast", level=3)
        self.assertEqual(
            surface.get_json()["content"][1],
            {"type": "heading", "attrs": {"level": 3}, "content": [{"type": "text", "text": "Cast"}]},
        )
        self.assertEqual(surface.selection, Selection.caret((1,), 4))

    def test_invalid_heading_level(self):
        surface = surface_with(paragraph("Intro"))
        with self.assertRaises(EditorError):
            surface.insert_heading("Cast", level=7)
        with self.assertRaises(EditorError):
            surface.set_heading(0)

    def test_set_heading_and_back(self):
        surface = surface_with(paragraph("Intro"))
        self.assertTrue(surface.set_heading(1))
        self.assertEqual(surface.get_json()["content"][0]["attrs"], {"level": 1})
        self.assertTrue(surface.set_paragraph())
        self.assertEqual(surface.get_json(), document(paragraph("Intro")))

    def test_wrap_in_list(self):
        surface = surface_with(paragraph("Item"))
        surface.wrap_in_list("orderedList")
        self.assertEqual(
            surface.get_json(),
            document({"type": "orderedList", "content": [{"type": "listItem", "content": [paragraph("Item")]}]}),
        )
        self.assertEqual(surface.selection.path, (0, 0, 0))
        with self.assertRaises(EditorError):
            surface.wrap_in_list("taskList")

    def test_wrap_in_blockquote(self):
        surface = surface_with(paragraph("Quote"))
        surface.wrap_in_blockquote()
        self.assertEqual(surface.get_json(), document({"type": "blockquote", "content": [paragraph("Quote")]}))

    def test_paragraph_splits_at_caret(self):
        surface = surface_with(paragraph("HelloWorld"))
        surface.select((0,), 5)
        surface.insert_paragraph("middle")
        self.assertEqual(
            surface.get_json(),
            document(paragraph("Hello"), paragraph("middle"), paragraph("World")),
        )


class LinkTests(SimpleTestCase):
    def setUp(self):
        self.surface = surface_with(paragraph("Visit us"))
        self.surface.select((0,), 6, 8)

    def test_set_link(self):
        self.assertTrue(self.surface.set_link("https://ways.com.np", nofollow=True))
        self.assertEqual(
            self.surface.render_preview(),
            '<p class="rt-paragraph">Visit <a href="https://ways.com.np" target="_blank" '
            'rel="nofollow noopener noreferrer">us</a></p>',
        )

    def test_link_attributes_at_caret(self):
        self.surface.set_link("https://ways.com.np")
        self.surface.select((0,), 7)
        self.assertEqual(
            self.surface.get_link_attributes(),
            {"href": "https://ways.com.np", "target": "_blank"},
        )

    def test_unset_link_covers_whole_run(self):
        self.surface.set_link("https://ways.com.np")
        self.surface.select((0,), 7)
        self.assertTrue(self.surface.unset_link())
        self.assertEqual(self.surface.get_json(), document(paragraph("Visit us")))

    def test_extend_mark_range(self):
        self.surface.set_link("https://ways.com.np")
        self.surface.select((0,), 7)
        self.assertEqual(self.surface.extend_mark_range("link"), Selection((0,), 6, 8))

    def test_typing_after_link_is_not_linked(self):
        self.surface.set_link("https://ways.com.np")
        self.surface.select((0,), 8)
        self.surface.insert_text("!")
        self.assertEqual(self.surface.get_json()["content"][0]["content"][-1], {"type": "text", "text": "!"})

    def test_edit_link_prompt_flow(self):
        prompts = []

        def prompt(previous):
            prompts.append(previous)
            return "https://example.com"

        self.assertTrue(self.surface.edit_link(prompt, confirm=lambda: False))
        self.assertEqual(prompts, [""])
        self.surface.select((0,), 7)
        self.assertEqual(self.surface.get_link_attributes()["href"], "https://example.com")

    def test_edit_link_cancel_and_remove(self):
        self.surface.set_link("https://ways.com.np")
        self.surface.select((0,), 7)
        self.assertFalse(self.surface.edit_link(lambda previous: None, confirm=lambda: True))
        self.assertEqual(self.surface.get_link_attributes()["href"], "https://ways.com.np")
        self.assertTrue(self.surface.edit_link(lambda previous: "  ", confirm=lambda: True))
        self.assertEqual(self.surface.get_link_attributes(), {})


class ImageTests(SimpleTestCase):
    def setUp(self):
        self.uploaded = []

    def uploader(self, upload_file):
        self.uploaded.append(upload_file)
        return UploadResult(success=True, url="https://cdn.example.com/blogs/a.png", key="blogs/a.png")

    def test_add_image_appends_node(self):
        surface = EditingSurface(uploader=self.uploader).mount()
        result = surface.add_image("file", alt="Poster")
        self.assertTrue(result.success)
        self.assertEqual(self.uploaded, ["file"])
        self.assertEqual(
            surface.get_json(),
            document({"type": "image", "attrs": {"src": "https://cdn.example.com/blogs/a.png", "alt": "Poster"}}),
        )

    def test_image_replaces_empty_paragraph(self):
        surface = EditingSurface(document({"type": "paragraph"}), uploader=self.uploader).mount()
        surface.add_image("file")
        self.assertEqual(
            surface.get_json(),
            document({"type": "image", "attrs": {"src": "https://cdn.example.com/blogs/a.png"}}),
        )

    def test_image_splits_paragraph(self):
        surface = EditingSurface(document(paragraph("HelloWorld")), uploader=self.uploader).mount()
        surface.select((0,), 5)
        surface.add_image("file")
        content = surface.get_json()["content"]
        self.assertEqual([block["type"] for block in content], ["paragraph", "image", "paragraph"])
        self.assertEqual(surface.selection, Selection.caret((2,), 0))

    def test_failed_upload_leaves_document_alone(self):
        changes = []
        surface = EditingSurface(
            uploader=lambda f: UploadResult.failure("Invalid file type."),
            on_change=changes.append,
        ).mount()
        result = surface.add_image("file")
        self.assertFalse(result.success)
        self.assertEqual(surface.last_error, "Invalid file type.")
        self.assertEqual(surface.get_json(), empty_document())
        self.assertEqual(changes, [])

    def test_add_image_without_uploader(self):
        with self.assertRaises(EditorError):
            EditingSurface().mount().add_image("file")
