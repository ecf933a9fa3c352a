"""
Form integration for the browser editor.

``RichTextWidget`` renders a hidden textarea holding the tree JSON next to an
empty mount point. ``studio/js/richtext-editor.js`` creates the editor inside
the mount point and writes the full tree back into the textarea on every
update, so a normal form POST carries the current document.
"""

import json

from django import forms
from django.core.exceptions import ValidationError
from django.urls import NoReverseMatch, reverse

from .nodes import empty_document, is_document


class RichTextWidget(forms.Widget):
    template_name = "studio/richtext/widget.html"

    class Media:
        css = {"all": ["studio/css/richtext-editor.css"]}
        js = ["studio/js/richtext-editor.js"]

    def __init__(self, attrs=None, upload_url=None, placeholder="Start writing..."):
        super().__init__(attrs)
        self.upload_url = upload_url
        self.placeholder = placeholder

    def _upload_url(self):
        if self.upload_url:
            return self.upload_url
        try:
            return reverse("api:upload")
        except NoReverseMatch:
            return ""

    def use_required_attribute(self, initial):
        # The textarea is hidden; browsers refuse to submit a required hidden field
        return False

    def format_value(self, value):
        if value in (None, "", "null"):
            return json.dumps(empty_document())
        if isinstance(value, str):
            return value
        return json.dumps(value)

    def get_context(self, name, value, attrs):
        context = super().get_context(name, value, attrs)
        context["widget"].update(
            {
                "upload_url": self._upload_url(),
                "placeholder": self.placeholder,
            }
        )
        return context


class RichTextField(forms.JSONField):
    """JSON form field that only accepts a document tree."""

    widget = RichTextWidget
    default_error_messages = {
        "not_document": "Content must be a rich-text document.",
    }

    def to_python(self, value):
        if value in self.empty_values:
            return empty_document()
        converted = super().to_python(value)
        if converted in (None, ""):
            return empty_document()
        if not is_document(converted):
            raise ValidationError(self.error_messages["not_document"], code="not_document")
        return converted
