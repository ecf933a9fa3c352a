"""
Forms for the studio app.

``BlogPostForm`` validates blog payloads for the JSON API (it receives
already-decoded JSON values, not POST strings). ``ContactForm`` backs the
public contact page.
"""

import logging

from django import forms
from django.conf import settings
from django.core.mail import send_mail

from .models import BlogPost
from .richtext.widgets import RichTextField

logger = logging.getLogger(__name__)

DUPLICATE_SLUG_MESSAGE = "A blog with this slug already exists"


class StringListField(forms.Field):
    """A list of strings, given as a JSON list or a comma separated string."""

    default_error_messages = {"invalid": "Enter a list of strings."}

    def to_python(self, value):
        if value in (None, ""):
            return []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        return [item.strip() for item in value if item.strip()]

    def validate(self, value):
        if self.required and not value:
            raise forms.ValidationError(self.error_messages["required"], code="required")


class BlogPostForm(forms.ModelForm):
    content = RichTextField(required=False)
    tags = StringListField(required=False)
    keywords = StringListField(required=False)

    class Meta:
        model = BlogPost
        fields = [
            "title",
            "slug",
            "excerpt",
            "content",
            "featured_image",
            "author",
            "category",
            "tags",
            "read_time",
            "meta_title",
            "meta_description",
            "keywords",
            "og_image",
            "published",
            "published_at",
        ]
        error_messages = {
            "title": {
                "required": "Please provide a title for this blog post",
                "max_length": "Title cannot be more than 200 characters",
            },
            "excerpt": {
                "required": "Please provide an excerpt",
                "max_length": "Excerpt cannot be more than 300 characters",
            },
            "slug": {"unique": DUPLICATE_SLUG_MESSAGE},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["author"].required = False

    def clean_slug(self):
        return (self.cleaned_data.get("slug") or "").strip().lower()

    def clean_content(self):
        content = self.cleaned_data.get("content")
        if self.instance.pk is None and "content" not in self.data:
            raise forms.ValidationError("Please provide content for this blog post")
        return content

    def clean_author(self):
        return self.cleaned_data.get("author") or "Admin"


class ContactForm(forms.Form):
    name = forms.CharField(
        max_length=120,
        label="Full Name",
        widget=forms.TextInput(attrs={"placeholder": "Your name"}),
    )
    email = forms.EmailField(
        label="Email Address",
        widget=forms.EmailInput(attrs={"placeholder": "you@example.com"}),
    )
    message = forms.CharField(
        max_length=5000,
        widget=forms.Textarea(
            attrs={"rows": 5, "placeholder": "Tell us about your project..."}
        ),
    )

    def send(self) -> bool:
        """Mail the submission to CONTACT_EMAIL. Returns False if sending failed."""
        data = self.cleaned_data
        subject = f"Website enquiry from {data['name']}"
        body = f"Name: {data['name']}\nEmail: {data['email']}\n\n{data['message']}"
        try:
            send_mail(
                subject,
                body,
                settings.DEFAULT_FROM_EMAIL,
                [settings.CONTACT_EMAIL],
                fail_silently=False,
            )
        except Exception:
            logger.exception("Failed to send contact form message from %s", data["email"])
            return False
        logger.info("Contact form message sent from %s", data["email"])
        return True
