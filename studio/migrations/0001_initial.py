from django.db import migrations, models

import studio.richtext.nodes


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BlogPost",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", models.CharField(max_length=200)),
                (
                    "slug",
                    models.SlugField(
                        blank=True,
                        help_text="Auto-generated from title if blank.",
                        max_length=220,
                        unique=True,
                    ),
                ),
                (
                    "excerpt",
                    models.CharField(help_text="Brief summary shown on cards.", max_length=300),
                ),
                (
                    "content",
                    models.JSONField(
                        default=studio.richtext.nodes.empty_document,
                        help_text="Rich-text document tree.",
                    ),
                ),
                ("featured_image", models.URLField(blank=True, max_length=500)),
                ("author", models.CharField(default="Admin", max_length=120)),
                ("category", models.CharField(blank=True, db_index=True, max_length=120)),
                ("tags", models.JSONField(blank=True, default=list)),
                (
                    "read_time",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Minutes. Estimated from the word count when left blank.",
                        null=True,
                    ),
                ),
                ("meta_title", models.CharField(blank=True, max_length=255)),
                ("meta_description", models.CharField(blank=True, max_length=300)),
                ("keywords", models.JSONField(blank=True, default=list)),
                ("og_image", models.URLField(blank=True, max_length=500)),
                ("published", models.BooleanField(db_index=True, default=False)),
                ("published_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("word_count", models.PositiveIntegerField(default=0)),
                (
                    "content_html_cached",
                    models.TextField(blank=True, help_text="Cache of rendered+processed HTML."),
                ),
                ("table_of_contents", models.JSONField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Blog post",
                "verbose_name_plural": "Blog posts",
                "ordering": ["-published_at", "-created_at"],
                "indexes": [
                    models.Index(
                        fields=["published", "published_at"],
                        name="blogpost_published_idx",
                    )
                ],
            },
        ),
    ]
