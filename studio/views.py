import json

from django.contrib import messages
from django.core.paginator import Paginator
from django.http import Http404
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.generic import DetailView, FormView, TemplateView

from .forms import ContactForm
from .models import BlogPost
from .projects import (
    get_all_projects,
    get_featured_projects,
    get_project_by_slug,
    get_projects_by_category,
)
from .seo import build_post_json_ld, build_post_metadata

BLOG_PAGE_SIZE = 9

JSON_SCRIPT_ESCAPES = {ord("<"): "\\u003c", ord(">"): "\\u003e", ord("&"): "\\u0026"}


def is_staff(user) -> bool:
    return user.is_authenticated and (user.is_staff or user.is_superuser)


class HomeView(TemplateView):
    """Landing page: hero, featured projects and the latest published posts."""

    template_name = "studio/pages/home.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["featured_projects"] = get_featured_projects()
        context["latest_posts"] = BlogPost.objects.recent(3)
        return context


class AboutView(TemplateView):
    template_name = "studio/pages/about.html"


class ServicesView(TemplateView):
    template_name = "studio/pages/services.html"


class TestimonialsView(TemplateView):
    template_name = "studio/pages/testimonials.html"


class ContactView(FormView):
    template_name = "studio/pages/contact.html"
    form_class = ContactForm
    success_url = reverse_lazy("studio:contact")

    def form_valid(self, form):
        if form.send():
            messages.success(self.request, "Message sent successfully!")
            return redirect(self.get_success_url())
        messages.error(self.request, "Failed to send message. Please try again later.")
        return self.render_to_response(self.get_context_data(form=form))


class PortfolioListView(TemplateView):
    template_name = "studio/portfolio/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        category = self.request.GET.get("category", "")
        projects = get_projects_by_category(category) if category else get_all_projects()
        context["projects"] = projects
        context["categories"] = sorted({project.category for project in get_all_projects()})
        context["active_category"] = category
        return context


class PortfolioDetailView(TemplateView):
    template_name = "studio/portfolio/detail.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        project = get_project_by_slug(self.kwargs["slug"])
        if project is None:
            raise Http404("Project not found")
        context["project"] = project
        context["other_projects"] = [p for p in get_all_projects() if p.slug != project.slug][:3]
        return context


class BlogListView(TemplateView):
    """Published posts, newest first, paginated."""

    template_name = "studio/blog/list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        posts = BlogPost.objects.published().defer("content", "content_html_cached")
        page_obj = Paginator(posts, BLOG_PAGE_SIZE).get_page(self.request.GET.get("page"))
        context["page_obj"] = page_obj
        context["posts"] = page_obj.object_list
        return context


class BlogDetailView(DetailView):
    """
    Shows a single post. Anonymous users can see only published posts.
    Staff can preview drafts via direct slug.
    """

    model = BlogPost
    slug_field = "slug"
    slug_url_kwarg = "slug"
    template_name = "studio/blog/detail.html"
    context_object_name = "post"

    def get_queryset(self):
        if is_staff(self.request.user):
            return BlogPost.objects.all()
        return BlogPost.objects.published()

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        post = self.object
        context["meta"] = build_post_metadata(post)
        # Escaped so post text cannot close the surrounding <script> element
        context["json_ld"] = json.dumps(build_post_json_ld(post)).translate(JSON_SCRIPT_ESCAPES)
        context["is_preview"] = not post.published
        return context
