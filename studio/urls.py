from django.urls import path

from .views import (
    AboutView,
    BlogDetailView,
    BlogListView,
    ContactView,
    HomeView,
    PortfolioDetailView,
    PortfolioListView,
    ServicesView,
    TestimonialsView,
)

app_name = "studio"

urlpatterns = [
    path("", HomeView.as_view(), name="home"),
    path("about/", AboutView.as_view(), name="about"),
    path("services/", ServicesView.as_view(), name="services"),
    path("testimonials/", TestimonialsView.as_view(), name="testimonials"),
    path("contact/", ContactView.as_view(), name="contact"),
    path("portfolio/", PortfolioListView.as_view(), name="portfolio"),
    path("portfolio/<slug:slug>/", PortfolioDetailView.as_view(), name="portfolio-detail"),
    path("blog/", BlogListView.as_view(), name="blog-list"),
    path("blog/<slug:slug>/", BlogDetailView.as_view(), name="blog-detail"),
]
