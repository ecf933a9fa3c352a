"""
JSON API for the blog dashboard.

Endpoints:
- POST   /api/admin/auth/         - Exchange admin credentials for a token
- GET    /api/blogs/              - List posts (paginated)
- POST   /api/blogs/              - Create a post (admin)
- GET    /api/blogs/<id>/         - Fetch a post
- PUT    /api/blogs/<id>/         - Update a post (admin, partial)
- DELETE /api/blogs/<id>/         - Delete a post (admin)
- GET    /api/blogs/slug/<slug>/  - Fetch a published post by slug
- POST   /api/upload/             - Upload an image for post content (admin)

Every response is ``{"success": bool, "data" | "error": ...}``.
"""

import json
import logging
import math
from functools import wraps

from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from studio.forms import DUPLICATE_SLUG_MESSAGE, BlogPostForm
from studio.models import BlogPost
from studio.uploads import upload_image

from .auth import api_auth_required, generate_admin_token, get_request_admin, verify_admin_credentials
from .serializers import form_data_for_update, payload_to_fields, serialize_post

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def success(data, status=200, **extra):
    return JsonResponse({"success": True, "data": data, **extra}, status=status)


def failure(error, status=400, **extra):
    return JsonResponse({"success": False, "error": error, **extra}, status=status)


def json_errors(view_func):
    """Turn unexpected exceptions into a logged 500 JSON response."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except Exception:
            logger.exception("Unhandled error in %s", view_func.__name__)
            return failure("An unexpected error occurred", status=500)

    return wrapper


def parse_json_body(request):
    """Decoded JSON object from the request body, or None if it is not one."""
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def form_error_response(form):
    errors = {field: [str(message) for message in messages] for field, messages in form.errors.items()}
    message = "; ".join(message for messages in errors.values() for message in messages)
    return failure(message, status=400, errors=errors)


def save_form(form):
    """Save a valid BlogPostForm, mapping a slug collision to the API message."""
    try:
        with transaction.atomic():
            return form.save(), None
    except IntegrityError:
        logger.info("Duplicate slug %r rejected", form.cleaned_data.get("slug"))
        return None, failure(DUPLICATE_SLUG_MESSAGE, status=400)


# --------------------------
# Auth
# --------------------------
@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def admin_auth(request):
    """
    POST /api/admin/auth/

    Request body: {"username": "...", "password": "..."}
    Response: {"success": true, "data": {"token": "...", "username": "..."}}
    """
    data = parse_json_body(request)
    if data is None:
        return failure("Invalid JSON", status=400)

    username = data.get("username")
    password = data.get("password")
    if not username or not password or not isinstance(username, str) or not isinstance(password, str):
        return failure("Username and password are required", status=400)

    if not verify_admin_credentials(username, password):
        logger.warning("Failed admin API login for %r", username)
        return failure("Invalid credentials", status=401)

    return success({"token": generate_admin_token(username), "username": username})


# --------------------------
# Blogs
# --------------------------
@csrf_exempt
@require_http_methods(["GET", "POST"])
@json_errors
def blog_collection(request):
    if request.method == "POST":
        return create_blog(request)
    return list_blogs(request)


def list_blogs(request):
    """
    GET /api/blogs/?page=1&limit=10&includeUnpublished=true

    Drafts are included only when an authenticated admin asks for them.
    """
    page = positive_int(request.GET.get("page"), 1)
    limit = min(positive_int(request.GET.get("limit"), DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)
    include_unpublished = (
        request.GET.get("includeUnpublished", request.GET.get("include_unpublished", "")).lower()
        == "true"
    )

    queryset = BlogPost.objects.all()
    if not include_unpublished or get_request_admin(request) is None:
        queryset = queryset.published()

    total = queryset.count()
    offset = (page - 1) * limit
    posts = queryset[offset:offset + limit]

    return success(
        [serialize_post(post) for post in posts],
        pagination={
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
    )


@api_auth_required
def create_blog(request):
    data = parse_json_body(request)
    if data is None:
        return failure("Invalid JSON", status=400)

    fields = payload_to_fields(data)
    if fields.get("published") and not fields.get("published_at"):
        fields["published_at"] = timezone.now()

    form = BlogPostForm(data=fields)
    if not form.is_valid():
        return form_error_response(form)

    post, error = save_form(form)
    if error is not None:
        return error

    logger.info("Blog post %s created by %s", post.slug, request.api_user.username)
    return success(serialize_post(post), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
@json_errors
def blog_detail(request, post_id):
    try:
        post = BlogPost.objects.get(pk=post_id)
    except BlogPost.DoesNotExist:
        return failure("Blog not found", status=404)

    if request.method == "PUT":
        return update_blog(request, post)
    if request.method == "DELETE":
        return delete_blog(request, post)

    # Drafts are only visible to admins
    if not post.published and get_request_admin(request) is None:
        return failure("Blog not found", status=404)
    return success(serialize_post(post))


@api_auth_required
def update_blog(request, post):
    data = parse_json_body(request)
    if data is None:
        return failure("Invalid JSON", status=400)

    fields = form_data_for_update(post, data)
    # Moving a draft to published stamps the publish time
    if fields.get("published") and not post.published and not payload_to_fields(data).get("published_at"):
        fields["published_at"] = timezone.now()

    form = BlogPostForm(data=fields, instance=post)
    if not form.is_valid():
        return form_error_response(form)

    post, error = save_form(form)
    if error is not None:
        return error

    logger.info("Blog post %s updated by %s", post.slug, request.api_user.username)
    return success(serialize_post(post))


@api_auth_required
def delete_blog(request, post):
    slug = post.slug
    post.delete()
    logger.info("Blog post %s deleted by %s", slug, request.api_user.username)
    return success({})


@require_http_methods(["GET"])
@json_errors
def blog_by_slug(request, slug):
    post = BlogPost.objects.published().filter(slug=slug.lower()).first()
    if post is None:
        return failure("Blog not found", status=404)
    return success(serialize_post(post))


# --------------------------
# Uploads
# --------------------------
@csrf_exempt
@require_http_methods(["POST"])
@api_auth_required
@json_errors
def upload(request):
    """
    POST /api/upload/ (multipart, field "file")

    Response: {"success": true, "data": {"url": "...", "key": "..."}}
    """
    upload_file = request.FILES.get("file")
    if upload_file is None:
        return failure("No file provided", status=400)

    result = upload_image(upload_file)
    if result.rejected:
        return failure(result.error, status=400)
    if not result.success or not result.url:
        return failure(result.error or "Upload to storage failed", status=500)

    return success({"url": result.url, "key": result.key})
