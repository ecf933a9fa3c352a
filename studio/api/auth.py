"""
Authentication utilities for the blog API.

Provides @api_auth_required decorator supporting:
- Django session auth (for the admin UI, requires is_staff)
- Bearer JWT auth (for the blog dashboard and scripts)

Tokens are issued by POST /api/admin/auth/ against the ADMIN_USERNAME and
ADMIN_PASSWORD settings and expire after JWT_EXPIRY_DAYS.
"""

import hmac
import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import wraps

import jwt
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiUser:
    """The identity an authenticated API request acts as."""

    username: str
    method: str  # "session" or "token"
    is_staff: bool = True


def verify_admin_credentials(username: str, password: str) -> bool:
    """
    Compare credentials against the configured admin account.

    Always False when no admin password is configured.
    """
    expected_username = settings.ADMIN_USERNAME or ""
    expected_password = settings.ADMIN_PASSWORD or ""
    if not expected_username or not expected_password:
        logger.warning("Admin API login attempted but ADMIN_PASSWORD is not configured")
        return False

    username_ok = hmac.compare_digest(username.encode(), expected_username.encode())
    password_ok = hmac.compare_digest(password.encode(), expected_password.encode())
    return username_ok and password_ok


def generate_admin_token(username: str) -> str:
    """Signed JWT with ``{username, is_admin}`` that expires after JWT_EXPIRY_DAYS."""
    now = timezone.now()
    payload = {
        "username": username,
        "is_admin": True,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRY_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str):
    """
    Decode and validate a JWT.

    Returns:
        The payload dict, or None if the token is invalid, expired or not an
        admin token
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected API token: %s", e)
        return None
    if not payload.get("is_admin"):
        return None
    return payload


def bearer_token(request) -> str:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip()  # Strip "Bearer " prefix
    return ""


def get_request_admin(request):
    """Return an ``ApiUser`` for a staff session or a valid Bearer token, else None."""
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated and user.is_staff:
        return ApiUser(username=user.get_username(), method="session")

    payload = verify_token(bearer_token(request))
    if payload is not None:
        return ApiUser(username=str(payload.get("username", "")), method="token")
    return None


def api_auth_required(view_func):
    """
    Decorator that requires authentication via staff session or Bearer token.

    Usage:
        @api_auth_required
        def my_view(request):
            # request.api_user is the authenticated ApiUser
            pass
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        api_user = get_request_admin(request)

        if api_user is None:
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                return JsonResponse(
                    {"success": False, "error": "Staff permission required"},
                    status=403,
                )
            return JsonResponse(
                {"success": False, "error": "Unauthorized"},
                status=401,
            )

        # Attach identity to request for views that need it
        request.api_user = api_user

        return view_func(request, *args, **kwargs)

    return wrapper
