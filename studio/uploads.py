"""
Image uploads to Cloudflare R2 (S3-compatible) for blog posts.

This module provides:
- validate_image(): allow-list checks run before anything reaches storage
- generate_file_key(): unique object key under the upload prefix
- upload_image(): validate, store with put_object, return the public URL
- delete_upload(): remove a stored object

Failures never raise to the caller; they come back as an ``UploadResult``
with ``success=False`` and a human-readable ``error``.
"""

from __future__ import annotations

import logging
import os
import re
import secrets
import string
import time
from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.utils import timezone
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png"})
ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png"})

# Declared MIME type -> extensions and Pillow formats it must agree with
MIME_EXTENSIONS = {
    "image/jpeg": ({"jpg", "jpeg"}, {"JPEG", "MPO"}),
    "image/png": ({"png"}, {"PNG"}),
}

_KEY_ALPHABET = string.ascii_lowercase + string.digits
_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9.\-]")


@dataclass(frozen=True)
class UploadResult:
    success: bool
    url: str | None = None
    key: str | None = None
    error: str | None = None
    # True when validation refused the file before any storage call
    rejected: bool = False

    @classmethod
    def failure(cls, error: str, rejected: bool = False) -> UploadResult:
        return cls(success=False, error=error, rejected=rejected)


class UploadRejected(ValueError):
    """The file failed validation and was not sent to storage."""


def get_s3_client():
    """
    Get a boto3 S3 client configured for Cloudflare R2.

    Returns:
        boto3 S3 client configured with R2 credentials and endpoint
    """
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        endpoint_url=settings.AWS_S3_ENDPOINT_URL,
        region_name=settings.AWS_S3_REGION_NAME,
        config=Config(
            signature_version=settings.AWS_S3_SIGNATURE_VERSION,
            s3={"addressing_style": settings.AWS_S3_ADDRESSING_STYLE},
        ),
    )


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def validate_image(upload_file) -> None:
    """
    Check an uploaded file against the image allow-list.

    Raises:
        UploadRejected: with the message to show the author
    """
    content_type = (getattr(upload_file, "content_type", "") or "").lower()
    name = getattr(upload_file, "name", "") or ""

    if content_type not in ALLOWED_MIME_TYPES:
        raise UploadRejected("Invalid file type. Only JPG, JPEG, and PNG images are allowed.")

    extension = file_extension(name)
    if extension not in ALLOWED_EXTENSIONS:
        raise UploadRejected("Invalid file extension. Only .jpg, .jpeg, and .png are allowed.")

    extensions, image_formats = MIME_EXTENSIONS[content_type]
    if extension not in extensions:
        raise UploadRejected("File extension does not match the file type.")

    size = getattr(upload_file, "size", None)
    if size is not None and size > settings.UPLOAD_MAX_SIZE:
        max_size_mb = settings.UPLOAD_MAX_SIZE / (1024 * 1024)
        raise UploadRejected(f"File size exceeds maximum of {max_size_mb:.0f}MB")

    try:
        upload_file.seek(0)
        with Image.open(upload_file) as image:
            detected = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UploadRejected("File is not a valid image.") from e
    finally:
        upload_file.seek(0)

    if detected not in image_formats:
        raise UploadRejected("File contents do not match the file type.")


def generate_file_key(filename: str, folder: str | None = None) -> str:
    """
    Build a unique object key: ``<folder>/<unix-ms>-<6 random chars>-<filename>``.

    Characters outside ``[a-zA-Z0-9.-]`` in the filename become ``-``.
    """
    folder = folder or settings.UPLOAD_KEY_PREFIX
    timestamp = int(time.time() * 1000)
    random_part = "".join(secrets.choice(_KEY_ALPHABET) for _ in range(6))
    sanitized = _UNSAFE_FILENAME_RE.sub("-", os.path.basename(filename or "")) or "upload"
    return f"{folder}/{timestamp}-{random_part}-{sanitized}"


def public_url(key: str) -> str:
    return f"{settings.R2_PUBLIC_URL}/{key}"


def upload_image(upload_file, folder: str | None = None) -> UploadResult:
    """
    Validate and store an uploaded image.

    Args:
        upload_file: Django ``UploadedFile`` (anything with name, content_type,
            size, read and seek)
        folder: Key prefix, defaults to ``settings.UPLOAD_KEY_PREFIX``

    Returns:
        UploadResult with the public URL and key, or the error message
    """
    try:
        validate_image(upload_file)
    except UploadRejected as e:
        logger.info("Rejected upload %r: %s", getattr(upload_file, "name", ""), e)
        return UploadResult.failure(str(e), rejected=True)

    key = generate_file_key(upload_file.name, folder)
    upload_file.seek(0)
    body = upload_file.read()

    try:
        get_s3_client().put_object(
            Bucket=settings.R2_BUCKET_NAME,
            Key=key,
            Body=body,
            ContentType=upload_file.content_type,
            Metadata={
                "originalName": _UNSAFE_FILENAME_RE.sub("-", os.path.basename(upload_file.name)),
                "uploadedAt": timezone.now().isoformat(),
            },
        )
    except (ClientError, BotoCoreError) as e:
        logger.error("R2 upload failed for %s: %s", key, e, exc_info=True)
        return UploadResult.failure(f"Upload to storage failed: {e}")

    logger.info("Uploaded %s (%d bytes)", key, len(body))
    return UploadResult(success=True, url=public_url(key), key=key)


def delete_upload(key: str) -> bool:
    """Delete an object from the bucket. Returns False when storage refuses."""
    try:
        get_s3_client().delete_object(Bucket=settings.R2_BUCKET_NAME, Key=key)
    except (ClientError, BotoCoreError) as e:
        logger.error("R2 delete failed for %s: %s", key, e, exc_info=True)
        return False
    return True
