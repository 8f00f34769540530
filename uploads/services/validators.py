"""
validators.py
-------------
Upload checks that run before anything touches the disk.

Rejections carry a short machine-readable code that views put into the
redirect query string (?error=upload|type|too_big).
"""

from django.conf import settings


class UploadRejected(ValueError):
    """An upload failed validation; `code` is safe to show in a URL."""

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


def validate_image_upload(uploaded_file, allowed_types=None, max_bytes=None) -> str:
    """
    Validate an uploaded image and return the file extension to store it with.

    Raises:
        UploadRejected("upload"): no file (or an empty one) was submitted
        UploadRejected("type"): MIME type is not an accepted image type
        UploadRejected("too_big"): file exceeds the size limit
    """
    allowed_types = allowed_types or settings.AVATAR_ALLOWED_TYPES
    max_bytes = max_bytes or settings.AVATAR_MAX_BYTES

    if uploaded_file is None or not getattr(uploaded_file, "size", 0):
        raise UploadRejected("upload", "No file was uploaded.")

    content_type = (getattr(uploaded_file, "content_type", "") or "").lower()
    if content_type not in allowed_types:
        raise UploadRejected("type", f"Unsupported image type: {content_type or 'unknown'}")

    if uploaded_file.size > max_bytes:
        raise UploadRejected("too_big", f"File is larger than {max_bytes} bytes.")

    return content_type.split("/", 1)[1] or "jpg"
