"""
avatars.py
----------
Master avatar upload and removal.

- Upload is validated (type, size) before anything is written.
- Stored under <UPLOADS_DIR>/masters/<id>/<epoch-ms>.<ext>.
- The previous file is removed best-effort, only after the new one is stored
  and the row saved; a missing or undeletable old file never fails the
  operation. If the row cannot be saved, the new file is removed again.
"""

import logging

from uploads.services.storage import remove_public_file, save_upload
from uploads.services.validators import validate_image_upload

logger = logging.getLogger(__name__)


def replace_avatar(staff, uploaded_file) -> str:
    """
    Store a new avatar and point the master at it.

    Raises:
        UploadRejected: missing file, wrong type or too big
    """
    ext = validate_image_upload(uploaded_file)

    previous = staff.avatar_url
    staff.avatar_url = save_upload(uploaded_file, f"masters/{staff.pk}", ext)
    try:
        staff.save(update_fields=["avatar_url"])
    except Exception:
        remove_public_file(staff.avatar_url)
        staff.avatar_url = previous
        raise
    logger.info("Master %s avatar set to %s", staff.pk, staff.avatar_url)

    if previous and previous != staff.avatar_url:
        remove_public_file(previous)
    return staff.avatar_url


def clear_avatar(staff) -> None:
    if staff.avatar_url:
        remove_public_file(staff.avatar_url)
    staff.avatar_url = None
    staff.save(update_fields=["avatar_url"])
