"""
storage.py
----------
Helpers for files stored under the public uploads directory.

Layout:
- Files live under settings.UPLOADS_DIR.
- Their public URL is settings.UPLOADS_URL + the path relative to that directory,
  e.g. <UPLOADS_DIR>/masters/7/1700000000000.png -> /uploads/masters/7/1700000000000.png
"""

import logging
import time
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)


def uploads_root() -> Path:
    return Path(settings.UPLOADS_DIR)


def public_url_for(path, root=None) -> str:
    """Public URL of a file under the uploads directory."""
    root = Path(root) if root is not None else uploads_root()
    rel = Path(path).relative_to(root).as_posix()
    return f"{settings.UPLOADS_URL.rstrip('/')}/{rel}"


def path_for_public_url(url, root=None):
    """
    Map a public /uploads/... URL back to its file path.
    Returns None for URLs outside the uploads prefix or escaping the directory.
    """
    prefix = settings.UPLOADS_URL.rstrip("/") + "/"
    if not url or not url.startswith(prefix):
        return None

    root = (Path(root) if root is not None else uploads_root()).resolve()
    candidate = (root / url[len(prefix):].lstrip("/")).resolve()
    if root != candidate and root not in candidate.parents:
        return None
    return candidate


def remove_public_file(url) -> bool:
    """
    Best-effort removal of the file behind a public URL.
    A missing file is not an error; failures are logged and reported as False.
    """
    path = path_for_public_url(url)
    if path is None:
        logger.warning("Not removing %r: not an uploads URL", url)
        return False
    try:
        path.unlink()
    except FileNotFoundError:
        logger.info("Upload already gone: %s", path)
        return False
    except OSError as exc:
        logger.warning("Could not remove upload %s: %s", path, exc)
        return False
    logger.info("Removed upload %s", path)
    return True


def save_upload(uploaded_file, subdir: str, ext: str) -> str:
    """
    Write an uploaded file to <UPLOADS_DIR>/<subdir>/<epoch-ms>.<ext>.
    Returns the public URL of the stored file.
    """
    directory = uploads_root() / subdir
    directory.mkdir(parents=True, exist_ok=True)

    target = directory / f"{int(time.time() * 1000)}.{ext}"
    with open(target, "wb") as fh:
        for chunk in uploaded_file.chunks():
            fh.write(chunk)

    return public_url_for(target)
