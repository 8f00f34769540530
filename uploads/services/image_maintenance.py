"""
image_maintenance.py
--------------------
Offline job that rewrites uploaded PNG/JPEG images as WebP.

For each source image under the uploads directory:
1) Convert it to a sibling <name>.webp (upright, downscaled to max_width, never upscaled),
   unless an up-to-date non-empty .webp already exists.
2) Repoint every database column that stores image URLs from the old public URL
   to the new one (exact string match).
3) Delete the source file once nothing references it any more
   (unless keep_originals is set). Deletion failures are logged, never fatal.

Sources sharing a base name in one directory (a.png, a.jpg) map to the same
.webp; the first in sorted order is converted but kept, the others are left
untouched.

Re-running is cheap: the skip rule (webp mtime >= source mtime, size > 0) means
nothing is converted twice. The job is strictly sequential and assumes a single
instance runs at a time.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from decouple import config
from django.apps import apps
from django.conf import settings
from django.db import transaction
from PIL import Image, ImageOps

from .storage import public_url_for

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".png", ".jpg", ".jpeg")

# (model label, field name) pairs holding public image URLs.
IMAGE_URL_FIELDS = (
    ("catalog.ServiceNode", "cover"),
    ("catalog.ServiceGalleryImage", "image"),
    ("staff.StaffMember", "avatar_url"),
)


@dataclass
class ImageMaintenanceConfig:
    uploads_dir: Path
    max_width: int = 1600
    quality: int = 82
    dry_run: bool = False
    keep_originals: bool = False

    @classmethod
    def from_env(cls):
        """
        Read UPLOADS_DIR, IMAGE_MAX_WIDTH, IMAGE_WEBP_QUALITY, DRY_RUN and
        KEEP_ORIGINALS from the environment, falling back to settings.
        """
        return cls(
            uploads_dir=Path(config("UPLOADS_DIR", default=str(settings.UPLOADS_DIR))),
            max_width=config("IMAGE_MAX_WIDTH", default=settings.IMAGE_MAX_WIDTH, cast=int),
            quality=config("IMAGE_WEBP_QUALITY", default=settings.IMAGE_WEBP_QUALITY, cast=int),
            dry_run=config("DRY_RUN", default="0") == "1",
            keep_originals=config("KEEP_ORIGINALS", default="0") == "1",
        )


@dataclass
class MaintenanceReport:
    candidates: int = 0
    converted: int = 0
    skipped: int = 0
    would_convert: int = 0
    rows_updated: int = 0
    deleted: int = 0
    collisions: int = 0


class ImageMaintenance:
    def __init__(self, config: ImageMaintenanceConfig, url_fields=IMAGE_URL_FIELDS):
        self.config = config
        self.root = Path(config.uploads_dir)
        self.url_fields = url_fields

    # ---------- file discovery ----------

    def walk(self):
        """All files under the uploads directory, in a stable order."""
        if not self.root.is_dir():
            raise FileNotFoundError(f"Uploads directory not found: {self.root}")
        return sorted(p for p in self.root.rglob("*") if p.is_file())

    def candidates(self):
        return [p for p in self.walk() if p.suffix.lower() in SOURCE_EXTENSIONS]

    @staticmethod
    def webp_path(source: Path) -> Path:
        return source.with_suffix(".webp")

    def is_up_to_date(self, source: Path) -> bool:
        target = self.webp_path(source)
        try:
            target_stat = target.stat()
        except FileNotFoundError:
            return False
        return target_stat.st_size > 0 and target_stat.st_mtime >= source.stat().st_mtime

    # ---------- conversion ----------

    def convert(self, source: Path) -> Path:
        target = self.webp_path(source)
        with Image.open(source) as original:
            img = ImageOps.exif_transpose(original)
            if img.width > self.config.max_width:
                height = max(1, round(img.height * self.config.max_width / img.width))
                img = img.resize((self.config.max_width, height), Image.Resampling.LANCZOS)
            if img.mode not in ("RGB", "RGBA"):
                has_alpha = img.mode in ("LA", "PA", "P") or "transparency" in img.info
                img = img.convert("RGBA" if has_alpha else "RGB")
            img.save(target, "WEBP", quality=self.config.quality)
        logger.info("Converted %s -> %s", source, target.name)
        return target

    # ---------- database references ----------

    def public_urls(self, source: Path):
        """(url before, url after) for a source image."""
        return (
            public_url_for(source, self.root),
            public_url_for(self.webp_path(source), self.root),
        )

    def repoint(self, before: str, after: str) -> int:
        updated = 0
        with transaction.atomic():
            for label, field in self.url_fields:
                model = apps.get_model(label)
                updated += model.objects.filter(**{field: before}).update(**{field: after})
        return updated

    def remaining_references(self, url: str) -> int:
        total = 0
        for label, field in self.url_fields:
            model = apps.get_model(label)
            total += model.objects.filter(**{field: url}).count()
        return total

    def remove_original(self, source: Path) -> bool:
        try:
            source.unlink()
        except OSError as exc:
            logger.warning("Failed to delete %s: %s", source, exc)
            return False
        return True

    def claim_targets(self, sources):
        """
        Split sources into those that own their .webp target and those that
        collide with an earlier source mapping to the same target. Also
        returns the owners of contested targets; they keep their originals
        so the collision is still visible on the next run.
        """
        owned, collisions = [], []
        claimed = {}
        contested = set()
        for source in sources:
            target = self.webp_path(source)
            if target in claimed:
                logger.warning("Skipping %s: %s is already produced from %s", source, target.name, claimed[target].name)
                collisions.append(source)
                contested.add(claimed[target])
                continue
            claimed[target] = source
            owned.append(source)
        return owned, collisions, contested

    # ---------- entry point ----------

    def run(self) -> MaintenanceReport:
        report = MaintenanceReport()
        sources = self.candidates()
        report.candidates = len(sources)
        sources, collisions, contested = self.claim_targets(sources)
        report.collisions = len(collisions)

        if self.config.dry_run:
            report.would_convert = sum(1 for s in sources if not self.is_up_to_date(s))
            logger.info("Dry run: %d of %d image(s) would be converted", report.would_convert, len(sources))
            return report

        for source in sources:
            if self.is_up_to_date(source):
                report.skipped += 1
            else:
                self.convert(source)
                report.converted += 1

        for source in sources:
            before, after = self.public_urls(source)
            report.rows_updated += self.repoint(before, after)

            if self.config.keep_originals or source in contested or self.remaining_references(before):
                continue
            if self.remove_original(source):
                report.deleted += 1

        logger.info(
            "Image maintenance done: converted=%d skipped=%d rows=%d deleted=%d",
            report.converted, report.skipped, report.rows_updated, report.deleted,
        )
        return report
