"""
optimize_uploads.py
-------------------
Convert uploaded PNG/JPEG images to WebP and repoint database references.

Usage:
    python manage.py optimize_uploads
    DRY_RUN=1 python manage.py optimize_uploads
    python manage.py optimize_uploads --keep-originals --max-width 1200

Environment (flags win over env):
    UPLOADS_DIR, IMAGE_MAX_WIDTH (1600), IMAGE_WEBP_QUALITY (82),
    DRY_RUN ("1" = only count), KEEP_ORIGINALS ("1" = never delete sources)
"""

import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from uploads.services.image_maintenance import ImageMaintenance, ImageMaintenanceConfig

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Convert uploaded PNG/JPEG images to WebP and repoint database references."

    def add_arguments(self, parser):
        parser.add_argument("--uploads-dir", help="Root directory to scan (default: UPLOADS_DIR).")
        parser.add_argument("--max-width", type=int, help="Downscale wider images to this width.")
        parser.add_argument("--quality", type=int, help="WebP quality (0-100).")
        parser.add_argument("--dry-run", action="store_true", help="Only report what would be converted.")
        parser.add_argument("--keep-originals", action="store_true", help="Never delete source files.")

    def handle(self, *args, **options):
        cfg = ImageMaintenanceConfig.from_env()
        if options.get("uploads_dir"):
            cfg.uploads_dir = Path(options["uploads_dir"])
        if options.get("max_width"):
            cfg.max_width = options["max_width"]
        if options.get("quality"):
            cfg.quality = options["quality"]
        if options.get("dry_run"):
            cfg.dry_run = True
        if options.get("keep_originals"):
            cfg.keep_originals = True

        try:
            report = ImageMaintenance(cfg).run()
        except Exception as exc:
            logger.exception("Image maintenance failed")
            raise CommandError(f"Image maintenance failed: {exc}") from exc

        if report.candidates == 0:
            self.stdout.write("No PNG/JPG files found in uploads.")
            return

        if cfg.dry_run:
            self.stdout.write(f"DRY_RUN=1. Files to convert: {report.would_convert}")
            return

        self.stdout.write(self.style.SUCCESS(f"Converted images: {report.converted}"))
        self.stdout.write(f"Skipped (already up to date): {report.skipped}")
        self.stdout.write(self.style.SUCCESS(f"Updated DB rows: {report.rows_updated}"))
        self.stdout.write(f"Deleted originals: {report.deleted}")
        if report.collisions:
            self.stdout.write(self.style.WARNING(f"Left alone (same .webp name as another source): {report.collisions}"))
