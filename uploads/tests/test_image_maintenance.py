# uploads/tests/test_image_maintenance.py
#
# WebP conversion job: conversion, skip rule, DB repointing, original cleanup
# and the management command output.

import os
import shutil
import tempfile
from io import StringIO
from pathlib import Path
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from PIL import Image

from catalog.models import ServiceGalleryImage, ServiceNode
from staff.models import StaffMember
from uploads.services.image_maintenance import ImageMaintenance, ImageMaintenanceConfig


class ImageMaintenanceTestBase(TestCase):
    def setUp(self):
        self.root = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.root, ignore_errors=True)
        override = override_settings(UPLOADS_DIR=self.root)
        override.enable()
        self.addCleanup(override.disable)

    def make_image(self, rel, size=(40, 20), mode="RGB", fmt=None):
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color="red" if mode == "RGB" else None).save(path, fmt)
        return path

    def run_job(self, **overrides):
        cfg = ImageMaintenanceConfig(uploads_dir=self.root, **overrides)
        return ImageMaintenance(cfg).run()


class ConversionTests(ImageMaintenanceTestBase):
    def test_converts_png_and_jpeg_and_deletes_unreferenced_sources(self):
        png = self.make_image("masters/1/a.png")
        jpg = self.make_image("services/b.jpg")
        (self.root / "notes.txt").write_text("not an image")

        report = self.run_job()

        self.assertEqual((report.candidates, report.converted, report.skipped), (2, 2, 0))
        self.assertEqual(report.deleted, 2)
        self.assertFalse(png.exists())
        self.assertFalse(jpg.exists())
        with Image.open(png.with_suffix(".webp")) as img:
            self.assertEqual(img.format, "WEBP")
            self.assertEqual(img.size, (40, 20))
        self.assertTrue((self.root / "notes.txt").exists())

    def test_downscales_wide_images_only(self):
        wide = self.make_image("wide.png", size=(400, 100))
        narrow = self.make_image("narrow.png", size=(50, 50))

        self.run_job(max_width=200, keep_originals=True)

        with Image.open(wide.with_suffix(".webp")) as img:
            self.assertEqual(img.size, (200, 50))
        with Image.open(narrow.with_suffix(".webp")) as img:
            self.assertEqual(img.size, (50, 50))

    def test_palette_image_is_converted(self):
        path = self.make_image("logo.png", mode="P")
        self.run_job(keep_originals=True)
        self.assertTrue(path.with_suffix(".webp").stat().st_size > 0)

    def test_second_run_skips_up_to_date_files(self):
        self.make_image("a.png")
        self.run_job(keep_originals=True)

        report = self.run_job(keep_originals=True)
        self.assertEqual((report.converted, report.skipped), (0, 1))

    def test_stale_webp_is_converted_again(self):
        src = self.make_image("a.png")
        webp = src.with_suffix(".webp")
        webp.write_bytes(b"")
        report = self.run_job(keep_originals=True)
        self.assertEqual(report.converted, 1)

        # Source newer than the webp
        stat = webp.stat()
        os.utime(src, (stat.st_atime, stat.st_mtime + 10))
        report = self.run_job(keep_originals=True)
        self.assertEqual(report.converted, 1)

    def test_dry_run_changes_nothing(self):
        src = self.make_image("a.png")
        StaffMember.objects.create(name="Anna", email="anna@example.com", avatar_url="/uploads/a.png")

        report = self.run_job(dry_run=True)

        self.assertEqual(report.would_convert, 1)
        self.assertEqual(report.converted, 0)
        self.assertTrue(src.exists())
        self.assertFalse(src.with_suffix(".webp").exists())
        self.assertEqual(StaffMember.objects.get().avatar_url, "/uploads/a.png")

    def test_missing_uploads_dir_raises(self):
        cfg = ImageMaintenanceConfig(uploads_dir=self.root / "nope")
        with self.assertRaises(FileNotFoundError):
            ImageMaintenance(cfg).run()


class RepointTests(ImageMaintenanceTestBase):
    def test_rows_are_repointed_by_exact_match(self):
        self.make_image("masters/7/1700000000000.png")
        self.make_image("services/cover.jpeg")
        anna = StaffMember.objects.create(
            name="Anna", email="anna@example.com", avatar_url="/uploads/masters/7/1700000000000.png",
        )
        other = StaffMember.objects.create(
            name="Olga", email="olga@example.com", avatar_url="/uploads/masters/7/1700000000000.png?v=2",
        )
        node = ServiceNode.objects.create(name="Hair", slug="hair", cover="/uploads/services/cover.jpeg")
        gallery = ServiceGalleryImage.objects.create(service=node, image="/uploads/services/cover.jpeg")

        report = self.run_job()

        self.assertEqual(report.rows_updated, 3)
        anna.refresh_from_db()
        other.refresh_from_db()
        node.refresh_from_db()
        gallery.refresh_from_db()
        self.assertEqual(anna.avatar_url, "/uploads/masters/7/1700000000000.webp")
        self.assertEqual(other.avatar_url, "/uploads/masters/7/1700000000000.png?v=2")
        self.assertEqual(node.cover, "/uploads/services/cover.webp")
        self.assertEqual(gallery.image, "/uploads/services/cover.webp")

    def test_original_kept_while_still_referenced(self):
        src = self.make_image("a.png")
        StaffMember.objects.create(name="Anna", email="anna@example.com", avatar_url="/uploads/a.png")
        job = ImageMaintenance(ImageMaintenanceConfig(uploads_dir=self.root))

        # Row left pointing at the old URL
        with mock.patch.object(job, "repoint", return_value=0):
            report = job.run()

        self.assertEqual(report.deleted, 0)
        self.assertTrue(src.exists())

    def test_sources_sharing_a_webp_name_are_not_merged(self):
        png = self.make_image("x/a.png", size=(10, 10))
        jpg = self.make_image("x/a.jpg", size=(30, 30))
        staff = StaffMember.objects.create(name="Anna", email="anna@example.com", avatar_url="/uploads/x/a.png")

        report = self.run_job()

        self.assertEqual((report.converted, report.skipped, report.collisions), (1, 0, 1))
        self.assertEqual(report.deleted, 0)
        self.assertTrue(jpg.exists())
        self.assertTrue(png.exists())
        staff.refresh_from_db()
        self.assertEqual(staff.avatar_url, "/uploads/x/a.png")
        with Image.open(png) as img:
            self.assertEqual(img.size, (10, 10))

        # Collision is still detected on the next run
        report = self.run_job()
        self.assertEqual((report.skipped, report.collisions, report.deleted), (1, 1, 0))
        staff.refresh_from_db()
        self.assertEqual(staff.avatar_url, "/uploads/x/a.png")
        self.assertTrue(png.exists())

    def test_keep_originals(self):
        src = self.make_image("a.png")
        report = self.run_job(keep_originals=True)
        self.assertEqual(report.deleted, 0)
        self.assertTrue(src.exists())

    def test_skipped_files_are_still_repointed(self):
        self.make_image("a.png")
        self.run_job(keep_originals=True)
        staff = StaffMember.objects.create(name="Anna", email="anna@example.com", avatar_url="/uploads/a.png")

        report = self.run_job()

        self.assertEqual((report.skipped, report.rows_updated, report.deleted), (1, 1, 1))
        staff.refresh_from_db()
        self.assertEqual(staff.avatar_url, "/uploads/a.webp")


class OptimizeUploadsCommandTests(ImageMaintenanceTestBase):
    def call(self, *args):
        out = StringIO()
        call_command("optimize_uploads", "--uploads-dir", str(self.root), *args, stdout=out)
        return out.getvalue()

    def test_reports_counts(self):
        self.make_image("a.png")
        self.make_image("b.jpg")
        output = self.call()
        self.assertIn("Converted images: 2", output)
        self.assertIn("Skipped (already up to date): 0", output)
        self.assertIn("Updated DB rows: 0", output)
        self.assertIn("Deleted originals: 2", output)

    def test_nothing_to_do(self):
        self.assertIn("No PNG/JPG files found in uploads.", self.call())

    def test_dry_run(self):
        self.make_image("a.png")
        output = self.call("--dry-run")
        self.assertIn("DRY_RUN=1. Files to convert: 1", output)
        self.assertTrue((self.root / "a.png").exists())

    def test_missing_directory_fails(self):
        with self.assertRaises(CommandError):
            call_command("optimize_uploads", "--uploads-dir", str(self.root / "missing"), stdout=StringIO())
