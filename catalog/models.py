# catalog/models.py
#
# Purpose:
# - The service catalog: a self-referential tree of categories and services.
#
# Design highlights:
# - ServiceNode: one table for both categories and bookable services.
#   • parent=None marks a root category.
#   • kind is chosen by the operator at creation time ("category" or "service");
#     a node that has children is treated as a category regardless (is_category).
#   • duration_minutes / price_cents only matter for services.
#   • cover holds a public /uploads/... URL.
# - ServiceTranslation: per-locale name/description (de, ru, en).
# - ServiceGalleryImage: extra images for a service, stored as public URLs.
#
# Notes for developers:
# - Deleting a node goes through catalog.services.deletion so bookings and
#   the whole subtree are removed in one transaction.
#
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


# -------------------------
# Category / service node
# -------------------------
class ServiceNode(models.Model):
    KIND_CATEGORY = "category"
    KIND_SERVICE = "service"
    KIND_CHOICES = [
        (KIND_CATEGORY, "Category"),
        (KIND_SERVICE, "Service"),
    ]

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True, default="")
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, default=KIND_CATEGORY)
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="children",
    )
    duration_minutes = models.PositiveIntegerField(default=0)
    price_cents = models.PositiveIntegerField(null=True, blank=True)
    cover = models.CharField(max_length=500, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def is_category(self) -> bool:
        if self.kind == self.KIND_CATEGORY:
            return True
        return self.pk is not None and self.children.exists()

    def clean(self):
        if self.pk is not None and self.parent_id == self.pk:
            raise ValidationError("A node cannot be its own parent.")
        if self.kind == self.KIND_SERVICE and self.parent_id is None:
            raise ValidationError("A service must belong to a category.")


# -------------------------
# Per-locale texts
# -------------------------
class ServiceTranslation(models.Model):
    LOCALE_CHOICES = [(code, code) for code in settings.CATALOG_LOCALES]

    service = models.ForeignKey(ServiceNode, on_delete=models.CASCADE, related_name="translations")
    locale = models.CharField(max_length=5, choices=LOCALE_CHOICES)
    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ["service_id", "locale"]
        constraints = [
            models.UniqueConstraint(fields=["service", "locale"], name="uniq_service_translation_locale"),
        ]

    def __str__(self):
        return f"{self.service_id} [{self.locale}] {self.name}"


# -------------------------
# Gallery images
# -------------------------
class ServiceGalleryImage(models.Model):
    service = models.ForeignKey(ServiceNode, on_delete=models.CASCADE, related_name="gallery")
    image = models.CharField(max_length=500)
    caption = models.CharField(max_length=200, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["service_id", "sort_order", "id"]

    def __str__(self):
        return self.image
