# booking/models.py
#
# Purpose:
# - Appointments that reference the catalog and the masters.
#
# Design highlights:
# - ClientProfile: the person who books; login account optional.
#   • clean() rejects a second profile with the same name/email (case-insensitive) + phone.
# - Booking:
#   • service is PROTECT: a service with bookings cannot vanish by accident.
#     Removing a catalog subtree goes through catalog.services.deletion, which
#     deletes the bookings first in the same transaction.
#   • staff is SET_NULL: deactivating or removing a master keeps history.
#   • status is "CONFIRMED" or "CANCELLED"; cancellation_time records when.
#
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


# -------------------------
# Client (person who books)
# -------------------------
class ClientProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="client_profile",
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20)

    def __str__(self):
        return self.name

    def clean(self):
        name = (self.name or "").strip()
        email = (self.email or "").strip()
        phone = (self.phone or "").strip()
        if not name or not email or not phone:
            return

        qs = ClientProfile.objects.filter(name__iexact=name, email__iexact=email, phone=phone)
        if self.pk:
            qs = qs.exclude(pk=self.pk)
        if qs.exists():
            raise ValidationError("A client with the same name, email, and phone already exists.")


# -------------------------
# Booking record
# -------------------------
class Booking(models.Model):
    STATUS_CONFIRMED = "CONFIRMED"
    STATUS_CANCELLED = "CANCELLED"
    STATUS_CHOICES = [
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    client = models.ForeignKey(ClientProfile, on_delete=models.CASCADE, related_name="bookings")
    service = models.ForeignKey("catalog.ServiceNode", on_delete=models.PROTECT, related_name="bookings")
    staff = models.ForeignKey(
        "staff.StaffMember",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    start_time = models.DateTimeField()
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_CONFIRMED)
    cancellation_time = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["start_time", "id"]

    def __str__(self):
        return f"{self.client.name} → {self.service.name} on {self.start_time}"
