# booking/tests/test_models.py

from datetime import datetime, timezone as dt_timezone

from django.core.exceptions import ValidationError
from django.db.models import ProtectedError
from django.test import TestCase

from booking.models import Booking, ClientProfile
from catalog.models import ServiceNode
from staff.models import StaffMember


class ClientProfileTests(TestCase):
    def test_duplicate_client_is_rejected_case_insensitively(self):
        ClientProfile.objects.create(name="Eva Braun", email="eva@example.com", phone="12345")
        dup = ClientProfile(name="eva braun", email="EVA@example.com", phone="12345")
        with self.assertRaises(ValidationError):
            dup.full_clean()

    def test_different_phone_is_a_different_client(self):
        ClientProfile.objects.create(name="Eva", email="eva@example.com", phone="12345")
        ClientProfile(name="Eva", email="eva@example.com", phone="99999").full_clean()


class BookingReferenceTests(TestCase):
    def setUp(self):
        self.hair = ServiceNode.objects.create(name="Hair", slug="hair")
        self.cut = ServiceNode.objects.create(name="Cut", slug="cut", kind="service", parent=self.hair)
        self.master = StaffMember.objects.create(name="Anna", email="anna@example.com")
        client = ClientProfile.objects.create(name="Eva", email="eva@example.com", phone="12345")
        self.booking = Booking.objects.create(
            client=client,
            service=self.cut,
            staff=self.master,
            start_time=datetime(2030, 1, 1, 9, tzinfo=dt_timezone.utc),
        )

    def test_service_with_bookings_cannot_be_deleted_directly(self):
        with self.assertRaises(ProtectedError):
            self.cut.delete()

    def test_removing_master_keeps_booking(self):
        self.master.delete()
        self.booking.refresh_from_db()
        self.assertIsNone(self.booking.staff)
        self.assertEqual(self.booking.status, Booking.STATUS_CONFIRMED)
