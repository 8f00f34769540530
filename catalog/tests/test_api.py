# catalog/tests/test_api.py

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient

from catalog.models import ServiceNode, ServiceTranslation


class TranslationsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(username="admin", password="pw12345", is_staff=True)
        self.client.force_authenticate(self.admin)
        self.service = ServiceNode.objects.create(name="Manicure", slug="manicure")

    def post(self, payload):
        return self.client.post("/api/admin/translations", payload, format="json")

    def test_upserts_valid_entries(self):
        resp = self.post({
            "serviceId": self.service.pk,
            "translations": [
                {"locale": "de", "name": " Maniküre ", "description": "Hände"},
                {"locale": "ru", "name": "Маникюр", "description": "   "},
                {"locale": "fr", "name": "Manucure"},
                {"locale": "en", "name": ""},
            ],
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True, "saved": 2})

        de = ServiceTranslation.objects.get(service=self.service, locale="de")
        self.assertEqual((de.name, de.description), ("Maniküre", "Hände"))
        self.assertIsNone(ServiceTranslation.objects.get(service=self.service, locale="ru").description)

        # Same locale again updates instead of duplicating
        self.post({"serviceId": str(self.service.pk), "translations": [{"locale": "de", "name": "Nagelpflege"}]})
        self.assertEqual(ServiceTranslation.objects.filter(service=self.service).count(), 2)
        self.assertEqual(ServiceTranslation.objects.get(service=self.service, locale="de").name, "Nagelpflege")

    def test_bad_requests(self):
        for payload in (
            {"translations": []},
            {"serviceId": self.service.pk},
            {"serviceId": "abc", "translations": []},
            {"serviceId": self.service.pk, "translations": "de"},
        ):
            with self.subTest(payload=payload):
                resp = self.post(payload)
                self.assertEqual(resp.status_code, 400)
                self.assertIn("error", resp.json())

    def test_unknown_service(self):
        resp = self.post({"serviceId": 999999, "translations": []})
        self.assertEqual(resp.status_code, 404)

    def test_staff_only(self):
        anonymous = APIClient()
        resp = anonymous.post(
            "/api/admin/translations",
            {"serviceId": self.service.pk, "translations": []},
            format="json",
        )
        self.assertIn(resp.status_code, (401, 403))


class CatalogReadApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.hair = ServiceNode.objects.create(name="Hair", slug="hair")
        self.cut = ServiceNode.objects.create(name="Cut", slug="cut", kind="service", parent=self.hair, price_cents=3000)
        self.hidden = ServiceNode.objects.create(
            name="Perm", slug="perm", kind="service", parent=self.hair, is_active=False,
        )

    def test_tree_shows_active_nodes(self):
        resp = self.client.get("/api/services/tree/")
        self.assertEqual(resp.status_code, 200)
        tree = resp.json()["tree"]
        self.assertEqual(len(tree), 1)
        self.assertEqual([c["name"] for c in tree[0]["children"]], ["Cut"])
        self.assertEqual(tree[0]["children"][0]["price_cents"], 3000)

    def test_staff_can_see_inactive_in_tree(self):
        admin = User.objects.create_user(username="admin", password="pw12345", is_staff=True)
        self.client.force_authenticate(admin)
        tree = self.client.get("/api/services/tree/?all=1").json()["tree"]
        self.assertEqual([c["name"] for c in tree[0]["children"]], ["Cut", "Perm"])

    def test_flat_list_hides_inactive_for_public(self):
        resp = self.client.get("/api/services/")
        self.assertEqual(resp.status_code, 200)
        names = {row["name"] for row in resp.json()}
        self.assertEqual(names, {"Hair", "Cut"})

    def test_masters_api_is_staff_only(self):
        self.assertIn(self.client.get("/api/masters/").status_code, (401, 403))

    def test_masters_api_refuses_logged_in_non_staff(self):
        user = User.objects.create_user(username="client", password="pw12345")
        self.client.force_authenticate(user)
        self.assertEqual(self.client.get("/api/masters/").status_code, 403)

    def test_masters_api_lists_schedule_and_services(self):
        from staff.models import StaffMember
        from staff.services.schedule_store import WeeklyScheduleStore

        admin = User.objects.create_user(username="admin", password="pw12345", is_staff=True)
        self.client.force_authenticate(admin)
        anna = StaffMember.objects.create(name="Anna", email="anna@example.com")
        WeeklyScheduleStore().ensure_week(anna)
        cut = self.cut
        anna.services.add(cut)

        rows = self.client.get("/api/masters/").json()
        self.assertEqual([r["name"] for r in rows], ["Anna"])
        self.assertEqual(rows[0]["services"], [cut.pk])
        self.assertEqual(len(rows[0]["working_hours"]), 7)
