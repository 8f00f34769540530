from django.test import TestCase, override_settings

from catalog.models import ServiceNode, ServiceTranslation
from catalog.services.price_display import PriceDisplayService
from catalog.services.translations import translation_for


class PriceFormattingTests(TestCase):
    def test_format_price(self):
        self.assertEqual(PriceDisplayService.format_price(4500), "45,00 €")
        self.assertEqual(PriceDisplayService.format_price(1050), "10,50 €")
        self.assertEqual(PriceDisplayService.format_price(0), "0,00 €")
        self.assertEqual(PriceDisplayService.format_price(None), "On request")

    def test_format_duration(self):
        self.assertEqual(PriceDisplayService.format_duration(0), "")
        self.assertEqual(PriceDisplayService.format_duration(45), "45 min")
        self.assertEqual(PriceDisplayService.format_duration(60), "1h")
        self.assertEqual(PriceDisplayService.format_duration(90), "1h 30min")


@override_settings(DEFAULT_LOCALE="de")
class PriceListTests(TestCase):
    def setUp(self):
        self.hair = ServiceNode.objects.create(name="Hair", slug="hair")
        self.cut = ServiceNode.objects.create(
            name="Cut", slug="cut", kind="service", parent=self.hair, duration_minutes=45, price_cents=3500,
        )
        self.color = ServiceNode.objects.create(name="Color", slug="color", kind="service", parent=self.hair)
        hidden = ServiceNode.objects.create(name="Hidden", slug="hidden", is_active=False)
        ServiceNode.objects.create(name="Under hidden", slug="under-hidden", kind="service", parent=hidden)

        ServiceTranslation.objects.create(service=self.cut, locale="de", name="Haarschnitt", description="Waschen inkl.")
        ServiceTranslation.objects.create(service=self.cut, locale="ru", name="Стрижка")

    def test_sections_per_root_category(self):
        sections = PriceDisplayService.get_price_list("en")
        self.assertEqual([s["name"] for s in sections], ["Hair"])
        entries = sections[0]["entries"]
        # "Haarschnitt" (de fallback) sorts after "Color"
        self.assertEqual([e["name"] for e in entries], ["Color", "Haarschnitt"])
        self.assertEqual(entries[0]["price"], "On request")
        self.assertEqual((entries[1]["price"], entries[1]["duration"]), ("35,00 €", "45 min"))

    def test_requested_locale_wins(self):
        entries = PriceDisplayService.get_price_list("ru")[0]["entries"]
        self.assertIn("Стрижка", [e["name"] for e in entries])
        cut = next(e for e in entries if e["name"] == "Стрижка")
        # ru has no description; fall back to the node's own (empty) text
        self.assertIsNone(cut["description"])

    def test_translation_fallback_chain(self):
        self.assertEqual(translation_for(self.cut, "ru")["name"], "Стрижка")
        self.assertEqual(translation_for(self.cut, "en")["name"], "Haarschnitt")
        self.assertEqual(translation_for(self.color, "en"), {"locale": None, "name": "Color", "description": None})

    def test_pricing_page(self):
        resp = self.client.get("/prices/?lang=ru")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context["locale"], "ru")
        self.assertContains(resp, "Стрижка")
        self.assertNotContains(resp, "Under hidden")

    def test_unknown_lang_uses_default(self):
        resp = self.client.get("/prices/?lang=xx")
        self.assertEqual(resp.context["locale"], "de")
        self.assertContains(resp, "Haarschnitt")
