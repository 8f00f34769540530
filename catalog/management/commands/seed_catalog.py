"""
seed_catalog.py
---------------
Seeds (creates or updates) the category/service tree with the salon's
standard menu. Safe to run any time; nodes are upserted by slug and a
Russian translation is stored next to each German name.

Usage:
    python manage.py seed_catalog
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import ServiceNode
from catalog.services.translations import save_translations


CATALOG = [
    {
        "slug": "haircut", "name": "Haarschnitt", "ru": "Стрижка",
        "description": "Alle Schnitte und Pflege.",
        "children": [
            {"slug": "haircut-men", "name": "Herren", "ru": "Мужская", "duration_minutes": 45, "price_cents": 3000},
            {"slug": "haircut-women", "name": "Damen", "ru": "Женская", "duration_minutes": 60, "price_cents": 4500},
            {"slug": "hair-coloring", "name": "Färben", "ru": "Покраска", "duration_minutes": 90, "price_cents": 7500},
        ],
    },
    {
        "slug": "manicure", "name": "Maniküre", "ru": "Маникюр",
        "description": "Pflege und Stärkung der Nägel.",
        "children": [
            {"slug": "manicure-classic", "name": "Klassisch", "ru": "Обычный", "duration_minutes": 60, "price_cents": 3500},
            {"slug": "manicure-extensions", "name": "Verlängerung", "ru": "Наращивание", "duration_minutes": 120, "price_cents": 7000},
            {"slug": "manicure-japanese", "name": "Japanisch", "ru": "Японский", "duration_minutes": 75, "price_cents": 4200},
        ],
    },
]


class Command(BaseCommand):
    help = "Seed or update the service catalog tree."

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        updated = 0

        for cat in CATALOG:
            parent, is_created = ServiceNode.objects.update_or_create(
                slug=cat["slug"],
                defaults={
                    "name": cat["name"],
                    "description": cat.get("description", ""),
                    "kind": ServiceNode.KIND_CATEGORY,
                    "parent": None,
                    "duration_minutes": 0,
                    "price_cents": None,
                    "is_active": True,
                },
            )
            created += is_created
            updated += not is_created
            save_translations(parent, [{"locale": "de", "name": cat["name"]}, {"locale": "ru", "name": cat["ru"]}])

            for item in cat["children"]:
                node, is_created = ServiceNode.objects.update_or_create(
                    slug=item["slug"],
                    defaults={
                        "name": item["name"],
                        "kind": ServiceNode.KIND_SERVICE,
                        "parent": parent,
                        "duration_minutes": item["duration_minutes"],
                        "price_cents": item["price_cents"],
                        "is_active": True,
                    },
                )
                created += is_created
                updated += not is_created
                save_translations(node, [{"locale": "de", "name": item["name"]}, {"locale": "ru", "name": item["ru"]}])

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Created={created}, Updated={updated}"))
