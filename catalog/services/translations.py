"""
translations.py
---------------
Per-locale names and descriptions for catalog nodes.

- normalize_translations() keeps only entries with a supported locale and a
  non-blank name; descriptions are trimmed and blank ones stored as NULL.
- save_translations() upserts by (service, locale) in one transaction.
- translation_for() picks the text to display:
  requested locale -> DEFAULT_LOCALE -> first available -> the node's own fields.
"""

import logging

from django.conf import settings
from django.db import transaction

from ..models import ServiceTranslation

logger = logging.getLogger(__name__)


def normalize_translations(entries):
    normalized = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        locale = entry.get("locale")
        name = entry.get("name")
        if locale not in settings.CATALOG_LOCALES:
            continue
        if not isinstance(name, str) or not name.strip():
            continue

        description = entry.get("description")
        description = description.strip() if isinstance(description, str) else ""
        normalized.append({
            "locale": locale,
            "name": name.strip(),
            "description": description or None,
        })
    return normalized


@transaction.atomic
def save_translations(service, entries) -> int:
    """Upsert normalized entries for `service`; returns how many were saved."""
    normalized = normalize_translations(entries)
    for item in normalized:
        ServiceTranslation.objects.update_or_create(
            service=service,
            locale=item["locale"],
            defaults={"name": item["name"], "description": item["description"]},
        )
    if normalized:
        logger.info("Saved %d translation(s) for catalog node %s", len(normalized), service.pk)
    return len(normalized)


def translation_for(node, locale, translations=None):
    """
    Display texts for `node` in `locale` as {"locale", "name", "description"}.
    `translations` may be passed in to avoid a query (e.g. from prefetch_related).
    """
    if translations is None:
        translations = list(node.translations.all())

    by_locale = {t.locale: t for t in translations if t.name}
    chosen = by_locale.get(locale) or by_locale.get(settings.DEFAULT_LOCALE)
    if chosen is None and by_locale:
        chosen = next(t for t in translations if t.name)

    if chosen is None:
        return {"locale": None, "name": node.name, "description": node.description or None}
    return {
        "locale": chosen.locale,
        "name": chosen.name,
        "description": chosen.description if chosen.description else (node.description or None),
    }
