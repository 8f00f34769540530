"""
slugs.py
--------
URL slugs for catalog nodes. Cyrillic names are transliterated first, then
Django's slugify drops everything that is not ASCII word characters.
"""

from django.utils.text import slugify

from ..models import ServiceNode

_CYRILLIC = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "i", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}

SLUG_BASE_LENGTH = 200


def to_slug(text: str) -> str:
    lowered = (text or "").strip().lower()
    transliterated = "".join(_CYRILLIC.get(ch, ch) for ch in lowered)
    return slugify(transliterated).replace("_", "-").strip("-")


def ensure_unique_slug(name: str, exclude_pk=None) -> str:
    """First free slug among <base>, <base>-2, <base>-3, ..."""
    base = to_slug(name)[:SLUG_BASE_LENGTH].strip("-") or "service"
    qs = ServiceNode.objects.all()
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)

    slug = base
    n = 1
    while qs.filter(slug=slug).exists():
        n += 1
        slug = f"{base}-{n}"
    return slug
