# catalog/services/price_display.py
#
# Purpose:
# - Build the public price list from the catalog tree.
# - Format prices (stored as cents) and durations consistently.
#
# Notes:
# - Only active nodes are shown; an inactive category hides its whole branch.
# - Names and descriptions come from translations with fallback
#   (see catalog.services.translations.translation_for).

from decimal import Decimal

from ..models import ServiceNode
from .translations import translation_for
from .tree_builder import build_tree, flatten_tree


class PriceDisplayService:
    """
    Price list for the public pricing page and its helpers.

    - format_price(): cents -> "12,50 €"; no price -> "On request"
    - format_duration(): 90 -> "1h 30min"
    - get_price_list(): one section per root category with its services
    """

    ON_REQUEST = "On request"

    @staticmethod
    def format_price(price_cents, currency_symbol="€"):
        """
        Format a price stored in cents using a decimal comma.

        Args:
            price_cents: int cents, or None when the price is not fixed
            currency_symbol: appended after the amount

        Returns:
            str: e.g. "45,00 €" or "On request"
        """
        if price_cents is None:
            return PriceDisplayService.ON_REQUEST
        amount = (Decimal(int(price_cents)) / 100).quantize(Decimal("0.01"))
        return f"{amount:.2f}".replace(".", ",") + f" {currency_symbol}"

    @staticmethod
    def format_duration(duration_minutes):
        """
        Format duration in a user-friendly way.

        Returns:
            str: "45 min", "1h" or "1h 30min"; "" for zero/unknown
        """
        if not duration_minutes:
            return ""
        if duration_minutes < 60:
            return f"{duration_minutes} min"

        hours = duration_minutes // 60
        minutes = duration_minutes % 60
        if minutes == 0:
            return f"{hours}h"
        return f"{hours}h {minutes}min"

    @staticmethod
    def get_price_list(locale):
        """
        Sections for the pricing page.

        Args:
            locale: display locale ("de", "ru", "en")

        Returns:
            list[dict]: [{"id", "name", "description", "entries": [...]}, ...]
            where each entry carries depth, name, description, price and duration.
        """
        nodes = list(
            ServiceNode.objects.filter(is_active=True).prefetch_related("translations")
        )
        items = []
        for node in nodes:
            texts = translation_for(node, locale, list(node.translations.all()))
            items.append({
                "id": node.pk,
                "parent_id": node.parent_id,
                "name": texts["name"],
                "description": texts["description"],
                "price_cents": node.price_cents,
                "duration_minutes": node.duration_minutes,
            })

        tree = build_tree(items, extra_fields=("description", "price_cents", "duration_minutes"))

        sections = []
        for root in tree:
            # Parent is inactive: the whole branch stays hidden.
            if root["parent_id"] is not None:
                continue
            entries = []
            for depth, node in flatten_tree(root["children"]):
                entries.append({
                    "id": node["id"],
                    "depth": depth,
                    "name": node["name"],
                    "description": node["description"],
                    "is_group": bool(node["children"]),
                    "price": PriceDisplayService.format_price(node["price_cents"]),
                    "duration": PriceDisplayService.format_duration(node["duration_minutes"]),
                })
            sections.append({
                "id": root["id"],
                "name": root["name"],
                "description": root["description"],
                "entries": entries,
            })
        return sections
