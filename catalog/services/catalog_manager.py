"""
catalog_manager.py
------------------
Create and update catalog nodes from admin form input.

Rules:
- Category: root node, duration 0, no price.
- Service: must have a parent; duration >= 0; price given in currency units
  ("12,50" or "12.50") and stored as cents; blank price means "on request".
- A node never becomes its own parent (or a descendant's child). Such a
  request keeps the previous parent instead of failing the whole save.
- Slugs are unique and regenerated when the name changes.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db import transaction

from ..models import ServiceNode
from .deletion import CascadingDeletionPlanner
from .slugs import ensure_unique_slug, to_slug

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Invalid catalog input; the message is shown to the operator."""


def parse_price_cents(raw):
    """'10,5' -> 1050; blank -> None."""
    text = (raw or "").strip().replace(",", ".")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise CatalogError(f"Price must be a number, got {raw!r}.")
    if not value.is_finite() or value < 0:
        raise CatalogError("Price must be zero or a positive number.")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_duration(raw) -> int:
    text = (raw or "").strip()
    if not text:
        return 0
    try:
        minutes = int(text)
    except ValueError:
        raise CatalogError("Duration must be a whole number of minutes.")
    if minutes < 0:
        raise CatalogError("Duration must not be negative.")
    return minutes


def parse_node_id(raw):
    text = (raw or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise CatalogError(f"Unknown catalog node {raw!r}.")


class ServiceCatalogManager:
    def __init__(self):
        self.planner = CascadingDeletionPlanner()

    @transaction.atomic
    def create_node(self, kind, name, description="", is_active=True,
                    parent_id=None, duration="", price=""):
        """
        Create a category or a service.

        Raises:
            CatalogError: missing name, unknown kind, missing/unknown parent
                for a service, invalid duration or price.
        """
        name = (name or "").strip()
        if not name:
            raise CatalogError("Enter a name.")

        node = ServiceNode(
            name=name,
            description=(description or "").strip(),
            is_active=is_active,
            slug=ensure_unique_slug(name),
        )

        if kind == ServiceNode.KIND_CATEGORY:
            node.kind = ServiceNode.KIND_CATEGORY
        elif kind == ServiceNode.KIND_SERVICE:
            node.kind = ServiceNode.KIND_SERVICE
            node.parent = self._require_parent(parent_id)
            node.duration_minutes = parse_duration(duration)
            node.price_cents = parse_price_cents(price)
        else:
            raise CatalogError(f"Unknown kind {kind!r}.")

        node.save()
        logger.info("Created %s %s (%s)", node.kind, node.pk, node.slug)
        return node

    @transaction.atomic
    def update_node(self, node, name, description="", is_active=True,
                    parent_id=None, duration="", price=""):
        name = (name or "").strip()
        if not name:
            raise CatalogError("Enter a name.")

        if name != node.name and to_slug(name) != node.slug:
            node.slug = ensure_unique_slug(name, exclude_pk=node.pk)
        node.name = name
        node.description = (description or "").strip()
        node.is_active = is_active

        if node.kind == ServiceNode.KIND_CATEGORY:
            node.parent = None
            node.duration_minutes = 0
            node.price_cents = None
        else:
            parent = self._require_parent(parent_id)
            if parent.pk in self.planner.collect_closure(node.pk):
                logger.info("Ignoring parent %s for node %s: would create a cycle", parent.pk, node.pk)
            else:
                node.parent = parent
            node.duration_minutes = parse_duration(duration)
            node.price_cents = parse_price_cents(price)

        node.save()
        return node

    def _require_parent(self, parent_id):
        pk = parse_node_id(parent_id) if isinstance(parent_id, str) else parent_id
        if pk is None:
            raise CatalogError("Choose a category for the service.")
        try:
            return ServiceNode.objects.get(pk=pk)
        except ServiceNode.DoesNotExist:
            raise CatalogError("The chosen category does not exist.")
