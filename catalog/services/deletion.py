"""
deletion.py
-----------
Deletes a category/service together with everything beneath it.

Steps (one transaction):
1) Collect the closure: breadth-first, one "children of the current frontier"
   query per level.
2) Delete bookings that reference any node in the closure
   (booking.Booking.service is PROTECT, so this has to come first).
3) Delete all descendants in one bulk delete, then the root itself.

Any failure rolls back the whole thing; no half-deleted subtree is ever committed.
"""

import logging
from dataclasses import dataclass, field

from django.db import transaction

from booking.models import Booking
from ..models import ServiceNode

logger = logging.getLogger(__name__)


class CatalogTreeError(ValueError):
    """The catalog tree is too deep to walk safely."""


@dataclass
class DeletionResult:
    root_id: int
    node_ids: list = field(default_factory=list)
    bookings_deleted: int = 0
    nodes_deleted: int = 0


class CascadingDeletionPlanner:
    MAX_DEPTH = 64

    def collect_closure(self, root_id):
        """
        Return [root_id, *descendant ids] in breadth-first order.

        A node reached twice (a parent cycle in bad data) is visited once;
        walking deeper than MAX_DEPTH levels raises CatalogTreeError.
        """
        closure = [root_id]
        seen = {root_id}
        frontier = [root_id]
        depth = 0

        while frontier:
            children = (
                ServiceNode.objects
                .filter(parent_id__in=frontier)
                .order_by("id")
                .values_list("id", flat=True)
            )
            next_frontier = []
            for child_id in children:
                if child_id in seen:
                    logger.warning("Parent cycle under catalog node %s at %s", root_id, child_id)
                    continue
                seen.add(child_id)
                closure.append(child_id)
                next_frontier.append(child_id)

            depth += 1
            if next_frontier and depth > self.MAX_DEPTH:
                raise CatalogTreeError(
                    f"Catalog subtree under {root_id} is deeper than {self.MAX_DEPTH} levels."
                )
            frontier = next_frontier

        return closure

    @transaction.atomic
    def delete(self, root_id) -> DeletionResult:
        """
        Remove the node, all descendants and all bookings referencing them.

        Raises:
            ServiceNode.DoesNotExist: unknown root id
        """
        root = ServiceNode.objects.select_for_update().get(pk=root_id)
        ids = self.collect_closure(root.pk)
        descendant_ids = [i for i in ids if i != root.pk]

        result = DeletionResult(root_id=root.pk, node_ids=ids)
        result.bookings_deleted = self._delete_bookings(ids)
        result.nodes_deleted = self._delete_descendants(descendant_ids)
        result.nodes_deleted += self._delete_root(root)

        logger.info(
            "Deleted catalog node %s: %d node(s), %d booking(s)",
            root_id, result.nodes_deleted, result.bookings_deleted,
        )
        return result

    def _delete_bookings(self, ids) -> int:
        _total, per_model = Booking.objects.filter(service_id__in=ids).delete()
        return per_model.get(Booking._meta.label, 0)

    def _delete_descendants(self, ids) -> int:
        if not ids:
            return 0
        _total, per_model = ServiceNode.objects.filter(pk__in=ids).delete()
        return per_model.get(ServiceNode._meta.label, 0)

    def _delete_root(self, root) -> int:
        _total, per_model = root.delete()
        return per_model.get(ServiceNode._meta.label, 0)
