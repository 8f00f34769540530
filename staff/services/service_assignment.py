"""
service_assignment.py
---------------------
Which catalog services a master offers.

Every save sends the full set of checked ids; the difference against what is
stored decides what to connect and disconnect, both in one transaction.
"""

import logging

from django.db import transaction

from catalog.models import ServiceNode

logger = logging.getLogger(__name__)


def parse_ids(values):
    ids = set()
    for raw in values:
        try:
            ids.add(int(str(raw).strip()))
        except ValueError:
            continue
    return ids


@transaction.atomic
def set_staff_services(staff, chosen_ids):
    """
    Make `staff.services` equal to `chosen_ids` (unknown ids are ignored).

    Returns:
        (added, removed): sorted id lists
    """
    chosen = set(ServiceNode.objects.filter(pk__in=set(chosen_ids)).values_list("pk", flat=True))
    existing = set(staff.services.values_list("pk", flat=True))

    to_add = sorted(chosen - existing)
    to_remove = sorted(existing - chosen)

    if to_add:
        staff.services.add(*to_add)
    if to_remove:
        staff.services.remove(*to_remove)

    logger.info("Master %s services: +%s -%s", staff.pk, to_add, to_remove)
    return to_add, to_remove
