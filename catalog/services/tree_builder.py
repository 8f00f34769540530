"""
tree_builder.py
---------------
Turns the flat catalog table ({id, name, parent_id}) into a sorted tree.

- Every input item becomes one node dict: {"id", "name", "parent_id", "children", ...extra}.
- Items whose parent is unknown (or missing) become roots.
- Siblings are ordered with a base-sensitivity collation: case and diacritics
  are ignored ("éclair" sorts with "Eclair"), with the raw name and the id as
  tie-breakers so the result never depends on input order.
- Parent cycles (A -> B -> A) cannot reach a root; the first node of such a
  cycle in sort order is promoted to a root so every item still appears once.
"""

import logging
import unicodedata
from collections.abc import Mapping

logger = logging.getLogger(__name__)


def collation_key(name) -> str:
    decomposed = unicodedata.normalize("NFKD", name or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _sort_key(node):
    return (collation_key(node["name"]), node["name"], str(node["id"]))


def _field(item, name):
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _mark_reachable(nodes, seen):
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if node["id"] in seen:
            continue
        seen.add(node["id"])
        stack.extend(node["children"])


def _sort_children(nodes):
    nodes.sort(key=_sort_key)
    for node in nodes:
        _sort_children(node["children"])


def build_tree(items, extra_fields=()):
    """
    Build a sorted forest from flat records.

    Args:
        items: mappings or objects exposing id, name and parent_id
        extra_fields: additional attribute names copied onto each node

    Returns:
        list of root node dicts, children nested under "children"
    """
    by_id = {}
    for item in items:
        node = {
            "id": _field(item, "id"),
            "name": _field(item, "name") or "",
            "parent_id": _field(item, "parent_id"),
            "children": [],
        }
        for field in extra_fields:
            node[field] = _field(item, field)
        by_id[node["id"]] = node

    roots = []
    for node in by_id.values():
        parent = by_id.get(node["parent_id"]) if node["parent_id"] is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent["children"].append(node)

    reachable = set()
    _mark_reachable(roots, reachable)
    stranded = [n for n in by_id.values() if n["id"] not in reachable]
    while stranded:
        head = min(stranded, key=_sort_key)
        parent = by_id[head["parent_id"]]
        parent["children"] = [c for c in parent["children"] if c is not head]
        logger.warning("Parent cycle at catalog node %s; showing it as a root", head["id"])
        roots.append(head)
        _mark_reachable([head], reachable)
        stranded = [n for n in stranded if n["id"] not in reachable]

    _sort_children(roots)
    return roots


def flatten_tree(roots, depth=0):
    """Yield (depth, node) pairs in display order (pre-order)."""
    for node in roots:
        yield depth, node
        yield from flatten_tree(node["children"], depth + 1)


def leaf_ids(roots):
    return [node["id"] for _depth, node in flatten_tree(roots) if not node["children"]]


def find_node(roots, node_id):
    for _depth, node in flatten_tree(roots):
        if node["id"] == node_id:
            return node
    return None
