from django.test import SimpleTestCase

from catalog.services.tree_builder import build_tree, collation_key, find_node, flatten_tree, leaf_ids


def item(id, name, parent_id=None):
    return {"id": id, "name": name, "parent_id": parent_id}


def shape(roots):
    return [(n["name"], shape(n["children"])) for n in roots]


class TreeBuilderTests(SimpleTestCase):
    def test_groups_children_under_parents_in_name_order(self):
        items = [item(1, "B"), item(2, "A"), item(3, "C", 1), item(4, "D", 2)]
        self.assertEqual(shape(build_tree(items)), [("A", [("D", [])]), ("B", [("C", [])])])

    def test_nested_children_follow_their_parent(self):
        items = [item("D", "Dye", "B"), item("C", "Cut", "A"), item("B", "Blonde", "A"), item("A", "Hair")]
        self.assertEqual(shape(build_tree(items)), [("Hair", [("Blonde", [("Dye", [])]), ("Cut", [])])])

    def test_output_does_not_depend_on_input_order(self):
        items = [
            item(1, "Hair"), item(2, "Nails"), item(3, "Cut", 1), item(4, "Color", 1),
            item(5, "Manicure", 2), item(6, "cut", 1),
        ]
        expected = build_tree(items)
        self.assertEqual(build_tree(list(reversed(items))), expected)
        self.assertEqual(build_tree(items[2:] + items[:2]), expected)

    def test_case_and_accents_are_ignored_when_sorting(self):
        items = [item(1, "zeta"), item(2, "Éclair"), item(3, "apple"), item(4, "Banana")]
        self.assertEqual([n["name"] for n in build_tree(items)], ["apple", "Banana", "Éclair", "zeta"])
        self.assertEqual(collation_key("Éclair"), collation_key("eclair"))

    def test_unknown_parent_becomes_root(self):
        roots = build_tree([item(1, "Orphan", 99), item(2, "Root")])
        self.assertEqual([n["name"] for n in roots], ["Orphan", "Root"])
        self.assertEqual(roots[0]["parent_id"], 99)

    def test_self_parent_becomes_root(self):
        roots = build_tree([item(1, "Loop", 1)])
        self.assertEqual(shape(roots), [("Loop", [])])

    def test_cycle_keeps_every_item_exactly_once(self):
        items = [item(1, "A", 2), item(2, "B", 1), item(3, "C", 2), item(4, "Root")]
        roots = build_tree(items)
        ids = [n["id"] for _d, n in flatten_tree(roots)]
        self.assertEqual(sorted(ids), [1, 2, 3, 4])
        self.assertEqual([n["name"] for n in roots], ["A", "Root"])
        self.assertEqual(shape(roots)[0], ("A", [("B", [("C", [])])]))

    def test_extra_fields_and_model_like_objects(self):
        class Row:
            def __init__(self, id, name, parent_id, price_cents):
                self.id, self.name, self.parent_id, self.price_cents = id, name, parent_id, price_cents

        roots = build_tree([Row(1, "Hair", None, None), Row(2, "Cut", 1, 3500)], extra_fields=("price_cents",))
        self.assertEqual(roots[0]["children"][0]["price_cents"], 3500)

    def test_flatten_and_helpers(self):
        roots = build_tree([item(1, "Hair"), item(2, "Cut", 1), item(3, "Color", 1), item(4, "Nails")])
        self.assertEqual(
            [(d, n["name"]) for d, n in flatten_tree(roots)],
            [(0, "Hair"), (1, "Color"), (1, "Cut"), (0, "Nails")],
        )
        self.assertEqual(leaf_ids(roots), [3, 2, 4])
        self.assertEqual(find_node(roots, 2)["name"], "Cut")
        self.assertIsNone(find_node(roots, 42))

    def test_empty_input(self):
        self.assertEqual(build_tree([]), [])
