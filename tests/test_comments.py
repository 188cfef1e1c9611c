"""Tests for comment thread assembly and flattening."""

from hnclient.core.comments import (
    assemble_thread,
    build_comment_tree,
    collect_thread_items,
    count_descendants,
    flatten_comment_tree,
)
from hnclient.core.items import CommentNode, parse_item


def _ids(nodes):
    return [n.id for n in nodes]


def _lookup(payloads):
    return {p["id"]: parse_item(p) for p in payloads}


def _fetcher(items, calls):
    async def fetch(item_id):
        calls.append(item_id)
        return parse_item(items.get(item_id))

    return fetch


class TestBuildAndFlatten:
    def test_builds_and_flattens_threaded_tree(self, thread_items):
        tree = build_comment_tree([1], _lookup(thread_items.values()))

        assert len(tree) == 1
        assert len(tree[0].children) == 2
        assert _ids(flatten_comment_tree(tree, set())) == [1, 2, 4, 3]
        assert _ids(flatten_comment_tree(tree, {2})) == [1, 2, 3]

    def test_depth_starts_at_zero_and_parent_is_recorded(self, thread_items):
        tree = build_comment_tree([1], _lookup(thread_items.values()))
        flat = flatten_comment_tree(tree, set())

        assert [(n.id, n.depth) for n in flat] == [(1, 0), (2, 1), (4, 2), (3, 1)]
        assert flat[0].parent_id is None
        assert flat[2].parent_id == 2

    def test_deleted_and_dead_comments_drop_their_subtree(self, payloads):
        lookup = _lookup([
            payloads.comment(1, 100, kids=[2]),
            payloads.comment(2, 1, kids=[3], deleted=True),
            payloads.comment(3, 2),
            payloads.comment(5, 100, dead=True),
            payloads.story(6),
        ])

        tree = build_comment_tree([1, 5, 6, 7], lookup)

        assert _ids(flatten_comment_tree(tree, set())) == [1]

    def test_cyclic_lookup_does_not_recurse_forever(self, payloads):
        lookup = _lookup([
            payloads.comment(1, 100, kids=[2]),
            payloads.comment(2, 1, kids=[1]),
        ])

        tree = build_comment_tree([1], lookup)

        assert _ids(flatten_comment_tree(tree, set())) == [1, 2]

    def test_missing_author_and_text_get_defaults(self):
        lookup = {7: parse_item({"id": 7, "type": "comment"})}

        (node,) = build_comment_tree([7], lookup)

        assert node.author == "unknown"
        assert node.text == ""
        assert node.timestamp == 0


class TestFlattenProperties:
    def _tree(self):
        leaf = CommentNode(id=4, author="a", text="", timestamp=0, depth=2, parent_id=2)
        child = CommentNode(id=2, author="a", text="", timestamp=0, depth=1, parent_id=1, children=[leaf])
        sibling = CommentNode(id=3, author="a", text="", timestamp=0, depth=1, parent_id=1)
        root = CommentNode(id=1, author="a", text="", timestamp=0, depth=0, children=[child, sibling])
        other = CommentNode(id=5, author="a", text="", timestamp=0, depth=0)
        return [root, other]

    def test_flatten_is_deterministic_and_pure(self):
        tree = self._tree()
        first = flatten_comment_tree(tree, set())
        second = flatten_comment_tree(tree, set())

        assert _ids(first) == _ids(second) == [1, 2, 4, 3, 5]
        assert len(tree[0].children) == 2

    def test_collapse_hides_only_descendants(self):
        tree = self._tree()

        flat = _ids(flatten_comment_tree(tree, {1}))

        assert flat == [1, 5]

    def test_collapsing_a_leaf_changes_nothing(self):
        tree = self._tree()

        assert _ids(flatten_comment_tree(tree, {4})) == _ids(flatten_comment_tree(tree, set()))

    def test_count_descendants(self):
        assert count_descendants(self._tree()[0]) == 3


class TestTraversal:
    async def test_shared_child_is_fetched_once(self, payloads):
        items = {
            1: payloads.comment(1, 100, kids=[3]),
            2: payloads.comment(2, 100, kids=[3]),
            3: payloads.comment(3, 1),
        }
        calls = []

        lookup = await collect_thread_items([1, 2], _fetcher(items, calls))

        assert calls == [1, 2, 3]
        assert set(lookup) == {1, 2, 3}

    async def test_cycle_terminates(self, payloads):
        items = {
            1: payloads.comment(1, 100, kids=[2]),
            2: payloads.comment(2, 1, kids=[1, 2]),
        }
        calls = []

        await collect_thread_items([1], _fetcher(items, calls))

        assert calls == [1, 2]

    async def test_traversal_is_breadth_first(self, thread_items):
        calls = []

        await collect_thread_items([1], _fetcher(thread_items, calls))

        assert calls == [1, 2, 3, 4]

    async def test_missing_items_are_skipped(self, payloads):
        items = {1: payloads.comment(1, 100, kids=[99])}
        calls = []

        tree = await assemble_thread([1, 42], _fetcher(items, calls))

        assert calls == [1, 42, 99]
        assert _ids(tree) == [1]
        assert tree[0].children == []

    async def test_assemble_orders_by_kids_not_fetch_order(self, thread_items):
        tree = await assemble_thread([1], _fetcher(thread_items, []))

        assert _ids(flatten_comment_tree(tree, set())) == [1, 2, 4, 3]
