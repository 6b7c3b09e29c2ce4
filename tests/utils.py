"""Utility functions for testing WBTree invariants."""

import logging
from fractions import Fraction

from wbtree.base import NaturalKey
from wbtree.tree import (
    WBTree,
    Stats
)

TREE_FLAGS = (
    "is_search_tree",
    "sizes_consistent",
    "is_balanced",
)


class RatKey(Fraction):
    """Arbitrary-precision rational key with a cmp() method."""

    def cmp(self, other: Fraction) -> int:
        if self < other:
            return -1
        if self > other:
            return 1
        return 0


def K(value) -> NaturalKey:
    """Shorthand for NaturalKey."""
    return NaturalKey(value)


def raw_keys(tree: WBTree) -> list:
    """Keys of the tree unwrapped from NaturalKey, ascending."""
    return [k.value for k in tree.keys()]


def assert_tree_invariants_tc(tc, t: WBTree, stats: Stats) -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False\n{t.print_structure()}"
        )

    tc.assertEqual(
        stats.node_count, t.size(),
        f"Invariant failed: node_count={stats.node_count} ≠ size()={t.size()}"
    )

    if not t.is_empty():
        tc.assertGreater(
            stats.height, 0,
            f"Invariant failed: height={stats.height} ≤ 0 for non-empty tree"
        )
        tc.assertIsNotNone(
            stats.least_key,
            "Invariant failed: least_key is None for non-empty tree"
        )
        tc.assertIsNotNone(
            stats.greatest_key,
            "Invariant failed: greatest_key is None for non-empty tree"
        )


class InvariantError(Exception):
    """Raised when a WBTree invariant is violated."""
    pass


def assert_tree_invariants_raise(t: WBTree, stats: Stats) -> None:
    """Check all invariants, raising on the first failure."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error(f"Invariant failed: {flag} is False")
            raise InvariantError(f"{flag} is False")

    if stats.node_count != t.size():
        logging.error(f"Invariant failed: node_count={stats.node_count} ≠ size()={t.size()}")
        raise InvariantError("node_count does not match size()")
