"""Statistics for weight-balanced trees."""
# pylint: skip-file

import logging
import time
from statistics import mean
from typing import List, Optional, Tuple
from dataclasses import asdict
import numpy as np

from wbtree.base import DELTA, NaturalKey
from wbtree.tree import (
    WBTree,
    wbtree_stats_,
    Stats,
)

TREE_FLAGS = (
    "is_search_tree",
    "sizes_consistent",
    "is_balanced",
)


def assert_invariants(t: WBTree, stats: Stats) -> None:
    """Check all invariants, but only log ERROR messages on failures."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error("Invariant failed: %s is False", flag)

    if stats.node_count != t.size():
        logging.error(
            "Invariant failed: node_count=%d ≠ size()=%d",
            stats.node_count, t.size()
        )
    if not t.is_empty():
        if stats.least_key is None:
            logging.error("Invariant failed: least_key is None for non-empty tree")
        if stats.greatest_key is None:
            logging.error("Invariant failed: greatest_key is None for non-empty tree")


def random_keys(n: int, seed: Optional[int] = None, space: int = 1 << 24) -> List[int]:
    """n distinct ints drawn from range(space), in random order."""
    if space < n:
        raise ValueError(f"Key-space too small! Required: {n}, Available: {space}")
    rng = np.random.default_rng(seed)
    return [int(k) for k in rng.choice(space, size=n, replace=False)]


def create_wbtree(keys) -> WBTree:
    """Build a tree by inserting each int key with its str as value."""
    tree = WBTree()
    for key in keys:
        tree, _ = tree.insert(NaturalKey(key), str(key))
    return tree


def random_wbtree_of_size(n: int, seed: Optional[int] = None) -> WBTree:
    return create_wbtree(random_keys(n, seed))


def check_keys_and_values(
    tree: WBTree,
    expected_keys: Optional[List[int]] = None
) -> Tuple[List[int], bool, bool]:
    """
    Walk the tree once and compute:
      1. presence_ok: if expected_keys is given, are exactly those keys stored?
      2. order_ok: are the keys strictly ascending?

    Returns:
        (keys, presence_ok, order_ok) where keys are the unwrapped key values.
    """
    keys = []
    order_ok = True
    prev = None
    for key in tree:
        if prev is not None and prev.cmp(key) >= 0:
            order_ok = False
        prev = key
        keys.append(key.value)

    presence_ok = True
    if expected_keys is not None:
        presence_ok = (
            len(keys) == len(expected_keys) and set(keys) == set(expected_keys)
        )
    return keys, presence_ok, order_ok


def repeated_experiment(size: int, repetitions: int) -> None:
    """
    Build `repetitions` random trees of `size` keys and log aggregated
    height statistics and build timings.
    """
    heights = []
    times = []
    for i in range(repetitions):
        t0 = time.perf_counter()
        tree = random_wbtree_of_size(size, seed=i)
        times.append(time.perf_counter() - t0)
        stats = wbtree_stats_(tree)
        assert_invariants(tree, stats)
        heights.append(stats.height)

    # the heavier child of any node holds at most DELTA/(DELTA+1) of its weight
    bound = np.log(size + 1) / np.log(1 + 1 / DELTA) if size else 0
    logging.info("n=%d, repetitions=%d", size, repetitions)
    logging.info("height: mean=%.2f max=%d (worst-case bound %.2f)",
                 mean(heights), max(heights), bound)
    logging.info("build time: mean=%.6fs", mean(times))
    logging.info("last tree stats: %s", asdict(stats))
