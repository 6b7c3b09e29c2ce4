#!/usr/bin/env python3
"""
Benchmarks for the weight-balanced tree.

This script measures:
 1. Full WBTree build times (random_wbtree_of_size)
 2. Structural statistics of a random tree
 3. Per-operation cost of insert/get/remove on trees of various sizes
 4. Height statistics over repeated random builds

Usage:
    python benchmarks.py [--sizes 100 1000 10000] [--trials T] [--repetitions R]
"""
import argparse
import gc
import logging
import random
import time
from pprint import pprint
from dataclasses import asdict
from statistics import mean, variance

from wbtree.base import NaturalKey
from wbtree.tree import WBTree, wbtree_stats_
from wbtree.profiling import PerformanceTracker, track_performance
from stats_wbtree import random_keys, random_wbtree_of_size, repeated_experiment

tracked_insert = track_performance(WBTree.insert, tag="WBTree.insert")
tracked_get = track_performance(WBTree.get, tag="WBTree.get")
tracked_remove = track_performance(WBTree.remove, tag="WBTree.remove")


def bench_build_tree(sizes: list[int]) -> None:
    """Measure random_wbtree_of_size for various sizes."""
    for n in sizes:
        t0 = time.perf_counter()
        _ = random_wbtree_of_size(n)
        elapsed = time.perf_counter() - t0
        print(f"[bench] random_wbtree_of_size({n}): {elapsed:.4f}s")


def bench_tree_stats(n: int) -> None:
    """Build a single random tree and print its stats."""
    tree = random_wbtree_of_size(n)
    stats = wbtree_stats_(tree)
    print(f"[bench] random_wbtree_of_size({n}) stats:")
    pprint(asdict(stats))


def measure_operations(n: int, trials: int = 200) -> dict[str, tuple[float, float]]:
    """
    Measure per-operation cost on a tree of exactly `n` keys.
    Each trial inserts a fresh key, looks it up and removes it again, so
    the tree size stays at n.

    Returns:
        {operation: (mean_time_s, variance_time_s)}
    """
    keys = random_keys(n + trials)
    tree = WBTree()
    for key in keys[:n]:
        tree, _ = tree.insert(NaturalKey(key), key)
    probes = [NaturalKey(k) for k in keys[n:]]
    random.shuffle(probes)

    tracker = PerformanceTracker.get_instance()
    tracker.reset()
    gc.collect()
    gc.disable()
    try:
        for key in probes:
            tree, _ = tracked_insert(tree, key, key.value)
            tracked_get(tree, key)
            tree, _ = tracked_remove(tree, key)
    finally:
        gc.enable()

    results = {}
    for name, metrics in tracker.metrics.items():
        spread = variance(metrics.times) if len(metrics.times) > 1 else 0.0
        results[name] = (mean(metrics.times), spread)
    return results


def bench_operations(sizes: list[int], trials: int) -> None:
    for n in sizes:
        results = measure_operations(n, trials)
        for name, (avg, var) in sorted(results.items()):
            print(f"[bench] n={n:<8} {name:<16} mean={avg * 1e6:.2f}µs "
                  f"var={var * 1e12:.2f}µs²")
    print(PerformanceTracker.get_instance().report(sort_by='avg_time'))


def main():
    parser = argparse.ArgumentParser(description="Benchmark the weight-balanced tree")
    parser.add_argument("--sizes", type=int, nargs="+", default=[100, 1000, 10000],
                        help="tree sizes to benchmark")
    parser.add_argument("--trials", type=int, default=200,
                        help="operations measured per size")
    parser.add_argument("--repetitions", type=int, default=10,
                        help="random builds per size for height statistics")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    bench_build_tree(args.sizes)
    bench_tree_stats(max(args.sizes))
    bench_operations(args.sizes, args.trials)
    for n in args.sizes:
        repeated_experiment(n, args.repetitions)


if __name__ == "__main__":
    main()
