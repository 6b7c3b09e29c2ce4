"""
Ordered map backed by a weight-balanced binary search tree.

Keys must implement cmp(other) -> int (see Comparable); wrap plain Python
values in NaturalKey to use their native ordering.
"""

from wbtree.base import (
    DELTA,
    GAMMA,
    AbstractSortedMap,
    Comparable,
    InsertResult,
    NaturalKey,
    RemoveResult,
)
from wbtree.tree import (
    Stats,
    WBNode,
    WBTree,
    wbtree_stats_,
)

__all__ = [
    'DELTA',
    'GAMMA',
    'AbstractSortedMap',
    'Comparable',
    'InsertResult',
    'NaturalKey',
    'RemoveResult',
    'Stats',
    'WBNode',
    'WBTree',
    'wbtree_stats_',
]
