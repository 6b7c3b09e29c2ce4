"""Weight-balanced binary search tree implementation"""

from __future__ import annotations
import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from wbtree.base import (
    DELTA,
    GAMMA,
    AbstractSortedMap,
    Comparable,
    InsertResult,
    RemoveResult,
)

# Configure logging
logger = logging.getLogger(__name__)
# Clear all handlers to ensure we don't add duplicates
if logger.hasHandlers():
    logger.handlers.clear()
handler = logging.StreamHandler()
formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)
# Prevent propagation to the root logger to avoid duplicate logs
logger.propagate = False


class WBNode:
    """
    A node of a weight-balanced tree.

    Attributes:
        key (Comparable): The stored key.
        value: The stored value.
        left (Optional[WBNode]): Subtree of lesser keys.
        right (Optional[WBNode]): Subtree of greater keys.
        child_size (int): Number of nodes in left plus right. 0 for leaves.
    """
    __slots__ = ("key", "value", "left", "right", "child_size")

    def __init__(
        self,
        key: Comparable,
        value: Any,
        left: Optional[WBNode] = None,
        right: Optional[WBNode] = None,
    ) -> None:
        self.key = key
        self.value = value
        self.left = left
        self.right = right
        self.child_size = _size(left) + _size(right)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(key={self.key!r}, "
                f"value={self.value!r}, size={self.child_size + 1})")


class WBTree(AbstractSortedMap):
    """
    An ordered map backed by a weight-balanced binary search tree.

    A WBTree is a handle on a (possibly empty) node graph. If `node` is None,
    the tree is empty. insert() and remove() restructure the nodes in place
    and re-point the handle at the new root, so the handle returned by a
    mutation is the one to keep using.

    Handles returned by get_node(), least(), greatest(), least_node() and
    greatest_node() are views sharing nodes with the tree they came from.
    After the owning tree is mutated such a view may no longer describe a
    consistent subtree; mutating through a view corrupts the owner. Neither
    case is detected.

    Not safe for concurrent use.
    """
    __slots__ = ("node",)

    def __init__(self, node: Optional[WBNode] = None):
        self.node: Optional[WBNode] = node

    def is_empty(self) -> bool:
        return self.node is None

    def __str__(self):
        if self.is_empty():
            return "Empty WBTree"
        return f"WBTree(size={self.size()}, root={self.node.key!r})"

    __repr__ = __str__

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Comparable) -> bool:
        return _get_node(self.node, key) is not None

    def __iter__(self) -> Iterator[Comparable]:
        for node in _iter_nodes(self.node):
            yield node.key

    # Accessors
    def root_key(self) -> Optional[Comparable]:
        """Key stored at the root, or None for the empty tree."""
        return None if self.node is None else self.node.key

    def root_value(self) -> Any:
        """Value stored at the root, or None for the empty tree."""
        return None if self.node is None else self.node.value

    def size(self) -> int:
        """Total number of nodes in the tree, 0 if empty."""
        return _size(self.node)

    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path, 0 if empty."""
        return _height(self.node)

    # Public API
    def insert(self, key: Comparable, value: Any) -> InsertResult:
        """
        Public method (O(log n)): Insert a key-value pair into the tree.
        If the key already exists, its value is replaced in place.

        Args:
            key (Comparable): The key to insert.
            value: The value to associate with key.

        Returns:
            InsertResult: (tree, added) where added is False if an existing
                value was replaced.

        Raises:
            TypeError: If key does not provide a cmp() method.
        """
        if not isinstance(key, Comparable):
            raise TypeError(
                f"insert(): key must implement cmp(), got {type(key).__name__}"
            )
        self.node, added = _insert(self.node, key, value)
        return InsertResult(self, added)

    def remove(self, key: Comparable) -> RemoveResult:
        """
        Public method (O(log n)): Remove the entry with the given key.

        Returns:
            RemoveResult: (tree, removed) where removed is False if the key
                was not present (the tree is then unchanged).
        """
        self.node, removed = _remove(self.node, key)
        return RemoveResult(self, removed)

    def get(self, key: Comparable, default: Optional[Any] = None) -> Any:
        """Return the value stored for key, or default if key is not present."""
        node = _get_node(self.node, key)
        return default if node is None else node.value

    def get_node(self, key: Comparable) -> Optional[WBTree]:
        """Return the subtree rooted at key, or None if key is not present."""
        node = _get_node(self.node, key)
        return None if node is None else WBTree(node)

    # Ordered traversal
    def for_each(self, visit: Callable[[Comparable, Any], bool]) -> None:
        """
        Call visit(key, value) for every entry in ascending key order.
        The walk stops as soon as visit returns a falsy value.
        """
        _walk(self.node, lambda node: visit(node.key, node.value))

    def reverse_for_each(self, visit: Callable[[Comparable, Any], bool]) -> None:
        """Like for_each(), in descending key order."""
        _reverse_walk(self.node, lambda node: visit(node.key, node.value))

    def keys(self) -> List[Comparable]:
        """All keys in ascending order."""
        return [node.key for node in _iter_nodes(self.node)]

    def values(self) -> List[Any]:
        """All values in ascending key order."""
        return [node.value for node in _iter_nodes(self.node)]

    def items(self) -> List[Tuple[Comparable, Any]]:
        """All (key, value) pairs in ascending key order."""
        return [(node.key, node.value) for node in _iter_nodes(self.node)]

    def least(self, n: int) -> List[WBTree]:
        """Up to n subtree handles with the smallest keys, ascending."""
        return self._first(n, _walk, "least")

    def greatest(self, n: int) -> List[WBTree]:
        """Up to n subtree handles with the greatest keys, descending."""
        return self._first(n, _reverse_walk, "greatest")

    def least_keys(self, n: int) -> List[Comparable]:
        return [t.node.key for t in self.least(n)]

    def greatest_keys(self, n: int) -> List[Comparable]:
        return [t.node.key for t in self.greatest(n)]

    def least_values(self, n: int) -> List[Any]:
        return [t.node.value for t in self.least(n)]

    def greatest_values(self, n: int) -> List[Any]:
        return [t.node.value for t in self.greatest(n)]

    def least_node(self) -> Optional[WBTree]:
        """The subtree rooted at the smallest key, or None if empty."""
        node = _least(self.node)
        return None if node is None else WBTree(node)

    def greatest_node(self) -> Optional[WBTree]:
        """The subtree rooted at the greatest key, or None if empty."""
        node = _greatest(self.node)
        return None if node is None else WBTree(node)

    def _first(self, n: int, walk, name: str) -> List[WBTree]:
        if not isinstance(n, int) or n < 0:
            raise ValueError(f"{name}(): n must be a non-negative int, got {n!r}")
        found: List[WBTree] = []
        if n == 0:
            return found

        def collect(node: WBNode) -> bool:
            found.append(WBTree(node))
            return len(found) < n

        walk(self.node, collect)
        return found

    def print_structure(self, indent: int = 0, max_depth: int = 8) -> str:
        prefix = ' ' * indent
        if self.is_empty():
            return f"{prefix}Empty {self.__class__.__name__}"
        result: List[str] = []
        _format_node(self.node, indent, 0, max_depth, "Root", result)
        return "\n".join(result)


# Engine
def _size(node: Optional[WBNode]) -> int:
    return 0 if node is None else node.child_size + 1


def _height(node: Optional[WBNode]) -> int:
    if node is None:
        return 0
    return 1 + max(_height(node.left), _height(node.right))


def _get_node(node: Optional[WBNode], key: Comparable) -> Optional[WBNode]:
    while node is not None:
        compared = node.key.cmp(key)
        if compared == 0:
            return node
        node = node.right if compared < 0 else node.left
    return None


def _least(node: Optional[WBNode]) -> Optional[WBNode]:
    if node is None:
        return None
    while node.left is not None:
        node = node.left
    return node


def _greatest(node: Optional[WBNode]) -> Optional[WBNode]:
    if node is None:
        return None
    while node.right is not None:
        node = node.right
    return node


def _insert(
    node: Optional[WBNode], key: Comparable, value: Any
) -> Tuple[WBNode, bool]:
    """
    Insert key below node and return (new subtree root, added).
    Each level re-balances on the way back up.
    """
    if node is None:
        return WBNode(key, value), True

    compared = node.key.cmp(key)
    if compared == 0:
        node.value = value
        return node, False

    add_right = compared < 0
    child = node.right if add_right else node.left
    child, added = _insert(child, key, value)
    if not added:
        # replaced deeper down, nothing changed structurally
        return node, False

    if add_right:
        node.right = child
    else:
        node.left = child
    node.child_size += 1
    return _balance(node, add_right), True


def _remove(node: Optional[WBNode], key: Comparable) -> Tuple[Optional[WBNode], bool]:
    """
    Remove key below node and return (new subtree root, removed).
    A node with two children takes over its in-order successor's entry.
    """
    if node is None:
        return None, False

    compared = node.key.cmp(key)
    if compared == 0:
        if node.left is None:
            return node.right, True
        if node.right is None:
            return node.left, True

        successor = _least(node.right)
        node.key = successor.key
        node.value = successor.value
        node.right, _ = _remove(node.right, successor.key)
        node.child_size -= 1
        return _balance(node, False), True

    remove_right = compared < 0
    child = node.right if remove_right else node.left
    child, removed = _remove(child, key)
    if not removed:
        return node, False

    if remove_right:
        node.right = child
    else:
        node.left = child
    node.child_size -= 1
    # the side opposite the removal is now the heavier one
    return _balance(node, not remove_right), True


def _set_children(
    node: WBNode,
    light: Optional[WBNode],
    heavy: Optional[WBNode],
    right_heavy: bool,
) -> None:
    if right_heavy:
        node.left, node.right = light, heavy
    else:
        node.left, node.right = heavy, light


def _balance(node: WBNode, right_heavy: bool) -> WBNode:
    """
    Restore weight balance at node after one insert or remove below it.

    right_heavy must be True if the right subtree grew (or the left shrank).
    Performs a single or double rotation if needed and returns the new
    subtree root, which is node itself when no rotation is required.
    """
    if right_heavy:
        x, c = node.left, node.right
    else:
        x, c = node.right, node.left

    x_size, c_size = _size(x), _size(c)
    if (x_size + 1) * DELTA >= c_size + 1:
        return node

    # c is nonempty here, its near child b and far child z decide the rotation
    if right_heavy:
        b, z = c.left, c.right
    else:
        b, z = c.right, c.left
    b_size, z_size = _size(b), _size(z)

    if b_size + 1 < (z_size + 1) * GAMMA:
        logger.debug(f"single rotation at {node.key!r} (right_heavy={right_heavy})")
        _set_children(node, x, b, right_heavy)
        _set_children(c, node, z, right_heavy)
        node.child_size = x_size + b_size
        c.child_size = node.child_size + 1 + z_size
        return c

    logger.debug(f"double rotation at {node.key!r} (right_heavy={right_heavy})")
    if right_heavy:
        s, y = b.left, b.right
    else:
        s, y = b.right, b.left
    _set_children(node, x, s, right_heavy)
    _set_children(c, y, z, right_heavy)
    _set_children(b, node, c, right_heavy)
    node.child_size = x_size + _size(s)
    c.child_size = _size(y) + z_size
    b.child_size = _size(node) + _size(c)
    return b


# Traversal
def _walk(node: Optional[WBNode], visit: Callable[[WBNode], Any]) -> bool:
    """In-order walk; returns False once visit asked to stop."""
    if node is None:
        return True
    if not _walk(node.left, visit):
        return False
    if not visit(node):
        return False
    return _walk(node.right, visit)


def _reverse_walk(node: Optional[WBNode], visit: Callable[[WBNode], Any]) -> bool:
    if node is None:
        return True
    if not _reverse_walk(node.right, visit):
        return False
    if not visit(node):
        return False
    return _reverse_walk(node.left, visit)


def _iter_nodes(node: Optional[WBNode]) -> Iterator[WBNode]:
    """Yield the nodes below node in ascending key order."""
    stack: List[WBNode] = []
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right


def _format_node(
    node: WBNode,
    indent: int,
    depth: int,
    max_depth: int,
    label: str,
    out: List[str],
) -> None:
    prefix = ' ' * indent
    if depth > max_depth:
        out.append(f"{prefix}... (max depth reached)")
        return
    out.append(f"{prefix}{label}: key={node.key!r}, value={node.value!r}, "
               f"size={node.child_size + 1}")
    for side, child in (("Left", node.left), ("Right", node.right)):
        if child is None:
            out.append(f"{prefix}    {side}: Empty")
        else:
            _format_node(child, indent + 4, depth + 1, max_depth, side, out)


@dataclass
class Stats:
    node_count: int
    height: int
    least_key: Optional[Any]
    greatest_key: Optional[Any]
    is_search_tree: bool
    sizes_consistent: bool
    is_balanced: bool


def wbtree_stats_(t: Optional[WBTree]) -> Stats:
    """
    Returns aggregated statistics for a weight-balanced tree in **O(n)** time.

    The flags report whether keys are in search-tree order, every cached
    child_size matches the actual node count below it, and every node
    satisfies the weight-balance bound for DELTA.
    """
    if t is None:
        return _node_stats(None)
    return _node_stats(t.node)


def _node_stats(node: Optional[WBNode]) -> Stats:
    if node is None:
        return Stats(node_count       = 0,
                     height           = 0,
                     least_key        = None,
                     greatest_key     = None,
                     is_search_tree   = True,
                     sizes_consistent = True,
                     is_balanced      = True)

    left = _node_stats(node.left)
    right = _node_stats(node.right)

    is_search_tree = left.is_search_tree and right.is_search_tree
    if left.greatest_key is not None and left.greatest_key.cmp(node.key) >= 0:
        is_search_tree = False
    if right.least_key is not None and right.least_key.cmp(node.key) <= 0:
        is_search_tree = False

    left_weight = left.node_count + 1
    right_weight = right.node_count + 1
    is_balanced = (
        left.is_balanced and right.is_balanced
        and left_weight * DELTA >= right_weight
        and right_weight * DELTA >= left_weight
    )

    sizes_consistent = (
        left.sizes_consistent and right.sizes_consistent
        and node.child_size == left.node_count + right.node_count
    )

    return Stats(
        node_count=1 + left.node_count + right.node_count,
        height=1 + max(left.height, right.height),
        least_key=left.least_key if node.left is not None else node.key,
        greatest_key=right.greatest_key if node.right is not None else node.key,
        is_search_tree=is_search_tree,
        sizes_consistent=sizes_consistent,
        is_balanced=is_balanced,
    )
