from abc import ABC, abstractmethod

from typing import Any, NamedTuple, Optional, Protocol, TypeVar, Generic, runtime_checkable

# Balance parameters from Y. Hirai and K. Yamamoto (2011), "Balancing
# weight-balanced trees". (3, 2) is the only integer pair proven valid.
DELTA = 3
GAMMA = 2


@runtime_checkable
class Comparable(Protocol):
    """
    Capability a key type must provide to be stored in a WBTree.

    cmp(other) compares this value with other and returns:
        a negative int if this value orders before other
        0              if both are equal
        a positive int if this value orders after other
    """

    def cmp(self, other: Any) -> int:
        ...


class NaturalKey:
    """
    Wraps a value with native ordering (int, str, tuple, ...) so it can be
    used as a tree key.
    """
    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def cmp(self, other: "NaturalKey") -> int:
        if self.value < other.value:
            return -1
        if other.value < self.value:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NaturalKey):
            return NotImplemented
        return self.cmp(other) == 0

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"


T = TypeVar("T", bound="AbstractSortedMap")


class InsertResult(NamedTuple):
    """
    Result of an insertion.

    Attributes:
        tree: The tree handle to use for subsequent operations.
        added (bool): True if a new entry was created, False if an existing
            value was replaced.
    """
    tree: Any
    added: bool


class RemoveResult(NamedTuple):
    """
    Result of a removal.

    Attributes:
        tree: The tree handle to use for subsequent operations.
        removed (bool): True if an entry was removed, False if the key was absent.
    """
    tree: Any
    removed: bool


class AbstractSortedMap(ABC, Generic[T]):
    """
    Abstract base class for ordered maps keyed by Comparable keys.
    """

    @abstractmethod
    def insert(self, key: Comparable, value: Any) -> InsertResult:
        """
        Insert a key-value pair, replacing the value if the key is present.

        Returns:
            InsertResult: (tree, added)
        """
        pass

    @abstractmethod
    def remove(self, key: Comparable) -> RemoveResult:
        """
        Remove the entry for key, if any.

        Returns:
            RemoveResult: (tree, removed)
        """
        pass

    @abstractmethod
    def get(self, key: Comparable, default: Optional[Any] = None) -> Any:
        """Return the value stored for key, or default if it is absent."""
        pass
