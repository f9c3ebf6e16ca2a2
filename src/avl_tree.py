import logging
from typing import TypeVar, Generic, List, Iterator, Optional, Tuple

T = TypeVar('T')

logger = logging.getLogger(__name__)


class EmptyCollectionError(IndexError):
    """Raised when removing from, or querying the extremes of, an empty collection."""

    def __init__(self, collection: Optional[str] = None) -> None:
        self.collection = collection
        if collection is None:
            super().__init__("The collection is empty.")
        else:
            super().__init__(f"The {collection} is empty.")


class ConcurrentModificationError(RuntimeError):
    """Raised by an iterator whose tree was mutated since its last step."""

    def __init__(self, message: str = "tree mutated during iteration") -> None:
        super().__init__(message)


class IteratorExhaustedError(StopIteration):
    """Raised when advancing an iterator past its last value."""


class AVLTree(Generic[T]):
    """Height-balanced binary search tree holding a multiset of values.

    Equal values are routed to the right subtree on insertion, so the
    in-order sequence stays non-decreasing and keeps every duplicate.
    Each completed ``insert``, ``delete``, ``delete_all`` or ``clear`` bumps
    a modification counter that iterators check to fail fast.
    """

    class Node:
        def __init__(self, value: T) -> None:
            self.value: T = value
            self.left: Optional['AVLTree.Node'] = None
            self.right: Optional['AVLTree.Node'] = None
            self.height: int = 1

    def __init__(self) -> None:
        self._root: Optional[AVLTree.Node] = None
        self._size: int = 0
        self._mod_count: int = 0

    @property
    def mod_count(self) -> int:
        return self._mod_count

    def _get_height(self, node: Optional[Node]) -> int:
        if node is None:
            return 0
        return node.height

    def _update_height(self, node: Node) -> None:
        node.height = 1 + max(self._get_height(node.left), self._get_height(node.right))

    def _get_balance(self, node: Optional[Node]) -> int:
        if node is None:
            return 0
        return self._get_height(node.left) - self._get_height(node.right)

    def _right_rotate(self, y: Node) -> Node:
        x = y.left
        assert x is not None
        t2 = x.right

        x.right = y
        y.left = t2

        # displaced node first, its height feeds the new root's
        self._update_height(y)
        self._update_height(x)

        logger.debug("rotated %r right, new subtree root %r", y.value, x.value)
        return x

    def _left_rotate(self, x: Node) -> Node:
        y = x.right
        assert y is not None
        t2 = y.left

        y.left = x
        x.right = t2

        self._update_height(x)
        self._update_height(y)

        logger.debug("rotated %r left, new subtree root %r", x.value, y.value)
        return y

    def _rebalance(self, node: Node) -> Node:
        self._update_height(node)
        balance = self._get_balance(node)

        if balance > 1:
            if self._get_balance(node.left) < 0:
                assert node.left is not None
                node.left = self._left_rotate(node.left)
            return self._right_rotate(node)

        if balance < -1:
            if self._get_balance(node.right) > 0:
                assert node.right is not None
                node.right = self._right_rotate(node.right)
            return self._left_rotate(node)

        return node

    def _join(self, left: Optional[Node], node: Node, right: Optional[Node]) -> Node:
        # Attach ``node`` between two valid subtrees whose heights may differ
        # by any amount: descend the spine of the taller one until the
        # heights are within one, then rebalance on the way back up.
        left_height = self._get_height(left)
        right_height = self._get_height(right)

        if left_height > right_height + 1:
            assert left is not None
            left.right = self._join(left.right, node, right)
            return self._rebalance(left)

        if right_height > left_height + 1:
            assert right is not None
            right.left = self._join(left, node, right.left)
            return self._rebalance(right)

        node.left = left
        node.right = right
        return self._rebalance(node)

    def _insert(self, node: Optional[Node], value: T) -> Node:
        if node is None:
            self._size += 1
            return AVLTree.Node(value)

        if value < node.value:
            node.left = self._insert(node.left, value)
        else:
            node.right = self._insert(node.right, value)

        return self._rebalance(node)

    def insert(self, value: T) -> None:
        self._root = self._insert(self._root, value)
        self._mod_count += 1
        logger.debug("inserted %r, size=%d height=%d", value, self._size, self.height())

    def _find_min_node(self, node: Node) -> Node:
        while node.left is not None:
            node = node.left
        return node

    def _detach_min(self, node: Node) -> Tuple[Optional[Node], Node]:
        if node.left is None:
            return node.right, node
        node.left, smallest = self._detach_min(node.left)
        return self._rebalance(node), smallest

    def _delete(self, node: Optional[Node], value: T) -> Optional[Node]:
        if node is None:
            return None

        if value < node.value:
            node.left = self._delete(node.left, value)
        elif value > node.value:
            node.right = self._delete(node.right, value)
        else:
            self._size -= 1
            if node.left is None:
                return node.right
            elif node.right is None:
                return node.left
            else:
                node.right, successor = self._detach_min(node.right)
                node.value = successor.value

        return self._rebalance(node)

    def delete(self, value: T) -> None:
        if self._root is None:
            raise EmptyCollectionError("AVL Tree")
        self._root = self._delete(self._root, value)
        self._mod_count += 1
        logger.debug("deleted one %r, size=%d", value, self._size)

    def _delete_all(self, node: Optional[Node], value: T) -> Optional[Node]:
        if node is None:
            return None

        # Duplicates can sit on either side of a non-matching node once
        # rotations have moved them, so both children are always visited.
        left = self._delete_all(node.left, value)
        right = self._delete_all(node.right, value)

        if value == node.value:
            self._size -= 1
            if left is None:
                return right
            if right is None:
                return left
            right, successor = self._detach_min(right)
            node.value = successor.value

        return self._join(left, node, right)

    def delete_all(self, value: T) -> None:
        if self._root is None:
            raise EmptyCollectionError("AVL Tree")
        before = self._size
        self._root = self._delete_all(self._root, value)
        self._mod_count += 1
        logger.debug("deleted %d x %r, size=%d", before - self._size, value, self._size)

    def contains(self, value: T) -> bool:
        node = self._root
        while node is not None:
            if value < node.value:
                node = node.left
            elif value > node.value:
                node = node.right
            else:
                return True
        return False

    def _count(self, node: Optional[Node], value: T) -> int:
        if node is None:
            return 0
        if value < node.value:
            return self._count(node.left, value)
        if value > node.value:
            return self._count(node.right, value)
        return 1 + self._count(node.left, value) + self._count(node.right, value)

    def count(self, value: T) -> int:
        return self._count(self._root, value)

    def min(self) -> T:
        if self._root is None:
            raise EmptyCollectionError("AVL Tree")
        return self._find_min_node(self._root).value

    def max(self) -> T:
        if self._root is None:
            raise EmptyCollectionError("AVL Tree")
        node = self._root
        while node.right is not None:
            node = node.right
        return node.value

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._root is None

    def clear(self) -> None:
        self._root = None
        self._size = 0
        self._mod_count += 1

    def height(self) -> int:
        return self._get_height(self._root)

    def in_order(self) -> List[T]:
        result: List[T] = []
        stack: List[AVLTree.Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            result.append(node.value)
            node = node.right
        return result

    def pre_order(self) -> List[T]:
        result: List[T] = []
        if self._root is None:
            return result
        stack: List[AVLTree.Node] = [self._root]
        while stack:
            node = stack.pop()
            result.append(node.value)
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return result

    def post_order(self) -> List[T]:
        result: List[T] = []
        if self._root is None:
            return result
        stack: List[AVLTree.Node] = [self._root]
        while stack:
            node = stack.pop()
            result.append(node.value)
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)
        result.reverse()
        return result

    def _render(self, node: Optional[Node], parts: List[str]) -> None:
        if node is not None:
            self._render(node.left, parts)
            parts.append(f"{node.value} ")
            self._render(node.right, parts)

    def to_display_string(self) -> str:
        parts: List[str] = []
        self._render(self._root, parts)
        return "".join(parts)

    def copy(self) -> 'AVLTree[T]':
        clone: AVLTree[T] = AVLTree()
        for value in self.pre_order():
            clone.insert(value)
        return clone

    def _is_balanced(self, node: Optional[Node]) -> bool:
        if node is None:
            return True
        balance = self._get_balance(node)
        if abs(balance) > 1:
            return False
        return self._is_balanced(node.left) and self._is_balanced(node.right)

    def is_balanced(self) -> bool:
        return self._is_balanced(self._root)

    def _is_valid(self, node: Optional[Node], low: Optional[T], high: Optional[T]) -> bool:
        if node is None:
            return True
        if low is not None and node.value < low:
            return False
        if high is not None and node.value > high:
            return False
        expected = 1 + max(self._get_height(node.left), self._get_height(node.right))
        if node.height != expected or abs(self._get_balance(node)) > 1:
            return False
        return (self._is_valid(node.left, low, node.value)
                and self._is_valid(node.right, node.value, high))

    def is_valid(self) -> bool:
        """Check ordering, stored heights and balance for every node."""
        return self._is_valid(self._root, None, None)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._root is not None

    def __contains__(self, value: T) -> bool:
        return self.contains(value)

    def __iter__(self) -> 'AVLTreeIterator[T]':
        return AVLTreeIterator(self)

    def __repr__(self) -> str:
        return f"AVLTree({self.in_order()})"

    def __str__(self) -> str:
        return self.to_display_string()


class AVLTreeIterator(Generic[T]):
    """Fail-fast in-order iterator over an :class:`AVLTree`.

    The stack holds the left frontier of values not yet produced. Any
    mutation of the tree through its public methods after the iterator's
    last successful step makes the next ``has_next`` or ``advance`` raise
    :class:`ConcurrentModificationError`.
    """

    def __init__(self, tree: AVLTree[T]) -> None:
        self._tree = tree
        self._expected_mod_count = tree.mod_count
        self._stack: List[AVLTree.Node] = []
        self._push_left(tree._root)

    def _push_left(self, node: Optional[AVLTree.Node]) -> None:
        while node is not None:
            self._stack.append(node)
            node = node.left

    def _check_for_comodification(self) -> None:
        if self._tree.mod_count != self._expected_mod_count:
            raise ConcurrentModificationError()

    def has_next(self) -> bool:
        self._check_for_comodification()
        return len(self._stack) > 0

    def advance(self) -> T:
        self._check_for_comodification()
        if not self._stack:
            raise IteratorExhaustedError()
        node = self._stack.pop()
        self._push_left(node.right)
        self._expected_mod_count = self._tree.mod_count
        return node.value

    def __next__(self) -> T:
        return self.advance()

    def __iter__(self) -> Iterator[T]:
        return self
