"""
AVL Tree Demo — walks through every operation of the multiset AVL tree.

Covers insertion with duplicates, single and bulk deletion, membership
queries, a full in-order iteration, and the two failure paths: deleting
from an empty tree and mutating a tree mid-iteration.
"""

import argparse
import logging
import sys

from avl_tree import AVLTree, ConcurrentModificationError, EmptyCollectionError

logger = logging.getLogger("avl_demo")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Demonstrate the multiset AVL tree"
    )
    parser.add_argument(
        "-n", "--count",
        type=int,
        default=7,
        help="Number of ascending values for the balance example (default: 7)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output, including every rotation"
    )
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(message)s'))
    root = logging.getLogger()
    if root.hasHandlers():
        root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def banner(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def example_1_mutations():
    """Insert with a duplicate, delete one value, then delete every 3."""
    banner("Example 1: Insert, Delete and Delete-All")

    tree: AVLTree[int] = AVLTree()
    for value in (1, 2, 3, 3):
        tree.insert(value)
    print(f"After inserting 1 2 3 3: {tree}")

    tree.delete(1)
    print(f"After delete(1):         {tree}")

    tree.delete_all(3)
    print(f"After delete_all(3):     {tree}")

    return tree


def example_2_contains(tree: AVLTree[int]):
    """Membership for present, absent and negative values."""
    banner("Example 2: Contains")

    tree.insert(1)
    tree.insert(2)
    print(f"Tree: {tree}")
    for value in (1, 12, 2, -2):
        print(f"contains({value}): {tree.contains(value)}")

    return tree


def example_3_iteration(tree: AVLTree[int]):
    """Drain one iterator using has_next/advance."""
    banner("Example 3: In-Order Iteration")

    seen = []
    iterator = iter(tree)
    while iterator.has_next():
        value = iterator.advance()
        seen.append(value)
        print(value)

    return seen


def example_4_empty_collection(tree: AVLTree[int]):
    """Delete past exhaustion to trigger EmptyCollectionError."""
    banner("Example 4: Deleting From an Empty Tree")

    try:
        tree.delete(1)
        tree.delete_all(2)
        tree.delete(3)
    except EmptyCollectionError as e:
        logger.info("caught %s", type(e).__name__)
        print(e)
        return e
    return None


def example_5_fail_fast():
    """Insert while iterating to trigger ConcurrentModificationError."""
    banner("Example 5: Fail-Fast Iteration")

    tree: AVLTree[int] = AVLTree()
    for value in (1, 2, 3):
        tree.insert(value)

    try:
        for value in tree:
            print(value)
            if value == 2:
                tree.insert(4)
    except ConcurrentModificationError as e:
        logger.info("caught %s: %s", type(e).__name__, e)
        print("ConcurrentModificationError has occurred --> (Fail Fast Test)")
        return e
    return None


def example_6_ascending_balance(count: int):
    """Ascending inserts never leave the tree unbalanced."""
    banner(f"Example 6: Ascending Inserts 1..{count}")

    tree: AVLTree[int] = AVLTree()
    for value in range(1, count + 1):
        tree.insert(value)
        if not tree.is_valid():
            raise AssertionError(f"tree invalid after inserting {value}")
    print(f"Tree:   {tree}")
    print(f"Height: {tree.height()}")

    return tree


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.debug)

    tree = example_1_mutations()
    example_2_contains(tree)
    example_3_iteration(tree)
    example_4_empty_collection(tree)
    example_5_fail_fast()
    example_6_ascending_balance(args.count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
