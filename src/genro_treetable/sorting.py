# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Hierarchical sorting of tree-table rows.

The render sequence lists every node exactly once so that:

- within each level, directories come before leaves whatever the sort
  column and order;
- each directory is immediately followed by its whole subtree;
- directories and leaves are ordered by the sort column inside their own
  partition.

Sort values are raw field values. Strings compare case-insensitively,
numbers numerically, None is lower than any value, and numbers are lower
than strings when a column mixes both. Equal values keep their input order.

Example:
    >>> pairs = [('b', 'B'), ('a/', 'A'), ('a/x', 'x'), ('c/', 'C')]
    >>> compute_sequence(pairs, 'asc')
    ['a/', 'a/x', 'c/', 'b']
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Iterable

from . import paths
from .exceptions import InvalidSequenceInputError

ASC = 'asc'
DESC = 'desc'
SORT_ORDERS = (ASC, DESC)

SortPair = tuple[str, Any]


def normalize_sort_order(order: Any) -> str | None:
    """Return 'asc' or 'desc' for a case-insensitive match, else None."""
    if isinstance(order, str) and order.lower() in SORT_ORDERS:
        return order.lower()
    return None


def _rank(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return 1
    return 2


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison of two raw field values (-1, 0 or 1)."""
    rank_a, rank_b = _rank(a), _rank(b)
    if rank_a != rank_b:
        return -1 if rank_a < rank_b else 1
    if rank_a == 0:
        return 0
    if isinstance(a, str):
        a, b = a.lower(), b.lower()
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def make_comparator(sort_order: str = ASC) -> Callable[[SortPair, SortPair], int]:
    """Return a pair comparator, reversed when sort_order is 'desc'."""
    direction = -1 if normalize_sort_order(sort_order) == DESC else 1

    def comparator(a: SortPair, b: SortPair) -> int:
        return direction * compare_values(a[1], b[1])

    return comparator


def sort_pairs(nodes: Iterable[Any], sort_column: str) -> list[SortPair]:
    """Build (node_id, sort_value) pairs from TreeTableNode objects."""
    return [(node.node_id, node.sort_value(sort_column)) for node in nodes]


def _validate_pairs(pairs: Iterable[Any]) -> list[SortPair]:
    checked: list[SortPair] = []
    seen: set[str] = set()
    for pair in pairs:
        if not isinstance(pair, (tuple, list)) or len(pair) != 2:
            raise InvalidSequenceInputError(f"Malformed sort pair: {pair!r}")
        node_id, value = pair
        if not isinstance(node_id, str) or not node_id:
            raise InvalidSequenceInputError(f"Malformed node id in sort pair: {pair!r}")
        if node_id in seen:
            raise InvalidSequenceInputError(f"Duplicate node id in sort pairs: {node_id!r}")
        seen.add(node_id)
        checked.append((node_id, value))
    return checked


def compute_sequence(pairs: Iterable[Any], sort_order: str = ASC) -> list[str]:
    """Compute the render sequence of a set of nodes.

    Args:
        pairs: (node_id, sort_value) pairs covering every node.
        sort_order: 'asc' or 'desc'.

    Returns:
        Every node id exactly once, in render order.

    Raises:
        InvalidSequenceInputError: If a pair is malformed, an id repeats, or
            a node's parent directory is missing from pairs.
    """
    checked = _validate_pairs(pairs)
    key = cmp_to_key(make_comparator(sort_order))

    levels: dict[str, tuple[list[SortPair], list[SortPair]]] = {}
    for pair in checked:
        directories, leaves = levels.setdefault(paths.parent_of(pair[0]), ([], []))
        if paths.is_directory(pair[0]):
            directories.append(pair)
        else:
            leaves.append(pair)
    for directories, leaves in levels.values():
        directories.sort(key=key)
        leaves.sort(key=key)

    sequence: list[str] = []
    _walk_level(levels, paths.ROOT, sequence)

    if len(sequence) != len(checked):
        placed = set(sequence)
        orphans = [node_id for node_id, _ in checked if node_id not in placed]
        raise InvalidSequenceInputError(f"Nodes without parent directory: {orphans!r}")
    return sequence


def _walk_level(
    levels: dict[str, tuple[list[SortPair], list[SortPair]]],
    level: str,
    sequence: list[str],
) -> None:
    directories, leaves = levels.get(level, ((), ()))
    for node_id, _ in directories:
        sequence.append(node_id)
        _walk_level(levels, node_id, sequence)
    sequence.extend(node_id for node_id, _ in leaves)
