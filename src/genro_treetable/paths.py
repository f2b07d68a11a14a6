# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Node id parsing.

Node ids are path-like strings divided by ``SEPARATOR``. An id ending with
the separator is a directory, anything else is a leaf::

    'docs/'          root-level directory
    'docs/readme'    leaf inside 'docs/'
    'docs/img/'      directory inside 'docs/'
    'notes'          root-level leaf

The empty string is the implicit root and is never stored as a node.
Parent, name and depth are always derived from the id itself.
"""

from __future__ import annotations

from typing import Any, Iterator

from .exceptions import InvalidArgumentError

SEPARATOR = '/'
ROOT = ''


def validate_node_id(node_id: Any) -> str:
    """Return node_id if it is a non-empty string.

    Raises:
        InvalidArgumentError: If node_id is not a string or is empty.
    """
    if not isinstance(node_id, str) or not node_id:
        raise InvalidArgumentError(f"Invalid node id: {node_id!r}")
    return node_id


def is_directory(node_id: str) -> bool:
    """True if node_id is non-empty and ends with the separator.

    Example:
        >>> is_directory('foo/')
        True
        >>> is_directory('foo/bar')
        False
    """
    return isinstance(node_id, str) and node_id.endswith(SEPARATOR)


def parent_of(node_id: str) -> str:
    """Return the id of the parent directory, or ROOT for root-level nodes.

    The node's own trailing separator is ignored, so a directory is never
    its own parent. A bare separator id is root-level.

    Example:
        >>> parent_of('foo/bar/')
        'foo/'
        >>> parent_of('foo/bar/baz')
        'foo/bar/'
        >>> parent_of('foo/')
        ''
    """
    stripped = node_id[:-1] if is_directory(node_id) else node_id
    idx = stripped.rfind(SEPARATOR)
    if idx < 0:
        return ROOT
    return stripped[:idx + 1]


def name_of(node_id: str) -> str:
    """Return the last non-empty segment of node_id.

    Example:
        >>> name_of('foo/bar/')
        'bar'
        >>> name_of('foo/bar.txt')
        'bar.txt'
    """
    for segment in reversed(node_id.split(SEPARATOR)):
        if segment:
            return segment
    return ''


def depth(node_id: str) -> int:
    """Return the nesting level of node_id (root-level nodes are 0)."""
    stripped = node_id[:-1] if is_directory(node_id) else node_id
    return stripped.count(SEPARATOR)


def iter_ancestors(node_id: str) -> Iterator[str]:
    """Yield strict ancestor directory ids, nearest first."""
    parent = parent_of(node_id)
    while parent:
        yield parent
        parent = parent_of(parent)


def ancestors_of(node_id: str) -> list[str]:
    """Return strict ancestor directory ids, nearest first.

    Example:
        >>> ancestors_of('a/b/c')
        ['a/b/', 'a/']
    """
    return list(iter_ancestors(node_id))
