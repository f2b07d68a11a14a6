# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NodeStore - the canonical id to node mapping of a TreeTable.

NodeStore keeps every TreeTableNode in a flat dict keyed by node id, which
gives O(1) lookup by path. Hierarchy is never stored as parent pointers:
the parent of a node is derived from its id (see ``genro_treetable.paths``)
and each directory only keeps the set of its direct children, which the
store maintains on every insert and remove.

Invariants kept by every public method:
    - every non-root-level node has its parent directory in the store
    - a directory's children set is exactly the set of nodes whose derived
      parent is that directory

Example:
    >>> store = NodeStore()
    >>> node = store.insert('docs/', {'name': 'Docs'})
    >>> node = store.insert('docs/readme', {'name': 'readme'})
    >>> store.children_of('docs/')
    ['docs/readme']
    >>> store.remove('docs/')
    ['docs/readme', 'docs/']
"""

from __future__ import annotations

from typing import Any, Iterator

from .. import paths
from ..exceptions import DuplicateNodeError, NodeNotFoundError
from ..node import TreeTableNode


class NodeStore:
    """A flat, path-keyed container of TreeTableNode with O(1) lookup.

    Iteration follows insertion order. Root-level node ids are tracked
    separately so that ``children_of('')`` needs no scan.
    """

    __slots__ = ('_nodes', '_roots')

    def __init__(self) -> None:
        self._nodes: dict[str, TreeTableNode] = {}
        self._roots: set[str] = set()

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"NodeStore({list(self._nodes.keys())})"

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        """Iterate over node ids in insertion order."""
        return iter(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return isinstance(node_id, str) and node_id in self._nodes

    # ==================== Access ====================

    def has(self, node_id: str) -> bool:
        """True if a node with this id exists."""
        return isinstance(node_id, str) and node_id in self._nodes

    def get(self, node_id: str) -> TreeTableNode:
        """Get node by id.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Node {node_id!r} not found") from None

    def ids(self) -> list[str]:
        """Return node ids in insertion order."""
        return list(self._nodes)

    def nodes(self) -> list[TreeTableNode]:
        """Return nodes in insertion order."""
        return list(self._nodes.values())

    def children_of(self, node_id: str = paths.ROOT) -> list[str]:
        """Return ids of the direct children of a directory, sorted by id.

        Args:
            node_id: Directory id, or '' for root-level nodes.

        Raises:
            NodeNotFoundError: If node_id is not '' and does not exist.
        """
        if node_id == paths.ROOT:
            return sorted(self._roots)
        return sorted(self.get(node_id).children)

    def descendants_of(self, node_id: str) -> list[str]:
        """Return all descendants of a node, children before grandchildren.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        result: list[str] = []
        pending = self.children_of(node_id)
        while pending:
            child_id = pending.pop(0)
            result.append(child_id)
            pending.extend(sorted(self._nodes[child_id].children))
        return result

    def post_order(self, node_id: str) -> list[str]:
        """Return node_id and its descendants, each directory after its subtree.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        result: list[str] = []

        def _visit(current: TreeTableNode) -> None:
            for child_id in sorted(current.children):
                _visit(self._nodes[child_id])
            result.append(current.node_id)

        _visit(self.get(node_id))
        return result

    # ==================== Mutation ====================

    def insert(self, node_id: str, fields: dict[str, Any] | None = None) -> TreeTableNode:
        """Insert a new node and register it with its parent.

        Args:
            node_id: Id of the node to create.
            fields: Column values.

        Returns:
            The new TreeTableNode.

        Raises:
            DuplicateNodeError: If the id already exists (use update instead).
            NodeNotFoundError: If the parent directory does not exist.
        """
        if node_id in self._nodes:
            raise DuplicateNodeError(f"Node {node_id!r} already exists")
        parent_id = paths.parent_of(node_id)
        if parent_id and parent_id not in self._nodes:
            raise NodeNotFoundError(
                f"Parent {parent_id!r} of {node_id!r} not found"
            )

        node = TreeTableNode(node_id, fields)
        self._nodes[node_id] = node
        if parent_id:
            self._nodes[parent_id].children.add(node_id)
        else:
            self._roots.add(node_id)
        return node

    def update(self, node_id: str, fields: dict[str, Any]) -> TreeTableNode:
        """Replace the fields of an existing node in place.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        node = self.get(node_id)
        node.replace_fields(fields)
        return node

    def remove(self, node_id: str) -> list[str]:
        """Remove a node and all its descendants.

        Descendants are removed depth-first before their directory.

        Returns:
            Removed ids in removal order (post-order, node_id last).

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        removed = self.post_order(node_id)
        for removed_id in removed:
            node = self._nodes.pop(removed_id)
            node.children.clear()

        parent_id = paths.parent_of(node_id)
        if parent_id:
            self._nodes[parent_id].children.discard(node_id)
        else:
            self._roots.discard(node_id)
        return removed

    def clear(self) -> None:
        """Remove all nodes."""
        self._nodes.clear()
        self._roots.clear()

    # ==================== Conversion ====================

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Return a dataset (id -> fields copy) reproducing this store."""
        return {node_id: dict(node.fields) for node_id, node in self._nodes.items()}
