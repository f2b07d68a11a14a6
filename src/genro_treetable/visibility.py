# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Branch expansion and node visibility."""

from __future__ import annotations

from typing import Iterable

from . import paths
from .exceptions import NotDirectoryError
from .node import TreeTableNode
from .store import NodeStore

VisibilityChange = tuple[str, bool]


class VisibilityController:
    """Open/close state of directories and the visibility derived from it.

    A node is visible when every strict ancestor is open. Opening or closing
    a directory never touches the flags of its descendants, so reopening a
    branch restores the expansion state below it.

    Each mutating method returns the (node_id, visible) pairs whose
    visibility changed, in store order. With report=False the flags are
    set without walking the affected nodes and nothing is returned.
    """

    __slots__ = ('_store',)

    def __init__(self, store: NodeStore) -> None:
        self._store = store

    def is_visible(self, node_id: str) -> bool:
        """True if all strict ancestors of node_id are open.

        Raises:
            InvalidArgumentError: If node_id is not a non-empty string.
            NodeNotFoundError: If the node does not exist.
        """
        paths.validate_node_id(node_id)
        self._store.get(node_id)
        return all(self._store.get(parent).is_open for parent in paths.iter_ancestors(node_id))

    def is_open(self, node_id: str) -> bool:
        return self._directory(node_id).is_open

    def visible_ids(self, sequence: Iterable[str]) -> list[str]:
        """Filter sequence down to the visible node ids."""
        return [node_id for node_id in sequence if self.is_visible(node_id)]

    def open(self, node_id: str, report: bool = True) -> list[VisibilityChange]:
        """Open (unfold) a directory."""
        return self._set_open([self._directory(node_id).node_id], True, report)

    def close(self, node_id: str, report: bool = True) -> list[VisibilityChange]:
        """Close (fold) a directory; open descendants stay open, but hidden."""
        return self._set_open([self._directory(node_id).node_id], False, report)

    def toggle(self, node_id: str, report: bool = True) -> list[VisibilityChange]:
        """Open a closed directory or close an open one."""
        node = self._directory(node_id)
        return self._set_open([node.node_id], not node.is_open, report)

    def open_all(self, report: bool = True) -> list[VisibilityChange]:
        """Open every directory."""
        return self._set_open(self._all_directories(), True, report)

    def close_all(self, report: bool = True) -> list[VisibilityChange]:
        """Close every directory."""
        return self._set_open(self._all_directories(), False, report)

    def _directory(self, node_id: str) -> TreeTableNode:
        paths.validate_node_id(node_id)
        if not paths.is_directory(node_id):
            raise NotDirectoryError(f"Node {node_id!r} is a leaf, not a directory")
        return self._store.get(node_id)

    def _all_directories(self) -> list[str]:
        return [node_id for node_id in self._store if paths.is_directory(node_id)]

    def _affected(self, directory_ids: list[str]) -> list[str]:
        if len(directory_ids) > 1:
            return self._store.ids()
        return self._store.descendants_of(directory_ids[0])

    def _set_open(
        self, directory_ids: list[str], is_open: bool, report: bool
    ) -> list[VisibilityChange]:
        if not report:
            for node_id in directory_ids:
                self._store.get(node_id).is_open = is_open
            return []

        affected = self._affected(directory_ids) if directory_ids else []
        before = {node_id: self.is_visible(node_id) for node_id in affected}
        for node_id in directory_ids:
            self._store.get(node_id).is_open = is_open

        changes: list[VisibilityChange] = []
        for node_id in affected:
            visible = self.is_visible(node_id)
            if visible != before[node_id]:
                changes.append((node_id, visible))
        return changes
