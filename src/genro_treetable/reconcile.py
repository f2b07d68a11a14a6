# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Dataset reconciliation.

A dataset is a flat mapping of node ids to field maps::

    {
        'docs/': {'name': 'Docs'},
        'docs/readme': {'name': 'readme', 'status': 'Idle'},
        'images/cat.png': {'name': 'cat.png'},
    }

Reconciling a dataset against a NodeStore makes the store equal to it:
nodes missing from the dataset are removed (with their subtrees), nodes
whose fields differ are updated, and new nodes are inserted parents first.
Missing ancestor directories are synthesized as ``{'name': segment}``, so a
dataset may list leaves only ('images/' above is created automatically).

The whole dataset is validated before the store is touched: on error the
store is left exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from . import paths
from .exceptions import (
    InvalidArgumentError,
    InvalidDatasetError,
    NodeNotFoundError,
)
from .node import validate_fields
from .store import NodeStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Node ids touched by a structural operation.

    Attributes:
        added: Inserted ids, parents before children.
        updated: Ids whose fields changed.
        removed: Removed ids, descendants before their directory.
    """

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.added or self.updated or self.removed)

    def as_dict(self) -> dict[str, list[str]]:
        return {
            'added': list(self.added),
            'updated': list(self.updated),
            'removed': list(self.removed),
        }


def placeholder_fields(node_id: str) -> dict[str, Any]:
    """Fields of a node created without data: its name only."""
    return {'name': paths.name_of(node_id)}


def synthesize_ancestors(dataset: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of dataset with every missing ancestor directory added.

    Example:
        >>> synthesize_ancestors({'foo/bar': {'name': 'bar'}})
        {'foo/bar': {'name': 'bar'}, 'foo/': {'name': 'foo'}}
    """
    result = dict(dataset)
    for node_id in list(dataset):
        for ancestor_id in paths.iter_ancestors(node_id):
            if ancestor_id in result:
                continue
            result[ancestor_id] = placeholder_fields(ancestor_id)
    return result


def validate_dataset(dataset: Any) -> dict[str, dict[str, Any]]:
    """Return a plain copy of dataset after checking its shape.

    Raises:
        InvalidDatasetError: If dataset is not a mapping of non-empty string
            ids to valid field maps.
    """
    if not isinstance(dataset, Mapping):
        raise InvalidDatasetError(
            f"Dataset must be a mapping, not {type(dataset).__name__}"
        )
    checked: dict[str, dict[str, Any]] = {}
    for node_id, fields in dataset.items():
        try:
            paths.validate_node_id(node_id)
            checked[node_id] = validate_fields(fields, node_id)
        except InvalidArgumentError as exc:
            raise InvalidDatasetError(f"Invalid dataset: {exc}") from exc
    return checked


def _parents_first(node_ids: list[str]) -> list[str]:
    return sorted(node_ids, key=paths.depth)


class DatasetReconciler:
    """Computes and applies add/update/remove deltas on a NodeStore.

    Args:
        store: The NodeStore to mutate.
        on_removed: Called with the removed ids after each removal, before
            the operation returns (the engine evicts them from selection).
    """

    __slots__ = ('_store', '_on_removed')

    def __init__(
        self,
        store: NodeStore,
        on_removed: Callable[[list[str]], None] | None = None,
    ) -> None:
        self._store = store
        self._on_removed = on_removed

    # ==================== Whole dataset ====================

    def prepare(self, dataset: Any) -> dict[str, dict[str, Any]]:
        """Validate dataset and add missing ancestors. The input is not modified."""
        return synthesize_ancestors(validate_dataset(dataset))

    def plan(self, dataset: Any) -> ReconcileResult:
        """Compute the delta reconcile() would apply, without applying it."""
        return self._diff(self.prepare(dataset))

    def reconcile(self, dataset: Any) -> ReconcileResult:
        """Make the store match dataset.

        Returns:
            The applied delta.

        Raises:
            InvalidDatasetError: If dataset is malformed (store untouched).
        """
        working = self.prepare(dataset)
        result = self._diff(working)

        gone = set(result.removed)
        removed_roots = [
            node_id for node_id in result.removed if paths.parent_of(node_id) not in gone
        ]
        result.removed = []
        for node_id in removed_roots:
            result.removed.extend(self._store.remove(node_id))
        if result.removed and self._on_removed is not None:
            self._on_removed(list(result.removed))

        for node_id in result.updated:
            self._store.update(node_id, working[node_id])

        for node_id in result.added:
            self._store.insert(node_id, working[node_id])

        logger.debug(
            "Reconciled dataset: %d added, %d updated, %d removed",
            len(result.added), len(result.updated), len(result.removed),
        )
        return result

    def _diff(self, working: dict[str, dict[str, Any]]) -> ReconcileResult:
        removed = [node_id for node_id in self._store if node_id not in working]
        updated = [
            node_id for node_id, fields in working.items()
            if node_id in self._store and self._store.get(node_id).fields != fields
        ]
        added = _parents_first(
            [node_id for node_id in working if node_id not in self._store]
        )
        return ReconcileResult(added=added, updated=updated, removed=removed)

    # ==================== Single node ====================

    def add_node(self, node_id: Any, fields: Any = None) -> ReconcileResult:
        """Insert a node, creating missing ancestors as placeholders.

        If the node already exists this is an update, never an error; an
        existing node added again without fields is left unchanged.

        Args:
            node_id: Non-empty node id.
            fields: Field map. If omitted, a new node takes its name from
                node_id.

        Raises:
            InvalidArgumentError: If node_id or fields are invalid.
        """
        paths.validate_node_id(node_id)
        if fields is not None:
            fields = validate_fields(fields, node_id)

        if self._store.has(node_id):
            if fields is None:
                return ReconcileResult()
            return self._update(node_id, fields)

        if fields is None:
            fields = placeholder_fields(node_id)

        missing = [
            ancestor_id for ancestor_id in paths.iter_ancestors(node_id)
            if not self._store.has(ancestor_id)
        ]
        result = ReconcileResult()
        for ancestor_id in reversed(missing):
            self._store.insert(ancestor_id, placeholder_fields(ancestor_id))
            result.added.append(ancestor_id)
        self._store.insert(node_id, fields)
        result.added.append(node_id)
        logger.debug("Added node %r (%d placeholder ancestors)", node_id, len(missing))
        return result

    def update_node(self, node_id: Any, fields: Any) -> ReconcileResult:
        """Replace the fields of an existing node.

        Raises:
            InvalidArgumentError: If node_id or fields are invalid.
            NodeNotFoundError: If the node does not exist.
        """
        paths.validate_node_id(node_id)
        fields = validate_fields(fields, node_id)
        if not self._store.has(node_id):
            raise NodeNotFoundError(f"Node {node_id!r} not found")
        return self._update(node_id, fields)

    def remove_node(self, node_id: Any) -> ReconcileResult:
        """Remove a node and its whole subtree.

        Raises:
            InvalidArgumentError: If node_id is invalid.
            NodeNotFoundError: If the node does not exist.
        """
        paths.validate_node_id(node_id)
        removed = self._store.remove(node_id)
        if self._on_removed is not None:
            self._on_removed(list(removed))
        logger.debug("Removed node %r (%d total)", node_id, len(removed))
        return ReconcileResult(removed=removed)

    def _update(self, node_id: str, fields: dict[str, Any]) -> ReconcileResult:
        node = self._store.get(node_id)
        if node.fields == fields:
            return ReconcileResult()
        self._store.update(node_id, fields)
        return ReconcileResult(updated=[node_id])
