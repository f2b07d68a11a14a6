# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeTable - the public engine of a sortable, selectable tree-table.

TreeTable ties together the node store, the dataset reconciler, the
hierarchical sorter and the selection and visibility controllers, and
notifies subscribers after each successful operation.

Example:
    >>> table = TreeTable({'columns': {'name': {'title': 'Name'}}})
    >>> result = table.reconcile({
    ...     'docs/readme': {'name': 'readme'},
    ...     'images/cat.png': {'name': 'cat.png'},
    ... })
    >>> table.sequence
    ('docs/', 'docs/readme', 'images/', 'images/cat.png')
    >>> table.open_branch('docs/')
    >>> table.is_visible('docs/readme')
    True
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterator

from . import paths
from .exceptions import InvalidArgumentError
from .node import TreeTableNode, is_reserved_field
from .reconcile import DatasetReconciler, ReconcileResult
from .render import HeaderCellView, RowView, build_header, build_rows
from .selection import SelectionController
from .sorting import ASC, DESC, compute_sequence, normalize_sort_order, sort_pairs
from .store import NodeStore, SubscriptionMixin
from .template import TreeTemplate
from .visibility import VisibilityChange, VisibilityController

logger = logging.getLogger(__name__)

CLICK_MODIFIERS = (None, 'toggle', 'range')


class TreeTable(SubscriptionMixin):
    """A hierarchical table built from a flat, path-keyed dataset.

    Args:
        template: A TreeTemplate, a template mapping, or None for defaults.
        dataset: Optional initial dataset, reconciled right away.

    Every operation validates its input before mutating anything, so a
    raised exception leaves nodes, sequence and selection unchanged and
    sends no notification.
    """

    def __init__(
        self,
        template: TreeTemplate | Mapping[str, Any] | None = None,
        dataset: Mapping[str, Any] | None = None,
    ) -> None:
        self._init_subscribers()
        self._template = TreeTemplate.coerce(template)
        self._store = NodeStore()
        self._sequence: list[str] = []
        self._selection_evicted = False
        self._reconciler = DatasetReconciler(self._store, on_removed=self._evict)
        self._selection = SelectionController(
            self._store, lambda: self._sequence, notify=self._on_selection_changed
        )
        self._visibility = VisibilityController(self._store)
        if dataset is not None:
            self.reconcile(dataset)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"TreeTable({len(self._store)} nodes, sort={self.sort_column!r} {self.sort_order})"

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[str]:
        """Iterate over node ids in render order."""
        return iter(list(self._sequence))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._store

    # ==================== Properties ====================

    @property
    def template(self) -> TreeTemplate:
        return self._template

    @property
    def sort_column(self) -> str:
        return self._template.sort_column

    @property
    def sort_order(self) -> str:
        return self._template.sort_order

    @property
    def sequence(self) -> tuple[str, ...]:
        """All node ids in render order."""
        return tuple(self._sequence)

    @property
    def selection(self) -> tuple[str, ...]:
        """Selected node ids in selection order."""
        return self._selection.selection

    # ==================== Structure ====================

    def reconcile(self, dataset: Mapping[str, Any]) -> ReconcileResult:
        """Make the table match dataset.

        Nodes absent from dataset are removed (and dropped from the
        selection), changed nodes are updated, new nodes are inserted, and
        missing ancestor directories are created. Subscribers receive one
        structure notification.

        Args:
            dataset: Mapping of node id to field map.

        Returns:
            The applied delta.

        Raises:
            InvalidDatasetError: If dataset is malformed.
        """
        return self._apply(self._reconciler.reconcile(dataset))

    update = reconcile

    def plan(self, dataset: Mapping[str, Any]) -> ReconcileResult:
        """Return the delta reconcile(dataset) would apply, changing nothing."""
        return self._reconciler.plan(dataset)

    def add_node(self, node_id: str, fields: Mapping[str, Any] | None = None) -> ReconcileResult:
        """Insert a node, or update it if it already exists.

        Missing ancestors are created with their name only. New directories
        start closed.

        Raises:
            InvalidArgumentError: If node_id or fields are invalid.
        """
        return self._apply(self._reconciler.add_node(node_id, fields))

    def update_node(self, node_id: str, fields: Mapping[str, Any]) -> ReconcileResult:
        """Replace the fields of an existing node.

        Raises:
            InvalidArgumentError: If node_id or fields are invalid.
            NodeNotFoundError: If the node does not exist.
        """
        return self._apply(self._reconciler.update_node(node_id, fields))

    def set_cell_value(self, node_id: str, column_id: str, value: Any) -> ReconcileResult:
        """Set one field of an existing node, keeping the others.

        Raises:
            NodeNotFoundError: If the node does not exist.
            InvalidArgumentError: If column_id is not a template column or
                value is not a str, number or None.
        """
        fields = dict(self.get_node(node_id).fields)
        if not self._template.has_column(column_id):
            raise InvalidArgumentError(f"Unknown column {column_id!r}")
        fields[column_id] = value
        return self.update_node(node_id, fields)

    def remove_node(self, node_id: str) -> ReconcileResult:
        """Remove a node with its subtree, dropping them from the selection.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        return self._apply(self._reconciler.remove_node(node_id))

    def set_template(self, template: TreeTemplate | Mapping[str, Any]) -> None:
        """Replace the template and reset nodes, sequence and selection.

        Raises:
            InvalidArgumentError: If template is neither a TreeTemplate nor
                a mapping.
        """
        if not isinstance(template, (TreeTemplate, Mapping)):
            raise InvalidArgumentError(
                f"Template must be a TreeTemplate or a mapping, not {type(template).__name__}"
            )
        new_template = TreeTemplate.coerce(template)
        removed = self._store.ids()
        had_selection = bool(self._selection)

        self._template = new_template
        self._store.clear()
        self._sequence = []
        self._selection.reset()
        logger.debug("Template replaced, %d node(s) dropped", len(removed))

        self._on_structure_changed(self._sequence, ReconcileResult(removed=removed))
        if had_selection:
            self._on_selection_changed(self._selection.selection)

    def _evict(self, node_ids: list[str]) -> None:
        if self._selection.evict(node_ids):
            self._selection_evicted = True

    def _apply(self, result: ReconcileResult) -> ReconcileResult:
        evicted, self._selection_evicted = self._selection_evicted, False
        self._refresh_sequence()
        self._on_structure_changed(self._sequence, result)
        if evicted:
            self._on_selection_changed(self._selection.selection)
        return result

    def _refresh_sequence(self) -> None:
        pairs = sort_pairs(self._store.nodes(), self._template.sort_column)
        self._sequence = compute_sequence(pairs, self._template.sort_order)

    # ==================== Sorting ====================

    def sort_by(self, column: str, order: str | None = None) -> None:
        """Sort the table by a column of the template.

        Args:
            column: Column id declared in the template.
            order: 'asc' or 'desc' (case-insensitive). Defaults to the
                current order.

        Raises:
            InvalidArgumentError: If column is unknown or reserved, or order
                is not a valid sort order.
        """
        if not isinstance(column, str) or is_reserved_field(column):
            raise InvalidArgumentError(f"Cannot sort by {column!r}")
        if not self._template.has_column(column):
            raise InvalidArgumentError(f"Unknown column {column!r}")
        if order is None:
            order = self._template.sort_order
        normalized = normalize_sort_order(order)
        if normalized is None:
            raise InvalidArgumentError(f"Invalid sort order {order!r}, expected 'asc' or 'desc'")

        self._template.sort_column = column
        self._template.sort_order = normalized
        self._refresh_sequence()
        logger.debug("Sorted by %r %s", column, normalized)
        self._on_structure_changed(self._sequence, ReconcileResult())

    def toggle_sort_by(self, column: str) -> None:
        """Sort by column, flipping the order if it is already the sort column."""
        if column == self._template.sort_column:
            order = DESC if self._template.sort_order == ASC else ASC
        else:
            order = self._template.sort_order
        self.sort_by(column, order)

    # ==================== Selection ====================

    def select(
        self,
        verb: str,
        node_id: str | None = None,
        end_id: str | None = None,
    ) -> tuple[str, ...]:
        """Apply a selection verb: add, remove, single, all, none or range.

        See SelectionController for the verbs. Subscribers receive one
        selection notification per successful call.
        """
        return self._selection.select(verb, node_id, end_id)

    def is_selected(self, node_id: str) -> bool:
        return self._selection.is_selected(node_id)

    def handle_click(self, node_id: str, modifier: str | None = None) -> tuple[str, ...]:
        """Map a row click to a selection verb.

        Args:
            node_id: The clicked row.
            modifier: None for a plain click (single), 'toggle' for ctrl
                (add or remove), 'range' for shift (range from the first
                selected node, or from node_id when nothing is selected).

        Raises:
            InvalidArgumentError: If modifier is not recognized.
        """
        if modifier is None:
            return self._selection.select('single', node_id)
        if modifier == 'toggle':
            verb = 'remove' if self._selection.is_selected(node_id) else 'add'
            return self._selection.select(verb, node_id)
        if modifier == 'range':
            start_id = self._selection.first or node_id
            return self._selection.select('range', start_id, node_id)
        raise InvalidArgumentError(
            f"Unknown click modifier {modifier!r}, expected one of {CLICK_MODIFIERS!r}"
        )

    def handle_background_click(self) -> tuple[str, ...]:
        """A click outside any row clears the selection."""
        return self._selection.select('none')

    # ==================== Visibility ====================

    def open_branch(self, node_id: str) -> None:
        """Open a directory.

        Raises:
            NotDirectoryError: If node_id is a leaf.
            NodeNotFoundError: If the directory does not exist.
        """
        self._notify_visibility(
            self._visibility.open(node_id, report=self.has_visibility_subscribers)
        )

    def close_branch(self, node_id: str) -> None:
        """Close a directory; the expansion state below it is kept."""
        self._notify_visibility(
            self._visibility.close(node_id, report=self.has_visibility_subscribers)
        )

    def toggle_branch(self, node_id: str) -> None:
        self._notify_visibility(
            self._visibility.toggle(node_id, report=self.has_visibility_subscribers)
        )

    def open_all(self) -> None:
        self._notify_visibility(self._visibility.open_all(report=self.has_visibility_subscribers))

    def close_all(self) -> None:
        self._notify_visibility(self._visibility.close_all(report=self.has_visibility_subscribers))

    def is_open(self, node_id: str) -> bool:
        """True if the directory is open.

        Raises:
            NotDirectoryError: If node_id is a leaf.
            NodeNotFoundError: If the directory does not exist.
        """
        return self._visibility.is_open(node_id)

    def is_visible(self, node_id: str) -> bool:
        """True if every ancestor directory of node_id is open.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        return self._visibility.is_visible(node_id)

    def visible_ids(self) -> list[str]:
        """Visible node ids in render order."""
        return self._visibility.visible_ids(self._sequence)

    def _notify_visibility(self, changes: list[VisibilityChange]) -> None:
        for node_id, visible in changes:
            self._on_visibility_changed(node_id, visible)

    # ==================== Access ====================

    def get_node(self, node_id: str) -> TreeTableNode:
        """Get node by id.

        Raises:
            InvalidArgumentError: If node_id is not a non-empty string.
            NodeNotFoundError: If the node does not exist.
        """
        return self._store.get(paths.validate_node_id(node_id))

    def children_of(self, node_id: str = '') -> list[str]:
        """Ids of the direct children of a directory ('' for root level)."""
        if node_id != paths.ROOT:
            paths.validate_node_id(node_id)
        return self._store.children_of(node_id)

    def walk(self, visible_only: bool = False) -> Iterator[tuple[str, TreeTableNode]]:
        """Yield (node_id, node) pairs in render order.

        Args:
            visible_only: If True, skip nodes hidden by a closed ancestor.
        """
        for node_id in list(self._sequence):
            if visible_only and not self._visibility.is_visible(node_id):
                continue
            yield node_id, self._store.get(node_id)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Return the current dataset (id -> fields copy)."""
        return self._store.as_dict()

    # ==================== Presentation ====================

    def resolve_column_default(self, column_id: str) -> Any:
        """Display default of a column, None if it has none."""
        return self._template.column_default(column_id)

    def is_column_displayed_raw(self, column_id: str) -> bool:
        """True if the column's values are shown without HTML escaping."""
        return self._template.is_raw_display(column_id)

    def rows(self, visible_only: bool = False) -> list[RowView]:
        """Row snapshots in render order."""
        rows = build_rows(self)
        if visible_only:
            return [row for row in rows if row.visible]
        return rows

    def header(self) -> list[HeaderCellView]:
        """Header cell snapshots; empty when the template disables the header."""
        return build_header(self._template)
