# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Multi-node selection.

The selection is an ordered list of live node ids without duplicates. It
changes through six verbs:

    add     append a node (no-op if already selected)
    remove  drop a node, keeping the order of the others
    single  select only one node
    all     select every node
    none    clear the selection
    range   select the nodes between two endpoints of the render sequence

Every verb either succeeds, notifying once, or raises leaving the selection
untouched. ``range`` notifies once however many nodes it selects.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Sequence

from . import paths
from .exceptions import (
    InvalidArgumentError,
    InvalidSequenceInputError,
    NodeNotFoundError,
)
from .store import NodeStore

logger = logging.getLogger(__name__)

VERBS = ('add', 'remove', 'single', 'all', 'none', 'range')


class SelectionController:
    """Owner of the selection list.

    Args:
        store: NodeStore used to check that nodes exist.
        sequence: Callable returning the current render sequence, used to
            resolve range bounds.
        notify: Called with the new selection after each successful verb.
    """

    __slots__ = ('_store', '_sequence', '_notify', '_selection')

    def __init__(
        self,
        store: NodeStore,
        sequence: Callable[[], Sequence[str]],
        notify: Callable[[Sequence[str]], None] | None = None,
    ) -> None:
        self._store = store
        self._sequence = sequence
        self._notify = notify
        self._selection: list[str] = []

    def __len__(self) -> int:
        return len(self._selection)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._selection))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._selection

    @property
    def selection(self) -> tuple[str, ...]:
        """Selected node ids in selection order."""
        return tuple(self._selection)

    @property
    def first(self) -> str | None:
        """The earliest selected node id, or None."""
        return self._selection[0] if self._selection else None

    def is_selected(self, node_id: str) -> bool:
        return node_id in self._selection

    def position_of(self, node_id: str) -> int | None:
        """Position of node_id in the selection, or None if not selected."""
        try:
            return self._selection.index(node_id)
        except ValueError:
            return None

    # ==================== Verbs ====================

    def select(
        self,
        verb: str,
        node_id: str | None = None,
        end_id: str | None = None,
    ) -> tuple[str, ...]:
        """Dispatch a selection verb.

        Args:
            verb: One of 'add', 'remove', 'single', 'all', 'none', 'range'.
            node_id: Target node, or range start.
            end_id: Range end.

        Returns:
            The selection after the verb.

        Raises:
            InvalidArgumentError: If verb is unknown.
        """
        if verb in ('add', 'remove', 'single'):
            getattr(self, verb)(node_id)
        elif verb == 'all':
            self.all()
        elif verb == 'none':
            self.none()
        elif verb == 'range':
            self.range(node_id, end_id)
        else:
            raise InvalidArgumentError(
                f"Unknown selection verb {verb!r}, expected one of {', '.join(VERBS)}"
            )
        return self.selection

    def add(self, node_id: str) -> None:
        """Add a node to the selection.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        self._require(node_id)
        self._add(node_id)
        self._changed()

    def remove(self, node_id: str) -> None:
        """Remove a node from the selection.

        Raises:
            NodeNotFoundError: If the node neither exists nor is selected.
        """
        if node_id not in self._selection:
            self._require(node_id)
        self._remove(node_id)
        self._changed()

    def single(self, node_id: str) -> None:
        """Select node_id alone. The selection is kept if node_id is unknown.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        self._require(node_id)
        self._clear()
        self._add(node_id)
        self._changed()

    def all(self) -> None:
        """Add every unselected node, in store order, after the current selection."""
        for node_id in self._store:
            self._add(node_id)
        self._changed()

    def none(self) -> None:
        """Clear the selection."""
        self._clear()
        self._changed()

    def range(self, start_id: str, end_id: str) -> None:
        """Select every node between start_id and end_id in render order.

        The endpoints may be given in either order; both are included.

        Raises:
            NodeNotFoundError: If either endpoint does not exist.
            InvalidSequenceInputError: If an endpoint is missing from the
                render sequence (the sequence must be refreshed first).
        """
        self._require(start_id)
        self._require(end_id)

        sequence = list(self._sequence())
        try:
            start = sequence.index(start_id)
            end = sequence.index(end_id)
        except ValueError:
            raise InvalidSequenceInputError(
                f"Range endpoints {start_id!r}, {end_id!r} are not in the render "
                "sequence; refresh it before selecting"
            ) from None
        if start > end:
            start, end = end, start

        self._clear()
        for node_id in sequence[start:end + 1]:
            self._add(node_id)
        self._changed()

    def evict(self, node_ids: Iterable[str]) -> bool:
        """Silently drop node_ids from the selection (used on node removal).

        Returns:
            True if the selection changed.
        """
        gone = set(node_ids)
        kept = [node_id for node_id in self._selection if node_id not in gone]
        changed = len(kept) != len(self._selection)
        self._selection[:] = kept
        return changed

    def reset(self) -> None:
        """Drop the selection without notifying."""
        self._selection.clear()

    # ==================== Internals ====================

    def _require(self, node_id: str | None) -> None:
        paths.validate_node_id(node_id)
        if not self._store.has(node_id):
            logger.debug("Selection rejected, node %r not found", node_id)
            raise NodeNotFoundError(f"Node {node_id!r} not found")

    def _add(self, node_id: str) -> None:
        if node_id not in self._selection:
            self._selection.append(node_id)

    def _remove(self, node_id: str) -> None:
        if node_id in self._selection:
            self._selection.remove(node_id)

    def _clear(self) -> None:
        while self._selection:
            self._remove(self._selection[0])

    def _changed(self) -> None:
        if self._notify is not None:
            self._notify(self.selection)
