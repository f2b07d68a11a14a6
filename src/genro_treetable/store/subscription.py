# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Subscription and notification system for TreeTable.

Rendering collaborators register callbacks under a subscriber id, one per
event kind:

- structure(sequence, changes): nodes were added, updated, removed or
  reordered. ``sequence`` is the new render order, ``changes`` a
  ReconcileResult.
- visibility(node_id, visible): a node became shown or hidden.
- selection(selection): the selection changed (one call per verb).

Callbacks run synchronously after the engine state is updated and must not
call back into the engine.

Example:
    >>> table.subscribe('view', structure=view.redraw, selection=view.mark)
    >>> table.unsubscribe('view', selection=True)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[..., Any]


class SubscriptionMixin:
    """Mixin providing subscribe/unsubscribe and the notification helpers.

    Classes using it must initialize the three subscriber dicts, see
    ``_init_subscribers``.
    """

    _structure_subscribers: dict[str, SubscriberCallback]
    _visibility_subscribers: dict[str, SubscriberCallback]
    _selection_subscribers: dict[str, SubscriberCallback]

    def _init_subscribers(self) -> None:
        self._structure_subscribers = {}
        self._visibility_subscribers = {}
        self._selection_subscribers = {}

    def subscribe(
        self,
        subscriber_id: str,
        structure: SubscriberCallback | None = None,
        visibility: SubscriberCallback | None = None,
        selection: SubscriberCallback | None = None,
    ) -> None:
        """Register callbacks for one or more events.

        Args:
            subscriber_id: Key identifying the subscriber. Subscribing again
                with the same id replaces the previous callback.
            structure: Called as structure(sequence, changes).
            visibility: Called as visibility(node_id, visible).
            selection: Called as selection(selection).
        """
        if structure is not None:
            self._structure_subscribers[subscriber_id] = structure
        if visibility is not None:
            self._visibility_subscribers[subscriber_id] = visibility
        if selection is not None:
            self._selection_subscribers[subscriber_id] = selection

    def unsubscribe(
        self,
        subscriber_id: str,
        structure: bool = False,
        visibility: bool = False,
        selection: bool = False,
    ) -> None:
        """Remove callbacks registered under subscriber_id.

        With no event flag set, all of the subscriber's callbacks are removed.
        """
        if not (structure or visibility or selection):
            structure = visibility = selection = True
        if structure:
            self._structure_subscribers.pop(subscriber_id, None)
        if visibility:
            self._visibility_subscribers.pop(subscriber_id, None)
        if selection:
            self._selection_subscribers.pop(subscriber_id, None)

    @property
    def has_visibility_subscribers(self) -> bool:
        return bool(self._visibility_subscribers)

    def _on_structure_changed(self, sequence: Sequence[str], changes: Any) -> None:
        for callback in list(self._structure_subscribers.values()):
            callback(list(sequence), changes)

    def _on_visibility_changed(self, node_id: str, visible: bool) -> None:
        for callback in list(self._visibility_subscribers.values()):
            callback(node_id, visible)

    def _on_selection_changed(self, selection: Sequence[str]) -> None:
        logger.debug("Selection changed: %d node(s)", len(selection))
        for callback in list(self._selection_subscribers.values()):
            callback(list(selection))
