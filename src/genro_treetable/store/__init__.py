# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store package - node storage and change notification.

The package is organized into:
- core: NodeStore, the flat path-keyed node container
- subscription: Event subscription and notification system

Example:
    >>> from genro_treetable.store import NodeStore
    >>> store = NodeStore()
    >>> node = store.insert('docs/', {'name': 'Docs'})
    >>> 'docs/' in store
    True
"""

from .core import NodeStore
from .subscription import SubscriberCallback, SubscriptionMixin

__all__ = ["NodeStore", "SubscriberCallback", "SubscriptionMixin"]
