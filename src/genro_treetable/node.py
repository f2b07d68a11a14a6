# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeTable node class."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from . import paths
from .exceptions import InvalidArgumentError

RESERVED_PREFIX = '__'
FIELD_TYPES = (str, int, float, type(None))


def is_reserved_field(field: str) -> bool:
    """True for styling metadata keys such as '__className'."""
    return field.startswith(RESERVED_PREFIX)


def validate_fields(fields: Any, node_id: str = '') -> dict[str, Any]:
    """Return a plain dict copy of fields after checking its shape.

    Keys must be strings; values must be str, int, float or None.

    Raises:
        InvalidArgumentError: If fields is not a valid field map.
    """
    if not isinstance(fields, Mapping):
        raise InvalidArgumentError(
            f"Fields of {node_id!r} must be a mapping, not {type(fields).__name__}"
        )
    for key, value in fields.items():
        if not isinstance(key, str):
            raise InvalidArgumentError(f"Field name {key!r} of {node_id!r} is not a string")
        if not isinstance(value, FIELD_TYPES):
            raise InvalidArgumentError(
                f"Field {key!r} of {node_id!r} must be str, number or None, "
                f"not {type(value).__name__}"
            )
    return dict(fields)


class TreeTableNode:
    """A row of the tree-table, owned by a NodeStore.

    Each node has:
    - node_id: The path-like key ('docs/', 'docs/readme')
    - fields: Raw column values (str, number or None), never resolved
    - children: Ids of direct children (directories only)
    - is_open: Expansion state (directories only, closed by default)

    Kind, parent, name and depth are derived from node_id.

    Example:
        >>> node = TreeTableNode('docs/readme', {'name': 'readme'})
        >>> node.is_leaf
        True
        >>> node.parent_id
        'docs/'
    """

    __slots__ = ('node_id', 'fields', 'children', 'is_open')

    def __init__(
        self,
        node_id: str,
        fields: dict[str, Any] | None = None,
    ) -> None:
        """Initialize a TreeTableNode.

        Args:
            node_id: The node's unique path-like key.
            fields: Optional dictionary of column values.
        """
        self.node_id = node_id
        self.fields: dict[str, Any] = dict(fields) if fields else {}
        self.children: set[str] = set()
        self.is_open = False

    def __repr__(self) -> str:
        kind = 'dir' if self.is_directory else 'leaf'
        return f"TreeTableNode({self.node_id!r}, {kind}, fields={self.fields!r})"

    @property
    def is_directory(self) -> bool:
        """True if the node id ends with the separator."""
        return paths.is_directory(self.node_id)

    @property
    def is_leaf(self) -> bool:
        """True if the node cannot have children."""
        return not paths.is_directory(self.node_id)

    @property
    def parent_id(self) -> str:
        """Id of the parent directory ('' at root level)."""
        return paths.parent_of(self.node_id)

    @property
    def name(self) -> str:
        """Last path segment of the id."""
        return paths.name_of(self.node_id)

    @property
    def depth(self) -> int:
        """Nesting level, used for indentation."""
        return paths.depth(self.node_id)

    def get_field(self, field: str | None = None, default: Any = None) -> Any:
        """Get a raw field value or all fields.

        Args:
            field: Column id. If None, returns all fields.
            default: Default value if the field is absent or None.

        Returns:
            Field value, default, or dict of all fields.
        """
        if field is None:
            return self.fields
        value = self.fields.get(field)
        return default if value is None else value

    def sort_value(self, column: str) -> Any:
        """Raw value used for sorting by column (None when absent)."""
        if is_reserved_field(column):
            return None
        return self.fields.get(column)

    def replace_fields(self, fields: dict[str, Any]) -> None:
        """Replace all fields in place."""
        self.fields.clear()
        self.fields.update(fields)
