# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree-table templates: column schema and sort configuration.

A template describes the columns of the table and how it is sorted::

    template = TreeTemplate.from_dict({
        'className': 'MyTree',
        'sortColumn': 'name',
        'sortOrder': 'asc',
        'columns': {
            'name': {'title': 'Item name'},
            'status': {'title': 'State', 'defaultValue': 'Idle', 'noescape': True},
        },
    })

Invalid values are replaced by defaults instead of being rejected: a
non-string class name, a non-string sort column, a sort order other than
'asc'/'desc' (case-insensitive) and a non-mapping column schema all fall
back to the documented defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .exceptions import InvalidArgumentError
from .sorting import ASC, normalize_sort_order

DEFAULT_CLASS_NAME = 'TreeTable'
DEFAULT_SORT_COLUMN = 'name'
DEFAULT_SORT_ORDER = ASC


@dataclass(frozen=True)
class ColumnSpec:
    """One column of the table.

    Attributes:
        title: Header caption.
        default_value: Shown when a node has no value for the column.
        raw_display: If True, values are rendered without HTML escaping.
    """

    title: str
    default_value: Any = None
    raw_display: bool = False

    @classmethod
    def from_value(cls, value: Any, position: int) -> ColumnSpec:
        """Build a ColumnSpec from a ColumnSpec or a mapping, normalizing it."""
        if isinstance(value, ColumnSpec):
            return value
        if not isinstance(value, Mapping):
            value = {}
        title = value.get('title')
        if not isinstance(title, str) or not title:
            title = f'Column {position}'
        default_value = value.get('default_value', value.get('defaultValue'))
        raw_display = value.get(
            'raw_display', value.get('noescape', value.get('noEscape', False))
        )
        return cls(title=title, default_value=default_value, raw_display=bool(raw_display))


@dataclass
class TreeTemplate:
    """Column schema plus tree-level sort and styling configuration."""

    class_name: str = DEFAULT_CLASS_NAME
    sort_column: str = DEFAULT_SORT_COLUMN
    sort_order: str = DEFAULT_SORT_ORDER
    default_sort_column: str = DEFAULT_SORT_COLUMN
    default_sort_order: str = DEFAULT_SORT_ORDER
    columns: dict[str, ColumnSpec] = field(default_factory=dict)
    disable_header: bool = False
    default_leaf_type: str | None = None

    def __post_init__(self) -> None:
        self.normalize()

    @classmethod
    def from_dict(cls, source: Mapping[str, Any]) -> TreeTemplate:
        """Build a template from a mapping.

        Accepts both the camelCase keys of the JSON template format
        (className, sortColumn, defaultValue, noescape...) and snake_case.

        Raises:
            InvalidArgumentError: If source is not a mapping.
        """
        if not isinstance(source, Mapping):
            raise InvalidArgumentError(
                f"Template must be a mapping, not {type(source).__name__}"
            )

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in source:
                    return source[key]
            return default

        return cls(
            class_name=pick('class_name', 'className', default=DEFAULT_CLASS_NAME),
            sort_column=pick('sort_column', 'sortColumn', default=None),
            sort_order=pick('sort_order', 'sortOrder', default=None),
            default_sort_column=pick(
                'default_sort_column', 'defaultSortColumn', default=DEFAULT_SORT_COLUMN
            ),
            default_sort_order=pick(
                'default_sort_order', 'defaultSortOrder', default=DEFAULT_SORT_ORDER
            ),
            columns=pick('columns', default={}),
            disable_header=bool(pick('disable_header', 'disableHeader', default=False)),
            default_leaf_type=pick('default_leaf_type', 'defaultLeafType'),
        )

    @classmethod
    def coerce(cls, template: TreeTemplate | Mapping[str, Any] | None) -> TreeTemplate:
        """Return a TreeTemplate from a template, a mapping or None."""
        if template is None:
            return cls()
        if isinstance(template, TreeTemplate):
            return replace(template, columns=dict(template.columns))
        return cls.from_dict(template)

    def normalize(self) -> None:
        """Replace invalid values with defaults, in place."""
        if not isinstance(self.default_sort_column, str):
            self.default_sort_column = DEFAULT_SORT_COLUMN
        self.default_sort_order = (
            normalize_sort_order(self.default_sort_order) or DEFAULT_SORT_ORDER
        )
        if not isinstance(self.class_name, str):
            self.class_name = DEFAULT_CLASS_NAME
        if not isinstance(self.sort_column, str):
            self.sort_column = self.default_sort_column
        self.sort_order = normalize_sort_order(self.sort_order) or self.default_sort_order
        if not isinstance(self.default_leaf_type, str) or not self.default_leaf_type:
            self.default_leaf_type = None

        columns = self.columns if isinstance(self.columns, Mapping) else {}
        self.columns = {
            column_id: ColumnSpec.from_value(spec, position)
            for position, (column_id, spec) in enumerate(columns.items())
            if isinstance(column_id, str)
        }

    # ==================== Column lookup ====================

    def has_column(self, column_id: str) -> bool:
        return column_id in self.columns

    def column_default(self, column_id: str) -> Any:
        """Default value of a column (None for unknown columns)."""
        spec = self.columns.get(column_id)
        return spec.default_value if spec is not None else None

    def is_raw_display(self, column_id: str) -> bool:
        """True if the column is rendered without escaping."""
        spec = self.columns.get(column_id)
        return spec.raw_display if spec is not None else False
