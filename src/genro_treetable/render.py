# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Presentation snapshots of a TreeTable.

These helpers turn the engine state into plain data a view can draw
without further decisions: cell text (column defaults applied, HTML
escaped unless the column is raw), CSS class lists, indentation and
visibility. Sorting and selection never use them; they always work on raw
field values.

Class names follow the template's class_name prefix::

    MyTree-folder / MyTree-leaf           row kind
    MyTree-branchIsOpen                   open directory
    MyTree-selectedNode                   selected row
    MyTree-<column>                       cell of a column
    MyTree-sortasc / MyTree-sortdesc      header of the sort column
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .node import TreeTableNode

if TYPE_CHECKING:
    from .engine import TreeTable
    from .template import TreeTemplate

INDENT = 18
STYLE_FIELD = '__className'

_HTML_ESCAPES = str.maketrans({
    '<': '&lt;',
    '>': '&gt;',
    '&': '&amp;',
    '"': '&quot;',
    "'": '&#039;',
    '#': '&#035;',
})


@dataclass(frozen=True)
class CellView:
    """One rendered cell."""

    column_id: str
    text: str
    class_names: tuple[str, ...]


@dataclass(frozen=True)
class RowView:
    """One rendered row, in render sequence order."""

    node_id: str
    depth: int
    indent: int
    is_directory: bool
    is_open: bool
    visible: bool
    selected: bool
    class_names: tuple[str, ...]
    cells: tuple[CellView, ...]

    @property
    def class_attr(self) -> str:
        return ' '.join(self.class_names)


@dataclass(frozen=True)
class HeaderCellView:
    """One header cell; clicking it should call toggle_sort_by(column_id)."""

    column_id: str
    title: str
    tooltip: str
    class_names: tuple[str, ...]
    sort_order: str | None


def escape_html(text: str) -> str:
    """Escape HTML special characters, including quotes and '#', in one pass."""
    return text.translate(_HTML_ESCAPES)


def format_cell(value: Any, default: Any = None, raw: bool = False) -> str:
    """Return the display text of a raw field value.

    None falls back to default (then to ''); numbers become strings; the
    result is escaped unless raw is True.
    """
    if value is None:
        value = default if default is not None else ''
    text = value if isinstance(value, str) else str(value)
    return text if raw else escape_html(text)


def add_class(class_names: list[str], name: str | None) -> None:
    """Append name unless already present (case-insensitive)."""
    if not name:
        return
    if name.lower() not in (existing.lower() for existing in class_names):
        class_names.append(name)


def indent_of(node: TreeTableNode) -> int:
    """Left padding of the name cell; leaves get one extra step for the expander."""
    return INDENT * node.depth + (0 if node.is_directory else INDENT)


def row_classes(template: TreeTemplate, node: TreeTableNode, selected: bool) -> list[str]:
    prefix = template.class_name
    class_names = [f'{prefix}-folder' if node.is_directory else f'{prefix}-leaf']
    if node.is_directory and node.is_open:
        add_class(class_names, f'{prefix}-branchIsOpen')
    if selected:
        add_class(class_names, f'{prefix}-selectedNode')
    return class_names


def build_cells(table: TreeTable, node: TreeTableNode) -> tuple[CellView, ...]:
    template = table.template
    prefix = template.class_name
    extra = node.fields.get(STYLE_FIELD)
    cells = []
    for column_id in template.columns:
        class_names = [f'{prefix}-{column_id}']
        if column_id == 'name' and node.is_leaf and template.default_leaf_type:
            add_class(class_names, f'{prefix}-{template.default_leaf_type}')
        if isinstance(extra, str):
            for name in extra.split():
                add_class(class_names, name)
        text = format_cell(
            node.fields.get(column_id),
            table.resolve_column_default(column_id),
            table.is_column_displayed_raw(column_id),
        )
        cells.append(CellView(column_id, text, tuple(class_names)))
    return tuple(cells)


def build_rows(table: TreeTable) -> list[RowView]:
    """Snapshot every row of table in render order."""
    template = table.template
    rows = []
    for node_id in table.sequence:
        node = table.get_node(node_id)
        selected = table.is_selected(node_id)
        rows.append(RowView(
            node_id=node_id,
            depth=node.depth,
            indent=indent_of(node),
            is_directory=node.is_directory,
            is_open=node.is_open,
            visible=table.is_visible(node_id),
            selected=selected,
            class_names=tuple(row_classes(template, node, selected)),
            cells=build_cells(table, node),
        ))
    return rows


def build_header(template: TreeTemplate) -> list[HeaderCellView]:
    """Snapshot the header cells; empty when the header is disabled."""
    if template.disable_header:
        return []
    prefix = template.class_name
    cells = []
    for column_id, spec in template.columns.items():
        class_names = [f'{prefix}-{column_id}']
        sort_order = None
        if column_id == template.sort_column:
            sort_order = template.sort_order
            add_class(class_names, f'{prefix}-sort{sort_order}')
        cells.append(HeaderCellView(
            column_id=column_id,
            title=spec.title,
            tooltip=f'Click to sort this table by {spec.title}',
            class_names=tuple(class_names),
            sort_order=sort_order,
        ))
    return cells
