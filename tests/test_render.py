# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for row and header snapshots."""

import pytest

from genro_treetable import TreeTable
from genro_treetable.render import add_class, format_cell

TEMPLATE = {
    'className': 'Files',
    'defaultLeafType': 'file',
    'columns': {
        'name': {'title': 'Name'},
        'size': {'title': 'Size', 'defaultValue': 0},
        'note': {'title': 'Note', 'noescape': True},
    },
}


@pytest.fixture
def table():
    return TreeTable(TEMPLATE, {
        'docs/': {'name': 'Docs'},
        'docs/a<b>': {'name': 'a<b>', 'size': 12, 'note': '<em>hi</em>'},
        'top': {'name': 'top', '__className': 'urgent bold'},
    })


class TestFormatCell:
    """Tests for format_cell."""

    def test_escapes_by_default(self):
        assert format_cell('<b>&') == '&lt;b&gt;&amp;'

    def test_escapes_quotes_and_hash(self):
        """Test quotes and '#' become numeric entities without double escaping."""
        assert format_cell("it's #1 \"x\"") == 'it&#039;s &#035;1 &quot;x&quot;'
        assert format_cell('&#035;') == '&amp;&#035;035;'

    def test_raw(self):
        assert format_cell('<b>', raw=True) == '<b>'

    def test_default_applies_to_none(self):
        assert format_cell(None, 'Idle') == 'Idle'
        assert format_cell(None) == ''

    def test_numbers(self):
        assert format_cell(3) == '3'
        assert format_cell(0, 'x') == '0'
        assert format_cell(1.5) == '1.5'


class TestClassHelpers:
    """Tests for add_class."""

    def test_add_class_no_duplicates(self):
        """Test the duplicate guard ignores case."""
        names = ['Files-leaf']
        add_class(names, 'files-LEAF')
        add_class(names, 'Files-selectedNode')
        add_class(names, '')
        assert names == ['Files-leaf', 'Files-selectedNode']


class TestRows:
    """Tests for TreeTable.rows."""

    def test_rows_follow_sequence(self, table):
        assert [row.node_id for row in table.rows()] == list(table.sequence)

    def test_directory_row(self, table):
        """Test directory class names and indentation."""
        table.open_branch('docs/')
        table.select('single', 'docs/')
        row = table.rows()[0]
        assert row.node_id == 'docs/'
        assert row.class_names == ('Files-folder', 'Files-branchIsOpen', 'Files-selectedNode')
        assert row.class_attr == 'Files-folder Files-branchIsOpen Files-selectedNode'
        assert row.indent == 0
        assert row.visible is True

    def test_leaf_cells(self, table):
        """Test escaping, raw columns and column defaults in cells."""
        row = table.rows()[1]
        assert row.node_id == 'docs/a<b>'
        assert row.depth == 1
        assert row.indent == 36
        assert row.visible is False
        texts = {cell.column_id: cell.text for cell in row.cells}
        assert texts == {'name': 'a&lt;b&gt;', 'size': '12', 'note': '<em>hi</em>'}
        assert row.cells[0].class_names == ('Files-name', 'Files-file')

    def test_default_value_and_style_field(self, table):
        """Test missing values use defaults and __className styles cells."""
        row = table.rows()[2]
        assert row.node_id == 'top'
        assert row.class_names == ('Files-leaf',)
        size = row.cells[1]
        assert size.text == '0'
        assert size.class_names == ('Files-size', 'urgent', 'bold')

    def test_visible_only(self, table):
        assert [row.node_id for row in table.rows(visible_only=True)] == ['docs/', 'top']

    def test_rows_do_not_change_fields(self, table):
        """Test rendering never resolves defaults into node fields."""
        table.rows()
        assert 'size' not in table.get_node('top').fields


class TestHeader:
    """Tests for TreeTable.header."""

    def test_header_cells(self, table):
        header = table.header()
        assert [cell.title for cell in header] == ['Name', 'Size', 'Note']
        assert header[0].class_names == ('Files-name', 'Files-sortasc')
        assert header[0].sort_order == 'asc'
        assert header[1].sort_order is None
        assert header[1].tooltip == 'Click to sort this table by Size'

    def test_header_follows_sort(self, table):
        table.toggle_sort_by('name')
        assert 'Files-sortdesc' in table.header()[0].class_names

    def test_disabled_header(self):
        table = TreeTable({'disableHeader': True, 'columns': {'name': {'title': 'Name'}}})
        assert table.header() == []
