# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the TreeTable engine and its notifications."""

import pytest

from genro_treetable import (
    InvalidArgumentError,
    InvalidDatasetError,
    NodeNotFoundError,
    NotDirectoryError,
    ReconcileResult,
    TreeTable,
    TreeTemplate,
)

TEMPLATE = {
    'className': 'Files',
    'columns': {
        'name': {'title': 'Name'},
        'size': {'title': 'Size', 'defaultValue': 0},
        'status': {'title': 'Status', 'defaultValue': 'Idle'},
    },
}

DATASET = {
    'docs/': {'name': 'Docs'},
    'docs/readme': {'name': 'readme', 'status': 'Idle'},
    'images/cat.png': {'name': 'cat.png'},
}


class Recorder:
    """Collects notifications per event."""

    def __init__(self, table):
        self.structure = []
        self.visibility = []
        self.selection = []
        table.subscribe(
            'recorder',
            structure=lambda sequence, changes: self.structure.append((sequence, changes)),
            visibility=lambda node_id, visible: self.visibility.append((node_id, visible)),
            selection=self.selection.append,
        )


@pytest.fixture
def table():
    return TreeTable(TEMPLATE, DATASET)


@pytest.fixture
def recorder(table):
    return Recorder(table)


class TestTreeTableScenario:
    """End-to-end behaviour."""

    def test_initial_sequence(self, table):
        """Test directories precede their leaves and are sorted by name."""
        assert table.sequence == ('docs/', 'docs/readme', 'images/', 'images/cat.png')
        assert table.get_node('images/').fields == {'name': 'images'}

    def test_constructor_without_dataset(self):
        table = TreeTable()
        assert len(table) == 0
        assert table.sequence == ()
        assert table.template == TreeTemplate()

    def test_container_protocol(self, table):
        assert len(table) == 4
        assert 'docs/readme' in table
        assert 'missing' not in table
        assert list(table) == list(table.sequence)

    def test_walk(self, table):
        """Test walk yields nodes in render order, optionally visible only."""
        assert [node_id for node_id, _ in table.walk()] == list(table.sequence)
        assert [node_id for node_id, _ in table.walk(visible_only=True)] == ['docs/', 'images/']

    def test_as_dict_round_trip(self, table):
        """Test reconciling as_dict() is a no-op."""
        result = table.reconcile(table.as_dict())
        assert not result

    def test_children_of(self, table):
        assert table.children_of() == ['docs/', 'images/']
        assert table.children_of('docs/') == ['docs/readme']


class TestTreeTableStructure:
    """Tests for reconcile, add_node, update_node and remove_node."""

    def test_reconcile_notifies_once(self, table, recorder):
        """Test a reconcile emits a single structure notification."""
        result = table.reconcile({'docs/readme': {'name': 'readme'}, 'src/main.py': {'name': 'main.py'}})
        assert len(recorder.structure) == 1
        sequence, changes = recorder.structure[0]
        assert changes is result
        assert sequence == ['docs/', 'docs/readme', 'src/', 'src/main.py']
        assert set(result.removed) == {'images/cat.png', 'images/'}
        assert set(result.updated) == {'docs/', 'docs/readme'}

    def test_update_alias(self, table):
        assert TreeTable.update is TreeTable.reconcile
        table.update({})
        assert len(table) == 0

    def test_invalid_dataset_changes_nothing(self, table, recorder):
        """Test a rejected dataset leaves state intact and sends nothing."""
        before = table.as_dict()
        with pytest.raises(InvalidDatasetError):
            table.reconcile({'docs/': {'name': {'bad': 1}}})
        assert table.as_dict() == before
        assert recorder.structure == []

    def test_add_node_creates_ancestors(self, table, recorder):
        """Test add_node synthesizes ancestors and re-sorts."""
        table.add_node('a/b/leaf', {'name': 'x'})
        assert {'a/', 'a/b/', 'a/b/leaf'} <= set(table)
        assert table.sequence[:3] == ('a/', 'a/b/', 'a/b/leaf')
        assert len(recorder.structure) == 1

    def test_add_node_under_closed_directory_hidden(self, table):
        table.add_node('docs/new')
        assert table.is_visible('docs/new') is False

    def test_add_existing_without_fields(self, table):
        """Test add_node on an existing id without fields keeps its fields."""
        result = table.add_node('docs/readme')
        assert not result
        assert table.get_node('docs/readme').fields == {'name': 'readme', 'status': 'Idle'}

    def test_add_node_twice_is_update(self, table):
        """Test repeated add_node leaves one node with the latest fields."""
        table.add_node('docs/todo', {'name': 'todo'})
        table.add_node('docs/todo', {'name': 'todo'})
        assert table.sequence.count('docs/todo') == 1
        assert table.get_node('docs/todo').fields == {'name': 'todo'}

    def test_update_node(self, table):
        table.update_node('docs/readme', {'name': 'README', 'size': 10})
        assert table.get_node('docs/readme').fields == {'name': 'README', 'size': 10}

    def test_set_cell_value(self, table, recorder):
        """Test a single field changes and the others are kept."""
        result = table.set_cell_value('docs/readme', 'size', 42)
        assert result.updated == ['docs/readme']
        assert table.get_node('docs/readme').fields == {
            'name': 'readme', 'status': 'Idle', 'size': 42
        }
        assert len(recorder.structure) == 1

    def test_set_cell_value_errors(self, table):
        with pytest.raises(NodeNotFoundError):
            table.set_cell_value('missing', 'size', 1)
        with pytest.raises(InvalidArgumentError, match="Unknown column"):
            table.set_cell_value('docs/readme', 'color', 'red')
        with pytest.raises(InvalidArgumentError):
            table.set_cell_value('docs/readme', 'size', [1])
        assert 'size' not in table.get_node('docs/readme').fields

    def test_update_missing(self, table, recorder):
        with pytest.raises(NodeNotFoundError):
            table.update_node('missing', {'name': 'x'})
        assert recorder.structure == []

    def test_remove_node_cascade_and_eviction(self):
        """Test removing a directory drops its subtree from store and selection."""
        table = TreeTable(TEMPLATE, {'d/x': {'name': 'x'}, 'd/y': {'name': 'y'}, 'e': {}})
        recorder = Recorder(table)
        table.select('all')
        recorder.selection.clear()

        result = table.remove_node('d/')
        assert set(result.removed) == {'d/', 'd/x', 'd/y'}
        assert list(table) == ['e']
        assert table.selection == ('e',)
        assert len(recorder.structure) == 1
        assert recorder.selection == [['e']]

    def test_remove_unselected_sends_no_selection(self, table, recorder):
        table.remove_node('images/')
        assert recorder.selection == []

    def test_remove_missing(self, table):
        with pytest.raises(NodeNotFoundError):
            table.remove_node('missing/')

    def test_plan(self, table):
        result = table.plan({'docs/': {'name': 'Docs'}})
        assert set(result.removed) == {'docs/readme', 'images/', 'images/cat.png'}
        assert len(table) == 4


class TestTreeTableSorting:
    """Tests for sort_by and toggle_sort_by."""

    @pytest.fixture
    def table(self):
        return TreeTable(TEMPLATE, {
            'a': {'name': 'a', 'size': 3},
            'b': {'name': 'b', 'size': 1},
            'c': {'name': 'c', 'size': 2},
            'dir/': {'name': 'dir', 'size': 0},
        })

    def test_sort_by(self, table, recorder):
        """Test sorting by another column keeps directories first."""
        table.sort_by('size')
        assert table.sequence == ('dir/', 'b', 'c', 'a')
        table.sort_by('size', 'DESC')
        assert table.sequence == ('dir/', 'a', 'c', 'b')
        assert table.sort_order == 'desc'
        assert len(recorder.structure) == 2
        assert not recorder.structure[0][1]

    def test_sort_by_keeps_current_order(self, table):
        table.sort_by('name', 'desc')
        table.sort_by('size')
        assert table.sort_order == 'desc'

    def test_sort_by_unknown_column(self, table):
        with pytest.raises(InvalidArgumentError, match="Unknown column"):
            table.sort_by('missing')

    def test_sort_by_reserved_column(self, table):
        with pytest.raises(InvalidArgumentError, match="Cannot sort"):
            table.sort_by('__className')

    def test_sort_by_invalid_order(self, table, recorder):
        with pytest.raises(InvalidArgumentError, match="Invalid sort order"):
            table.sort_by('size', 'up')
        assert table.sort_column == 'name'
        assert recorder.structure == []

    def test_toggle_same_column_twice(self, table):
        """Test toggling twice returns to the original order."""
        table.toggle_sort_by('name')
        assert table.sort_order == 'desc'
        table.toggle_sort_by('name')
        assert table.sort_order == 'asc'

    def test_toggle_other_column_keeps_order(self, table):
        table.toggle_sort_by('name')
        table.toggle_sort_by('size')
        assert table.sort_column == 'size'
        assert table.sort_order == 'desc'


class TestTreeTableSelection:
    """Tests for selection through the engine."""

    def test_select_notifies(self, table, recorder):
        table.select('single', 'docs/readme')
        assert table.selection == ('docs/readme',)
        assert table.is_selected('docs/readme')
        assert recorder.selection == [['docs/readme']]

    def test_range_uses_render_order(self, table):
        table.select('range', 'images/cat.png', 'docs/readme')
        assert table.selection == ('docs/readme', 'images/', 'images/cat.png')

    def test_single_missing_keeps_selection(self, table, recorder):
        table.select('add', 'docs/')
        with pytest.raises(NodeNotFoundError):
            table.select('single', 'missing')
        assert table.selection == ('docs/',)
        assert len(recorder.selection) == 1

    def test_click(self, table):
        """Test plain, toggle and range clicks."""
        table.handle_click('docs/')
        assert table.selection == ('docs/',)
        table.handle_click('images/', 'toggle')
        assert table.selection == ('docs/', 'images/')
        table.handle_click('docs/', 'toggle')
        assert table.selection == ('images/',)
        table.handle_click('images/cat.png', 'range')
        assert table.selection == ('images/', 'images/cat.png')

    def test_range_click_without_selection(self, table):
        table.handle_click('docs/readme', 'range')
        assert table.selection == ('docs/readme',)

    def test_unknown_modifier(self, table):
        with pytest.raises(InvalidArgumentError, match="Unknown click modifier"):
            table.handle_click('docs/', 'alt')

    def test_invalid_ids_raise_typed_errors(self, table, recorder):
        """Test list ids raise InvalidArgumentError instead of TypeError."""
        bad = ['docs/']
        with pytest.raises(InvalidArgumentError):
            table.select('add', bad)
        with pytest.raises(InvalidArgumentError):
            table.select('single', bad)
        with pytest.raises(InvalidArgumentError):
            table.is_visible(bad)
        with pytest.raises(InvalidArgumentError):
            table.get_node(bad)
        for modifier in (None, 'toggle', 'range'):
            with pytest.raises(InvalidArgumentError):
                table.handle_click(bad, modifier)
        assert bad not in table
        assert table.selection == ()
        assert recorder.selection == []

    def test_background_click(self, table, recorder):
        table.select('all')
        table.handle_background_click()
        assert table.selection == ()
        assert recorder.selection[-1] == []


class TestTreeTableVisibility:
    """Tests for branch operations through the engine."""

    def test_open_branch_notifies(self, table, recorder):
        table.open_branch('docs/')
        assert table.is_open('docs/')
        assert recorder.visibility == [('docs/readme', True)]

    def test_close_branch(self, table, recorder):
        table.open_branch('docs/')
        table.close_branch('docs/')
        assert recorder.visibility[-1] == ('docs/readme', False)

    def test_toggle_branch(self, table):
        table.toggle_branch('images/')
        assert table.is_visible('images/cat.png')
        table.toggle_branch('images/')
        assert not table.is_visible('images/cat.png')

    def test_open_all_and_visible_ids(self, table):
        table.open_all()
        assert table.visible_ids() == list(table.sequence)
        table.close_all()
        assert table.visible_ids() == ['docs/', 'images/']

    def test_leaf_branch_operation(self, table, recorder):
        with pytest.raises(NotDirectoryError):
            table.open_branch('docs/readme')
        assert recorder.visibility == []

    def test_without_subscribers(self, table):
        """Test branch operations work with nobody listening."""
        table.open_branch('docs/')
        assert table.is_visible('docs/readme')

    def test_unsubscribe(self, table, recorder):
        table.unsubscribe('recorder', visibility=True)
        table.open_branch('docs/')
        table.select('all')
        assert recorder.visibility == []
        assert len(recorder.selection) == 1
        table.unsubscribe('recorder')
        table.select('none')
        assert len(recorder.selection) == 1


class TestTreeTableTemplate:
    """Tests for set_template and column helpers."""

    def test_set_template_resets(self, table, recorder):
        """Test a new template drops nodes, sequence and selection."""
        table.select('all')
        table.set_template({'className': 'Other'})
        assert len(table) == 0
        assert table.sequence == ()
        assert table.selection == ()
        assert table.template.class_name == 'Other'
        assert isinstance(recorder.structure[-1][1], ReconcileResult)
        assert recorder.selection[-1] == []

    def test_set_template_invalid(self, table):
        with pytest.raises(InvalidArgumentError):
            table.set_template('Other')
        assert len(table) == 4

    def test_column_helpers(self, table):
        assert table.resolve_column_default('status') == 'Idle'
        assert table.resolve_column_default('missing') is None
        assert table.is_column_displayed_raw('status') is False

    def test_subscriber_error_propagates(self, table):
        """Test a failing subscriber raises after state is updated."""
        def boom(sequence, changes):
            raise RuntimeError('boom')

        table.subscribe('bad', structure=boom)
        with pytest.raises(RuntimeError):
            table.add_node('new')
        assert 'new' in table
