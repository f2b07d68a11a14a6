# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FileBrowser - Example tree-table over a directory listing.

A didactic example showing how a view subscribes to a TreeTable and
draws its rows, here as indented text on the terminal.
"""

from __future__ import annotations

import os

from genro_treetable import TreeTable

TEMPLATE = {
    'className': 'FileBrowser',
    'sortColumn': 'name',
    'defaultLeafType': 'file',
    'columns': {
        'name': {'title': 'Name'},
        'size': {'title': 'Size', 'defaultValue': '-'},
    },
}


class FileBrowser:
    """A text view of a directory tree.

    Example:
        >>> browser = FileBrowser('.')
        >>> browser.table.open_branch('src/')
        >>> print(browser.draw())
    """

    def __init__(self, root: str) -> None:
        self.root = root
        self.table = TreeTable(TEMPLATE)
        self.redraws = 0
        self.table.subscribe('browser', structure=self._on_structure)
        self.refresh()

    def refresh(self) -> None:
        """Re-read the directory and reconcile the table with it."""
        self.table.reconcile(scan(self.root))

    def draw(self) -> str:
        lines = []
        for row in self.table.rows(visible_only=True):
            marker = ' '
            if row.is_directory:
                marker = '-' if row.is_open else '+'
            name, size = (cell.text for cell in row.cells)
            selected = '*' if row.selected else ' '
            lines.append(f"{selected}{' ' * (row.indent // 9)}{marker} {name:<40} {size:>10}")
        return '\n'.join(lines)

    def _on_structure(self, sequence, changes) -> None:
        self.redraws += 1


def scan(root: str) -> dict[str, dict]:
    """Build a dataset from the files below root."""
    dataset: dict[str, dict] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if not name.startswith('.')]
        relative = os.path.relpath(dirpath, root)
        prefix = '' if relative == '.' else relative.replace(os.sep, '/') + '/'
        if prefix:
            dataset[prefix] = {'name': os.path.basename(dirpath)}
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            dataset[prefix + filename] = {'name': filename, 'size': os.path.getsize(path)}
    return dataset


if __name__ == '__main__':
    browser = FileBrowser('.')
    browser.table.open_all()
    print(browser.draw())
