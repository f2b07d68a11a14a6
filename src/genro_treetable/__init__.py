# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-TreeTable - Sortable, selectable tree-tables from flat datasets.

A lightweight, zero-dependency engine turning a path-keyed dataset
('docs/', 'docs/readme', ...) into an ordered, expandable and selectable
hierarchy, for the Genro ecosystem (Genro Kyō).
"""

__version__ = "0.1.0"

from .engine import TreeTable
from .exceptions import (
    DuplicateNodeError,
    InvalidArgumentError,
    InvalidDatasetError,
    InvalidSequenceInputError,
    NodeNotFoundError,
    NotDirectoryError,
    TreeTableError,
)
from .node import TreeTableNode
from .reconcile import DatasetReconciler, ReconcileResult, synthesize_ancestors
from .render import CellView, HeaderCellView, RowView
from .selection import SelectionController
from .sorting import compute_sequence
from .store import NodeStore
from .template import ColumnSpec, TreeTemplate
from .visibility import VisibilityController

__all__ = [
    # Engine
    "TreeTable",
    # Components
    "NodeStore",
    "TreeTableNode",
    "DatasetReconciler",
    "ReconcileResult",
    "SelectionController",
    "VisibilityController",
    "compute_sequence",
    "synthesize_ancestors",
    # Configuration
    "ColumnSpec",
    "TreeTemplate",
    # Presentation
    "CellView",
    "HeaderCellView",
    "RowView",
    # Exceptions
    "TreeTableError",
    "InvalidArgumentError",
    "InvalidDatasetError",
    "NodeNotFoundError",
    "DuplicateNodeError",
    "NotDirectoryError",
    "InvalidSequenceInputError",
]
