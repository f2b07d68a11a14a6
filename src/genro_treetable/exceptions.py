# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeTable exceptions."""

from __future__ import annotations


class TreeTableError(Exception):
    """Base exception for TreeTable errors."""

    pass


class InvalidArgumentError(TreeTableError, ValueError):
    """Raised when a node id, dataset or fields map has the wrong shape."""

    pass


class InvalidDatasetError(InvalidArgumentError):
    """Raised when a dataset is not a mapping of node ids to field maps."""

    pass


class NodeNotFoundError(TreeTableError, KeyError):
    """Raised when an operation targets a node id that does not exist."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ''


class DuplicateNodeError(TreeTableError):
    """Raised when a node is inserted with an id that already exists."""

    pass


class NotDirectoryError(TreeTableError):
    """Raised when a branch operation targets a leaf."""

    pass


class InvalidSequenceInputError(TreeTableError):
    """Raised when sort pairs are malformed or the render sequence is stale."""

    pass
