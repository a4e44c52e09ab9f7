#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/editor/__init__.py
"""Editable document tree: locations, primitives, selection and normalization."""

from __future__ import annotations

from autolinker.editor.location import Path, Point, Range, is_ancestor, next_path, parent_path, previous_path
from autolinker.editor.tree import DocumentTree, EditHandler, NodeEntry, NodeHandler

__all__ = [
    "Path",
    "Point",
    "Range",
    "parent_path",
    "next_path",
    "previous_path",
    "is_ancestor",
    "DocumentTree",
    "NodeEntry",
    "NodeHandler",
    "EditHandler",
]
