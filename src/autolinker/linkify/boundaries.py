#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/linkify/boundaries.py
"""Isolation checks for candidate and existing links.

A link is isolated when nothing but a separator (or nothing at all) touches
it on either side. Neighbours are the siblings within the same paragraph; a
link neighbour is never acceptable.
"""

from __future__ import annotations

from autolinker.ast.nodes import Text
from autolinker.editor.location import Path
from autolinker.editor.tree import DocumentTree
from autolinker.linkify.separators import ends_with_separator, is_separator, starts_with_separator


def is_previous_node_valid(tree: DocumentTree, path: Path) -> bool:
    """Return whether the sibling before ``path`` lets a link start there."""
    entry = tree.previous_sibling(path)
    if entry is None:
        return True
    sibling = entry[0]
    return isinstance(sibling, Text) and ends_with_separator(sibling.text)


def is_next_node_valid(tree: DocumentTree, path: Path) -> bool:
    """Return whether the sibling after ``path`` lets a link end there."""
    entry = tree.next_sibling(path)
    if entry is None:
        return True
    sibling = entry[0]
    return isinstance(sibling, Text) and starts_with_separator(sibling.text)


def is_content_around_valid(tree: DocumentTree, text: Text, path: Path, start: int, end: int) -> bool:
    """Return whether ``text.text[start:end]`` is delimited on both sides.

    Inside the run the neighbouring characters must be separators; at the
    run's edges the decision falls to the neighbouring sibling.

    Parameters
    ----------
    tree : DocumentTree
        Tree holding ``text``
    text : Text
        The run containing the candidate span
    path : Path
        Current path of ``text``
    start, end : int
        Candidate span, end exclusive

    """
    content = text.text
    before_ok = is_separator(content[start - 1]) if start > 0 else is_previous_node_valid(tree, path)
    after_ok = is_separator(content[end]) if end < len(content) else is_next_node_valid(tree, path)
    return before_ok and after_ok


__all__ = ["is_previous_node_valid", "is_next_node_valid", "is_content_around_valid"]
