#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/editor/location.py
"""Locations inside a document tree.

A ``Path`` is a tuple of sibling indices from the document root. Paths are
snapshots: any structural edit to an ancestor or an earlier sibling shifts
them, so they must be recomputed after every primitive edit rather than
kept across one.

A ``Point`` is a path to a Text leaf plus a character offset, and a
``Range`` is an anchor/focus pair of points.
"""

from __future__ import annotations

from dataclasses import dataclass

Path = tuple[int, ...]


def parent_path(path: Path) -> Path:
    """Return the path of the parent of ``path``.

    Raises
    ------
    ValueError
        If ``path`` is the root path

    """
    if not path:
        raise ValueError("The root path has no parent")
    return path[:-1]


def next_path(path: Path) -> Path:
    """Return the path of the following sibling position."""
    if not path:
        raise ValueError("The root path has no siblings")
    return path[:-1] + (path[-1] + 1,)


def previous_path(path: Path) -> Path:
    """Return the path of the preceding sibling position.

    Raises
    ------
    ValueError
        If ``path`` is the root path or already the first sibling

    """
    if not path or path[-1] == 0:
        raise ValueError(f"Path {path} has no previous sibling")
    return path[:-1] + (path[-1] - 1,)


def is_ancestor(path: Path, other: Path) -> bool:
    """Return whether ``path`` is a strict ancestor of ``other``."""
    return len(path) < len(other) and other[: len(path)] == path


@dataclass(frozen=True)
class Point:
    """A character position inside a Text leaf.

    Parameters
    ----------
    path : Path
        Path to the Text leaf
    offset : int
        Character offset within the leaf

    """

    path: Path
    offset: int


@dataclass(frozen=True)
class Range:
    """An anchor/focus pair of points.

    Parameters
    ----------
    anchor : Point
        Where the range starts from
    focus : Point
        Where the range extends to

    """

    anchor: Point
    focus: Point

    @classmethod
    def collapsed(cls, point: Point) -> Range:
        """Create a zero-width range at ``point``."""
        return cls(anchor=point, focus=point)

    @property
    def is_collapsed(self) -> bool:
        """Return whether anchor and focus coincide."""
        return self.anchor == self.focus

    def edges(self) -> tuple[Point, Point]:
        """Return ``(start, end)`` in document order."""
        anchor, focus = self.anchor, self.focus
        if (anchor.path, anchor.offset) <= (focus.path, focus.offset):
            return anchor, focus
        return focus, anchor


__all__ = [
    "Path",
    "Point",
    "Range",
    "parent_path",
    "next_path",
    "previous_path",
    "is_ancestor",
]
