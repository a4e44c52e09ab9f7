#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/ast/visitors.py
"""Visitor pattern implementation for document traversal.

This module provides the visitor base class used by the renderers and the
invariant checker. Visitors keep algorithms (rendering, checking) separate
from the node classes themselves.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from autolinker.ast.nodes import AutoLink, Document, Node, Paragraph, Text, node_text
from autolinker.exceptions import DocumentError
from autolinker.linkify.matcher import is_exact_url
from autolinker.linkify.separators import (
    ends_with_period_or_question_mark,
    ends_with_separator,
    starts_with_separator,
)


class NodeVisitor(ABC):
    """Abstract base class for document node visitors.

    Subclasses implement one ``visit_*`` method per node class. The model is
    closed, so every visitor handles all four.

    Examples
    --------
    Simple visitor that counts links:

        >>> class LinkCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_document(self, node):
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def visit_paragraph(self, node):
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def visit_auto_link(self, node):
        ...         self.count += 1
        ...     def visit_text(self, node):
        ...         pass
        >>> counter = LinkCounter()
        >>> document.accept(counter)

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node.

        Parameters
        ----------
        node : Document
            The document node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        pass

    @abstractmethod
    def visit_auto_link(self, node: AutoLink) -> Any:
        """Visit an AutoLink node."""
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass


class InvariantVisitor(NodeVisitor):
    """Visitor that checks a document against the auto-link rules.

    It reports, for every link:

    - text that differs from ``url`` or is not exactly one URL
    - text ending in ``.`` or ``?``
    - a neighbour that is a link, or a Text not separated from it
    - children that are not Text, or a link not placed directly in a paragraph

    and, for the document as a whole, nodes nested where the model does not
    allow them.

    Parameters
    ----------
    strict : bool, default = False
        Raise :class:`DocumentError` on the first violation instead of
        collecting every one in ``errors``

    Examples
    --------
        >>> visitor = InvariantVisitor()
        >>> document.accept(visitor)
        >>> visitor.errors
        []

    """

    def __init__(self, strict: bool = False):
        """Initialize the checker with an empty error list."""
        self.strict = strict
        self.errors: list[str] = []
        self._path: list[int] = []

    def _add_error(self, message: str) -> None:
        """Record a violation at the current path.

        Parameters
        ----------
        message : str
            Error message

        """
        located = f"{tuple(self._path)}: {message}"
        self.errors.append(located)
        if self.strict:
            raise DocumentError(located)

    def _visit_children(self, children: list[Node]) -> None:
        for index, child in enumerate(children):
            self._path.append(index)
            try:
                child.accept(self)
            finally:
                self._path.pop()

    def visit_document(self, node: Document) -> None:
        """Check a Document node."""
        for index, child in enumerate(node.children):
            if not isinstance(child, Paragraph):
                self._path.append(index)
                self._add_error(f"Document can only contain paragraphs, found {type(child).__name__}")
                self._path.pop()
        self._visit_children(node.children)  # type: ignore[arg-type]

    def visit_paragraph(self, node: Paragraph) -> None:
        """Check a Paragraph node and the isolation of the links in it."""
        children = node.children
        for index, child in enumerate(children):
            self._path.append(index)
            if not isinstance(child, (Text, AutoLink)):
                self._add_error(f"Paragraph can only contain inline nodes, found {type(child).__name__}")
            elif isinstance(child, AutoLink):
                previous = children[index - 1] if index > 0 else None
                following = children[index + 1] if index + 1 < len(children) else None
                self._check_isolation(child, previous, following)
            self._path.pop()
        self._visit_children(children)  # type: ignore[arg-type]

    def visit_auto_link(self, node: AutoLink) -> None:
        """Check an AutoLink node."""
        for index, child in enumerate(node.children):
            if isinstance(child, AutoLink):
                self._path.append(index)
                self._add_error("Link nested inside another link")
                self._path.pop()
            elif not isinstance(child, Text):
                self._path.append(index)
                self._add_error(f"Link can only contain text, found {type(child).__name__}")
                self._path.pop()

        text = node_text(node)
        if text != node.url:
            self._add_error(f"Link text {text!r} differs from its url {node.url!r}")
        if not is_exact_url(text):
            self._add_error(f"Link text {text!r} is not exactly one URL")
        if ends_with_period_or_question_mark(text):
            self._add_error(f"Link text {text!r} ends with trailing punctuation")
        self._visit_children(node.children)  # type: ignore[arg-type]

    def visit_text(self, node: Text) -> None:
        """Check a Text node."""
        if not isinstance(node.text, str):
            self._add_error(f"Text content must be a string, got {type(node.text).__name__}")

    def _check_isolation(self, link: AutoLink, previous: Optional[Node], following: Optional[Node]) -> None:
        if isinstance(previous, AutoLink) or isinstance(following, AutoLink):
            self._add_error(f"Link {link.url!r} is adjacent to another link")
            return
        if isinstance(previous, Text) and not ends_with_separator(previous.text):
            self._add_error(f"Link {link.url!r} is preceded by {previous.text!r} without a separator")
        if isinstance(following, Text) and not starts_with_separator(following.text):
            self._add_error(f"Link {link.url!r} is followed by {following.text!r} without a separator")


def check_invariants(document: Document) -> list[str]:
    """Return every auto-link rule violation in ``document``.

    An empty list means the document is in the state normalization
    converges to.
    """
    visitor = InvariantVisitor()
    document.accept(visitor)
    return visitor.errors


__all__ = ["NodeVisitor", "InvariantVisitor", "check_invariants"]
