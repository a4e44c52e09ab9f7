#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/ast/nodes.py
"""Node classes for the rich-text document model.

The model is deliberately small and closed. A document is an ordered
sequence of blocks, each block an ordered sequence of inline nodes:

    Document
      Paragraph (block)
        Text      (leaf, carries style flags)
        AutoLink  (inline element, carries ``url``, holds Text leaves)

Every node supports the visitor pattern through ``accept``. Nodes are
mutable dataclasses; the editing layer (``autolinker.editor.tree``) mutates
them in place and tracks identity, so two structurally equal nodes compare
equal with ``==`` but are distinct tree members.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union

from autolinker.constants import STYLE_FLAGS


class Node(ABC):
    """Base class for all document nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and rendering.
    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


@dataclass
class Text(Node):
    """A run of text sharing one set of style flags.

    Parameters
    ----------
    text : str
        Text content, possibly empty
    bold : bool, default = False
        Bold flag
    italic : bool, default = False
        Italic flag
    underline : bool, default = False
        Underline flag

    """

    text: str = ""
    bold: bool = False
    italic: bool = False
    underline: bool = False

    @property
    def marks(self) -> frozenset[str]:
        """Return the set of style flags that are switched on."""
        return frozenset(flag for flag in STYLE_FLAGS if getattr(self, flag))

    def same_marks(self, other: Text) -> bool:
        """Return whether ``other`` carries exactly the same style flags."""
        return self.marks == other.marks

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_text method

        Returns
        -------
        Any
            Result from visitor.visit_text(self)

        """
        return visitor.visit_text(self)


@dataclass
class AutoLink(Node):
    """Inline element wrapping the text of a detected URL.

    Exactly one nesting level: a well-formed AutoLink holds only Text
    children, and the concatenation of their text equals ``url``.

    Parameters
    ----------
    url : str
        Link target
    children : list of Text
        Text runs displayed for the link

    """

    url: str = ""
    children: list[Inline] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_auto_link method

        Returns
        -------
        Any
            Result from visitor.visit_auto_link(self)

        """
        return visitor.visit_auto_link(self)


@dataclass
class Paragraph(Node):
    """Block holding a sequence of inline nodes.

    Parameters
    ----------
    children : list of Text or AutoLink
        Inline content

    """

    children: list[Inline] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class Document(Node):
    """Root node holding the ordered sequence of blocks.

    Parameters
    ----------
    children : list of Paragraph
        Blocks in document order

    """

    children: list[Paragraph] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


Inline = Union[Text, AutoLink]
Element = Union[Document, Paragraph, AutoLink]

INLINE_NODES = (Text, AutoLink)
ELEMENT_NODES = (Document, Paragraph, AutoLink)


def is_element(node: Node) -> bool:
    """Return whether ``node`` can hold children."""
    return isinstance(node, ELEMENT_NODES)


def is_inline(node: Node) -> bool:
    """Return whether ``node`` lives inside a block."""
    return isinstance(node, INLINE_NODES)


def get_node_children(node: Node) -> list[Node]:
    """Return the children of ``node``, or an empty list for a Text leaf.

    The returned list is the live children list of the element, so callers
    that only read must not mutate it.
    """
    if isinstance(node, (Document, Paragraph, AutoLink)):
        return node.children  # type: ignore[return-value]
    return []


def node_text(node: Node) -> str:
    """Concatenate the text of every Text leaf below ``node``."""
    if isinstance(node, Text):
        return node.text
    return "".join(node_text(child) for child in get_node_children(node))


__all__ = [
    "Node",
    "Text",
    "AutoLink",
    "Paragraph",
    "Document",
    "Inline",
    "Element",
    "INLINE_NODES",
    "ELEMENT_NODES",
    "is_element",
    "is_inline",
    "get_node_children",
    "node_text",
]
