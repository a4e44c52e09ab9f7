#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/ast/__init__.py
"""Document model for autolinker.

The module consists of several components:

- nodes: the closed set of node classes (Document, Paragraph, Text, AutoLink)
- visitors: visitor base class and the auto-link invariant checker
- serialization: native and Slate-shaped JSON (de)serialization
- builder: helpers for constructing documents

Examples
--------
    >>> from autolinker.ast import Document, Paragraph, Text, check_invariants
    >>> doc = Document(children=[Paragraph(children=[Text("Hello world")])])
    >>> check_invariants(doc)
    []

"""

from __future__ import annotations

from autolinker.ast.builder import DocumentBuilder, document_from_text
from autolinker.ast.nodes import (
    AutoLink,
    Document,
    Element,
    Inline,
    Node,
    Paragraph,
    Text,
    get_node_children,
    node_text,
)
from autolinker.ast.serialization import (
    ast_to_dict,
    ast_to_json,
    ast_to_slate,
    dict_to_ast,
    json_to_ast,
    slate_to_ast,
)
from autolinker.ast.visitors import InvariantVisitor, NodeVisitor, check_invariants

__all__ = [
    # Nodes
    "Node",
    "Document",
    "Paragraph",
    "Text",
    "AutoLink",
    "Inline",
    "Element",
    "get_node_children",
    "node_text",
    # Builder
    "DocumentBuilder",
    "document_from_text",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "ast_to_slate",
    "slate_to_ast",
    # Visitors
    "NodeVisitor",
    "InvariantVisitor",
    "check_invariants",
]
