#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/ast/serialization.py
"""JSON serialization and deserialization for document nodes.

Two shapes are supported:

Native
    Every node is an object tagged with ``node_type``. The root carries a
    ``schema_version`` field so later versions of the format can be
    migrated.

        {"schema_version": 1, "node_type": "Document", "children": [
            {"node_type": "Paragraph", "children": [
                {"node_type": "Text", "text": "Visit ", "bold": false, ...},
                {"node_type": "AutoLink", "url": "https://a.com", "children": [...]}
            ]}
        ]}

Slate
    The value shape used by Slate-based editors: a list of blocks, elements
    tagged with ``type`` (``"paragraph"``, ``"auto-link"``) and leaves
    recognised by their ``text`` key. Style flags are only present when set.

        [{"type": "paragraph", "children": [
            {"text": "Visit "},
            {"type": "auto-link", "url": "https://a.com", "children": [{"text": "https://a.com"}]},
            {"text": " for info", "bold": true}
        ]}]

Examples
--------
    >>> doc = Document(children=[Paragraph(children=[Text("Hello")])])
    >>> json_str = ast_to_json(doc, indent=2)
    >>> json_to_ast(json_str).children[0].children[0].text
    'Hello'

"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from autolinker.ast.nodes import AutoLink, Document, Node, Paragraph, Text
from autolinker.constants import AUTO_LINK_TYPE, PARAGRAPH_TYPE, STYLE_FLAGS
from autolinker.exceptions import DocumentError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


# =============================================================================
# Native format
# =============================================================================


def _serialize_text(node: Text) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "Text", "text": node.text}
    for flag in STYLE_FLAGS:
        result[flag] = getattr(node, flag)
    return result


def _serialize_auto_link(node: AutoLink) -> dict[str, Any]:
    return {
        "node_type": "AutoLink",
        "url": node.url,
        "children": [ast_to_dict(child) for child in node.children],
    }


def _serialize_children_node(node: Node, node_type: str) -> dict[str, Any]:
    """Serialize nodes with a 'children' attribute.

    Parameters
    ----------
    node : Node
        Node with children attribute
    node_type : str
        Type name for the node

    Returns
    -------
    dict
        Serialized node

    """
    return {
        "node_type": node_type,
        "children": [ast_to_dict(child) for child in node.children],  # type: ignore[attr-defined]
    }


# Dispatch table mapping node types to their serialization functions
_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Document: lambda n: _serialize_children_node(n, "Document"),
    Paragraph: lambda n: _serialize_children_node(n, "Paragraph"),
    AutoLink: _serialize_auto_link,
    Text: _serialize_text,
}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to its native dictionary representation.

    Examples
    --------
    >>> ast_to_dict(Text("Hello"))
    {'node_type': 'Text', 'text': 'Hello', 'bold': False, 'italic': False, 'underline': False}

    """
    node_class = type(node)
    serializer = _SERIALIZATION_DISPATCH.get(node_class)
    if serializer:
        return serializer(node)

    raise DocumentError(f"Unknown node type for serialization: {node_class.__name__}")


def _require(data: dict[str, Any], key: str, expected: type, default: Any = None) -> Any:
    value = data.get(key, default)
    if not isinstance(value, expected):
        raise DocumentError(
            f"Field {key!r} of {data.get('node_type') or data.get('type') or 'node'} must be "
            f"{expected.__name__}, got {type(value).__name__}"
        )
    return value


def _read_flags(data: dict[str, Any]) -> dict[str, bool]:
    return {flag: _require(data, flag, bool, False) for flag in STYLE_FLAGS}


def _deserialize_children(data: dict[str, Any], strict_mode: bool) -> list[Any]:
    """Deserialize the ``children`` list of ``data``, dropping skipped nodes."""
    children = _require(data, "children", list, [])
    nodes = (dict_to_ast(child, strict_mode=strict_mode) for child in children)
    return [node for node in nodes if node is not None]


def _deserialize_document(data: dict[str, Any], strict_mode: bool) -> Document:
    return Document(children=_deserialize_children(data, strict_mode))


def _deserialize_paragraph(data: dict[str, Any], strict_mode: bool) -> Paragraph:
    return Paragraph(children=_deserialize_children(data, strict_mode))


def _deserialize_auto_link(data: dict[str, Any], strict_mode: bool) -> AutoLink:
    return AutoLink(url=_require(data, "url", str, ""), children=_deserialize_children(data, strict_mode))


def _deserialize_text(data: dict[str, Any], strict_mode: bool) -> Text:
    return Text(text=_require(data, "text", str, ""), **_read_flags(data))


_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any], bool], Node]] = {
    "Document": _deserialize_document,
    "Paragraph": _deserialize_paragraph,
    "AutoLink": _deserialize_auto_link,
    "Text": _deserialize_text,
}


def dict_to_ast(data: dict[str, Any], strict_mode: bool = True) -> Optional[Node]:
    """Convert a native dictionary representation back to a node.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node
    strict_mode : bool, default True
        If True, raise on unknown node types.
        If False, log a warning and skip them (None is returned for a
        skipped node and it is left out of its parent).

    Returns
    -------
    Node or None
        Reconstructed node

    Raises
    ------
    DocumentError
        If the dictionary is malformed, or names an unknown node type and
        strict_mode is True

    """
    if not isinstance(data, dict):
        raise DocumentError(f"Expected a node object, got {type(data).__name__}")

    node_type = data.get("node_type")
    if not node_type:
        if strict_mode:
            raise DocumentError("Dictionary must contain 'node_type' field")
        logger.warning("Dictionary missing 'node_type' field, skipping")
        return None

    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)
    if not deserializer:
        if strict_mode:
            raise DocumentError(f"Unknown node type: {node_type}")
        logger.warning(f"Unknown node type '{node_type}', skipping")
        return None

    return deserializer(data, strict_mode)


def ast_to_json(node: Node, indent: Optional[int] = None) -> str:
    """Serialize a node to a JSON string with schema versioning.

    Parameters
    ----------
    node : Node
        The node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON string with ``schema_version`` at the root

    """
    versioned_dict = {"schema_version": SCHEMA_VERSION, **ast_to_dict(node)}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str, validate_schema: bool = True, strict_mode: bool = True) -> Node:
    """Deserialize a native JSON string to a node.

    A missing ``schema_version`` is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON string representation
    validate_schema : bool, default True
        If True, reject unsupported schema versions.
        If False, only warn about them.
    strict_mode : bool, default True
        If True, raise on unknown node types; otherwise skip them

    Raises
    ------
    DocumentError
        If the JSON is not a node, contains unknown node types, or has an
        unsupported schema version
    json.JSONDecodeError
        If the JSON string is malformed

    """
    data = json.loads(json_str)
    if not isinstance(data, dict):
        raise DocumentError(f"Expected a JSON object at the top level, got {type(data).__name__}")

    schema_version = data.pop("schema_version", None)
    if validate_schema:
        if schema_version is None:
            schema_version = SCHEMA_VERSION
        if not isinstance(schema_version, int):
            raise DocumentError(f"Schema version must be an integer, got {type(schema_version).__name__}")
        if schema_version != SCHEMA_VERSION:
            raise DocumentError(
                f"Unsupported schema version: {schema_version}. "
                f"This version of autolinker supports schema version {SCHEMA_VERSION} only."
            )
    elif schema_version is not None and schema_version != SCHEMA_VERSION:
        logger.warning(
            f"Schema version {schema_version} differs from supported version {SCHEMA_VERSION}. "
            f"Attempting to parse anyway (schema validation disabled)."
        )

    node = dict_to_ast(data, strict_mode=strict_mode)
    if node is None:
        raise DocumentError("JSON document has no readable root node")
    return node


# =============================================================================
# Slate format
# =============================================================================


def _slate_node(data: Any, strict_mode: bool) -> Optional[Node]:
    if not isinstance(data, dict):
        raise DocumentError(f"Expected a Slate node object, got {type(data).__name__}")

    node_type = data.get("type")
    if node_type is None and "text" in data:
        return Text(text=_require(data, "text", str), **_read_flags(data))
    if node_type == PARAGRAPH_TYPE:
        return Paragraph(children=_slate_children(data, strict_mode))
    if node_type == AUTO_LINK_TYPE:
        return AutoLink(url=_require(data, "url", str, ""), children=_slate_children(data, strict_mode))

    if strict_mode:
        raise DocumentError(f"Unknown Slate node type: {node_type!r}")
    logger.warning(f"Unknown Slate node type {node_type!r}, skipping")
    return None


def _slate_children(data: dict[str, Any], strict_mode: bool) -> list[Any]:
    children = _require(data, "children", list, [])
    nodes = (_slate_node(child, strict_mode) for child in children)
    return [node for node in nodes if node is not None]


def slate_to_ast(value: Any, strict_mode: bool = True) -> Document:
    """Build a Document from a Slate editor value.

    Parameters
    ----------
    value : list
        Top-level list of Slate block objects
    strict_mode : bool, default True
        If True, raise on unknown ``type`` values; otherwise skip them

    Raises
    ------
    DocumentError
        If ``value`` is not a list of Slate nodes

    """
    if not isinstance(value, list):
        raise DocumentError(f"A Slate value must be a list of blocks, got {type(value).__name__}")
    nodes = (_slate_node(block, strict_mode) for block in value)
    return Document(children=[node for node in nodes if node is not None])  # type: ignore[misc]


def _to_slate(node: Node) -> dict[str, Any]:
    if isinstance(node, Text):
        leaf: dict[str, Any] = {"text": node.text}
        for flag in STYLE_FLAGS:
            if getattr(node, flag):
                leaf[flag] = True
        return leaf
    if isinstance(node, AutoLink):
        return {"type": AUTO_LINK_TYPE, "url": node.url, "children": [_to_slate(child) for child in node.children]}
    if isinstance(node, Paragraph):
        return {"type": PARAGRAPH_TYPE, "children": [_to_slate(child) for child in node.children]}
    raise DocumentError(f"Unknown node type for Slate serialization: {type(node).__name__}")


def ast_to_slate(document: Document) -> list[dict[str, Any]]:
    """Convert a Document to a Slate editor value (a list of blocks)."""
    return [_to_slate(block) for block in document.children]


__all__ = [
    "SCHEMA_VERSION",
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "slate_to_ast",
    "ast_to_slate",
]
