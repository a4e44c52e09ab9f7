#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for JSON and Slate serialization."""

import json
import logging

import pytest
from utils import document, link, paragraph

from autolinker.ast.nodes import AutoLink, Document, Paragraph, Text
from autolinker.ast.serialization import (
    SCHEMA_VERSION,
    ast_to_dict,
    ast_to_json,
    ast_to_slate,
    dict_to_ast,
    json_to_ast,
    slate_to_ast,
)
from autolinker.exceptions import DocumentError


@pytest.fixture
def linked_document():
    return document(
        paragraph(Text("Visit "), link("https://a.com"), Text(" for info", bold=True)),
        paragraph(Text("")),
    )


@pytest.mark.unit
class TestNativeFormat:
    """Test the node_type-tagged format."""

    def test_text_lists_every_flag(self):
        """Test that a text node always carries all style flags."""
        assert ast_to_dict(Text("Hi", italic=True)) == {
            "node_type": "Text",
            "text": "Hi",
            "bold": False,
            "italic": True,
            "underline": False,
        }

    def test_auto_link_dict(self):
        """Test link serialization."""
        data = ast_to_dict(link("www.a.com"))
        assert data["node_type"] == "AutoLink"
        assert data["url"] == "www.a.com"
        assert data["children"][0]["text"] == "www.a.com"

    def test_json_carries_schema_version(self, linked_document):
        """Test the root of the JSON output."""
        data = json.loads(ast_to_json(linked_document))
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["node_type"] == "Document"
        assert len(data["children"]) == 2

    def test_json_round_trip(self, linked_document):
        """Test that a document survives serialization."""
        assert json_to_ast(ast_to_json(linked_document, indent=2)) == linked_document

    def test_json_keeps_non_ascii(self):
        """Test that non-ASCII text is written as-is."""
        output = ast_to_json(Document(children=[Paragraph(children=[Text("café")])]))
        assert "café" in output

    def test_missing_schema_version_is_version_one(self):
        """Test that unversioned input is accepted."""
        node = json_to_ast('{"node_type": "Paragraph", "children": [{"node_type": "Text", "text": "x"}]}')
        assert node == Paragraph(children=[Text("x")])

    def test_unsupported_schema_version(self):
        """Test that a newer schema is refused."""
        with pytest.raises(DocumentError, match="Unsupported schema version"):
            json_to_ast('{"schema_version": 2, "node_type": "Document", "children": []}')

    def test_unsupported_schema_version_without_validation(self, caplog):
        """Test that schema validation can be relaxed to a warning."""
        with caplog.at_level(logging.WARNING):
            node = json_to_ast('{"schema_version": 2, "node_type": "Document"}', validate_schema=False)
        assert node == Document()
        assert "differs from supported version" in caplog.text

    def test_non_integer_schema_version(self):
        """Test that the schema version must be an integer."""
        with pytest.raises(DocumentError, match="must be an integer"):
            json_to_ast('{"schema_version": "1", "node_type": "Document"}')

    def test_top_level_must_be_object(self):
        """Test that a JSON list is not a native document."""
        with pytest.raises(DocumentError, match="JSON object"):
            json_to_ast("[]")

    def test_malformed_json_propagates(self):
        """Test that syntax errors surface as JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            json_to_ast("{not json")

    def test_unknown_node_type_strict(self):
        """Test that unknown node types are rejected by default."""
        with pytest.raises(DocumentError, match="Unknown node type: Image"):
            dict_to_ast({"node_type": "Paragraph", "children": [{"node_type": "Image"}]})

    def test_unknown_node_type_skipped(self, caplog):
        """Test that lenient mode drops unknown nodes with a warning."""
        data = {"node_type": "Paragraph", "children": [{"node_type": "Image"}, {"node_type": "Text", "text": "ok"}]}
        with caplog.at_level(logging.WARNING):
            node = dict_to_ast(data, strict_mode=False)
        assert node == Paragraph(children=[Text("ok")])
        assert "Unknown node type 'Image'" in caplog.text

    def test_missing_node_type(self):
        """Test that a node without node_type is rejected or skipped."""
        with pytest.raises(DocumentError, match="node_type"):
            dict_to_ast({"text": "x"})
        assert dict_to_ast({"text": "x"}, strict_mode=False) is None

    def test_unreadable_root(self):
        """Test that a skipped root is an error even in lenient mode."""
        with pytest.raises(DocumentError, match="no readable root"):
            json_to_ast('{"node_type": "Video"}', strict_mode=False)

    @pytest.mark.parametrize(
        "data",
        [
            {"node_type": "Text", "text": 5},
            {"node_type": "Text", "text": "x", "bold": 1},
            {"node_type": "AutoLink", "url": None, "children": []},
            {"node_type": "Paragraph", "children": "abc"},
        ],
    )
    def test_wrong_field_types(self, data):
        """Test field type validation."""
        with pytest.raises(DocumentError, match="must be"):
            dict_to_ast(data)

    def test_non_dict_child(self):
        """Test that children must be objects."""
        with pytest.raises(DocumentError, match="Expected a node object"):
            dict_to_ast({"node_type": "Paragraph", "children": ["text"]})


@pytest.mark.unit
class TestSlateFormat:
    """Test the Slate editor value format."""

    def test_slate_output(self, linked_document):
        """Test that only set flags are written and elements carry a type."""
        assert ast_to_slate(linked_document) == [
            {
                "type": "paragraph",
                "children": [
                    {"text": "Visit "},
                    {"type": "auto-link", "url": "https://a.com", "children": [{"text": "https://a.com"}]},
                    {"text": " for info", "bold": True},
                ],
            },
            {"type": "paragraph", "children": [{"text": ""}]},
        ]

    def test_slate_input(self, linked_document):
        """Test reading a Slate value."""
        assert slate_to_ast(ast_to_slate(linked_document)) == linked_document

    def test_leaf_with_flags(self):
        """Test that leaves are recognised by their text key."""
        doc = slate_to_ast([{"type": "paragraph", "children": [{"text": "x", "underline": True}]}])
        assert doc.children[0].children == [Text("x", underline=True)]

    def test_value_must_be_list(self):
        """Test that a single object is not a Slate value."""
        with pytest.raises(DocumentError, match="must be a list"):
            slate_to_ast({"type": "paragraph"})

    def test_unknown_slate_type(self):
        """Test strict handling of unknown element types."""
        value = [{"type": "paragraph", "children": [{"type": "mention", "children": [{"text": "@a"}]}]}]
        with pytest.raises(DocumentError, match="mention"):
            slate_to_ast(value)

    def test_unknown_slate_type_skipped(self):
        """Test lenient handling of unknown element types."""
        value = [
            {"type": "heading", "children": [{"text": "Title"}]},
            {"type": "paragraph", "children": [{"text": "a"}, {"type": "mention"}, {"text": "b"}]},
        ]
        doc = slate_to_ast(value, strict_mode=False)
        assert doc == Document(children=[Paragraph(children=[Text("a"), Text("b")])])

    def test_link_without_url(self):
        """Test that a link missing its url reads as an empty url."""
        doc = slate_to_ast([{"type": "paragraph", "children": [{"type": "auto-link", "children": [{"text": "x"}]}]}])
        assert doc.children[0].children[0] == AutoLink(url="", children=[Text("x")])
