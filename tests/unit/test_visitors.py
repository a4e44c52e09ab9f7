#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for document visitors and the invariant checker."""

import pytest
from utils import document, link, paragraph

from autolinker.ast.builder import DocumentBuilder, document_from_text
from autolinker.ast.nodes import AutoLink, Document, Paragraph, Text
from autolinker.ast.visitors import InvariantVisitor, NodeVisitor, check_invariants
from autolinker.exceptions import DocumentError


class LinkCounter(NodeVisitor):
    def __init__(self):
        self.links = 0
        self.texts = 0

    def visit_document(self, node):
        for child in node.children:
            child.accept(self)

    def visit_paragraph(self, node):
        for child in node.children:
            child.accept(self)

    def visit_auto_link(self, node):
        self.links += 1
        for child in node.children:
            child.accept(self)

    def visit_text(self, node):
        self.texts += 1


@pytest.mark.unit
class TestNodeVisitor:
    """Test visitor dispatch."""

    def test_accept_dispatches_by_type(self):
        """Test that every node calls its own visit method."""
        doc = DocumentBuilder().text("a ").link("www.b.com").text("").paragraph().text("c").build()
        counter = LinkCounter()
        doc.accept(counter)
        assert counter.links == 1
        assert counter.texts == 4

    def test_incomplete_visitor_cannot_be_created(self):
        """Test that all four visit methods are required."""

        class TextOnly(NodeVisitor):
            def visit_text(self, node):
                pass

        with pytest.raises(TypeError):
            TextOnly()


@pytest.mark.unit
class TestCheckInvariants:
    """Test detection of invalid links."""

    def test_clean_documents(self):
        """Test documents with no violations."""
        assert check_invariants(document_from_text("no links")) == []
        assert check_invariants(document(paragraph(Text("See "), link("https://a.com"), Text(". Done")))) == []
        assert check_invariants(Document()) == []

    def test_url_mismatch(self):
        """Test a link whose url differs from its text."""
        doc = document(paragraph(AutoLink(url="https://b.com", children=[Text("https://a.com")])))
        assert check_invariants(doc) == ["(0, 0): Link text 'https://a.com' differs from its url 'https://b.com'"]

    def test_not_a_url(self):
        """Test a link over words."""
        errors = check_invariants(document(paragraph(link("hello"))))
        assert errors == ["(0, 0): Link text 'hello' is not exactly one URL"]

    def test_trailing_punctuation(self):
        """Test a link ending in a period."""
        errors = check_invariants(document(paragraph(link("www.a.com."))))
        assert errors == ["(0, 0): Link text 'www.a.com.' ends with trailing punctuation"]

    def test_adjacent_links(self):
        """Test two touching links."""
        errors = check_invariants(document(paragraph(link("www.a.com"), link("www.b.com"))))
        assert errors == [
            "(0, 0): Link 'www.a.com' is adjacent to another link",
            "(0, 1): Link 'www.b.com' is adjacent to another link",
        ]

    def test_missing_separators(self):
        """Test links glued to words on both sides."""
        errors = check_invariants(document(paragraph(Text("x"), link("www.a.com"), Text("y"))))
        assert errors == [
            "(0, 1): Link 'www.a.com' is preceded by 'x' without a separator",
            "(0, 1): Link 'www.a.com' is followed by 'y' without a separator",
        ]

    def test_nested_link(self):
        """Test a link inside a link."""
        doc = document(paragraph(AutoLink(url="www.a.com", children=[link("www.a.com")])))
        errors = check_invariants(doc)
        assert "(0, 0, 0): Link nested inside another link" in errors

    def test_misplaced_block(self):
        """Test a paragraph inside a paragraph."""
        doc = Document(children=[Paragraph(children=[Paragraph(children=[Text("x")])])])
        assert check_invariants(doc) == ["(0, 0): Paragraph can only contain inline nodes, found Paragraph"]

    def test_strict_visitor_raises(self):
        """Test that strict mode stops at the first violation."""
        visitor = InvariantVisitor(strict=True)
        with pytest.raises(DocumentError, match="not exactly one URL"):
            document(paragraph(link("hello"))).accept(visitor)
        assert len(visitor.errors) == 1
