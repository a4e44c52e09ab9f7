#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the auto-link normalization rules."""

import logging

import pytest
from utils import document, inline_summary, link, link_urls, paragraph, plain_text

from autolinker.ast.builder import document_from_text
from autolinker.ast.nodes import AutoLink, Text
from autolinker.ast.visitors import check_invariants
from autolinker.editor.location import Point
from autolinker.editor.tree import DocumentTree
from autolinker.exceptions import TreeError
from autolinker.linkify.engine import AutoLinkEngine, RewriteKind, linkify, with_auto_links
from autolinker.options import NormalizeOptions


def _kinds(rewrites):
    return [rewrite.kind for rewrite in rewrites]


def _attached(doc):
    engine = AutoLinkEngine()
    tree = engine.attach(DocumentTree(doc))
    return tree, engine


@pytest.mark.unit
class TestLinkCreation:
    """Test wrapping of delimited URLs in plain text."""

    def test_url_in_prose(self):
        """Test a URL surrounded by spaces."""
        result, rewrites = linkify(document_from_text("Visit https://a.com for info"))
        assert inline_summary(result) == [("text", "Visit "), ("link", "https://a.com"), ("text", " for info")]
        assert _kinds(rewrites) == [RewriteKind.WRAP]
        assert rewrites[0].rule == "create.delimited_url"
        assert rewrites[0].url == "https://a.com"

    def test_url_alone_gets_empty_frame(self):
        """Test that a paragraph holding only a URL keeps empty runs around the link."""
        result, _ = linkify(document_from_text("www.example.com"))
        assert inline_summary(result) == [("text", ""), ("link", "www.example.com"), ("text", "")]

    def test_trailing_period_stays_outside(self):
        """Test that sentence-final punctuation is trimmed from the link."""
        result, rewrites = linkify(document_from_text("See https://a.com."))
        assert inline_summary(result) == [("text", "See "), ("link", "https://a.com"), ("text", ".")]
        assert _kinds(rewrites) == [RewriteKind.WRAP, RewriteKind.TRIM_PUNCTUATION]

    def test_trailing_question_mark_stays_outside(self):
        """Test trimming a trailing question mark."""
        result, _ = linkify(document_from_text("Is it www.a.com?"))
        assert inline_summary(result) == [("text", "Is it "), ("link", "www.a.com"), ("text", "?")]

    def test_comma_separated_urls(self):
        """Test that each URL of a comma-separated list gets its own link."""
        result, _ = linkify(document_from_text("www.a.com,www.b.com"))
        assert inline_summary(result) == [
            ("text", ""),
            ("link", "www.a.com"),
            ("text", ","),
            ("link", "www.b.com"),
            ("text", ""),
        ]

    def test_url_glued_to_word_is_not_linked(self):
        """Test that a URL preceded by a letter stays plain."""
        result, rewrites = linkify(document_from_text("xhttps://a.com"))
        assert inline_summary(result) == [("text", "xhttps://a.com")]
        assert rewrites == []

    def test_text_without_urls_is_untouched(self):
        """Test that plain prose produces no rewrites."""
        source = document_from_text("Nothing to see here.\nOr here")
        result, rewrites = linkify(source)
        assert rewrites == []
        assert result == source

    def test_every_paragraph_is_processed(self, sample_document):
        """Test several paragraphs with several links."""
        result, _ = linkify(sample_document)
        assert link_urls(result) == ["https://example.com", "www.example.org/docs", "https://mirror.example.net"]
        assert check_invariants(result) == []

    def test_input_document_is_not_modified(self):
        """Test that linkify works on a copy."""
        source = document_from_text("Visit https://a.com")
        linkify(source)
        assert source == document_from_text("Visit https://a.com")

    def test_text_is_preserved(self, sample_document, sample_text):
        """Test that rewrites never change the characters of the document."""
        result, _ = linkify(sample_document)
        assert plain_text(result) == sample_text


@pytest.mark.unit
class TestExistingLinks:
    """Test review of links already in the document."""

    def test_url_is_resynced_to_text(self):
        """Test that a link whose url drifted from its text is updated."""
        doc = document(paragraph(Text(""), AutoLink(url="https://old.com", children=[Text("https://a.com")]), Text("")))
        result, rewrites = linkify(doc)
        assert inline_summary(result) == [("text", ""), ("link", "https://a.com"), ("text", "")]
        assert _kinds(rewrites) == [RewriteKind.RESYNC]
        assert rewrites[0].rule == "review.url_mismatch"

    def test_text_that_is_not_a_url_is_unwrapped(self):
        """Test that a link over plain words is dissolved."""
        doc = document(paragraph(Text(""), link("nope", Text("not a url")), Text("")))
        result, rewrites = linkify(doc)
        assert inline_summary(result) == [("text", "not a url")]
        assert rewrites[0].rule == "review.not_a_url"

    def test_link_with_extra_text_is_unwrapped_and_rewrapped(self):
        """Test a link whose text holds a URL plus more words."""
        doc = document(paragraph(Text(""), link("https://a.com", Text("https://a.com now")), Text("")))
        result, rewrites = linkify(doc)
        assert inline_summary(result) == [("text", ""), ("link", "https://a.com"), ("text", " now")]
        assert _kinds(rewrites) == [RewriteKind.UNWRAP, RewriteKind.WRAP]

    def test_trim_keeps_run_flags(self):
        """Test trimming a link whose text spans differently styled runs."""
        doc = document(
            paragraph(Text(""), link("www.a.com.", Text("www.a"), Text(".com.", bold=True)), Text(""))
        )
        result, rewrites = linkify(doc)
        children = result.children[0].children
        assert children[1] == AutoLink(url="www.a.com", children=[Text("www.a"), Text(".com", bold=True)])
        assert children[2] == Text(".", bold=True)
        assert RewriteKind.TRIM_PUNCTUATION in _kinds(rewrites)
        assert check_invariants(result) == []

    def test_link_touching_a_word_is_unwrapped(self):
        """Test that a link preceded by a letter is dissolved."""
        doc = document(paragraph(Text("x"), link("https://a.com"), Text("")))
        result, rewrites = linkify(doc)
        assert inline_summary(result) == [("text", "xhttps://a.com")]
        assert rewrites[0].rule == "review.not_isolated"

    def test_adjacent_links_collapse_into_one_url(self):
        """Test that two touching links are dissolved and the joined text re-linked."""
        doc = document(paragraph(Text(""), link("www.a.com"), link("www.b.com"), Text("")))
        result, rewrites = linkify(doc)
        assert link_urls(result) == ["www.a.comwww.b.com"]
        assert _kinds(rewrites).count(RewriteKind.UNWRAP) == 2
        assert check_invariants(result) == []

    def test_valid_link_is_left_alone(self):
        """Test that a converged link produces no rewrites."""
        doc = document(paragraph(Text("Go to "), link("https://a.com"), Text(" now")))
        result, rewrites = linkify(doc)
        assert rewrites == []
        assert result == doc

    def test_nested_link_is_flattened(self):
        """Test that a link inside a link ends as a single link."""
        inner = link("www.a.com")
        doc = document(paragraph(Text(""), AutoLink(url="www.a.com", children=[Text(""), inner, Text("")]), Text("")))
        result, rewrites = linkify(doc)
        assert inline_summary(result) == [("text", ""), ("link", "www.a.com"), ("text", "")]
        assert RewriteKind.UNWRAP in _kinds(rewrites)
        assert check_invariants(result) == []


@pytest.mark.unit
class TestRulesInIsolation:
    """Test individual rules called directly on an attached engine."""

    def test_review_nested(self):
        """Test the nested-link rule."""
        inner = link("www.a.com")
        outer = AutoLink(url="www.a.com", children=[Text(""), inner, Text("")])
        tree, engine = _attached(document(paragraph(Text(""), outer, Text(""))))
        rewrite = engine.review_existing_link(inner, (0, 1, 1))
        assert rewrite.rule == "review.nested"
        assert outer.children == [Text(""), Text("www.a.com"), Text("")]

    def test_review_non_text_child(self):
        """Test the non-text-child rule."""
        outer = AutoLink(url="www.a.com", children=[Text(""), link("www.a.com"), Text("")])
        tree, engine = _attached(document(paragraph(Text(""), outer, Text(""))))
        rewrite = engine.review_existing_link(outer, (0, 1))
        assert rewrite.kind == RewriteKind.UNWRAP
        assert rewrite.rule == "review.non_text_child"
        assert not tree.is_attached(outer)

    def test_next_neighbour_not_separated(self):
        """Test unwrapping a link that follows a run without a separator."""
        target = link("https://a.com")
        tree, engine = _attached(document(paragraph(Text("x"), target, Text(""))))
        rewrite = engine.resolve_neighbours(tree.node((0, 0)), (0, 0))
        assert rewrite.rule == "neighbours.next_not_separated"
        assert rewrite.url == "https://a.com"
        assert [type(child) for child in tree.document.children[0].children] == [Text, Text, Text]

    def test_previous_neighbour_not_separated(self):
        """Test that a letter typed after a link joins it."""
        doc = document(paragraph(Text(""), link("https://a.com"), Text("x")))
        result, rewrites = linkify(doc)
        assert rewrites[0].rule == "neighbours.previous_not_separated"
        assert inline_summary(result) == [("text", ""), ("link", "https://a.comx"), ("text", "")]

    def test_continuation_is_merged(self):
        """Test that ``.uk`` after ``https://a.co`` extends the link."""
        doc = document(paragraph(Text("Visit "), link("https://a.co"), Text(".uk rocks")))
        result, rewrites = linkify(doc)
        assert inline_summary(result) == [("text", "Visit "), ("link", "https://a.co.uk"), ("text", " rocks")]
        assert _kinds(rewrites) == [RewriteKind.MERGE, RewriteKind.WRAP]
        assert rewrites[0].rule == "neighbours.continuation"

    def test_separated_neighbours_need_nothing(self):
        """Test that a separated run next to a link triggers no rule."""
        tree, engine = _attached(document(paragraph(Text("a "), link("www.b.com"), Text(", c"))))
        assert engine.resolve_neighbours(tree.node((0, 0)), (0, 0)) is None
        assert engine.resolve_neighbours(tree.node((0, 2)), (0, 2)) is None

    def test_stale_path_abandons_rule(self, caplog):
        """Test that a rule started on a stale path is dropped and logged."""
        tree, engine = _attached(document(paragraph(Text("hello"))))
        caplog.set_level(logging.DEBUG, logger="autolinker.linkify.engine")
        engine.normalize_node(Text("https://a.com"), (0, 0))
        assert engine.rewrites == []
        assert tree.document == document(paragraph(Text("hello")))
        assert "Abandoned rule at (0, 0)" in caplog.text


@pytest.mark.unit
class TestEngineLifecycle:
    """Test attaching, options and repeated runs."""

    def test_attach_twice_is_refused(self):
        """Test that an engine serves a single tree."""
        engine = AutoLinkEngine()
        engine.attach(DocumentTree())
        with pytest.raises(TreeError, match="already attached"):
            engine.attach(DocumentTree())

    def test_unattached_engine(self):
        """Test that an engine needs a tree to normalize."""
        with pytest.raises(TreeError, match="not attached"):
            AutoLinkEngine().normalize()

    def test_iteration_factor_is_applied_to_tree(self):
        """Test that the option reaches the tree."""
        tree = with_auto_links(DocumentTree(), NormalizeOptions(iteration_factor=7))
        assert tree.iteration_factor == 7

    def test_second_run_is_a_fixpoint(self, sample_document):
        """Test that a converged document needs no further rewrites."""
        engine = AutoLinkEngine()
        engine.attach(DocumentTree(sample_document))
        assert engine.normalize()
        assert engine.normalize() == []

    def test_rewrites_are_logged(self, caplog):
        """Test the debug log of applied rewrites."""
        caplog.set_level(logging.DEBUG, logger="autolinker.linkify.engine")
        linkify(document_from_text("Visit https://a.com"))
        assert "Applied wrap (create.delimited_url)" in caplog.text

    def test_engine_edits_normalize_through_tree(self):
        """Test that edits made after attaching are linked immediately."""
        tree = with_auto_links(DocumentTree(document_from_text("")))
        tree.insert_text("see www.a.com now", at=Point((0, 0), 0))
        assert inline_summary(tree.document) == [("text", "see "), ("link", "www.a.com"), ("text", " now")]
