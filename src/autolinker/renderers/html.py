#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/renderers/html.py
"""HTML rendering for documents.

Paragraphs become block elements (``<div>`` by default), links become
``<a href="...">`` with an inline underline style, and text runs are wrapped
in ``<strong>``, ``<em>`` and ``<u>`` according to their style flags.

"""

from __future__ import annotations

import logging
from html import escape as _html_escape
from typing import Optional

from autolinker.ast.nodes import AutoLink, Document, Paragraph, Text
from autolinker.ast.visitors import NodeVisitor
from autolinker.options import HtmlRendererOptions
from autolinker.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape HTML special characters when enabled."""
    if not enabled:
        return text
    return _html_escape(text)


class HtmlRenderer(NodeVisitor, BaseRenderer):
    """Render documents to an HTML fragment.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options

    Examples
    --------
        >>> doc = document_from_text("Visit https://a.com")
        >>> linked, _ = linkify(doc)
        >>> HtmlRenderer().render_to_string(linked)
        '<div>Visit <a href="https://a.com" style="text-decoration: underline">https://a.com</a></div>\\n'

    """

    def __init__(self, options: Optional[HtmlRendererOptions] = None):
        """Initialize the HTML renderer with options."""
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options
        self._output: list[str] = []

    def render_to_string(self, document: Document) -> str:
        """Render a document to an HTML string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            HTML text, one block element per line

        """
        self._output = []
        document.accept(self)
        return "".join(self._output)

    def _escape(self, text: str) -> str:
        return escape_html(text, enabled=self.options.escape_html)

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        for child in node.children:
            child.accept(self)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        tag = self.options.block_tag
        self._output.append(f"<{tag}>")
        for child in node.children:
            child.accept(self)
        self._output.append(f"</{tag}>\n")

    def visit_auto_link(self, node: AutoLink) -> None:
        """Render an AutoLink node."""
        href = self._escape(node.url)
        style_attr = f' style="{self._escape(self.options.link_style)}"' if self.options.link_style else ""
        self._output.append(f'<a href="{href}"{style_attr}>')
        for child in node.children:
            child.accept(self)
        self._output.append("</a>")

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        content = self._escape(node.text)
        if not content:
            return
        if node.underline:
            content = f"<u>{content}</u>"
        if node.italic:
            content = f"<em>{content}</em>"
        if node.bold:
            content = f"<strong>{content}</strong>"
        self._output.append(content)


__all__ = ["HtmlRenderer", "escape_html"]
