#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/renderers/markdown.py
"""Markdown rendering for documents.

Links are written as ``[text](url)``, bold runs as ``**text**``, italic runs
as ``*text*`` and underlined runs as ``<u>text</u>``. Paragraphs are
separated by a blank line.

"""

from __future__ import annotations

from autolinker.ast.nodes import AutoLink, Document, Paragraph, Text
from autolinker.ast.visitors import NodeVisitor
from autolinker.renderers.base import BaseRenderer

_TEXT_SPECIAL_CHARS = r"\`*_{}[]<"
_LINK_SPECIAL_CHARS = r"\[]"
_URL_SPECIAL_CHARS = r"\()"


def escape_markdown(text: str, context: str = "text") -> str:
    r"""Escape markdown with context awareness.

    Parameters
    ----------
    text : str
        Text to escape
    context : {'text', 'link', 'url'}, default = 'text'
        Where the text will be used

    Examples
    --------
        >>> escape_markdown("Text with [brackets]")
        'Text with \\[brackets\\]'
        >>> escape_markdown("https://a.com/x_(y)", "url")
        'https://a.com/x_\\(y\\)'

    """
    if not text:
        return text
    if context == "link":
        special_chars = _LINK_SPECIAL_CHARS
    elif context == "url":
        special_chars = _URL_SPECIAL_CHARS
    else:
        special_chars = _TEXT_SPECIAL_CHARS
    return "".join("\\" + char if char in special_chars else char for char in text)


class MarkdownRenderer(NodeVisitor, BaseRenderer):
    """Render documents to Markdown.

    Examples
    --------
        >>> doc = DocumentBuilder().text("Go to ").link("www.a.com").text("").build()
        >>> MarkdownRenderer().render_to_string(doc)
        'Go to [www.a.com](www.a.com)\\n'

    """

    def __init__(self) -> None:
        """Initialize the Markdown renderer."""
        BaseRenderer.__init__(self)
        self._blocks: list[str] = []
        self._inline: list[str] = []
        self._context = "text"

    def render_to_string(self, document: Document) -> str:
        """Render a document to a Markdown string."""
        self._blocks = []
        document.accept(self)
        if not self._blocks:
            return ""
        return "\n\n".join(self._blocks) + "\n"

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        for child in node.children:
            child.accept(self)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self._inline = []
        for child in node.children:
            child.accept(self)
        self._blocks.append("".join(self._inline))

    def visit_auto_link(self, node: AutoLink) -> None:
        """Render an AutoLink node."""
        outer = self._inline
        self._inline = []
        self._context = "link"
        try:
            for child in node.children:
                child.accept(self)
        finally:
            self._context = "text"
        label = "".join(self._inline)
        self._inline = outer
        self._inline.append(f"[{label}]({escape_markdown(node.url, 'url')})")

    def visit_text(self, node: Text) -> None:
        """Render a Text node.

        Whitespace at the edges of a styled run is kept outside the markers,
        since ``** bold**`` is not emphasis in Markdown.
        """
        content = escape_markdown(node.text, self._context)
        stripped = content.strip()
        if not stripped or not node.marks:
            self._inline.append(content)
            return
        leading = content[: len(content) - len(content.lstrip())]
        trailing = content[len(content.rstrip()) :]
        if node.underline:
            stripped = f"<u>{stripped}</u>"
        if node.italic:
            stripped = f"*{stripped}*"
        if node.bold:
            stripped = f"**{stripped}**"
        self._inline.append(f"{leading}{stripped}{trailing}")


__all__ = ["MarkdownRenderer", "escape_markdown"]
