#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/ast/builder.py
"""Helpers for constructing documents.

``document_from_text`` turns plain text into one paragraph per line.
``DocumentBuilder`` assembles mixed content paragraph by paragraph, which
is mostly useful when setting up documents for tests and examples.

"""

from __future__ import annotations

from autolinker.ast.nodes import AutoLink, Document, Inline, Paragraph, Text


def document_from_text(text: str) -> Document:
    """Build a document holding one single-run paragraph per line of ``text``.

    Empty input yields one paragraph with an empty run.

    Examples
    --------
    >>> doc = document_from_text("first line\\nsecond line")
    >>> len(doc.children)
    2

    """
    lines = text.splitlines() or [""]
    return Document(children=[Paragraph(children=[Text(line)]) for line in lines])


class DocumentBuilder:
    """Incremental builder for documents.

    Inline content is appended to the current paragraph; ``paragraph``
    starts a new one.

    Examples
    --------
    >>> doc = (
    ...     DocumentBuilder()
    ...     .text("Visit ")
    ...     .link("https://a.com")
    ...     .text(" now", bold=True)
    ...     .paragraph()
    ...     .text("Second paragraph")
    ...     .build()
    ... )

    """

    def __init__(self) -> None:
        self._blocks: list[Paragraph] = []
        self._current: list[Inline] | None = None

    def _inlines(self) -> list[Inline]:
        if self._current is None:
            self.paragraph()
        return self._current  # type: ignore[return-value]

    def paragraph(self) -> DocumentBuilder:
        """Start a new paragraph."""
        block = Paragraph()
        self._blocks.append(block)
        self._current = block.children
        return self

    def text(self, text: str, bold: bool = False, italic: bool = False, underline: bool = False) -> DocumentBuilder:
        """Append a text run to the current paragraph."""
        self._inlines().append(Text(text, bold=bold, italic=italic, underline=underline))
        return self

    def link(self, url: str, *runs: Text) -> DocumentBuilder:
        """Append a link to the current paragraph.

        The link holds ``runs`` when given, otherwise a single run whose text
        is ``url``.
        """
        children = list(runs) if runs else [Text(url)]
        self._inlines().append(AutoLink(url=url, children=children))  # type: ignore[arg-type]
        return self

    def build(self) -> Document:
        """Return the assembled document."""
        return Document(children=list(self._blocks))


__all__ = ["document_from_text", "DocumentBuilder"]
